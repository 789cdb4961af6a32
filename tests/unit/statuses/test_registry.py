"""Unit tests for badge contrast and the status registry snapshot."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from modules.statuses.exceptions import (
    EmptyStatusRegistry,
    MissingRequiredStatus,
    StatusNotFound,
)
from modules.statuses.registry import (
    BLACK,
    DEFAULT_STATUSES,
    DELIVERED,
    READY_FOR_PRODUCTION,
    WHITE,
    StatusRegistry,
    contrast_color,
    is_valid_color,
)

pytestmark = pytest.mark.unit


def _status(name, sort_order, color="#6b7280"):
    return SimpleNamespace(name=name, sort_order=sort_order, color=color)


class TestContrastColor:
    @pytest.mark.parametrize(
        "background,expected",
        [
            ("#ffffff", BLACK),
            ("#FFFFFF", BLACK),
            ("#ffff00", BLACK),
            ("#000000", WHITE),
            ("#f59e0b", WHITE),
            ("#3b82f6", WHITE),
        ],
    )
    def test_known_colors(self, background, expected):
        assert contrast_color(background) == expected

    def test_threshold_is_exclusive(self):
        # 179/255 is just above 0.70, 178/255 just below.
        assert contrast_color("#b3b3b3") == BLACK
        assert contrast_color("#b2b2b2") == WHITE

    @pytest.mark.parametrize("value", [None, 123, "", "#fff", "ffffff", "#gggggg", "#ffffff0"])
    def test_malformed_input_gets_white(self, value):
        assert contrast_color(value) == WHITE

    def test_is_valid_color(self):
        assert is_valid_color("#A855F7")
        assert not is_valid_color("purple")


class TestStatusRegistry:
    def test_entries_sorted_by_sort_order(self):
        registry = StatusRegistry.from_statuses(
            [_status("Delivered", 6), _status("New", 1), _status("Shipping", 5)]
        )
        assert registry.names == ("New", "Shipping", "Delivered")
        assert registry.initial == "New"
        assert len(registry) == 3

    def test_empty_registry_has_no_initial_status(self):
        with pytest.raises(EmptyStatusRegistry):
            StatusRegistry.from_statuses([]).initial

    def test_resolve_known_and_unknown(self):
        registry = StatusRegistry.from_statuses([_status("New", 1)])
        assert registry.resolve("New") == "New"
        with pytest.raises(StatusNotFound):
            registry.resolve("new")

    def test_require_load_bearing_status(self):
        registry = StatusRegistry.from_statuses([_status("New", 1)])
        with pytest.raises(MissingRequiredStatus, match=READY_FOR_PRODUCTION):
            registry.require(READY_FOR_PRODUCTION)
        assert registry.missing_required() == [READY_FOR_PRODUCTION, DELIVERED]

    def test_defaults_include_required_statuses(self):
        registry = StatusRegistry.from_statuses(
            _status(name, position, color)
            for position, (name, color) in enumerate(DEFAULT_STATUSES, start=1)
        )
        assert registry.missing_required() == []
        assert registry.entries[0].text_color == WHITE
