"""Unit tests for money rendering and price display resolution."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.pricing.formatting import format_currency, resolve_display, to_decimal

pytestmark = pytest.mark.unit


class TestFormatCurrency:
    def test_zero_uses_code_prefix(self):
        assert format_currency(0, "AED") == "AED 0.00"

    def test_missing_amount_renders_zero(self):
        assert format_currency(None, "AED") == "AED 0.00"

    def test_unparsable_amount_renders_zero(self):
        assert format_currency("not-a-number", "EUR") == "EUR 0.00"

    def test_missing_code_falls_back_to_default(self, settings):
        settings.DEFAULT_CURRENCY_CODE = "AED"
        assert format_currency(Decimal("12.5")) == "AED 12.50"

    def test_single_character_symbol_is_glued(self):
        assert format_currency(Decimal("1234.5"), "USD", "$") == "$1,234.50"

    def test_multi_character_symbol_is_spaced(self):
        assert format_currency(10, "AED", "AED") == "AED 10.00"

    def test_code_is_normalised(self):
        assert format_currency(3, " usd ") == "USD 3.00"

    def test_rounds_half_up(self):
        assert format_currency(Decimal("2.345"), "USD") == "USD 2.35"

    def test_negative_zero_is_not_signed(self):
        assert format_currency(Decimal("-0.001"), "USD") == "USD 0.00"

    def test_infinite_amount_renders_zero(self):
        assert to_decimal(float("inf")) == Decimal("0")


class TestResolveDisplay:
    def test_base_currency_only(self):
        rendered = resolve_display(Decimal("50"), "AED")
        assert rendered.primary == "AED 50.00"
        assert rendered.secondary is None
        assert rendered.text == "AED 50.00"
        assert rendered.is_converted is False

    @pytest.mark.parametrize("variant", ["inline", "stacked", "compact"])
    def test_same_currency_is_not_converted(self, variant):
        rendered = resolve_display(Decimal("50"), "AED", "AED", Decimal("50"), variant)
        assert rendered.secondary is None
        assert rendered.text == "AED 50.00"

    @pytest.mark.parametrize("variant", ["inline", "stacked", "compact"])
    def test_foreign_without_base_amount_is_not_converted(self, variant):
        rendered = resolve_display(Decimal("50"), "AED", "USD", None, variant)
        assert rendered.primary == "AED 50.00"
        assert rendered.secondary is None
        assert rendered.text == "AED 50.00"
        assert rendered.is_converted is False

    def test_inline_shows_approximate_base_amount(self):
        rendered = resolve_display(
            Decimal("100"), "AED", "USD", Decimal("367.25"), foreign_symbol="$"
        )
        assert rendered.primary == "$100.00"
        assert rendered.secondary == "AED 367.25"
        assert rendered.approximate is True
        assert rendered.text == "$100.00 (≈AED 367.25)"

    def test_stacked_puts_conversion_on_second_line(self):
        rendered = resolve_display(
            Decimal("100"), "AED", "USD", Decimal("367.25"), "stacked", foreign_symbol="$"
        )
        assert rendered.text == "$100.00\n≈ AED 367.25"

    def test_compact_picks_same_values_as_inline(self):
        inline = resolve_display(Decimal("100"), "AED", "USD", Decimal("367.25"))
        compact = resolve_display(
            Decimal("100"), "AED", "USD", Decimal("367.25"), "compact"
        )
        assert (compact.primary, compact.secondary) == (inline.primary, inline.secondary)

    def test_approximation_marker_can_be_hidden(self):
        rendered = resolve_display(
            Decimal("100"), "AED", "USD", Decimal("367.25"), show_approx=False
        )
        assert rendered.approximate is False
        assert rendered.text == "USD 100.00 (AED 367.25)"

    def test_unknown_variant_is_rejected(self):
        with pytest.raises(ValueError, match="Unknown price variant"):
            resolve_display(Decimal("1"), "AED", variant="banner")
