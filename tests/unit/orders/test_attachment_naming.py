"""Unit tests for smart attachment file names."""

from __future__ import annotations

import pytest
from freezegun import freeze_time

from modules.orders.attachments import (
    build_attachment_name,
    file_extension,
    sanitize_client_name,
)
from modules.orders.exceptions import InvalidAttachment

pytestmark = pytest.mark.unit

ORDER_ID = "abcdefgh-1234-5678-9abc-def012345678"
TS = 1702656000000


class TestSanitizeClientName:
    def test_strips_punctuation(self):
        assert sanitize_client_name("Jane O'Brien!!") == "Jane_OBrien"

    def test_collapses_whitespace(self):
        assert sanitize_client_name("  Blue   Dune\tCafe ") == "Blue_Dune_Cafe"

    def test_truncates_to_thirty_characters(self):
        name = sanitize_client_name("A" * 40)
        assert name == "A" * 30

    @pytest.mark.parametrize("value", [None, "", "   ", "!!!"])
    def test_empty_result_falls_back(self, value):
        assert sanitize_client_name(value) == "Order"

    def test_non_ascii_letters_are_dropped(self):
        assert sanitize_client_name("Café Zoë") == "Caf_Zo"


class TestFileExtension:
    def test_lowercases_last_extension(self):
        assert file_extension("proof.final.PDF") == "pdf"

    @pytest.mark.parametrize("value", ["README", "trailing.", ""])
    def test_missing_extension(self, value):
        assert file_extension(value) == "file"


class TestBuildAttachmentName:
    @pytest.mark.parametrize(
        "file_type,code",
        [("design_mockup", "PROOF"), ("print_file", "PRINT"), ("client_reference", "REF")],
    )
    def test_type_short_codes(self, file_type, code):
        name = build_attachment_name(ORDER_ID, "Jane", file_type, "a.png", timestamp_ms=TS)
        assert name == f"ORD-abcdefgh_Jane_{code}_{TS}.png"

    def test_full_example(self):
        name = build_attachment_name(
            ORDER_ID, "Jane O'Brien", "design_mockup", "logo.PNG", timestamp_ms=TS
        )
        assert name == f"ORD-abcdefgh_Jane_OBrien_PROOF_{TS}.png"

    def test_unknown_type(self):
        with pytest.raises(InvalidAttachment):
            build_attachment_name(ORDER_ID, "Jane", "invoice", "a.pdf", timestamp_ms=TS)

    @freeze_time("2023-12-15 16:00:00")
    def test_uses_current_epoch_millis(self):
        name = build_attachment_name(ORDER_ID, "Jane", "print_file", "art.ai")
        assert name == "ORD-abcdefgh_Jane_PRINT_1702656000000.ai"
