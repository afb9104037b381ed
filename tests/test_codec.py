"""
Tests for the row codec.

Tests cell extraction, row decoding, and encoding of new items.
"""

import pytest

from imladris.items.base import COLUMNS, InvalidItemError, Item, ItemKind
from imladris.items.codec import decode_row, decode_tags, encode_item, encode_tags, get_cell


class TestGetCell:
    """Test get_cell."""

    def test_returns_value(self):
        """Test a present cell is returned as is."""
        assert get_cell(["a", "b"], 1) == "b"

    def test_short_row_returns_none(self):
        """Test a column past the end of the row is None."""
        assert get_cell(["a"], 3) is None

    def test_empty_cell_returns_none(self):
        """Test empty and None cells are both None."""
        assert get_cell(["a", ""], 1) is None
        assert get_cell(["a", None], 1) is None


class TestTags:
    """Test tag splitting and joining."""

    def test_decode_lowercases_and_splits(self):
        """Test tags are lowercased before splitting."""
        assert decode_tags("Search,TOOLS") == ["search", "tools"]

    def test_decode_empty_is_none(self):
        """Test a missing Tags cell yields None, not an empty list."""
        assert decode_tags(None) is None

    def test_encode_joins_with_comma(self):
        """Test tags are joined with commas."""
        assert encode_tags(["a", "b"]) == "a,b"
        assert encode_tags(None) == ""


class TestItemKind:
    """Test ItemKind parsing."""

    def test_parse_case_insensitive(self):
        """Test kinds are matched case-insensitively."""
        assert ItemKind.parse("IMAGE") is ItemKind.IMAGE
        assert ItemKind.parse("Link") is ItemKind.LINK

    def test_parse_unknown_raises(self):
        """Test unknown kinds raise InvalidItemError."""
        with pytest.raises(InvalidItemError, match="Unsupported item type"):
            ItemKind.parse("video")

    def test_parse_empty_raises(self):
        """Test an empty kind raises InvalidItemError."""
        with pytest.raises(InvalidItemError, match="cannot be empty"):
            ItemKind.parse(None)


class TestDecodeRow:
    """Test decode_row."""

    def test_decode_full_row(self):
        """Test a complete row decodes into an Item."""
        item = decode_row(
            ["id-1", "https://google.com", "link", "Google", "search,tools", "Search engine"]
        )

        assert item == Item(
            id="id-1",
            link="https://google.com",
            kind=ItemKind.LINK,
            name="Google",
            tags=["search", "tools"],
            description="Search engine",
        )

    def test_decode_empty_optional_cells(self):
        """Test empty cells decode to None."""
        item = decode_row(["id-1", "https://google.com", "link", "", "", ""])

        assert item is not None
        assert item.name is None
        assert item.tags is None
        assert item.description is None

    def test_short_row_is_skipped(self, log_messages):
        """Test rows shorter than the schema are not decoded."""
        assert decode_row(["id-1", "https://google.com", "link"], row_number=7) is None
        assert any("Row 7" in m and "malformed" in m for m in log_messages)

    def test_missing_id_is_skipped(self, log_messages):
        """Test rows without an id are not decoded."""
        assert decode_row(["", "link.com", "link", "", "", ""], row_number=4) is None
        assert any("no id" in m for m in log_messages)

    def test_unknown_kind_decodes_to_none(self):
        """Test an unknown Type cell keeps the item but drops the kind."""
        item = decode_row(["id-1", "https://example.com", "video", "", "", ""])

        assert item is not None
        assert item.kind is None

    def test_extra_cells_are_ignored(self):
        """Test cells past the schema do not affect decoding."""
        item = decode_row(["id-1", "l", "image", "n", "t", "d", "extra"])

        assert item is not None
        assert item.kind is ItemKind.IMAGE


class TestEncodeItem:
    """Test encode_item."""

    def test_encode_full_width_row(self):
        """Test encoding produces a row in schema order."""
        item, row = encode_item(
            "https://google.com",
            "LINK",
            name="Google",
            tags=["Search", "tools"],
            description="Search engine",
            id_factory=lambda: "fixed-id",
        )

        assert row == ["fixed-id", "https://google.com", "link", "Google", "search,tools", "Search engine"]
        assert len(row) == len(COLUMNS)
        assert item.id == "fixed-id"
        assert item.kind is ItemKind.LINK
        assert item.tags == ["search", "tools"]

    def test_name_defaults_to_link(self):
        """Test the name falls back to the link."""
        item, row = encode_item("https://google.com", "link", id_factory=lambda: "x")

        assert item.name == "https://google.com"
        assert row[3] == "https://google.com"

    def test_missing_optional_fields_are_blank(self):
        """Test absent tags and description become empty cells."""
        item, row = encode_item("https://google.com", "image", id_factory=lambda: "x")

        assert row[4] == ""
        assert row[5] == ""
        assert item.tags is None
        assert item.description is None

    def test_default_ids_are_unique(self):
        """Test generated ids differ between items."""
        first, _ = encode_item("a.com", "link")
        second, _ = encode_item("a.com", "link")

        assert first.id != second.id

    def test_invalid_kind_raises(self):
        """Test unsupported kinds are rejected."""
        with pytest.raises(InvalidItemError):
            encode_item("https://google.com", "video")

    def test_empty_link_raises(self):
        """Test an empty link is rejected."""
        with pytest.raises(InvalidItemError, match="link cannot be empty"):
            encode_item("", "link")

    def test_encoded_row_decodes_to_same_item(self):
        """Test a freshly encoded row decodes back to the created item."""
        item, row = encode_item("https://a.com", "link", tags=["x"], id_factory=lambda: "id")

        assert decode_row(row) == item
