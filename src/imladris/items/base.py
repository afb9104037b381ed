"""
Data models for items and their spreadsheet schema.

Provides the Item record, the allowed item kinds, and the fixed column
layout rows are stored in.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# Fixed column order of the remote sheet
COLUMNS: tuple[str, ...] = ("Id", "Link", "Type", "Name", "Tags", "Description")

# Column name -> Item field
COLUMN_FIELDS: dict[str, str] = {
    "Id": "id",
    "Link": "link",
    "Type": "kind",
    "Name": "name",
    "Tags": "tags",
    "Description": "description",
}

ID_INDEX = COLUMNS.index("Id")
LINK_INDEX = COLUMNS.index("Link")
TYPE_INDEX = COLUMNS.index("Type")
NAME_INDEX = COLUMNS.index("Name")
TAGS_INDEX = COLUMNS.index("Tags")
DESCRIPTION_INDEX = COLUMNS.index("Description")

TAG_SEPARATOR = ","

Row = list[str]


class InvalidItemError(ValueError):
    """Raised when item fields cannot be turned into a valid row."""


class ItemKind(str, Enum):
    """Kinds of item the collection can hold."""

    LINK = "link"
    IMAGE = "image"

    @classmethod
    def parse(cls, value: "str | ItemKind | None") -> "ItemKind":
        """Parse a kind case-insensitively.

        Raises:
            InvalidItemError: If value is empty or not a known kind.
        """
        if isinstance(value, ItemKind):
            return value
        if not value:
            raise InvalidItemError("Item type cannot be empty")
        try:
            return cls(value.strip().lower())
        except ValueError:
            allowed = ", ".join(kind.value for kind in cls)
            raise InvalidItemError(
                f"Unsupported item type '{value}' (expected one of: {allowed})"
            ) from None


class Item(BaseModel):
    """One decoded row of the collection."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Unique item identifier (UUID4 for new items)")
    link: str | None = Field(default=None, description="Target URL of the item")
    kind: ItemKind | None = Field(default=None, description="Item kind, None if unrecognised")
    name: str | None = Field(default=None, description="Display name, defaults to the link")
    tags: list[str] | None = Field(
        default=None, description="Lowercase tags, None when the item has none"
    )
    description: str | None = Field(default=None, description="Free-form description")

    def has_tag(self, tag: str) -> bool:
        """Check whether the item carries a tag (case-insensitive)."""
        return self.tags is not None and tag.lower() in self.tags
