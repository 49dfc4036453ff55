"""Data models for SharePoint list items, folders and content types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# SharePoint REST JSON field names
FIELD_ID = "Id"
FIELD_NAME = "Name"
FIELD_STRING_VALUE = "StringValue"
FIELD_SERVER_RELATIVE_URL = "ServerRelativeUrl"
FIELD_CONTENT_TYPE_ID = "ContentTypeId"

# Diagnostics entry keys returned by AddValidateUpdateItemUsingPath
FIELD_VALUE_NAME = "FieldName"
FIELD_VALUE_VALUE = "FieldValue"
FIELD_VALUE_ERROR = "ErrorMessage"
FIELD_VALUE_HAS_EXCEPTION = "HasException"
FIELD_VALUE_ITEM_ID = "ItemId"

# Response keys
KEY_DATA = "data"
ODATA_VALUE = "value"

# A created item as returned by the API: field name -> value
ListItemRecord = dict[str, Any]


@dataclass(frozen=True)
class FolderSegment:
    """One segment of a folder path and the absolute path of its parent."""

    name: str
    ancestor_path: str

    @property
    def full_path(self) -> str:
        return f"{self.ancestor_path.rstrip('/')}/{self.name}"


@dataclass(frozen=True)
class ExistenceResult:
    """Outcome of probing a single folder segment."""

    segment: FolderSegment
    exists: bool


@dataclass(frozen=True)
class PendingCreation:
    """A folder that must be created under an existing (or earlier-created) parent."""

    folder_name: str
    parent_path: str

    @property
    def depth(self) -> int:
        return len([part for part in self.parent_path.split("/") if part])


@dataclass
class EnsureFolderResult:
    """Summary of an ensure-folder run.

    Attributes:
        existing: Absolute paths that were found on the first probe.
        created: Absolute paths created during this run, in creation order.
        skipped: Absolute paths whose creation request failed.
    """

    existing: list[str] = field(default_factory=list)
    created: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class FieldValue:
    """One per-field outcome entry from the validate-and-update endpoint."""

    field_name: str
    field_value: Any = None
    error_message: str = ""
    has_exception: bool = False
    item_id: int = 0

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> FieldValue:
        return cls(
            field_name=raw.get(FIELD_VALUE_NAME, ""),
            field_value=raw.get(FIELD_VALUE_VALUE),
            error_message=raw.get(FIELD_VALUE_ERROR) or "",
            has_exception=bool(raw.get(FIELD_VALUE_HAS_EXCEPTION, False)),
            item_id=int(raw.get(FIELD_VALUE_ITEM_ID) or 0),
        )


@dataclass(frozen=True)
class ContentType:
    """A content type available on a list."""

    id: str
    name: str

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> ContentType:
        raw_id = raw.get(FIELD_ID, {})
        # nometadata returns Id as {"StringValue": "0x01..."}; tolerate a bare string too.
        content_type_id = raw_id.get(FIELD_STRING_VALUE, "") if isinstance(raw_id, dict) else raw_id
        return cls(id=str(content_type_id or ""), name=raw.get(FIELD_NAME, ""))
