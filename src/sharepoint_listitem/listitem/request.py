"""Caller request for creating a list item, with validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sharepoint_listitem.sharepoint.paths import is_valid_sharepoint_url, list_rest_url

# Caller option names that address the list rather than describe the item
OPTION_WEB_URL = "webUrl"
OPTION_LIST_ID = "listId"
OPTION_LIST_TITLE = "listTitle"
OPTION_CONTENT_TYPE = "contentType"
OPTION_FOLDER = "folder"


class RequestValidationError(ValueError):
    """Raised when the caller's options cannot address a list."""


@dataclass
class AddItemRequest:
    """Everything the caller supplied for one item creation.

    Attributes:
        web_url: Absolute URL of the site that holds the list.
        list_id: GUID of the list (mutually exclusive with list_title).
        list_title: Title of the list (mutually exclusive with list_id).
        content_type: Optional content type name or ID.
        folder: Optional folder path relative to the list root, e.g. "2024/Q1".
        options: Every option the caller passed, in order. Options outside the
            addressing/diagnostic set become item field values.
    """

    web_url: str
    list_id: str | None = None
    list_title: str | None = None
    content_type: str | None = None
    folder: str | None = None
    options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_options(cls, options: dict[str, Any]) -> AddItemRequest:
        """Build a request from a flat option mapping such as a JSON body."""
        return cls(
            web_url=options.get(OPTION_WEB_URL) or "",
            list_id=options.get(OPTION_LIST_ID) or None,
            list_title=options.get(OPTION_LIST_TITLE) or None,
            content_type=options.get(OPTION_CONTENT_TYPE) or None,
            folder=options.get(OPTION_FOLDER) or None,
            options=dict(options),
        )

    def validate(self) -> None:
        """Check the addressing options.

        Raises:
            RequestValidationError: With a caller-facing message on the first problem found.
        """
        if not self.web_url:
            raise RequestValidationError("Required parameter webUrl missing")
        if not is_valid_sharepoint_url(self.web_url):
            raise RequestValidationError(
                f"'{self.web_url}' is not a valid SharePoint Online site URL"
            )
        if not self.list_id and not self.list_title:
            raise RequestValidationError("Required parameters listId or listTitle missing")
        if self.list_id and self.list_title:
            raise RequestValidationError("Only specify one of listId or listTitle parameters")

    @property
    def list_label(self) -> str:
        return self.list_id or self.list_title or ""

    @property
    def list_url(self) -> str:
        return list_rest_url(self.web_url, list_id=self.list_id, list_title=self.list_title)
