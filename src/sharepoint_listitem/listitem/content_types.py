"""Content type lookup for a list."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sharepoint_listitem.sharepoint.models import ODATA_VALUE, ContentType

if TYPE_CHECKING:
    from sharepoint_listitem.sharepoint.client import SharePointClient

logger = logging.getLogger(__name__)


class ContentTypeUnmatchedError(Exception):
    """Raised in strict mode when a content type hint matches nothing on the list."""

    def __init__(self, hint: str) -> None:
        super().__init__(f"Content type '{hint}' not found on the list")
        self.hint = hint


def select_content_type(content_types: list[ContentType], hint: str | None) -> ContentType | None:
    """Pick a content type by ID or name, or the first one when there is no hint."""
    if not content_types:
        return None
    if not hint:
        return content_types[0]
    for content_type in content_types:
        if hint in (content_type.id, content_type.name):
            return content_type
    return None


class ContentTypeResolver:
    """Resolves a caller's content type hint to a content type ID."""

    def __init__(self, client: SharePointClient, strict: bool = False) -> None:
        """Initialise the resolver.

        Args:
            client: Authenticated SharePointClient.
            strict: Raise ContentTypeUnmatchedError for an unknown hint instead
                of falling back to no content type.
        """
        self._client = client
        self._strict = strict

    def list_content_types(self, list_url: str) -> list[ContentType]:
        """Fetch the content types of a list in the order the API returns them."""
        response = self._client.get(f"{list_url}/contenttypes")
        return [ContentType.from_dict(raw) for raw in response.get(ODATA_VALUE, [])]

    def resolve(self, list_url: str, hint: str | None) -> str:
        """Return the ID of the content type to use for the new item.

        Args:
            list_url: REST URL of the list.
            hint: Content type name or ID supplied by the caller, or None.

        Returns:
            The content type ID, or "" when the list has no content types or
            the hint matches none of them (non-strict mode).

        Raises:
            SharePointApiError: If the content types cannot be listed.
            ContentTypeUnmatchedError: In strict mode, when the hint matches nothing.
        """
        content_types = self.list_content_types(list_url)
        selected = select_content_type(content_types, hint)
        if selected is None:
            if hint and content_types:
                if self._strict:
                    raise ContentTypeUnmatchedError(hint)
                logger.warning(
                    "[resolve] content type hint matched nothing; creating item without it;"
                    " hint:%s;available:%d",
                    hint,
                    len(content_types),
                )
            return ""
        logger.debug(
            "[resolve] using content type; id:%s;name:%s;from_hint:%s",
            selected.id,
            selected.name,
            bool(hint),
        )
        return selected.id
