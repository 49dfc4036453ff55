"""Turn an item creation response into the created item's record."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from sharepoint_listitem.sharepoint.models import (
    FIELD_ID,
    KEY_DATA,
    ODATA_VALUE,
    FieldValue,
    ListItemRecord,
)

if TYPE_CHECKING:
    from sharepoint_listitem.sharepoint.client import SharePointClient

logger = logging.getLogger(__name__)


class CreationFailedError(Exception):
    """Raised when the diagnostics returned for a new item carry no item ID."""

    def __init__(self, field_values: list[FieldValue] | None = None) -> None:
        super().__init__("Item didn't add successfully")
        self.field_values = field_values or []

    @property
    def field_errors(self) -> dict[str, str]:
        return {fv.field_name: fv.error_message for fv in self.field_values if fv.has_exception}


class ResponseKind(enum.Enum):
    DIRECT_RECORD = "direct_record"
    DIAGNOSTICS = "diagnostics"
    EMPTY = "empty"


@dataclass(frozen=True)
class SubmissionOutcome:
    """A creation response classified by shape."""

    kind: ResponseKind
    record: ListItemRecord | None = None
    field_values: list[FieldValue] = field(default_factory=list)


def classify_response(response: dict[str, Any]) -> SubmissionOutcome:
    """Decide which shape a creation response has by its well-known keys."""
    if response.get(KEY_DATA):
        return SubmissionOutcome(kind=ResponseKind.DIRECT_RECORD, record=response[KEY_DATA])
    values = response.get(ODATA_VALUE)
    if isinstance(values, list) and values:
        return SubmissionOutcome(
            kind=ResponseKind.DIAGNOSTICS,
            field_values=[FieldValue.from_dict(raw) for raw in values],
        )
    return SubmissionOutcome(kind=ResponseKind.EMPTY)


def find_item_id(field_values: list[FieldValue]) -> Any | None:
    """Return the value of the Id diagnostics entry, or None if there is none."""
    for fv in field_values:
        if fv.field_name == FIELD_ID:
            return fv.field_value
    return None


def reconcile(
    client: SharePointClient, list_url: str, response: dict[str, Any]
) -> ListItemRecord | None:
    """Return the created item, fetching it once when only diagnostics came back.

    Args:
        client: Authenticated SharePointClient for the follow-up fetch.
        list_url: REST URL of the list the item was added to.
        response: Parsed body of the creation request.

    Returns:
        The created item's fields, or None when the response carried neither
        a record nor diagnostics.

    Raises:
        CreationFailedError: If the diagnostics contain no Id entry.
        SharePointApiError: If the follow-up fetch fails.
    """
    outcome = classify_response(response)
    if outcome.kind is ResponseKind.DIRECT_RECORD:
        return outcome.record
    if outcome.kind is ResponseKind.EMPTY:
        logger.info("[reconcile] creation response carried no record or diagnostics")
        return None

    for fv in outcome.field_values:
        if fv.has_exception:
            logger.warning(
                "[reconcile] field rejected; field:%s;error:%s", fv.field_name, fv.error_message
            )

    item_id = find_item_id(outcome.field_values)
    logger.debug("[reconcile] id returned by AddValidateUpdateItemUsingPath; id:%s", item_id)
    if item_id is None:
        raise CreationFailedError(outcome.field_values)
    return client.get(f"{list_url}/items({item_id})")
