"""Build and submit the AddValidateUpdateItemUsingPath request."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sharepoint_listitem.listitem.request import (
    OPTION_CONTENT_TYPE,
    OPTION_FOLDER,
    OPTION_LIST_ID,
    OPTION_LIST_TITLE,
    OPTION_WEB_URL,
)
from sharepoint_listitem.sharepoint.models import (
    FIELD_CONTENT_TYPE_ID,
    FIELD_VALUE_NAME,
    FIELD_VALUE_VALUE,
)

if TYPE_CHECKING:
    from sharepoint_listitem.sharepoint.client import SharePointClient

logger = logging.getLogger(__name__)

# Options that select the list or control the command; never sent as item fields.
EXCLUDED_OPTIONS = frozenset(
    {
        OPTION_WEB_URL,
        OPTION_LIST_ID,
        OPTION_LIST_TITLE,
        OPTION_CONTENT_TYPE,
        OPTION_FOLDER,
        "debug",
        "verbose",
        "output",
        "query",
    }
)


def build_form_values(
    options: dict[str, Any], content_type_id: str = ""
) -> list[dict[str, Any]]:
    """Map caller options to ``{FieldName, FieldValue}`` pairs.

    Option names are passed through verbatim, so any field defined on the
    list can be set without knowing the list schema. Values are not
    converted; people and managed metadata fields take whatever string or
    structure the API accepts.

    Args:
        options: Caller options, in the order they were given.
        content_type_id: Resolved content type to tag the item with. Ignored
            when empty or when the caller set ContentTypeId explicitly.

    Returns:
        Form values for the formValues array of the request body.
    """
    form_values = [
        {FIELD_VALUE_NAME: name, FIELD_VALUE_VALUE: value}
        for name, value in options.items()
        if name not in EXCLUDED_OPTIONS
    ]
    if content_type_id and FIELD_CONTENT_TYPE_ID not in options:
        form_values.append(
            {FIELD_VALUE_NAME: FIELD_CONTENT_TYPE_ID, FIELD_VALUE_VALUE: content_type_id}
        )
    return form_values


def build_request_body(
    form_values: list[dict[str, Any]], folder_path: str | None = None
) -> dict[str, Any]:
    """Assemble the request body, adding the folder placement when a folder was ensured."""
    body: dict[str, Any] = {"formValues": form_values}
    if folder_path:
        body["listItemCreateInfo"] = {"FolderPath": {"DecodedUrl": folder_path}}
    return body


def submit_item(
    client: SharePointClient, list_url: str, body: dict[str, Any]
) -> dict[str, Any]:
    """POST the item to the list. Transport errors propagate unchanged."""
    logger.debug(
        "[submit_item] submitting item; list_url:%s;field_count:%d",
        list_url,
        len(body.get("formValues", [])),
    )
    return client.post(f"{list_url}/AddValidateUpdateItemUsingPath()", body)
