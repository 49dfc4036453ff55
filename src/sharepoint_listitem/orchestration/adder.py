"""List item adder — orchestrates content type lookup, folder ensuring and item creation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sharepoint_listitem.listitem.content_types import ContentTypeResolver
from sharepoint_listitem.listitem.folders import FolderEnsurer
from sharepoint_listitem.listitem.reconciler import reconcile
from sharepoint_listitem.listitem.submitter import (
    build_form_values,
    build_request_body,
    submit_item,
)
from sharepoint_listitem.sharepoint.client import SharePointClient, sharepoint_client_from_config
from sharepoint_listitem.sharepoint.models import FIELD_SERVER_RELATIVE_URL, ListItemRecord
from sharepoint_listitem.sharepoint.paths import folder_server_relative_path, resource_from_url

if TYPE_CHECKING:
    from sharepoint_listitem.config import AppConfig
    from sharepoint_listitem.listitem.request import AddItemRequest

logger = logging.getLogger(__name__)


class ListItemAdder:
    """Runs the full add-list-item pipeline for one request."""

    def __init__(
        self,
        client: SharePointClient,
        content_type_resolver: ContentTypeResolver,
        folder_ensurer: FolderEnsurer,
    ) -> None:
        """Initialise the adder.

        Args:
            client: Authenticated SharePointClient.
            content_type_resolver: Resolver for the caller's content type hint.
            folder_ensurer: FolderEnsurer that creates missing folder segments.
        """
        self._client = client
        self._content_types = content_type_resolver
        self._folders = folder_ensurer

    def get_root_folder_path(self, list_url: str) -> str:
        """Return the server-relative URL of the list's root folder."""
        response = self._client.get(f"{list_url}/rootFolder")
        return str(response.get(FIELD_SERVER_RELATIVE_URL, ""))

    def add_item(self, request: AddItemRequest) -> ListItemRecord | None:
        """Create one list item.

        Steps:
            1. Validate the request and acquire a token for the site.
            2. Resolve the content type ID.
            3. If a folder was requested, look up the list root folder and
               ensure every segment of the folder path exists.
            4. Submit the item through AddValidateUpdateItemUsingPath.
            5. Reconcile the response into the created item's record.

        Folder existence checks and folder creations never fail the request;
        everything else propagates.

        Args:
            request: The caller's options.

        Returns:
            The created item's fields, or None if the API returned nothing to show.

        Raises:
            RequestValidationError: If the request cannot address a list.
            SharePointAuthError: If no token can be acquired; raised before any request.
            SharePointApiError: If a content type, root folder, submit or fetch call fails.
            ContentTypeUnmatchedError: If strict and the content type hint matches nothing.
            CreationFailedError: If the API reports no ID for the new item.
        """
        request.validate()
        self._client.acquire_token(resource_from_url(request.web_url))
        list_url = request.list_url

        logger.debug("[add_item] getting content types for list; list:%s", request.list_label)
        content_type_id = self._content_types.resolve(list_url, request.content_type)

        folder_path: str | None = None
        if request.folder:
            root_path = self.get_root_folder_path(list_url)
            ensured = self._folders.ensure_folder(request.web_url, root_path, request.folder)
            logger.info(
                "[add_item] ensured folder; folder:%s;created:%d;skipped:%d",
                request.folder,
                len(ensured.created),
                len(ensured.skipped),
            )
            folder_path = folder_server_relative_path(root_path, request.folder)

        logger.info(
            "[add_item] creating item; list:%s;web_url:%s", request.list_label, request.web_url
        )
        # The list default is the first content type, so only an explicit hint tags the item.
        form_values = build_form_values(
            request.options, content_type_id if request.content_type else ""
        )
        response = submit_item(self._client, list_url, build_request_body(form_values, folder_path))
        return reconcile(self._client, list_url, response)


def list_item_adder_from_config(config: AppConfig) -> ListItemAdder:
    """Construct a ListItemAdder from application configuration.

    Creates a SharePointClient from the config, then wires it into the
    content type resolver, folder ensurer and adder.

    Args:
        config: Application configuration instance.

    Returns:
        Configured ListItemAdder instance.
    """
    client = sharepoint_client_from_config(config)
    return ListItemAdder(
        client=client,
        content_type_resolver=ContentTypeResolver(client, strict=config.strict_content_type),
        folder_ensurer=FolderEnsurer(client, max_workers=config.probe_workers),
    )
