"""URL and server-relative path helpers for the SharePoint REST API."""

from __future__ import annotations

import re
from urllib.parse import quote, urlparse

from sharepoint_listitem.sharepoint.models import FolderSegment

_DUPLICATE_SLASHES = re.compile(r"/{2,}")


def normalize_path(path: str) -> str:
    """Collapse runs of slashes into a single slash."""
    return _DUPLICATE_SLASHES.sub("/", path)


def split_folder_path(root_path: str, folder: str) -> list[FolderSegment]:
    """Split a list-relative folder path into ordered segments.

    Each segment carries the absolute path of its parent: the list root
    folder joined with every preceding segment. Empty tokens (leading,
    trailing or doubled slashes) are ignored, so an empty path yields an
    empty list.

    Args:
        root_path: Server-relative URL of the list root folder,
            e.g. "/sites/team/Lists/Tasks".
        folder: Folder path relative to the list root, e.g. "2024/Q1".

    Returns:
        One FolderSegment per folder name, in path order.
    """
    names = [name for name in folder.split("/") if name]
    segments: list[FolderSegment] = []
    for index, name in enumerate(names):
        ancestor = normalize_path("/".join([root_path, *names[:index]]))
        segments.append(FolderSegment(name=name, ancestor_path=ancestor.rstrip("/") or "/"))
    return segments


def folder_server_relative_path(root_path: str, folder: str) -> str:
    """Return the absolute decoded path of ``folder`` under the list root."""
    return normalize_path(f"{root_path}/{folder}").rstrip("/")


def resource_from_url(url: str) -> str:
    """Return the scheme and host of ``url`` (the token audience)."""
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def is_valid_sharepoint_url(url: str) -> bool:
    """Check that ``url`` is an absolute https URL with a host."""
    parsed = urlparse(url)
    return parsed.scheme == "https" and bool(parsed.netloc)


def odata_literal(value: str) -> str:
    """Escape a value for use inside a single-quoted OData string literal."""
    return value.replace("'", "''")


def list_rest_url(web_url: str, list_id: str | None = None, list_title: str | None = None) -> str:
    """Build the REST URL of a list addressed by GUID or by title.

    Raises:
        ValueError: If neither list_id nor list_title is given.
    """
    web_url = web_url.rstrip("/")
    if list_id:
        return f"{web_url}/_api/web/lists(guid'{quote(list_id, safe='')}')"
    if list_title:
        return f"{web_url}/_api/web/lists/getByTitle('{quote(odata_literal(list_title), safe='')}')"
    raise ValueError("Either list_id or list_title is required")


def folder_by_path_url(web_url: str, path: str) -> str:
    """REST URL that resolves a folder by its server-relative decoded path."""
    encoded = quote(odata_literal(normalize_path(path)), safe="/")
    return f"{web_url.rstrip('/')}/_api/web/GetFolderByServerRelativePath(decodedurl='{encoded}')"


def add_sub_folder_url(web_url: str, parent_path: str, folder_name: str) -> str:
    """REST URL that creates ``folder_name`` inside ``parent_path``."""
    parent = quote(odata_literal(parent_path), safe="")
    name = quote(odata_literal(folder_name), safe="")
    return (
        f"{web_url.rstrip('/')}/_api/web/GetFolderByServerRelativePath(DecodedUrl=@a1)"
        f"/AddSubFolderUsingPath(DecodedUrl=@a2)?@a1='{parent}'&@a2='{name}'"
    )
