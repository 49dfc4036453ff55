"""Ensure a nested folder path exists inside a list.

Existence checks for every segment run concurrently and are joined before
anything is created. Missing folders are then created one at a time,
parents before children. A failed check counts as "missing"; a failed
creation is logged and skipped so the remaining folders are still attempted.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from sharepoint_listitem.sharepoint.models import (
    EnsureFolderResult,
    ExistenceResult,
    FolderSegment,
    PendingCreation,
)
from sharepoint_listitem.sharepoint.paths import (
    add_sub_folder_url,
    folder_by_path_url,
    normalize_path,
    split_folder_path,
)

if TYPE_CHECKING:
    from sharepoint_listitem.sharepoint.client import SharePointClient

logger = logging.getLogger(__name__)

DEFAULT_PROBE_WORKERS = 8



def pending_creations(results: list[ExistenceResult]) -> list[PendingCreation]:
    """Turn missing segments into creations ordered by parent depth, then parent path."""
    pending = [
        PendingCreation(folder_name=r.segment.name, parent_path=r.segment.ancestor_path)
        for r in results
        if not r.exists
    ]
    return sorted(pending, key=lambda p: (p.depth, p.parent_path, p.folder_name))


class FolderEnsurer:
    """Creates the missing segments of a folder path on a SharePoint site."""

    def __init__(self, client: SharePointClient, max_workers: int = DEFAULT_PROBE_WORKERS) -> None:
        """Initialise the folder ensurer.

        Args:
            client: Authenticated SharePointClient.
            max_workers: Upper bound on concurrent existence checks.
        """
        self._client = client
        self._max_workers = max(1, max_workers)

    def folder_exists(self, web_url: str, segment: FolderSegment) -> bool:
        """Return True if the folder at the segment's full path can be fetched."""
        try:
            self._client.get(folder_by_path_url(web_url, segment.full_path))
        except Exception as exc:
            logger.debug(
                "[folder_exists] folder lookup failed; treating as missing; path:%s;error:%s",
                segment.full_path,
                exc,
            )
            return False
        return True

    def probe_folders(self, web_url: str, segments: list[FolderSegment]) -> list[ExistenceResult]:
        """Check every segment concurrently and wait for all checks to finish.

        Args:
            web_url: Absolute URL of the site.
            segments: Segments produced by split_folder_path.

        Returns:
            One ExistenceResult per segment, in segment order.
        """
        if not segments:
            return []
        workers = min(self._max_workers, len(segments))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # map() preserves input order and blocks until every check has returned.
            flags = list(executor.map(lambda s: self.folder_exists(web_url, s), segments))
        return [ExistenceResult(segment=s, exists=e) for s, e in zip(segments, flags)]

    def create_missing(
        self, web_url: str, pending: list[PendingCreation], result: EnsureFolderResult
    ) -> EnsureFolderResult:
        """Create pending folders sequentially, skipping the ones that fail.

        Args:
            web_url: Absolute URL of the site.
            pending: Ordered creations from pending_creations().
            result: Accumulator for created and skipped paths.

        Returns:
            The same accumulator, updated.
        """
        for index, creation in enumerate(pending):
            path = normalize_path(f"{creation.parent_path}/{creation.folder_name}")
            logger.debug(
                "[create_missing] creating folder; index:%d;parent:%s;name:%s",
                index,
                creation.parent_path,
                creation.folder_name,
            )
            try:
                self._client.post(
                    add_sub_folder_url(web_url, creation.parent_path, creation.folder_name)
                )
            except Exception as exc:
                logger.warning(
                    "[create_missing] folder creation failed; skipping; path:%s;error:%s",
                    path,
                    exc,
                )
                result.skipped.append(path)
                continue
            result.created.append(path)
        return result

    def ensure_folder(self, web_url: str, root_path: str, folder: str) -> EnsureFolderResult:
        """Make sure every segment of ``folder`` exists under the list root.

        Never raises for probe or creation failures; inspect the returned
        result to see what was skipped.

        Args:
            web_url: Absolute URL of the site.
            root_path: Server-relative URL of the list root folder.
            folder: Folder path relative to the list root.

        Returns:
            EnsureFolderResult describing existing, created and skipped folders.
        """
        segments = split_folder_path(root_path, folder)
        result = EnsureFolderResult()
        if not segments:
            return result

        checks = self.probe_folders(web_url, segments)
        result.existing.extend(c.segment.full_path for c in checks if c.exists)
        pending = pending_creations(checks)
        logger.info(
            "[ensure_folder] folder check complete; folder:%s;found:%d;to_create:%d",
            folder,
            len(result.existing),
            len(pending),
        )
        return self.create_missing(web_url, pending, result)
