"""FolderManager: folder lifecycle, breadcrumbs and recursive permanent delete."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from drivekeeper.errors import DriveKeeperError, TransferError, ValidationError
from drivekeeper.models import ErrorKind, FileRecord, FolderRecord, OperationResult
from drivekeeper.repository import RecordFilter, RecordRepository
from drivekeeper.storage import BlobStore
from drivekeeper.util.ids import new_record_id
from drivekeeper.util.time import now_utc

from .base import RecordManager, gather_all

logger = logging.getLogger(__name__)


class FolderManager(RecordManager[FolderRecord]):
    """
    Folders of the signed-in user.

    Notes:
        - `resolve_path` and `get_child_folders` only see the loaded set; load
          the full set with `fetch` before building breadcrumbs.
        - Permanent delete reads descendants from the repository, not from
          the cache, so unloaded subtrees are deleted too.
    """

    noun = "folder"

    def __init__(
        self,
        repository: RecordRepository[FolderRecord],
        file_repository: RecordRepository[FileRecord],
        blob_store: BlobStore,
    ) -> None:
        super().__init__(repository)
        self._file_repo = file_repository
        self._blobs = blob_store

    @property
    def folders(self) -> list[FolderRecord]:
        return list(self._items)

    @property
    def current_folder(self) -> Optional[FolderRecord]:
        return self._current

    # ----------------------------
    # Read APIs (in-memory)
    # ----------------------------
    def get_child_folders(self, parent_folder_id: Optional[str]) -> list[FolderRecord]:
        return [f for f in self._items if f.parent_folder_id == parent_folder_id]

    def resolve_path(self, folder_id: Optional[str]) -> list[FolderRecord]:
        """
        Ancestors of folder_id plus the folder itself, root first.

        The walk stops at a folder with no parent or whose parent is not
        loaded, so the path is truncated when ancestors are missing.
        """
        if not folder_id:
            return []

        by_id = {f.id: f for f in self._items}
        path: list[FolderRecord] = []
        seen: set[str] = set()
        current = by_id.get(folder_id)

        while current is not None and current.id not in seen:
            seen.add(current.id)
            path.insert(0, current)
            if current.parent_folder_id is None:
                break
            current = by_id.get(current.parent_folder_id)

        return path

    # ----------------------------
    # Fetch
    # ----------------------------
    async def fetch(self, owner_id: str) -> None:
        """Load every non-trashed folder of owner_id, newest first."""
        await self._load(RecordFilter(owner_id=owner_id, trashed=False))

    # ----------------------------
    # Mutations
    # ----------------------------
    async def create(
        self,
        name: str,
        parent_folder_id: Optional[str],
        owner_id: str,
    ) -> OperationResult:
        with self._busy():
            try:
                if not isinstance(name, str) or not name.strip():
                    raise ValidationError("Folder name must not be empty")
                now = now_utc()
                record = FolderRecord(
                    id=new_record_id(),
                    name=name.strip(),
                    parent_folder_id=parent_folder_id,
                    owner_id=owner_id,
                    created_at=now,
                    updated_at=now,
                )
                stored = await self._repo.insert(record)
            except DriveKeeperError as exc:
                return self._fail(exc, ErrorKind.REPOSITORY)

            self._items.append(stored)
            logger.info("Created folder %s under %s", stored.id, parent_folder_id or "root")
            return OperationResult.success(item_id=stored.id, record=stored)

    async def move(
        self,
        folder_id: str,
        new_parent_folder_id: Optional[str],
    ) -> OperationResult:
        """Re-parent a folder; moves into itself or a descendant are rejected."""
        with self._busy():
            try:
                self._validate_no_cycle(folder_id, new_parent_folder_id)
                now = now_utc()
                await self._repo.update(
                    folder_id,
                    parent_folder_id=new_parent_folder_id,
                    updated_at=now,
                )
            except DriveKeeperError as exc:
                return self._fail(exc, ErrorKind.REPOSITORY, item_id=folder_id)

            self._patch_cached(folder_id, parent_folder_id=new_parent_folder_id, updated_at=now)
            return OperationResult.success(item_id=folder_id, record=self.get(folder_id))

    async def permanently_delete(self, folder_id: str) -> OperationResult:
        """
        Delete a folder and everything below it (post-order).

        Any failure aborts the call with the first error. Sibling subtrees
        that already finished stay deleted; there is no rollback.
        """
        with self._busy():
            try:
                folder = self._require_cached(folder_id)
                await self._purge(folder.id, folder.owner_id)
            except DriveKeeperError as exc:
                return self._fail(exc, ErrorKind.DELETE_FAILED, item_id=folder_id)

            logger.info("Permanently deleted folder %s", folder_id)
            return OperationResult.success(item_id=folder_id)

    async def empty_trash(self, owner_id: str) -> OperationResult:
        """Permanently delete every trashed folder tree of owner_id."""
        with self._busy():
            if not any(f.trashed for f in self._items):
                await self.fetch_trashed(owner_id)
                if self.error:
                    return OperationResult.failure(ErrorKind.REPOSITORY, self.error)

            trashed = [f for f in self._items if f.trashed]
            if not trashed:
                return OperationResult.success(message="No folders to delete")

            # Trashed folders nested in another trashed folder go with their root.
            trashed_ids = {f.id for f in trashed}
            roots = [f for f in trashed if f.parent_folder_id not in trashed_ids]

            results = await asyncio.gather(*(self.permanently_delete(f.id) for f in roots))
            failed = [r for r in results if not r.ok]
            if failed:
                message = f"Failed to delete folder {failed[0].item_id}: {failed[0].message}"
                self.error = message
                return OperationResult.failure(ErrorKind.DELETE_FAILED, message)

            self._drop_cached(trashed_ids)
            return OperationResult.success(message="Folders deleted successfully")

    # ----------------------------
    # Internals
    # ----------------------------
    async def _purge(self, folder_id: str, owner_id: str) -> None:
        """Recursive delete; raises on the first failure."""
        files = await self._file_repo.list(RecordFilter(owner_id=owner_id, parent_id=folder_id))
        await gather_all(self._purge_file(f) for f in files)

        children = await self._repo.list(RecordFilter(owner_id=owner_id, parent_id=folder_id))
        await gather_all(self._purge(child.id, owner_id) for child in children)

        await self._repo.delete(folder_id)
        self._drop_cached({folder_id})
        logger.debug("Purged folder %s (%d files, %d subfolders)", folder_id, len(files), len(children))

    async def _purge_file(self, record: FileRecord) -> None:
        removed = await self._blobs.remove(record.url)
        if not removed.ok:
            raise TransferError(
                f"An error occurred when deleting file {record.id}",
                details={"id": record.id, "reason": removed.message},
            )
        await self._file_repo.delete(record.id)

    def _validate_no_cycle(self, folder_id: str, new_parent_folder_id: Optional[str]) -> None:
        """
        Reject cycles: walk from the new parent towards the root; hitting
        folder_id means the move would put the folder under itself.
        """
        if new_parent_folder_id is None:
            return
        if new_parent_folder_id == folder_id:
            raise ValidationError(
                "Cannot move a folder into itself",
                details={"id": folder_id},
            )

        by_id = {f.id: f for f in self._items}
        seen: set[str] = set()
        cur: Optional[str] = new_parent_folder_id
        while cur is not None and cur not in seen:
            if cur == folder_id:
                raise ValidationError(
                    "Cannot move a folder into one of its subfolders",
                    details={"id": folder_id, "new_parent_id": new_parent_folder_id},
                )
            seen.add(cur)
            parent = by_id.get(cur)
            cur = parent.parent_folder_id if parent is not None else None
