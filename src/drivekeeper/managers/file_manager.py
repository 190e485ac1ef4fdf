"""FileManager: file lifecycle (upload, star, trash, permanent delete)."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional, Sequence

from drivekeeper.errors import (
    DriveKeeperError,
    SizeExceededError,
    TransferError,
)
from drivekeeper.models import (
    ErrorKind,
    FileRecord,
    OperationResult,
    RejectedUpload,
    UploadItem,
)
from drivekeeper.repository import RecordFilter, RecordRepository
from drivekeeper.storage import BlobStore
from drivekeeper.util.ids import new_record_id, new_upload_id
from drivekeeper.util.mime import (
    ALLOWED_CONTENT_TYPES,
    MAX_UPLOAD_BYTES,
    allowed_extensions,
    format_size,
)
from drivekeeper.util.time import now_utc

from .base import RecordManager

logger = logging.getLogger(__name__)


class FileManager(RecordManager[FileRecord]):
    """
    Files of the signed-in user for the current view (folder, starred, trash).

    Notes:
        - `total_size_bytes` only covers the loaded view, not the account.
        - Upload progress is keyed by a temporary id per upload and cleared
          shortly after completion.
    """

    noun = "file"

    def __init__(
        self,
        repository: RecordRepository[FileRecord],
        blob_store: BlobStore,
        *,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
        progress_grace_seconds: float = 1.0,
        allowed_content_types: Optional[Iterable[str]] = None,
    ) -> None:
        super().__init__(repository)
        self._blobs = blob_store
        self._max_upload_bytes = max_upload_bytes
        self._progress_grace_seconds = progress_grace_seconds
        self._allowed_content_types = frozenset(
            allowed_content_types if allowed_content_types is not None else ALLOWED_CONTENT_TYPES
        )
        self._upload_progress: dict[str, int] = {}

    @property
    def files(self) -> list[FileRecord]:
        return list(self._items)

    @property
    def current_file(self) -> Optional[FileRecord]:
        return self._current

    @property
    def upload_progress(self) -> dict[str, int]:
        return dict(self._upload_progress)

    @property
    def total_size_bytes(self) -> int:
        return sum(f.size_bytes for f in self._items)

    def search(self, query: str) -> list[FileRecord]:
        """Case-insensitive name match over the loaded view."""
        needle = query.strip().lower()
        if not needle:
            return self.files
        return [f for f in self._items if needle in f.name.lower()]

    # ----------------------------
    # Fetch
    # ----------------------------
    async def fetch(self, owner_id: str, parent_folder_id: Optional[str] = None) -> None:
        """Load non-trashed files directly under parent_folder_id (None = root)."""
        await self._load(
            RecordFilter(owner_id=owner_id, parent_id=parent_folder_id, trashed=False)
        )

    # ----------------------------
    # Upload
    # ----------------------------
    def validate_uploads(
        self,
        items: Sequence[UploadItem],
    ) -> tuple[list[UploadItem], list[RejectedUpload]]:
        """Split items into accepted ones and rejections (size cap, content type)."""
        accepted: list[UploadItem] = []
        rejected: list[RejectedUpload] = []
        for item in items:
            if (item.size_bytes or 0) > self._max_upload_bytes:
                rejected.append(
                    RejectedUpload(
                        item.file_name,
                        "File exceeds the maximum allowed size of "
                        f"{format_size(self._max_upload_bytes)}",
                    )
                )
                continue
            if self._allowed_content_types and item.content_type not in self._allowed_content_types:
                rejected.append(
                    RejectedUpload(
                        item.file_name,
                        f"File type not allowed. Supported formats: {allowed_extensions()}",
                    )
                )
                continue
            accepted.append(item)
        return accepted, rejected

    async def upload_one(
        self,
        data: bytes,
        file_name: str,
        content_type: str,
        size_bytes: int,
        owner_id: str,
        parent_folder_id: Optional[str],
    ) -> OperationResult:
        """
        Transfer bytes, then persist the record and add it to the view.

        Steps:
            1) reject over-cap sizes before any I/O
            2) track progress under a temporary id
            3) blob transfer
            4) record insert (a failure here leaves the blob orphaned)
            5) append the stored record
        """
        if size_bytes > self._max_upload_bytes:
            exc = SizeExceededError(
                "File size exceeds the maximum allowed size of "
                f"{format_size(self._max_upload_bytes)}",
                details={"file_name": file_name, "size_bytes": size_bytes},
            )
            return self._fail(exc, ErrorKind.SIZE_EXCEEDED)

        upload_id = new_upload_id()
        self._upload_progress[upload_id] = 0

        with self._busy():
            try:
                url = await self._blobs.put(data, file_name, content_type, folder=owner_id)
            except DriveKeeperError as exc:
                self._upload_progress.pop(upload_id, None)
                return self._fail(exc, ErrorKind.UPLOAD_FAILED)

            now = now_utc()
            record = FileRecord(
                id=new_record_id(),
                name=file_name,
                content_type=content_type,
                size_bytes=size_bytes,
                url=url,
                parent_folder_id=parent_folder_id,
                owner_id=owner_id,
                created_at=now,
                updated_at=now,
            )
            try:
                stored = await self._repo.insert(record)
            except DriveKeeperError as exc:
                self._upload_progress.pop(upload_id, None)
                logger.error("Record insert failed after upload; blob left at %s", url)
                return self._fail(exc, ErrorKind.UPLOAD_FAILED)

            self._items.append(stored)
            self._upload_progress[upload_id] = 100
            self._schedule_progress_clear(upload_id)
            logger.info("Uploaded file %s (%d bytes)", stored.id, stored.size_bytes)
            return OperationResult.success(item_id=stored.id, record=stored)

    async def upload_many(
        self,
        items: Sequence[UploadItem],
        owner_id: str,
        parent_folder_id: Optional[str],
    ) -> list[OperationResult]:
        """Upload all items concurrently; one result per item, in input order."""
        with self._busy():
            return list(
                await asyncio.gather(
                    *(
                        self.upload_one(
                            item.data,
                            item.file_name,
                            item.content_type or "application/octet-stream",
                            item.size_bytes if item.size_bytes is not None else len(item.data),
                            owner_id,
                            parent_folder_id,
                        )
                        for item in items
                    )
                )
            )

    # ----------------------------
    # Mutations
    # ----------------------------
    async def move_to_folder(
        self,
        file_id: str,
        new_parent_folder_id: Optional[str],
    ) -> OperationResult:
        with self._busy():
            try:
                now = now_utc()
                await self._repo.update(
                    file_id,
                    parent_folder_id=new_parent_folder_id,
                    updated_at=now,
                )
            except DriveKeeperError as exc:
                return self._fail(exc, ErrorKind.REPOSITORY, item_id=file_id)

            self._patch_cached(file_id, parent_folder_id=new_parent_folder_id, updated_at=now)
            return OperationResult.success(item_id=file_id, record=self.get(file_id))

    async def permanently_delete(self, file_id: str) -> OperationResult:
        """Remove the blob first; the record is only deleted once the blob is gone."""
        with self._busy():
            try:
                record = self._require_cached(file_id)
                removed = await self._blobs.remove(record.url)
                if not removed.ok:
                    raise TransferError(
                        f"An error occurred when deleting file {file_id}",
                        details={"id": file_id, "reason": removed.message},
                    )
                await self._repo.delete(file_id)
            except DriveKeeperError as exc:
                return self._fail(exc, ErrorKind.DELETE_FAILED, item_id=file_id)

            self._drop_cached({file_id})
            logger.info("Permanently deleted file %s", file_id)
            return OperationResult.success(item_id=file_id)

    async def empty_trash(self, owner_id: str) -> OperationResult:
        """Permanently delete every trashed file of owner_id."""
        with self._busy():
            if not any(f.trashed for f in self._items):
                await self.fetch_trashed(owner_id)
                if self.error:
                    return OperationResult.failure(ErrorKind.REPOSITORY, self.error)

            trashed = [f for f in self._items if f.trashed]
            if not trashed:
                return OperationResult.success(message="No files to delete")

            results = await asyncio.gather(*(self.permanently_delete(f.id) for f in trashed))
            failed = [r for r in results if not r.ok]
            if failed:
                message = f"Failed to delete file {failed[0].item_id}: {failed[0].message}"
                self.error = message
                return OperationResult.failure(ErrorKind.DELETE_FAILED, message)

            self._drop_cached({f.id for f in trashed})
            return OperationResult.success(message="Files deleted successfully")

    # ----------------------------
    # Internals
    # ----------------------------
    def _schedule_progress_clear(self, upload_id: str) -> None:
        loop = asyncio.get_running_loop()
        loop.call_later(self._progress_grace_seconds, self._upload_progress.pop, upload_id, None)
