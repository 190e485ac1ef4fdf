"""DriveWorkspace: the signed-in user's drive, composed from both managers."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence

from drivekeeper.auth import AuthSession
from drivekeeper.config import DriveKeeperConfig
from drivekeeper.errors import AuthError
from drivekeeper.managers import FileManager, FolderManager
from drivekeeper.models import (
    BatchSummary,
    CurrentUser,
    ErrorKind,
    FolderRecord,
    OperationResult,
    UploadItem,
)
from drivekeeper.repository import connect_repositories
from drivekeeper.selection import SelectionCoordinator, ViewContext
from drivekeeper.storage import BlobStore
from drivekeeper.util.mime import format_size

logger = logging.getLogger(__name__)


class DriveWorkspace:
    """
    High-level entry point used by a UI.

    Policy:
        - The owner id always comes from the session; while signed out every
          owner-scoped action returns an Unauthenticated result.
        - Switching view replaces both collections and clears the selection.
    """

    def __init__(
        self,
        session: AuthSession,
        files: FileManager,
        folders: FolderManager,
    ) -> None:
        self.session = session
        self.files = files
        self.folders = folders
        self.selection = SelectionCoordinator(files, folders)
        self.folder_id: Optional[str] = None
        self._unsubscribe = session.subscribe(self._on_user_changed)

    @classmethod
    async def connect(cls, config: DriveKeeperConfig, session: AuthSession) -> "DriveWorkspace":
        """Build repositories, blob store and managers from config."""
        file_repo, folder_repo = await connect_repositories(config)
        blobs = BlobStore(config)
        files = FileManager(
            file_repo,
            blobs,
            max_upload_bytes=config.max_upload_bytes,
            progress_grace_seconds=config.progress_grace_seconds,
            allowed_content_types=config.allowed_content_types,
        )
        folders = FolderManager(folder_repo, file_repo, blobs)
        return cls(session, files, folders)

    def close(self) -> None:
        self._unsubscribe()

    @property
    def view(self) -> ViewContext:
        return self.selection.view

    @property
    def storage_used(self) -> int:
        return self.files.total_size_bytes

    @property
    def storage_used_label(self) -> str:
        return format_size(self.storage_used)

    def visible_folders(self) -> list[FolderRecord]:
        if self.view is ViewContext.DRIVE:
            return self.folders.get_child_folders(self.folder_id)
        return self.folders.folders

    def breadcrumbs(self, folder_id: Optional[str] = None) -> list[FolderRecord]:
        return self.folders.resolve_path(folder_id if folder_id is not None else self.folder_id)

    # ----------------------------
    # Views
    # ----------------------------
    async def load_view(
        self,
        view: ViewContext,
        folder_id: Optional[str] = None,
    ) -> OperationResult:
        owner_id = self._owner_id()
        if owner_id is None:
            return _unauthenticated()

        self.selection.clear()
        self.selection.view = view
        self.folder_id = folder_id if view is ViewContext.DRIVE else None

        if view is ViewContext.DRIVE:
            await asyncio.gather(
                self.files.fetch(owner_id, folder_id),
                self.folders.fetch(owner_id),
            )
        elif view is ViewContext.STARRED:
            await asyncio.gather(
                self.files.fetch_starred(owner_id),
                self.folders.fetch_starred(owner_id),
            )
        else:
            await asyncio.gather(
                self.files.fetch_trashed(owner_id),
                self.folders.fetch_trashed(owner_id),
            )

        error = self.files.error or self.folders.error
        if error:
            return OperationResult.failure(ErrorKind.REPOSITORY, error)
        return OperationResult.success()

    async def open_folder(self, folder_id: Optional[str]) -> OperationResult:
        return await self.load_view(ViewContext.DRIVE, folder_id)

    async def open_file(self, file_id: str) -> OperationResult:
        owner_id = self._owner_id()
        if owner_id is None:
            return _unauthenticated(file_id)
        return await self.files.fetch_one(file_id, owner_id)

    # ----------------------------
    # Actions
    # ----------------------------
    async def create_folder(self, name: str) -> OperationResult:
        owner_id = self._owner_id()
        if owner_id is None:
            return _unauthenticated()
        return await self.folders.create(name, self.folder_id, owner_id)

    async def upload(self, items: Sequence[UploadItem]) -> BatchSummary:
        """Validate, upload into the open folder, and summarise the batch."""
        owner_id = self._owner_id()
        if owner_id is None:
            return BatchSummary.from_results([_unauthenticated() for _ in items])

        accepted, rejected = self.files.validate_uploads(items)
        results = await self.files.upload_many(accepted, owner_id, self.folder_id)
        summary = BatchSummary.from_results(results, rejected)
        logger.info("Upload batch: %s", summary.message)
        return summary

    async def empty_trash(self) -> OperationResult:
        owner_id = self._owner_id()
        if owner_id is None:
            return _unauthenticated()

        file_result, folder_result = await asyncio.gather(
            self.files.empty_trash(owner_id),
            self.folders.empty_trash(owner_id),
        )
        if not file_result.ok:
            return file_result
        if not folder_result.ok:
            return folder_result
        return OperationResult.success(message="Trash emptied")

    # ----------------------------
    # Internals
    # ----------------------------
    def _owner_id(self) -> Optional[str]:
        try:
            return self.session.require_owner_id()
        except AuthError:
            return None

    def _on_user_changed(self, user: Optional[CurrentUser]) -> None:
        if user is None:
            self.selection.clear()
            self.folder_id = None


def _unauthenticated(item_id: Optional[str] = None) -> OperationResult:
    return OperationResult.failure(
        ErrorKind.UNAUTHENTICATED,
        "You must be signed in",
        item_id=item_id,
    )
