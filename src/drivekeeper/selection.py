"""Single-item selection and the contextual actions applied to it."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional, Union

from drivekeeper.managers import FileManager, FolderManager, RecordManager
from drivekeeper.models import ErrorKind, FileRecord, FolderRecord, OperationResult
from drivekeeper.util.mime import icon_category, preview_kind

ItemKind = Literal["file", "folder"]


class ViewContext(str, Enum):
    """Which listing the user is looking at."""

    DRIVE = "drive"
    STARRED = "starred"
    TRASHED = "trashed"


@dataclass(frozen=True)
class Selection:
    kind: ItemKind
    id: str


class SelectionCoordinator:
    """Tracks at most one selected item and routes actions to its manager."""

    def __init__(
        self,
        files: FileManager,
        folders: FolderManager,
        *,
        view: ViewContext = ViewContext.DRIVE,
    ) -> None:
        self._files = files
        self._folders = folders
        self._selected: Optional[Selection] = None
        self.view = view

    @property
    def selected(self) -> Optional[Selection]:
        return self._selected

    @property
    def trash_action_label(self) -> str:
        if self.view is ViewContext.TRASHED:
            return "Restore from trash"
        return "Move to trash"

    @property
    def can_star(self) -> bool:
        return self.view is not ViewContext.STARRED

    def select(self, kind: ItemKind, item_id: str) -> None:
        if kind not in ("file", "folder"):
            raise ValueError(f"Unknown item kind: {kind}")
        self._selected = Selection(kind, item_id)

    def clear(self) -> None:
        self._selected = None

    def is_selected(self, kind: ItemKind, item_id: str) -> bool:
        return self._selected == Selection(kind, item_id)

    def selected_record(self) -> Union[FileRecord, FolderRecord, None]:
        if self._selected is None:
            return None
        return self._manager(self._selected).get(self._selected.id)

    def download_url(self) -> Optional[str]:
        """URL of the selected file; folders have none."""
        if self._selected is None or self._selected.kind != "file":
            return None
        record = self._files.get(self._selected.id)
        return record.url if record is not None and record.url else None

    def icon(self) -> Optional[str]:
        """Icon family of the selection: "folder", or the file's content category."""
        record = self.selected_record()
        if record is None:
            return None
        if isinstance(record, FolderRecord):
            return "folder"
        return icon_category(record.content_type)

    def preview(self) -> str:
        """How the selected file can be shown inline; "none" for folders."""
        record = self.selected_record()
        if not isinstance(record, FileRecord):
            return "none"
        return preview_kind(record.content_type)

    # ----------------------------
    # Contextual actions
    # ----------------------------
    async def toggle_star(self) -> OperationResult:
        if self._selected is None:
            return _nothing_selected()
        return await self._manager(self._selected).toggle_star(self._selected.id)

    async def toggle_trash(self) -> OperationResult:
        """Trash (or restore, in the trash view) the selection, then clear it."""
        if self._selected is None:
            return _nothing_selected()
        result = await self._manager(self._selected).move_or_restore_trash(self._selected.id)
        if result.ok:
            self.clear()
        return result

    async def rename(self, new_name: str) -> OperationResult:
        if self._selected is None:
            return _nothing_selected()
        return await self._manager(self._selected).rename(self._selected.id, new_name)

    async def delete_permanently(self) -> OperationResult:
        if self._selected is None:
            return _nothing_selected()
        selection = self._selected
        if selection.kind == "file":
            result = await self._files.permanently_delete(selection.id)
        else:
            result = await self._folders.permanently_delete(selection.id)
        if result.ok:
            self.clear()
        return result

    def _manager(self, selection: Selection) -> RecordManager:
        return self._files if selection.kind == "file" else self._folders


def _nothing_selected() -> OperationResult:
    return OperationResult.failure(ErrorKind.NOT_FOUND, "Nothing is selected")
