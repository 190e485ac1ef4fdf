"""Column mappings between records and the files/folders tables."""

from __future__ import annotations

from typing import Any

from drivekeeper.models import FileRecord, FolderRecord
from drivekeeper.util.time import now_utc, parse_rfc3339, to_rfc3339

# record attribute -> table column
FILE_COLUMNS: dict[str, str] = {
    "id": "id",
    "name": "name",
    "content_type": "type",
    "size_bytes": "size",
    "url": "url",
    "parent_folder_id": "folder_id",
    "owner_id": "user_id",
    "created_at": "created_at",
    "updated_at": "updated_at",
    "starred": "starred",
    "trashed": "trashed",
}

FOLDER_COLUMNS: dict[str, str] = {
    "id": "id",
    "name": "name",
    "parent_folder_id": "parent_id",
    "owner_id": "user_id",
    "created_at": "created_at",
    "updated_at": "updated_at",
    "starred": "starred",
    "trashed": "trashed",
}

_TIMESTAMP_ATTRS: frozenset[str] = frozenset({"created_at", "updated_at"})


def to_columns(columns: dict[str, str], changes: dict[str, Any]) -> dict[str, Any]:
    """Translate attribute-keyed changes to a column-keyed row patch."""
    row: dict[str, Any] = {}
    for attr, value in changes.items():
        if attr not in columns:
            raise KeyError(f"Unknown record attribute: {attr}")
        if attr in _TIMESTAMP_ATTRS and value is not None:
            value = to_rfc3339(value)
        row[columns[attr]] = value
    return row


def file_to_row(record: FileRecord) -> dict[str, Any]:
    return to_columns(
        FILE_COLUMNS,
        {attr: getattr(record, attr) for attr in FILE_COLUMNS},
    )


def folder_to_row(record: FolderRecord) -> dict[str, Any]:
    return to_columns(
        FOLDER_COLUMNS,
        {attr: getattr(record, attr) for attr in FOLDER_COLUMNS},
    )


def file_from_row(row: dict[str, Any]) -> FileRecord:
    size = row.get("size")
    if isinstance(size, str) and size.isdigit():
        size = int(size)
    return FileRecord(
        id=str(row.get("id", "")),
        name=_str(row.get("name")),
        content_type=_str(row.get("type")),
        size_bytes=size if isinstance(size, int) and size >= 0 else 0,
        url=_str(row.get("url")),
        parent_folder_id=_opt_str(row.get("folder_id")),
        owner_id=_str(row.get("user_id")),
        created_at=_timestamp(row.get("created_at")),
        updated_at=_timestamp(row.get("updated_at")),
        # Rows created before the starred/trashed migration carry nulls.
        starred=bool(row.get("starred") or False),
        trashed=bool(row.get("trashed") or False),
    )


def folder_from_row(row: dict[str, Any]) -> FolderRecord:
    return FolderRecord(
        id=str(row.get("id", "")),
        name=_str(row.get("name")),
        parent_folder_id=_opt_str(row.get("parent_id")),
        owner_id=_str(row.get("user_id")),
        created_at=_timestamp(row.get("created_at")),
        updated_at=_timestamp(row.get("updated_at")),
        starred=bool(row.get("starred") or False),
        trashed=bool(row.get("trashed") or False),
    )


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _opt_str(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def _timestamp(value: Any):
    if isinstance(value, str):
        try:
            return parse_rfc3339(value)
        except ValueError:
            pass
    return now_utc()
