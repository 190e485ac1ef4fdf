"""Record repository exports for drivekeeper."""

from __future__ import annotations

from .filters import UNSET, RecordFilter
from .record_repository import (
    FileRepository,
    FolderRepository,
    RecordRepository,
    connect_repositories,
)

__all__ = [
    "UNSET",
    "RecordFilter",
    "RecordRepository",
    "FileRepository",
    "FolderRepository",
    "connect_repositories",
]
