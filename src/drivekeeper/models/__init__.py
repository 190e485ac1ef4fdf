"""Public model exports for drivekeeper."""

from __future__ import annotations

from .records import FileRecord, FolderRecord
from .results import (
    BatchSummary,
    ErrorKind,
    OperationResult,
    RejectedUpload,
    ResultStatus,
)
from .upload import UploadItem
from .user import CurrentUser, SignInResult

__all__ = [
    "UploadItem",
    "FileRecord",
    "FolderRecord",
    "CurrentUser",
    "SignInResult",
    "ErrorKind",
    "ResultStatus",
    "OperationResult",
    "RejectedUpload",
    "BatchSummary",
]
