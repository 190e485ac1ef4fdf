"""drivekeeper public API."""

from __future__ import annotations

from drivekeeper.auth import AuthInfo, AuthSession, GoogleSignIn, IdentityClient
from drivekeeper.config import DriveKeeperConfig
from drivekeeper.errors import (
    ApiError,
    AuthError,
    DriveKeeperError,
    HttpErrorInfo,
    InvalidStateError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    RepositoryError,
    SizeExceededError,
    TransferError,
    ValidationError,
    map_http_error,
)
from drivekeeper.managers import FileManager, FolderManager
from drivekeeper.models import (
    BatchSummary,
    CurrentUser,
    ErrorKind,
    FileRecord,
    FolderRecord,
    OperationResult,
    RejectedUpload,
    UploadItem,
)
from drivekeeper.repository import FileRepository, FolderRepository, RecordFilter
from drivekeeper.selection import Selection, SelectionCoordinator, ViewContext
from drivekeeper.storage import BlobStore, RemoveResult
from drivekeeper.workspace import DriveWorkspace

__all__ = [
    # High-level
    "DriveWorkspace",
    "DriveKeeperConfig",
    "FileManager",
    "FolderManager",
    "SelectionCoordinator",
    "Selection",
    "ViewContext",
    # Adapters
    "FileRepository",
    "FolderRepository",
    "RecordFilter",
    "BlobStore",
    "RemoveResult",
    # Auth
    "AuthInfo",
    "AuthSession",
    "IdentityClient",
    "GoogleSignIn",
    # Models
    "FileRecord",
    "FolderRecord",
    "CurrentUser",
    "UploadItem",
    "OperationResult",
    "ErrorKind",
    "BatchSummary",
    "RejectedUpload",
    # Errors
    "DriveKeeperError",
    "ValidationError",
    "SizeExceededError",
    "InvalidStateError",
    "AuthError",
    "NotFoundError",
    "TransferError",
    "RepositoryError",
    "RateLimitError",
    "NetworkError",
    "ApiError",
    "HttpErrorInfo",
    "map_http_error",
]
