"""Public error exports for drivekeeper."""

from __future__ import annotations

from .exceptions import (
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

__all__ = [
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
