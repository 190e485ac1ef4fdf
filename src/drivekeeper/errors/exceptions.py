"""Exception hierarchy and HTTP error mapping for drivekeeper."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class DriveKeeperError(Exception):
    """
    Base exception for drivekeeper.

    Attributes:
        details: Optional structured information (e.g., record id, status code).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class ValidationError(DriveKeeperError):
    """Raised when input is rejected before any I/O (empty name, bad type)."""


class SizeExceededError(ValidationError):
    """Raised when an upload payload is over the size cap."""


class InvalidStateError(DriveKeeperError):
    """Raised when the library is used in an invalid state."""


class AuthError(DriveKeeperError):
    """Raised when sign-in fails or an operation needs a signed-in user."""


class NotFoundError(DriveKeeperError):
    """Raised when a record is absent from the repository or the local cache."""


class TransferError(DriveKeeperError):
    """Raised when the blob store fails to store or remove an object."""


class RepositoryError(DriveKeeperError):
    """Raised when the tabular store rejects a list/insert/update/delete."""


class RateLimitError(DriveKeeperError):
    """Raised when rate-limited (HTTP 429)."""


class NetworkError(DriveKeeperError):
    """Raised when network/timeout issues prevent the request."""


class ApiError(DriveKeeperError):
    """Raised for unclassified API errors (5xx, unknown 4xx, etc.)."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to drivekeeper exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


# Identity Toolkit reports bad credentials as 400 with these messages.
_CREDENTIAL_REASONS: tuple[str, ...] = (
    "EMAIL_NOT_FOUND",
    "INVALID_PASSWORD",
    "INVALID_LOGIN_CREDENTIALS",
    "INVALID_ID_TOKEN",
    "TOKEN_EXPIRED",
    "USER_DISABLED",
    "USER_NOT_FOUND",
)


def _is_credential_reason(reason: str | None) -> bool:
    if not reason:
        return False
    upper = reason.upper()
    return any(key in upper for key in _CREDENTIAL_REASONS)


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> DriveKeeperError:
    """
    Map an HTTP error to a drivekeeper exception.

    Policy:
        - 400 -> AuthError if the reason is a credential failure,
          otherwise ValidationError
        - 401/403 -> AuthError
        - 404 -> NotFoundError
        - 429 -> RateLimitError
        - 5xx -> ApiError
        - otherwise -> ApiError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 400:
        if _is_credential_reason(info.reason) or _is_credential_reason(info.message):
            return AuthError(message, details=details, cause=cause)
        return ValidationError(message, details=details, cause=cause)
    if info.status_code in (401, 403):
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)
    if 500 <= info.status_code <= 599:
        return ApiError(message, details=details, cause=cause)

    return ApiError(message, details=details, cause=cause)
