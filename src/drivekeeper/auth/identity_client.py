"""Firebase Identity Toolkit client (email/password and Google sign-in)."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from drivekeeper.errors import (
    ApiError,
    AuthError,
    DriveKeeperError,
    HttpErrorInfo,
    NetworkError,
    RateLimitError,
    map_http_error,
)
from drivekeeper.models import CurrentUser, SignInResult

from .auth_info import AuthInfo

logger = logging.getLogger(__name__)

# Identity Toolkit requires a requestUri for IdP assertions; any http URL works.
_ASSERTION_REQUEST_URI = "http://localhost"


@dataclass(frozen=True)
class RetryPolicy:
    """Attempts per identity request; the wait doubles after each failure."""

    max_attempts: int = 4
    base_delay_sec: float = 1.0

    def delay_for(self, attempt: int) -> float:
        return self.base_delay_sec * (2 ** (attempt - 1))


class IdentityClient:
    """
    Identity Toolkit (v3 `relyingparty`) client.

    Notes:
        - Throttling, 5xx and network failures are retried per `RetryPolicy`.
        - Credential failures come back as 400 with a Firebase code
          (EMAIL_NOT_FOUND, INVALID_PASSWORD, ...) and map to AuthError.
    """

    def __init__(self, auth_info: AuthInfo, *, retry_policy: Optional[RetryPolicy] = None) -> None:
        self._retry_policy = retry_policy or RetryPolicy()
        try:
            self._service = build(
                "identitytoolkit",
                "v3",
                developerKey=auth_info.api_key,
                cache_discovery=False,
            )
        except Exception as exc:
            raise AuthError("Failed to build Identity Toolkit service", cause=exc) from exc

    @classmethod
    def from_service(
        cls,
        service: Any,
        *,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> "IdentityClient":
        """Wrap an already built discovery service."""
        client = cls.__new__(cls)
        client._retry_policy = retry_policy or RetryPolicy()
        client._service = service
        return client

    # ----------------------------
    # Public API
    # ----------------------------
    def sign_up(self, email: str, password: str, display_name: str) -> SignInResult:
        """Create an email/password account and set its display name."""
        req = self._service.relyingparty().signupNewUser(
            body={"email": email, "password": password, "returnSecureToken": True}
        )
        data = self._execute(req)
        result = _sign_in_from_dict(data)

        if display_name:
            result = self.update_profile(result.id_token, display_name=display_name)
        logger.info("Created account %s", result.user.id)
        return result

    def sign_in_with_password(self, email: str, password: str) -> SignInResult:
        req = self._service.relyingparty().verifyPassword(
            body={"email": email, "password": password, "returnSecureToken": True}
        )
        data = self._execute(req)
        return _sign_in_from_dict(data)

    def sign_in_with_google(self, google_id_token: str) -> SignInResult:
        """Exchange a Google ID token for a Firebase session."""
        req = self._service.relyingparty().verifyAssertion(
            body={
                "requestUri": _ASSERTION_REQUEST_URI,
                "postBody": f"id_token={google_id_token}&providerId=google.com",
                "returnSecureToken": True,
                "returnIdpCredential": True,
            }
        )
        data = self._execute(req)
        return _sign_in_from_dict(data)

    def get_account(self, id_token: str) -> CurrentUser:
        req = self._service.relyingparty().getAccountInfo(body={"idToken": id_token})
        data = self._execute(req)
        users = data.get("users") or []
        if not users or not isinstance(users[0], dict):
            raise AuthError("No account for this token")
        return _user_from_dict(users[0])

    def update_profile(
        self,
        id_token: str,
        *,
        display_name: Optional[str] = None,
        photo_url: Optional[str] = None,
    ) -> SignInResult:
        body: dict[str, Any] = {"idToken": id_token, "returnSecureToken": True}
        if display_name is not None:
            body["displayName"] = display_name
        if photo_url is not None:
            body["photoUrl"] = photo_url

        req = self._service.relyingparty().setAccountInfo(body=body)
        data = self._execute(req)
        if not data.get("idToken"):
            data = {**data, "idToken": id_token}
        return _sign_in_from_dict(data)

    # ----------------------------
    # Internals
    # ----------------------------
    def _execute(self, request: Any) -> dict[str, Any]:
        policy = self._retry_policy
        for attempt in range(1, policy.max_attempts + 1):
            try:
                return request.execute()
            except Exception as exc:
                error = _to_drivekeeper_error(exc)
                if attempt == policy.max_attempts or not _is_transient(error):
                    raise error from exc
                wait = policy.delay_for(attempt)
                logger.debug(
                    "Identity request failed (%s), attempt %d; retrying in %.1fs",
                    type(error).__name__,
                    attempt,
                    wait,
                )
                time.sleep(wait)

        raise ApiError("Identity request was never attempted")


def _is_transient(error: DriveKeeperError) -> bool:
    if isinstance(error, (RateLimitError, NetworkError)):
        return True
    status = error.details.get("status_code")
    return isinstance(error, ApiError) and isinstance(status, int) and status >= 500


def _to_drivekeeper_error(exc: Exception) -> DriveKeeperError:
    if isinstance(exc, DriveKeeperError):
        return exc
    if isinstance(exc, HttpError):
        return map_http_error(_firebase_error_info(exc), cause=exc)
    if isinstance(exc, (OSError, TimeoutError)):
        return NetworkError("Network error", cause=exc)
    return ApiError("Identity Toolkit error", cause=exc)

def _user_from_dict(data: dict[str, Any]) -> CurrentUser:
    user_id = data.get("localId")
    if not isinstance(user_id, str) or not user_id:
        raise AuthError("Identity provider response has no user id")

    email = data.get("email")
    display_name = data.get("displayName")
    photo_url = data.get("photoUrl")
    return CurrentUser(
        id=user_id,
        email=email if isinstance(email, str) else "",
        display_name=display_name if isinstance(display_name, str) else "",
        photo_url=photo_url if isinstance(photo_url, str) and photo_url else None,
    )


def _sign_in_from_dict(data: dict[str, Any]) -> SignInResult:
    id_token = data.get("idToken")
    if not isinstance(id_token, str) or not id_token:
        raise AuthError("Identity provider did not return an ID token")

    refresh_token = data.get("refreshToken")
    return SignInResult(
        user=_user_from_dict(data),
        id_token=id_token,
        refresh_token=refresh_token if isinstance(refresh_token, str) else None,
    )



def _firebase_error_info(exc: HttpError) -> HttpErrorInfo:
    """
    Read the Firebase error body.

    Firebase puts its machine-readable code in error.message, either bare
    ("EMAIL_NOT_FOUND") or followed by a description
    ("WEAK_PASSWORD : Password should be at least 6 characters").
    """
    status = getattr(exc.resp, "status", None)
    try:
        body = json.loads(exc.content.decode("utf-8")) if exc.content else {}
    except (AttributeError, UnicodeDecodeError, ValueError):
        body = {}

    error = body.get("error") if isinstance(body, dict) else None
    message = error.get("message") if isinstance(error, dict) else None
    if not isinstance(message, str) or not message:
        message = None

    code = message.split(" : ", 1)[0].strip() if message else None
    reason = code or getattr(exc.resp, "reason", None)
    return HttpErrorInfo(
        status_code=status if isinstance(status, int) else 0,
        reason=reason if isinstance(reason, str) else None,
        message=message,
        details={"firebase_code": code} if code else None,
    )
