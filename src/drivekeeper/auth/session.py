"""Reactive current-user signal backed by the identity provider."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import id_token as google_id_token

from drivekeeper.errors import AuthError
from drivekeeper.models import CurrentUser, SignInResult

from .auth_info import AuthInfo
from .identity_client import IdentityClient
from .oauth_client import GoogleSignIn

logger = logging.getLogger(__name__)


class _Pending:
    def __repr__(self) -> str:
        return "PENDING"


# Session state before the first sign-in/restore has resolved.
PENDING: Any = _Pending()

UserListener = Callable[[Optional[CurrentUser]], None]


def verify_id_token(id_token: str, project_id: str, *, request: Any = None) -> CurrentUser:
    """
    Verify a Firebase ID token and return the user it identifies.

    Raises:
        AuthError: if the token is invalid, expired or for another project.
    """
    try:
        claims = google_id_token.verify_firebase_token(
            id_token,
            request or Request(),
            audience=project_id,
        )
    except (ValueError, GoogleAuthError) as exc:
        raise AuthError("Invalid ID token", cause=exc) from exc

    if not claims:
        raise AuthError("Invalid ID token")

    user_id = claims.get("user_id") or claims.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise AuthError("ID token has no subject")
    return CurrentUser(
        id=user_id,
        email=claims.get("email") or "",
        display_name=claims.get("name") or "",
        photo_url=claims.get("picture") or None,
    )


class AuthSession:
    """
    Current user of the drive: PENDING, a CurrentUser, or None (signed out).

    Listeners are called with the new user (or None) on every transition.
    Owner-scoped operations must call `require_owner_id()`.
    """

    def __init__(
        self,
        auth_info: AuthInfo,
        identity: IdentityClient,
        *,
        google_sign_in: Optional[GoogleSignIn] = None,
        token_verifier: Optional[Callable[[str, str], CurrentUser]] = None,
    ) -> None:
        self._auth_info = auth_info
        self._identity = identity
        self._google = google_sign_in
        self._verify = token_verifier or verify_id_token
        self._state: Any = PENDING
        self._id_token: Optional[str] = None
        self._listeners: list[UserListener] = []

    @property
    def pending(self) -> bool:
        return self._state is PENDING

    @property
    def current_user(self) -> Optional[CurrentUser]:
        return None if self._state is PENDING else self._state

    @property
    def id_token(self) -> Optional[str]:
        return self._id_token

    def subscribe(self, listener: UserListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def require_owner_id(self) -> str:
        user = self.current_user
        if user is None:
            raise AuthError("You must be signed in")
        return user.id

    # ----------------------------
    # Transitions
    # ----------------------------
    def sign_in(self, email: str, password: str) -> CurrentUser:
        result = self._identity.sign_in_with_password(email, password)
        return self._accept(result)

    def sign_up(self, email: str, password: str, display_name: str) -> CurrentUser:
        result = self._identity.sign_up(email, password, display_name)
        return self._accept(result)

    def sign_in_with_google(self) -> CurrentUser:
        if self._google is None:
            raise AuthError("Google sign-in is not configured")
        google_token = self._google.get_id_token()
        result = self._identity.sign_in_with_google(google_token)
        return self._accept(result)

    def restore(self, id_token: str) -> Optional[CurrentUser]:
        """Resume a session from a stored ID token; signs out if it is invalid."""
        try:
            user = self._verify(id_token, self._auth_info.project_id)
        except AuthError as exc:
            logger.info("Stored session rejected: %s", exc)
            self.sign_out()
            return None
        self._id_token = id_token
        self._set(user)
        return user

    def refresh(self) -> Optional[CurrentUser]:
        """Reload the signed-in user's profile from the identity provider."""
        if self._id_token is None:
            return None
        user = self._identity.get_account(self._id_token)
        self._set(user)
        return user

    def sign_out(self) -> None:
        self._id_token = None
        self._set(None)

    def _accept(self, result: SignInResult) -> CurrentUser:
        self._id_token = result.id_token
        self._set(result.user)
        logger.info("Signed in as %s", result.user.id)
        return result.user

    def _set(self, user: Optional[CurrentUser]) -> None:
        self._state = user
        for listener in list(self._listeners):
            listener(user)
