"""Google account sign-in (installed-app OAuth flow) for drivekeeper."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Sequence

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from drivekeeper.errors import AuthError, ValidationError

from .auth_info import AuthInfo

logger = logging.getLogger(__name__)

SIGN_IN_SCOPES: tuple[str, ...] = (
    "openid",
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/userinfo.profile",
)


class GoogleSignIn:
    """
    Obtain a Google ID token to exchange for a Firebase session.

    A cached token_file only holds the refresh token; the ID token itself is
    re-issued by refreshing, or by running the browser consent flow.
    """

    def __init__(self, auth_info: AuthInfo) -> None:
        if not auth_info.client_secrets_file:
            raise ValidationError("Google sign-in requires data['client_secrets_file']")
        self._client_secrets = auth_info.client_secrets_file
        self._token_file = auth_info.token_file

    def get_credentials(self, scopes: Sequence[str] = SIGN_IN_SCOPES) -> Credentials:
        """
        Return Google OAuth credentials carrying an ID token.

        Raises:
            AuthError: the cached token cannot be read or refreshed, or the
                consent flow fails.
        """
        creds = self._refresh_cached(scopes)
        if creds is None:
            try:
                flow = InstalledAppFlow.from_client_secrets_file(
                    self._client_secrets,
                    scopes=list(scopes),
                )
                creds = flow.run_local_server(port=0)
            except Exception as exc:
                raise AuthError(
                    "Google sign-in was not completed",
                    details={"client_secrets_file": self._client_secrets},
                    cause=exc,
                ) from exc

        self._store(creds)
        return creds

    def get_id_token(self) -> str:
        id_token = getattr(self.get_credentials(), "id_token", None)
        if not isinstance(id_token, str) or not id_token:
            raise AuthError("Google did not return an ID token")
        return id_token

    def _refresh_cached(self, scopes: Sequence[str]) -> Optional[Credentials]:
        if not self._token_file or not os.path.exists(self._token_file):
            return None

        try:
            creds = Credentials.from_authorized_user_file(self._token_file, scopes=list(scopes))
            if not creds.refresh_token:
                return None
            creds.refresh(Request())
        except Exception as exc:
            raise AuthError(
                "Cached Google sign-in could not be refreshed",
                details={"token_file": self._token_file},
                cause=exc,
            ) from exc

        if not getattr(creds, "id_token", None):
            logger.info("Refreshed Google credentials carry no ID token; running consent flow")
            return None
        return creds

    def _store(self, creds: Credentials) -> None:
        if not self._token_file:
            return
        path = Path(self._token_file)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(creds.to_json(), encoding="utf-8")
        except OSError as exc:
            raise AuthError(
                "Failed to save Google token file",
                details={"token_file": self._token_file},
                cause=exc,
            ) from exc
