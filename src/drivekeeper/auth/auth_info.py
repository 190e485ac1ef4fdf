"""Identity provider settings for drivekeeper (Firebase Authentication)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(slots=True, frozen=True)
class AuthInfo:
    """
    Authentication information.

    kind = "firebase"
    data must include:
        - api_key: Web API key of the Firebase project
        - project_id: Firebase project id (ID token audience)
    optional, for Google account sign-in:
        - client_secrets_file
        - token_file
    """

    kind: str
    data: dict[str, Any]

    def __post_init__(self) -> None:
        if self.kind != "firebase":
            raise ValueError("AuthInfo.kind must be 'firebase'")

        if not isinstance(self.data, dict):
            raise TypeError("AuthInfo.data must be a dict")

        for key in ("api_key", "project_id"):
            value = self.data.get(key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"AuthInfo.data['{key}'] must be a non-empty string")

    @property
    def api_key(self) -> str:
        return str(self.data["api_key"])

    @property
    def project_id(self) -> str:
        return str(self.data["project_id"])

    @property
    def client_secrets_file(self) -> Optional[str]:
        """Path to OAuth client secrets JSON (Google sign-in only)."""
        value = self.data.get("client_secrets_file")
        return str(value) if value else None

    @property
    def token_file(self) -> Optional[str]:
        """Path to cached Google OAuth token JSON."""
        value = self.data.get("token_file")
        return str(value) if value else None
