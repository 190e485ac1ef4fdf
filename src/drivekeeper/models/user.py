"""Identity models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True, frozen=True)
class CurrentUser:
    """The signed-in user as reported by the identity provider."""

    id: str
    email: str
    display_name: str
    photo_url: Optional[str] = None


@dataclass(slots=True, frozen=True)
class SignInResult:
    """A successful sign-in: the user plus the provider's tokens."""

    user: CurrentUser
    id_token: str
    refresh_token: Optional[str] = None
