"""Public auth exports for drivekeeper."""

from __future__ import annotations

from .auth_info import AuthInfo
from .identity_client import IdentityClient, RetryPolicy
from .oauth_client import GoogleSignIn
from .session import PENDING, AuthSession, verify_id_token

__all__ = [
    "AuthInfo",
    "IdentityClient",
    "RetryPolicy",
    "GoogleSignIn",
    "AuthSession",
    "PENDING",
    "verify_id_token",
]
