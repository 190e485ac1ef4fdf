"""Blob store exports for drivekeeper."""

from __future__ import annotations

from .blob_store import (
    UPLOAD_MARKER,
    BlobStore,
    RemoveResult,
    public_id_from_url,
    resource_type_from_url,
)

__all__ = [
    "BlobStore",
    "RemoveResult",
    "UPLOAD_MARKER",
    "public_id_from_url",
    "resource_type_from_url",
]
