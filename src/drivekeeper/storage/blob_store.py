"""Blob transfer adapter over the hosted object store (Cloudinary)."""

from __future__ import annotations

import asyncio
import base64
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Literal, Optional
from urllib.parse import unquote, urlparse

from drivekeeper.config import DriveKeeperConfig
from drivekeeper.errors import SizeExceededError, TransferError, ValidationError
from drivekeeper.util.mime import format_size, is_pdf

logger = logging.getLogger(__name__)

# Path segment after which the (optional) folder path and public id begin.
UPLOAD_MARKER: str = "upload"

_VERSION_SEGMENT = re.compile(r"^v\d+$")
_RESOURCE_TYPES = frozenset({"image", "raw", "video"})
# Vendor size rejection, e.g. "File size too large. Got N. Maximum is M."
_TOO_LARGE = re.compile(r"\btoo large\b", re.IGNORECASE)


@dataclass(slots=True, frozen=True)
class RemoveResult:
    """Outcome of a blob removal; remove() reports failures here instead of raising."""

    status: Literal["success", "error"]
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "success"


class BlobStore:
    """
    Store and remove raw bytes at the object store.

    Notes:
        - The vendor SDK is synchronous; calls run in a worker thread.
        - Credentials are passed per call, the SDK's global config is untouched.
    """

    def __init__(self, config: DriveKeeperConfig, *, uploader: Any = None) -> None:
        if uploader is None:
            import cloudinary.uploader

            uploader = cloudinary.uploader
        self._uploader = uploader
        self._max_bytes = config.max_upload_bytes
        self._folder = config.upload_folder.strip("/")
        self._credentials = {
            "cloud_name": config.cloudinary_cloud_name,
            "api_key": config.cloudinary_api_key,
            "api_secret": config.cloudinary_api_secret,
            "secure": True,
        }

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    async def put(
        self,
        data: bytes,
        file_name: str,
        content_type: str,
        *,
        folder: Optional[str] = None,
    ) -> str:
        """
        Upload bytes and return the object's secure URL.

        Raises:
            ValidationError: empty payload.
            SizeExceededError: payload over the cap, or the store reports it too large.
            TransferError: the store rejected the upload.
        """
        if not data:
            raise ValidationError("Please select a file", details={"file_name": file_name})
        if len(data) > self._max_bytes:
            raise SizeExceededError(
                f"File size exceeds the maximum allowed size of {format_size(self._max_bytes)}",
                details={"file_name": file_name, "size_bytes": len(data)},
            )

        options: dict[str, Any] = {
            "folder": self._join_folder(folder),
            "public_id": f"{int(time.time() * 1000)}_{file_name.split('.')[0]}",
            "resource_type": "raw" if is_pdf(content_type) else "auto",
            **self._credentials,
        }
        data_uri = f"data:{content_type};base64,{base64.b64encode(data).decode('ascii')}"

        try:
            result = await asyncio.to_thread(self._uploader.upload, data_uri, **options)
        except Exception as exc:
            logger.warning("Upload of %s failed: %s", file_name, exc)
            if _TOO_LARGE.search(str(exc)):
                raise SizeExceededError(
                    f"File size exceeds the maximum allowed size of {format_size(self._max_bytes)}",
                    details={"file_name": file_name, "size_bytes": len(data)},
                    cause=exc,
                ) from exc
            raise TransferError(
                "Failed to upload file",
                details={"file_name": file_name},
                cause=exc,
            ) from exc

        url = result.get("secure_url") if isinstance(result, dict) else None
        if not isinstance(url, str) or not url:
            raise TransferError(
                "Object store did not return a URL",
                details={"file_name": file_name},
            )
        logger.debug("Uploaded %s to %s", file_name, url)
        return url

    async def remove(self, url: str) -> RemoveResult:
        """Remove the object addressed by url. Never raises."""
        try:
            public_id = public_id_from_url(url)
        except ValueError as exc:
            return RemoveResult(status="error", message=str(exc))

        try:
            result = await asyncio.to_thread(
                self._uploader.destroy,
                public_id,
                resource_type=resource_type_from_url(url),
                **self._credentials,
            )
        except Exception as exc:
            logger.error("Delete of %s failed: %s", public_id, exc)
            return RemoveResult(status="error", message="Failed to delete file")

        outcome = result.get("result") if isinstance(result, dict) else None
        if outcome == "ok":
            return RemoveResult(status="success")
        if outcome == "not found":
            logger.warning("Object %s was already gone", public_id)
            return RemoveResult(status="success")
        return RemoveResult(status="error", message=f"Failed to delete file: {outcome}")

    def _join_folder(self, folder: Optional[str]) -> str:
        parts = [p for p in (self._folder, (folder or "").strip("/")) if p]
        return "/".join(parts)


def public_id_from_url(url: str) -> str:
    """
    Derive the stored object's public id from its delivery URL.

    https://res.cloudinary.com/demo/image/upload/v17/drive/u1/170_a.png
        -> "drive/u1/170_a"

    The folder path is whatever sits between the "upload" marker (and an
    optional version segment) and the last segment.
    Segments are percent-decoded, since delivery URLs escape the stored name.
    """
    path = urlparse(url).path if "://" in url else url
    segments = [unquote(s) for s in path.split("/") if s]
    if not segments:
        raise ValueError(f"Cannot derive public id from url: {url!r}")

    public_id = segments[-1].split(".")[0]

    folder_segments: list[str] = []
    if UPLOAD_MARKER in segments[:-1]:
        start = segments.index(UPLOAD_MARKER) + 1
        folder_segments = segments[start:-1]
        if folder_segments and _VERSION_SEGMENT.match(folder_segments[0]):
            folder_segments = folder_segments[1:]

    if folder_segments:
        return "/".join(folder_segments + [public_id])
    return public_id


def resource_type_from_url(url: str) -> str:
    """
    Return the resource type an object was stored under.

    The segment before the "upload" marker wins when it names a resource
    type; otherwise PDFs are "raw" and everything else is "image".
    """
    path = urlparse(url).path if "://" in url else url
    segments = [s for s in path.split("/") if s]
    if UPLOAD_MARKER in segments[:-1]:
        index = segments.index(UPLOAD_MARKER)
        if index > 0 and segments[index - 1] in _RESOURCE_TYPES:
            return segments[index - 1]

    last = segments[-1] if segments else ""
    extension = last.rsplit(".", 1)[-1].lower() if "." in last else ""
    return "raw" if extension == "pdf" else "image"
