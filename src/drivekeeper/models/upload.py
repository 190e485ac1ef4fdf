"""Upload input model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from drivekeeper.util.mime import guess_content_type


@dataclass(slots=True)
class UploadItem:
    """
    One file selected for upload.

    content_type is guessed from file_name and size_bytes defaults to the
    payload length when omitted.
    """

    data: bytes
    file_name: str
    content_type: Optional[str] = None
    size_bytes: Optional[int] = None

    def __post_init__(self) -> None:
        if self.content_type is None:
            self.content_type = guess_content_type(self.file_name)
        if self.size_bytes is None:
            self.size_bytes = len(self.data)
