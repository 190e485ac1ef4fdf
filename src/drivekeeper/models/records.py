"""Data models for drive records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class FileRecord:
    """
    Metadata for one uploaded binary object.

    Notes:
        - parent_folder_id None means the root of the owner's drive.
        - url is set once the blob transfer succeeded; records are only
          persisted after that.
    """

    id: str
    name: str
    content_type: str
    size_bytes: int
    url: str
    parent_folder_id: Optional[str]
    owner_id: str
    created_at: datetime
    updated_at: datetime

    starred: bool = False
    trashed: bool = False


@dataclass(slots=True)
class FolderRecord:
    """A hierarchical container; parent_folder_id links form a forest per owner."""

    id: str
    name: str
    parent_folder_id: Optional[str]
    owner_id: str
    created_at: datetime
    updated_at: datetime

    starred: bool = False
    trashed: bool = False
