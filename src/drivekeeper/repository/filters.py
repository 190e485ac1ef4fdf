"""Filter values for repository list queries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


# parent_id=None means "root only"; UNSET means "do not filter by parent".
UNSET: Any = _Unset()


@dataclass(frozen=True)
class RecordFilter:
    """
    Filter for RecordRepository.list.

    Notes:
        - parent_id=None matches only records with a null parent.
        - trashed=False also matches legacy rows whose trashed column is null.
    """

    owner_id: Optional[str] = None
    parent_id: Any = UNSET
    starred: Optional[bool] = None
    trashed: Optional[bool] = None

    @property
    def filters_parent(self) -> bool:
        return self.parent_id is not UNSET
