"""Shared state and operations for the file and folder lifecycle managers."""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from typing import Any, Awaitable, Generic, Iterable, Iterator, Optional, TypeVar

from drivekeeper.errors import (
    DriveKeeperError,
    NotFoundError,
    SizeExceededError,
    ValidationError,
)
from drivekeeper.models import ErrorKind, OperationResult
from drivekeeper.repository import RecordFilter, RecordRepository
from drivekeeper.util.time import now_utc

logger = logging.getLogger(__name__)

R = TypeVar("R")
T = TypeVar("T")


class RecordManager(Generic[R]):
    """
    In-memory collection of one record kind, kept in step with the repository.

    Policy:
        - The collection is only mutated here, after the repository confirmed
          the change.
        - Public operations never raise DriveKeeperError: they set `error` and
          return a failed OperationResult.
        - Every fetch replaces the collection (no merging across views).
    """

    noun: str = "item"

    def __init__(self, repository: RecordRepository[R]) -> None:
        self._repo = repository
        self._items: list[R] = []
        self._current: Optional[R] = None
        self._pending = 0
        self.error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self._pending > 0

    def get(self, item_id: str) -> Optional[R]:
        """Return the cached record with item_id, or None."""
        for item in self._items:
            if getattr(item, "id") == item_id:
                return item
        return None

    # ----------------------------
    # Fetch
    # ----------------------------
    async def fetch_starred(self, owner_id: str) -> None:
        await self._load(RecordFilter(owner_id=owner_id, starred=True, trashed=False))

    async def fetch_trashed(self, owner_id: str) -> None:
        """Load trashed records, most recently trashed first."""
        await self._load(
            RecordFilter(owner_id=owner_id, trashed=True),
            order_by="updated_at",
        )

    async def fetch_one(self, item_id: str, owner_id: str) -> OperationResult:
        """Load one record into the `current` slot."""
        with self._busy():
            try:
                record = await self._repo.get(item_id, owner_id)
            except DriveKeeperError as exc:
                return self._fail(exc, ErrorKind.REPOSITORY, item_id=item_id)
            self._current = record
            return OperationResult.success(item_id=item_id, record=record)

    # ----------------------------
    # Mutations shared by both kinds
    # ----------------------------
    async def rename(self, item_id: str, new_name: str) -> OperationResult:
        with self._busy():
            try:
                if not isinstance(new_name, str) or not new_name.strip():
                    raise ValidationError(
                        f"{self.noun.capitalize()} name must not be empty",
                        details={"id": item_id},
                    )
                now = now_utc()
                await self._repo.update(item_id, name=new_name, updated_at=now)
            except DriveKeeperError as exc:
                return self._fail(exc, ErrorKind.REPOSITORY, item_id=item_id)

            self._patch_cached(item_id, name=new_name, updated_at=now)
            return OperationResult.success(item_id=item_id, record=self.get(item_id))

    async def toggle_star(self, item_id: str) -> OperationResult:
        """Flip `starred`; the current value is read from the cached view."""
        with self._busy():
            try:
                item = self._require_cached(item_id)
                starred = not getattr(item, "starred")
                now = now_utc()
                await self._repo.update(item_id, starred=starred, updated_at=now)
            except DriveKeeperError as exc:
                return self._fail(exc, ErrorKind.REPOSITORY, item_id=item_id)

            self._patch_cached(item_id, starred=starred, updated_at=now)
            return OperationResult.success(item_id=item_id, record=item)

    async def move_or_restore_trash(self, item_id: str) -> OperationResult:
        """
        Flip `trashed` and drop the record from the current view.

        The views are filtered by trash state, so the record leaves the view
        whichever way the flag moved.
        """
        with self._busy():
            try:
                item = self._require_cached(item_id)
                trashed = not getattr(item, "trashed")
                now = now_utc()
                await self._repo.update(item_id, trashed=trashed, updated_at=now)
            except DriveKeeperError as exc:
                return self._fail(exc, ErrorKind.REPOSITORY, item_id=item_id)

            self._patch_cached(item_id, trashed=trashed, updated_at=now)
            self._drop_cached({item_id})
            logger.info(
                "%s %s %s",
                self.noun.capitalize(),
                item_id,
                "moved to trash" if trashed else "restored from trash",
            )
            return OperationResult.success(item_id=item_id, record=item)

    # ----------------------------
    # Internals
    # ----------------------------
    async def _load(
        self,
        record_filter: RecordFilter,
        *,
        order_by: str = "created_at",
    ) -> bool:
        """Replace the collection; on failure keep it and set `error`."""
        with self._busy():
            try:
                records = await self._repo.list(record_filter, order_by=order_by, descending=True)
            except DriveKeeperError as exc:
                self._fail(exc, ErrorKind.REPOSITORY)
                return False
            self._items = records
            return True

    @contextmanager
    def _busy(self) -> Iterator[None]:
        # Only the outermost operation resets `error`; failures of concurrent
        # or nested operations stay visible.
        if self._pending == 0:
            self.error = None
        self._pending += 1
        try:
            yield
        finally:
            self._pending -= 1

    def _fail(
        self,
        exc: DriveKeeperError,
        default: ErrorKind,
        *,
        item_id: Optional[str] = None,
    ) -> OperationResult:
        self.error = str(exc)
        logger.warning("%s operation failed (%s): %s", self.noun, item_id or "-", exc)
        return OperationResult.failure(error_kind(exc, default), str(exc), item_id=item_id)

    def _require_cached(self, item_id: str) -> R:
        item = self.get(item_id)
        if item is None:
            raise NotFoundError(
                f"{self.noun.capitalize()} not found",
                details={"id": item_id},
            )
        return item

    def _patch_cached(self, item_id: str, **changes: Any) -> None:
        item = self.get(item_id)
        if item is None:
            return
        for attr, value in changes.items():
            setattr(item, attr, value)

    def _drop_cached(self, item_ids: Iterable[str]) -> None:
        ids = set(item_ids)
        self._items = [item for item in self._items if getattr(item, "id") not in ids]


def error_kind(exc: DriveKeeperError, default: ErrorKind) -> ErrorKind:
    """Tag an exception for a failed result; `default` covers I/O failures."""
    if isinstance(exc, SizeExceededError):
        return ErrorKind.SIZE_EXCEEDED
    if isinstance(exc, NotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(exc, ValidationError):
        return ErrorKind.VALIDATION
    return default


async def gather_all(aws: Iterable[Awaitable[T]]) -> list[T]:
    """
    Run awaitables concurrently and wait for every one of them.

    Siblings are never cancelled; once all have finished, the first exception
    in input order is re-raised.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return list(results)  # type: ignore[arg-type]
