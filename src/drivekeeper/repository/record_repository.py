"""Typed CRUD facade over the hosted tabular store (Supabase / PostgREST)."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

import httpx
from postgrest.exceptions import APIError

from drivekeeper.config import DriveKeeperConfig
from drivekeeper.errors import NetworkError, NotFoundError, RepositoryError
from drivekeeper.models import FileRecord, FolderRecord

from .fields import (
    FILE_COLUMNS,
    FOLDER_COLUMNS,
    file_from_row,
    file_to_row,
    folder_from_row,
    folder_to_row,
    to_columns,
)
from .filters import RecordFilter

logger = logging.getLogger(__name__)

R = TypeVar("R")


class RecordRepository(Generic[R]):
    """
    CRUD over one table of the tabular store.

    Notes:
        - `client` is a supabase AsyncClient (or anything exposing `.table()`
          with the PostgREST query builder).
        - Record attributes are translated to table columns through `columns`.
    """

    def __init__(
        self,
        client: Any,
        table: str,
        *,
        columns: dict[str, str],
        from_row: Callable[[dict[str, Any]], R],
        to_row: Callable[[R], dict[str, Any]],
    ) -> None:
        self._client = client
        self._table = table
        self._columns = columns
        self._from_row = from_row
        self._to_row = to_row

    @property
    def table(self) -> str:
        return self._table

    # ----------------------------
    # Public API
    # ----------------------------
    async def list(
        self,
        record_filter: RecordFilter,
        *,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> list[R]:
        query = self._client.table(self._table).select("*")

        if record_filter.owner_id is not None:
            query = query.eq(self._columns["owner_id"], record_filter.owner_id)

        if record_filter.filters_parent:
            parent_col = self._columns["parent_folder_id"]
            if record_filter.parent_id is None:
                query = query.is_(parent_col, "null")
            else:
                query = query.eq(parent_col, record_filter.parent_id)

        if record_filter.starred is not None:
            query = query.eq(self._columns["starred"], record_filter.starred)

        if record_filter.trashed is True:
            query = query.eq(self._columns["trashed"], True)
        elif record_filter.trashed is False:
            col = self._columns["trashed"]
            query = query.or_(f"{col}.is.null,{col}.eq.false")

        query = query.order(self._columns[order_by], desc=descending)
        response = await self._execute(query.execute, "list")
        return [self._from_row(row) for row in (response.data or [])]

    async def get(self, record_id: str, owner_id: str) -> R:
        query = (
            self._client.table(self._table)
            .select("*")
            .eq(self._columns["id"], record_id)
            .eq(self._columns["owner_id"], owner_id)
            .limit(1)
        )
        response = await self._execute(query.execute, "get")
        rows = response.data or []
        if not rows:
            raise NotFoundError(
                f"Record not found in {self._table}",
                details={"table": self._table, "id": record_id},
            )
        return self._from_row(rows[0])

    async def insert(self, record: R) -> R:
        """Insert and return the stored row (server defaults win)."""
        query = self._client.table(self._table).insert(self._to_row(record))
        response = await self._execute(query.execute, "insert")
        rows = response.data or []
        if not rows:
            return record
        return self._from_row(rows[0])

    async def update(self, record_id: str, **changes: Any) -> None:
        patch = to_columns(self._columns, changes)
        query = (
            self._client.table(self._table)
            .update(patch)
            .eq(self._columns["id"], record_id)
        )
        await self._execute(query.execute, "update")

    async def delete(self, record_id: str) -> None:
        query = self._client.table(self._table).delete().eq(self._columns["id"], record_id)
        await self._execute(query.execute, "delete")

    # ----------------------------
    # Internals
    # ----------------------------
    async def _execute(self, func: Callable[[], Awaitable[Any]], op: str) -> Any:
        try:
            return await func()
        except APIError as exc:
            logger.warning("%s on %s failed: %s", op, self._table, exc.message)
            raise RepositoryError(
                exc.message or f"{op} on {self._table} failed",
                details={"table": self._table, "op": op, "code": exc.code},
                cause=exc,
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("%s on %s failed: network error", op, self._table)
            raise NetworkError(
                "Network error",
                details={"table": self._table, "op": op},
                cause=exc,
            ) from exc


class FileRepository(RecordRepository[FileRecord]):
    def __init__(self, client: Any, table: str = "files") -> None:
        super().__init__(
            client,
            table,
            columns=FILE_COLUMNS,
            from_row=file_from_row,
            to_row=file_to_row,
        )


class FolderRepository(RecordRepository[FolderRecord]):
    def __init__(self, client: Any, table: str = "folders") -> None:
        super().__init__(
            client,
            table,
            columns=FOLDER_COLUMNS,
            from_row=folder_from_row,
            to_row=folder_to_row,
        )


async def connect_repositories(
    config: DriveKeeperConfig,
    *,
    client: Optional[Any] = None,
) -> tuple[FileRepository, FolderRepository]:
    """Create both repositories over one supabase AsyncClient."""
    if client is None:
        from supabase import acreate_client

        client = await acreate_client(config.supabase_url, config.supabase_key)

    return (
        FileRepository(client, config.files_table),
        FolderRepository(client, config.folders_table),
    )
