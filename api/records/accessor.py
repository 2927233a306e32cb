"""
Generic table access (raw SQL over any table).

The table name is the only caller-controlled fragment interpolated into SQL
text, so every operation checks it against `TABLE_NAME_PATTERN` before
building a statement. All values (ids, column values) are bound parameters.

Column names inside a record are NOT validated here. They must come from
schema-defined fields, never from raw request keys.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, Union

from core.db import DuplicateKeyError, Store, StoreError
from core.errors import ConflictError, InvalidInputError, InvalidTableError, NotFoundError, QueryFailedError

TABLE_NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

Record = Union[Mapping[str, Any], Sequence[tuple[str, Any]]]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Created:
    id: Any
    record: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Updated:
    affected: int


@dataclass(frozen=True)
class Deleted:
    affected: int


def validate_table(table: str) -> str:
    # fullmatch: `$` would let a trailing newline through.
    if not isinstance(table, str) or TABLE_NAME_PATTERN.fullmatch(table) is None:
        raise InvalidTableError("Invalid table name.")
    return table


def record_pairs(record: Record) -> list[tuple[str, Any]]:
    """
    Freeze a record into (column, value) pairs.

    Column list and bound parameters are both derived from this one list.
    """
    if isinstance(record, Mapping):
        pairs = [(str(k), v) for k, v in record.items()]
    else:
        pairs = [(str(k), v) for k, v in record]
    if not pairs:
        raise InvalidInputError("Record has no fields.")
    return pairs


@contextmanager
def store_errors(table: str, action: str) -> Iterator[None]:
    try:
        yield
    except DuplicateKeyError as exc:
        logger.info("duplicate_key table=%s action=%s", table, action)
        raise ConflictError(f"{table} record already exists.") from exc
    except StoreError as exc:
        logger.error("query_failed table=%s action=%s error=%s", table, action, exc)
        raise QueryFailedError(f"Error {action} {table}.") from exc


class RecordAccessor:
    """
    CRUD over an arbitrary table through an injected `Store`.
    """

    def __init__(self, store: Store) -> None:
        self._store = store

    async def list_all(self, table: str) -> list[dict[str, Any]]:
        validate_table(table)
        with store_errors(table, "fetching from"):
            return await self._store.fetch_all(f"SELECT * FROM {table} ORDER BY created_at DESC")

    async def get_by_id(self, table: str, record_id: Any) -> dict[str, Any]:
        validate_table(table)
        with store_errors(table, "fetching from"):
            rows = await self._store.fetch_all(f"SELECT * FROM {table} WHERE id = $1", record_id)
        if not rows:
            raise NotFoundError(f"{table} not found.")
        return rows[0]

    async def insert(self, table: str, record: Record) -> Created:
        validate_table(table)
        pairs = record_pairs(record)
        columns = ", ".join(col for col, _ in pairs)
        placeholders = ", ".join(f"${i}" for i in range(1, len(pairs) + 1))

        with store_errors(table, "creating"):
            row = await self._store.fetch_one(
                f"INSERT INTO {table} ({columns}) VALUES ({placeholders}) RETURNING id",
                *[value for _, value in pairs],
            )
        if row is None:
            raise QueryFailedError(f"Error creating {table}.")

        new_id = row["id"]
        return Created(id=new_id, record={**dict(pairs), "id": new_id})

    async def update(self, table: str, record_id: Any, record: Record) -> Updated:
        """
        Zero affected rows is reported as not found. A store that counts only
        changed rows would report an unchanged-but-existing row the same way.
        """
        validate_table(table)
        pairs = record_pairs(record)
        set_clause = ", ".join(f"{col} = ${i}" for i, (col, _) in enumerate(pairs, start=1))
        id_placeholder = f"${len(pairs) + 1}"

        with store_errors(table, "updating"):
            affected = await self._store.execute(
                f"UPDATE {table} SET {set_clause} WHERE id = {id_placeholder}",
                *[value for _, value in pairs],
                record_id,
            )
        if affected == 0:
            raise NotFoundError(f"{table} not found.")
        return Updated(affected=affected)

    async def remove(self, table: str, record_id: Any) -> Deleted:
        validate_table(table)
        with store_errors(table, "deleting"):
            affected = await self._store.execute(f"DELETE FROM {table} WHERE id = $1", record_id)
        if affected == 0:
            raise NotFoundError(f"{table} not found.")
        return Deleted(affected=affected)

    async def create_table(self, table: str, columns_sql: str) -> None:
        """
        Administrative: `CREATE TABLE IF NOT EXISTS`. `columns_sql` is trusted
        DDL written by the application, not request input.
        """
        validate_table(table)
        with store_errors(table, "creating table"):
            await self._store.execute(f"CREATE TABLE IF NOT EXISTS {table} ({columns_sql})")
        logger.info("table_ready table=%s", table)
