"""
Async database access (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`). Request code never touches the
pool directly: it receives a `Store` through `get_store()` so tests can
swap in a fake.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import asyncio
import os
from contextlib import contextmanager
from typing import Any, Iterator, Protocol
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from .settings import env_float

_pool: asyncpg.Pool | None = None


class StoreError(RuntimeError):
    pass


class DuplicateKeyError(StoreError):
    pass


class Store(Protocol):
    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None: ...

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]: ...

    async def execute(self, sql: str, *args: Any) -> int: ...


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def command_timeout_s() -> float:
    return env_float("DB_COMMAND_TIMEOUT_S", 30.0)


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=1,
        max_size=5,
        command_timeout=command_timeout_s(),
    )


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


def affected_rows(status: str) -> int:
    """
    Parse the row count out of a command status tag.

    "UPDATE 3" -> 3, "DELETE 0" -> 0, "INSERT 0 1" -> 1.
    """
    last = (status or "").rsplit(" ", 1)[-1]
    return int(last) if last.isdigit() else 0


@contextmanager
def _translate_errors() -> Iterator[None]:
    try:
        yield
    except asyncpg.UniqueViolationError as exc:
        raise DuplicateKeyError(str(exc)) from exc
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as exc:
        raise StoreError(str(exc)) from exc


class PoolStore:
    """
    `Store` backed by an asyncpg pool.
    """

    def __init__(self, db_pool: asyncpg.Pool) -> None:
        self._pool = db_pool

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        with _translate_errors():
            row = await self._pool.fetchrow(sql, *args)
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        with _translate_errors():
            rows = await self._pool.fetch(sql, *args)
        return [_record_to_dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> int:
        with _translate_errors():
            status = await self._pool.execute(sql, *args)
        return affected_rows(status)


async def get_store() -> Store:
    """
    FastAPI dependency: the process-wide store.
    """
    return PoolStore(pool())
