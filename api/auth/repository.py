"""
Auth persistence helpers.

Generic create/read goes through `records.RecordAccessor`; the lookups here
need filters the accessor does not offer.
"""

from __future__ import annotations

from typing import Any

from core.db import Store
from records.accessor import store_errors

USERS_TABLE = "users"


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


async def find_user_by_email_or_username(store: Store, *, email: str, username: str) -> dict[str, Any] | None:
    with store_errors(USERS_TABLE, "fetching from"):
        return await store.fetch_one(
            """
            SELECT id
            FROM users
            WHERE email = $1
               OR username = $2
            LIMIT 1
            """,
            normalize_email(email),
            username,
        )


async def get_active_user_by_email(store: Store, email: str) -> dict[str, Any] | None:
    with store_errors(USERS_TABLE, "fetching from"):
        return await store.fetch_one(
            """
            SELECT *
            FROM users
            WHERE email = $1
              AND is_active = true
            LIMIT 1
            """,
            normalize_email(email),
        )


async def get_password_hash(store: Store, user_id: int) -> str | None:
    with store_errors(USERS_TABLE, "fetching from"):
        row = await store.fetch_one(
            """
            SELECT password_hash
            FROM users
            WHERE id = $1
            """,
            user_id,
        )
    if row is None:
        return None
    return str(row["password_hash"] or "")
