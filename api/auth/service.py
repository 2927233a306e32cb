"""
Auth business logic.

Register: validate -> existence check -> hash -> insert -> respond.
Login:    validate -> active-user lookup -> verify -> issue token -> respond.

The existence check and the insert are not atomic. The store's unique
constraints on `email`/`username` decide the race; a duplicate-key error from
the insert is reported as a conflict just like a failed pre-check.
"""

from __future__ import annotations

import logging
from typing import Any

from core.db import Store
from core.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    NotImplementedFeatureError,
    UnauthorizedError,
)
from records.accessor import RecordAccessor

from . import repository, schemas, security

PASSWORD_MIN_LEN = 6
DEFAULT_ROLE = "user"
INVALID_CREDENTIALS = "Invalid email or password."
INVALID_TOKEN = "Invalid or expired token."

logger = logging.getLogger(__name__)


def strip_password(row: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in row.items() if k != "password_hash"}


def authenticate_token(access_token: str) -> dict[str, Any]:
    """
    Verify a bearer token and return the identity it asserts.

    Expired and malformed tokens give the caller the same error; only the
    log line tells them apart.
    """
    try:
        payload = security.decode_access_token(access_token)
    except security.TokenExpiredError as exc:
        logger.info("token_rejected reason=expired")
        raise UnauthorizedError(INVALID_TOKEN) from exc
    except security.AuthSecurityError as exc:
        logger.warning("token_rejected reason=invalid detail=%s", exc)
        raise UnauthorizedError(INVALID_TOKEN) from exc

    subject = str(payload.get("sub") or "").strip()
    if not subject.isdigit():
        logger.warning("token_rejected reason=bad_subject")
        raise UnauthorizedError(INVALID_TOKEN)
    return {"id": int(subject)}


class AuthService:
    def __init__(self, store: Store, records: RecordAccessor | None = None) -> None:
        self._store = store
        self._records = records or RecordAccessor(store)

    async def _insert_user(self, pairs: list[tuple[str, Any]]) -> dict[str, Any]:
        try:
            created = await self._records.insert(repository.USERS_TABLE, pairs)
        except ConflictError as exc:
            raise ConflictError("User with this email or username already exists.") from exc
        return strip_password(created.record)

    async def register(self, payload: schemas.RegisterRequest) -> dict[str, Any]:
        username = (payload.username or "").strip()
        email = repository.normalize_email(payload.email)
        password = payload.password or ""

        if not username or not email or not password:
            raise InvalidInputError("Username, email, and password are required.")
        if len(password) < PASSWORD_MIN_LEN:
            raise InvalidInputError(f"Password must be at least {PASSWORD_MIN_LEN} characters long.")

        existing = await repository.find_user_by_email_or_username(self._store, email=email, username=username)
        if existing is not None:
            raise ConflictError("User with this email or username already exists.")

        user = await self._insert_user(
            [
                ("username", username),
                ("email", email),
                ("password_hash", security.hash_password(password)),
                ("first_name", payload.first_name or None),
                ("last_name", payload.last_name or None),
                ("role", DEFAULT_ROLE),
                ("is_active", True),
            ]
        )
        logger.info("user_registered user_id=%s", user["id"])
        return user

    async def create_user(self, payload: schemas.UserCreate) -> dict[str, Any]:
        """
        Admin path: role and active flag come from the payload.
        """
        return await self._insert_user(
            [
                ("username", payload.username.strip()),
                ("email", repository.normalize_email(payload.email)),
                ("password_hash", security.hash_password(payload.password)),
                ("first_name", payload.first_name or None),
                ("last_name", payload.last_name or None),
                ("role", payload.role),
                ("is_active", payload.is_active),
            ]
        )

    async def login(self, payload: schemas.LoginRequest) -> dict[str, Any]:
        if not (payload.email or "").strip() or not payload.password:
            raise InvalidInputError("Email and password are required.")

        user_row = await repository.get_active_user_by_email(self._store, payload.email or "")
        if user_row is None:
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if not security.verify_password(payload.password, str(user_row.get("password_hash") or "")):
            raise UnauthorizedError(INVALID_CREDENTIALS)

        access_token = security.build_access_token(user_id=int(user_row["id"]))
        return {
            "message": "Login successful",
            "user": strip_password(user_row),
            "access_token": access_token,
            "token_type": "bearer",
        }

    async def logout(self) -> dict[str, str]:
        # Tokens are stateless; the client just drops it.
        return {"message": "Logout successful"}

    async def refresh(self) -> dict[str, str]:
        raise NotImplementedFeatureError("Token refresh is not implemented.")

    async def me(self, identity: dict[str, Any]) -> dict[str, Any]:
        row = await self._records.get_by_id(repository.USERS_TABLE, int(identity["id"]))
        return strip_password(row)

    async def change_password(self, user_id: int, payload: schemas.PasswordChangeRequest) -> dict[str, Any]:
        current_password = payload.current_password or ""
        new_password = payload.new_password or ""
        if not current_password or not new_password:
            raise InvalidInputError("Current password and new password are required.")
        if len(new_password) < PASSWORD_MIN_LEN:
            raise InvalidInputError(f"New password must be at least {PASSWORD_MIN_LEN} characters long.")

        password_hash = await repository.get_password_hash(self._store, user_id)
        if password_hash is None:
            raise NotFoundError("User not found.")
        if not security.verify_password(current_password, password_hash):
            raise UnauthorizedError("Current password is incorrect.")

        result = await self._records.update(
            repository.USERS_TABLE,
            user_id,
            [("password_hash", security.hash_password(new_password))],
        )
        return {"message": "Password updated successfully", "affected_rows": result.affected}
