"""
Auth security helpers: bcrypt password hashing and JWT access tokens.
"""

from __future__ import annotations

import time
from typing import Any

import bcrypt
import jwt

from core.settings import env_int, env_str

DEFAULT_BCRYPT_ROUNDS = 10
DEFAULT_ACCESS_TOKEN_EXPIRE_MIN = 60

# bcrypt only uses the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72


class AuthSecurityError(RuntimeError):
    pass


class TokenExpiredError(AuthSecurityError):
    pass


def jwt_secret() -> str:
    # Local default keeps development simple.
    # In production, set JWT_SECRET in environment.
    return env_str("JWT_SECRET", "dev-change-this-secret-before-deploying")


def jwt_algorithm() -> str:
    return env_str("JWT_ALG", "HS256")


def bcrypt_rounds() -> int:
    return env_int("BCRYPT_ROUNDS", DEFAULT_BCRYPT_ROUNDS)


def access_token_expire_minutes() -> int:
    return env_int("ACCESS_TOKEN_EXPIRE_MIN", DEFAULT_ACCESS_TOKEN_EXPIRE_MIN)


def now_epoch_s() -> int:
    return int(time.time())


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")[:BCRYPT_MAX_BYTES]
    if not password:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt(rounds=bcrypt_rounds())).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")[:BCRYPT_MAX_BYTES]
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def build_access_token(*, user_id: int, issued_at: int | None = None) -> str:
    issued_at = now_epoch_s() if issued_at is None else issued_at
    expires_at = issued_at + (access_token_expire_minutes() * 60)

    payload = {
        "sub": str(user_id),
        "type": "access",
        "iat": issued_at,
        "exp": expires_at,
    }
    return jwt.encode(payload, jwt_secret(), algorithm=jwt_algorithm())


def decode_access_token(token: str) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Access token is empty.")

    try:
        payload = jwt.decode(raw, jwt_secret(), algorithms=[jwt_algorithm()])
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpiredError("Access token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid access token.") from exc

    token_type = str(payload.get("type") or "").strip().lower()
    if token_type != "access":
        raise AuthSecurityError("Token is not an access token.")

    return payload
