"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from fastapi import Depends, Header, Request

from core import db
from core.errors import UnauthorizedError

from . import service


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise UnauthorizedError("Missing Authorization header.")

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise UnauthorizedError("Invalid Authorization header format.")

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise UnauthorizedError("Authorization must be: Bearer <token>.")
    return token


async def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    return _extract_bearer_token(authorization)


async def get_current_user(request: Request, access_token: str = Depends(get_bearer_token)) -> dict:
    identity = service.authenticate_token(access_token)
    request.state.user = identity
    return identity


async def get_auth_service(store: db.Store = Depends(db.get_store)) -> service.AuthService:
    return service.AuthService(store)
