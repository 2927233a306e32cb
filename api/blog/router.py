"""
Blog resource routers: posts, users, customers, comments, tags, categories.
"""

from __future__ import annotations

from fastapi import Depends, status

from auth import dependencies as auth_dependencies
from auth import schemas as auth_schemas
from auth import service as auth_service
from records.router import build_router

from . import schemas

posts = build_router(
    "posts",
    create_schema=schemas.PostCreate,
    update_schema=schemas.PostCreate,
    protect_list=True,
)

users = build_router(
    "users",
    update_schema=schemas.UserUpdate,
    hidden_fields=("password_hash",),
)

customers = build_router(
    "customers",
    create_schema=schemas.CustomerCreate,
    update_schema=schemas.CustomerCreate,
)

comments = build_router(
    "comments",
    create_schema=schemas.CommentCreate,
    update_schema=schemas.CommentUpdate,
)

tags = build_router(
    "tags",
    create_schema=schemas.TagCreate,
    update_schema=schemas.TagUpdate,
)

categories = build_router(
    "categories",
    create_schema=schemas.CategoryCreate,
    update_schema=schemas.CategoryUpdate,
)


@users.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: auth_schemas.UserCreate,
    _: dict = Depends(auth_dependencies.get_current_user),
    auth: auth_service.AuthService = Depends(auth_dependencies.get_auth_service),
) -> dict:
    user = await auth.create_user(payload)
    return {"id": user["id"], "message": "users created successfully", "data": user}


@users.put("/{record_id}/password")
async def change_password(
    record_id: int,
    payload: auth_schemas.PasswordChangeRequest,
    _: dict = Depends(auth_dependencies.get_current_user),
    auth: auth_service.AuthService = Depends(auth_dependencies.get_auth_service),
) -> dict:
    return await auth.change_password(record_id, payload)
