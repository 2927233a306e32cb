"""
Request schemas for blog resources.

Field order is column order on insert/update.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from auth.schemas import EMAIL_PATTERN, Email, OptionalEmail

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class PostCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=255)
    content: str = Field(..., min_length=10, max_length=65535)
    author: str = Field(..., min_length=2, max_length=255)
    status: Literal["draft", "published", "archived"] = "draft"


class UserUpdate(BaseModel):
    username: str | None = Field(default=None, min_length=3, max_length=50)
    email: OptionalEmail = Field(default=None, max_length=255, pattern=EMAIL_PATTERN)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    role: Literal["admin", "user", "moderator"] | None = None
    is_active: bool | None = None


class CustomerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: Email = Field(..., max_length=255, pattern=EMAIL_PATTERN)


class CommentCreate(BaseModel):
    post_id: int
    user_id: int | None = None
    author_name: str | None = Field(default=None, max_length=100)
    author_email: OptionalEmail = Field(default=None, max_length=255, pattern=EMAIL_PATTERN)
    content: str = Field(..., min_length=1)
    status: Literal["pending", "approved", "spam"] = "pending"


class CommentUpdate(BaseModel):
    content: str | None = Field(default=None, min_length=1)
    status: Literal["pending", "approved", "spam"] | None = None


class TagCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    slug: str = Field(..., min_length=1, max_length=50, pattern=SLUG_PATTERN)
    description: str | None = None


class TagUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=50)
    slug: str | None = Field(default=None, min_length=1, max_length=50, pattern=SLUG_PATTERN)
    description: str | None = None


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100, pattern=SLUG_PATTERN)
    description: str | None = None
    parent_id: int | None = None


class CategoryUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    slug: str | None = Field(default=None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    description: str | None = None
    parent_id: int | None = None
