"""
Auth API schemas (request models).

Register/login fields are optional at the schema level so the service can
report missing values as `invalid_input` with a readable message.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import AliasChoices, BaseModel, BeforeValidator, Field

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def lowercase_email(value: Any) -> Any:
    """
    Emails are stored stripped and lower-cased; login looks them up the same way.
    """
    if isinstance(value, str):
        return value.strip().lower()
    return value


Email = Annotated[str, BeforeValidator(lowercase_email)]
OptionalEmail = Annotated[str | None, BeforeValidator(lowercase_email)]


class RegisterRequest(BaseModel):
    username: str | None = None
    email: str | None = None
    password: str | None = None
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: Email = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6, max_length=255)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    role: Literal["admin", "user", "moderator"] = "user"
    is_active: bool = True


class PasswordChangeRequest(BaseModel):
    current_password: str | None = Field(
        default=None,
        validation_alias=AliasChoices("current_password", "currentPassword"),
    )
    new_password: str | None = Field(
        default=None,
        validation_alias=AliasChoices("new_password", "newPassword"),
    )
