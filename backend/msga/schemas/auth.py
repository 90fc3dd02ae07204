"""Authentication-related schemas."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .user import UserRead


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=128)


class RegisterRequest(BaseModel):
    """Registration payload; presence and format are checked by the user service."""

    username: str | None = Field(default=None, max_length=64)
    sh_profile_url: str | None = Field(default=None, alias="shProfileURL")
    password: str | None = Field(default=None, max_length=128)

    model_config = ConfigDict(populate_by_name=True)


class TokenResponse(UserRead):
    token: str


class LogoutResponse(BaseModel):
    success: bool = True
