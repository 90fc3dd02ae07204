"""Pydantic schemas for user operations."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UserRead(BaseModel):
    id: int
    username: str
    sh_profile_url: str = Field(alias="shProfileURL")
    role: str
    approved: bool

    model_config = ConfigDict(populate_by_name=True)


class UserApprovalUpdate(BaseModel):
    approved: bool | None = None


class UserDeleteResponse(BaseModel):
    success: bool = True
    deleted_id: int = Field(alias="deletedId")
    username: str

    model_config = ConfigDict(populate_by_name=True)


class ProfileRead(BaseModel):
    username: str
    sh_profile_url: str = Field(alias="shProfileURL")
    role: str
    approved: bool
    date_created: str = Field(alias="dateCreated")

    model_config = ConfigDict(populate_by_name=True)


class PasswordChange(BaseModel):
    old_password: str | None = Field(default=None, alias="oldPassword")
    new_password: str | None = Field(default=None, alias="newPassword", max_length=128)

    model_config = ConfigDict(populate_by_name=True)


class DeletionRequestCreate(BaseModel):
    reason: str | None = None


class DeletionRequestRead(BaseModel):
    id: int
    user_id: int = Field(alias="userId")
    username: str
    request_date: str = Field(alias="requestDate")
    reason: str
    status: str
    resolved_at: str | None = Field(default=None, alias="resolvedAt")

    model_config = ConfigDict(populate_by_name=True)


class MessageResponse(BaseModel):
    success: bool = True
    message: str
