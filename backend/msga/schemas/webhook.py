"""Pydantic schemas for webhook registrations."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class WebhookCreate(BaseModel):
    url: str | None = None
    name: str | None = Field(default=None, max_length=128)


class WebhookRead(BaseModel):
    id: int
    url: str
    name: str
    created: str
    created_by: str = Field(alias="createdBy")
    last_used: str | None = Field(default=None, alias="lastUsed")

    model_config = ConfigDict(populate_by_name=True)
