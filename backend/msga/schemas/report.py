"""Pydantic schemas for work and profile reports."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReportCreate(_CamelModel):
    url: str | None = None
    title: str | None = None
    reason: str | None = None
    proofs: list[str | None] | None = None
    additional_info: str | None = None


class ReportStatusUpdate(_CamelModel):
    status: str | None = None


class ReportUpdate(_CamelModel):
    """Partial update; only fields present in the request body are applied."""

    title: str | None = None
    url: str | None = None
    reason: str | None = None
    proofs: list[str] | None = None
    additional_info: str | None = None
    reporter: str | None = None
    date_reported: str | None = None
    status: str | None = None
    approved: bool | None = None

    def patch(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True, by_alias=True)


class ReportRead(_CamelModel):
    id: int
    title: str
    url: str
    status: str
    reporter: str
    reason: str = ""
    proofs: list[str] = []
    additional_info: str = ""
    date_reported: str
    approved: bool


class ReportDeleteResponse(_CamelModel):
    success: bool = True
    deleted_id: int
