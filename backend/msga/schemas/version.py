"""Client version schema."""
from __future__ import annotations

from pydantic import BaseModel


class VersionRead(BaseModel):
    client_version: str
    changes: list[str] = []
