"""Client version endpoint."""
from __future__ import annotations

from fastapi import APIRouter

from msga.core.config import get_settings
from msga.schemas.version import VersionRead
from msga.services.version import load_client_info

router = APIRouter(prefix="/version", tags=["version"])


@router.get("", response_model=VersionRead)
async def get_version() -> VersionRead:
    return VersionRead.model_validate(load_client_info(get_settings().client_info_file))
