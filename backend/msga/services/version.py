"""Client version information served to frontends."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from msga.core.exceptions import InternalError

logger = logging.getLogger(__name__)

VERSION_NOT_FOUND = "Version data not found."


def load_client_info(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Could not read client info from %s: %s", path, exc)
        raise InternalError(VERSION_NOT_FOUND) from exc

    client_version = data.get("client_version")
    if not client_version:
        logger.error("Client info at %s has no client_version", path)
        raise InternalError(VERSION_NOT_FOUND)
    return {"client_version": client_version, "changes": data.get("changes") or []}
