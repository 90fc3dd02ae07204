"""Reusable dependencies for FastAPI routes."""
from __future__ import annotations

from typing import Any

import httpx
from fastapi import Depends, Request

from msga.core.exceptions import (
    ForbiddenError,
    MalformedTokenError,
    MSGAError,
    NoTokenError,
    RevokedError,
)
from msga.core.security import SecretManager, TokenService
from msga.db.session import async_session_factory
from msga.db.store import DocumentStore
from msga.services.users import ROLE_ADMIN, is_token_revoked

Claims = dict[str, Any]

_store = DocumentStore(async_session_factory)


async def get_store() -> DocumentStore:
    return _store


async def get_secret_manager() -> SecretManager:
    return SecretManager()


async def get_token_service() -> TokenService:
    return TokenService()


async def get_webhook_transport() -> httpx.AsyncBaseTransport | None:
    """Transport for outbound webhook calls; None selects the default network transport."""

    return None


def _bearer_token(request: Request) -> str:
    header = request.headers.get("Authorization")
    if not header:
        raise NoTokenError()
    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise MalformedTokenError()
    return parts[1]


async def get_current_user(
    request: Request,
    store: DocumentStore = Depends(get_store),
    tokens: TokenService = Depends(get_token_service),
) -> Claims:
    claims = tokens.decode(_bearer_token(request))
    if await is_token_revoked(store, claims["jti"]):
        raise RevokedError()
    return claims


async def get_optional_user(
    request: Request,
    store: DocumentStore = Depends(get_store),
    tokens: TokenService = Depends(get_token_service),
) -> Claims | None:
    """Like :func:`get_current_user`, but any failure means anonymous."""

    try:
        return await get_current_user(request, store, tokens)
    except MSGAError:
        return None


async def require_admin(current_user: Claims = Depends(get_current_user)) -> Claims:
    if current_user.get("role") != ROLE_ADMIN:
        raise ForbiddenError()
    return current_user
