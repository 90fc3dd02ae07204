"""API router aggregator."""
from fastapi import APIRouter

from msga.api.routes import account, auth, reports, users, version, webhooks


def build_api_router(prefix: str = "") -> APIRouter:
    api_router = APIRouter(prefix=prefix)
    api_router.include_router(auth.router)
    api_router.include_router(users.router)
    api_router.include_router(reports.works_router)
    api_router.include_router(reports.profiles_router)
    api_router.include_router(webhooks.router)
    api_router.include_router(version.router)
    api_router.include_router(account.router)
    return api_router


__all__ = ["build_api_router"]
