"""FastAPI application entrypoint."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from msga import __version__
from msga.api import build_api_router
from msga.core.config import get_settings
from msga.core.dependencies import get_store
from msga.core.exceptions import setup_exception_handlers
from msga.core.logging import setup_logging
from msga.db.session import engine
from msga.db.store import create_schema
from msga.middleware.rate_limit import RateLimitMiddleware
from msga.middleware.request_logging import RequestLoggingMiddleware
from msga.middleware.security_headers import SecurityHeadersMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    await create_schema(engine)
    store = await get_store()
    await store.init()
    logger.info("Database initialized successfully")
    try:
        yield
    finally:
        await engine.dispose()


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging()

    app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)
    setup_exception_handlers(app)

    # Starlette runs the last added middleware first.
    app.add_middleware(
        RateLimitMiddleware,
        auth_paths=(f"{settings.route_prefix}/login", f"{settings.route_prefix}/register"),
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(build_api_router(settings.route_prefix))
    return app


app = create_app()
