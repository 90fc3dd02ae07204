"""Database session and engine management."""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from msga.core.config import get_settings

_settings = get_settings()
engine = create_async_engine(_settings.database_url, future=True, echo=False)
async_session_factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


def build_session_factory(database_url: str, **engine_kwargs) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Create a separate engine and session factory, e.g. for scripts or tests."""

    other_engine = create_async_engine(database_url, future=True, echo=False, **engine_kwargs)
    return other_engine, async_sessionmaker(other_engine, expire_on_commit=False, class_=AsyncSession)

