"""Named-collection document store.

Each collection is a mapping of string keys to JSON records, read and written
as a whole snapshot. Callers follow a read-modify-write pattern with no
locking: when two requests write the same collection concurrently, the last
snapshot written wins.
"""
from __future__ import annotations

import copy
import logging
from typing import Any, Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from msga.db.base import Base
from msga.models.collection import Collection

logger = logging.getLogger(__name__)

USERS = "users"
WORKS = "works"
PROFILES = "profiles"
BLOCKED_TOKENS = "blockedTokens"
WEBHOOKS = "webhooks"
DELETION_REQUESTS = "deletionRequests"

REQUIRED_COLLECTIONS = (USERS, WORKS, PROFILES, BLOCKED_TOKENS, WEBHOOKS, DELETION_REQUESTS)

Document = dict[str, Any]


class DocumentStore:
    """Read and replace whole named collections."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, name: str) -> dict[str, Document]:
        async with self._session_factory() as session:
            row = await session.get(Collection, name)
            if row is None:
                return {}
            # Detach from the ORM state so callers may mutate freely.
            return copy.deepcopy(row.data)

    async def set(self, name: str, data: dict[str, Document]) -> None:
        async with self._session_factory() as session:
            row = await session.get(Collection, name)
            if row is None:
                session.add(Collection(name=name, data=data))
            else:
                row.data = data
            await session.commit()

    async def list_names(self) -> list[str]:
        async with self._session_factory() as session:
            result = await session.execute(select(Collection.name))
            return list(result.scalars().all())

    async def init(self, names: Iterable[str] = REQUIRED_COLLECTIONS) -> None:
        """Create every collection in ``names`` that does not exist yet."""

        existing = set(await self.list_names())
        for name in names:
            if name not in existing:
                await self.set(name, {})
                logger.info("Created collection %s", name)


async def create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def next_id(collection: dict[str, Document], start: int = 1) -> int:
    """Return ``max(existing ids) + 1``, or ``start`` for an empty collection."""

    ids = [int(key) for key in collection]
    return max(ids) + 1 if ids else start
