"""Shared pytest fixtures.

Every test gets its own SQLite database file; the FastAPI app is wired to it
through a dependency override so the module-level engine is never used.
"""
import asyncio
import os

# Settings are read once and memoized, so configure them before importing msga.
os.environ.setdefault("MSGA_SECRET_KEY", "test-secret-key-for-testing-only")
os.environ.setdefault("MSGA_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("MSGA_AUTH_RATE_LIMIT", "1000")
os.environ.setdefault("MSGA_GENERAL_RATE_LIMIT", "10000")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import NullPool

from msga.core.dependencies import get_store
from msga.core.security import SecretManager, TokenService
from msga.db.session import build_session_factory
from msga.db.store import USERS, DocumentStore, create_schema
from msga.main import create_app
from msga.services import users as user_service

ADMIN_PROFILE_URL = "https://www.scribblehub.com/profile/1/admin/"
USER_PROFILE_URL = "https://www.scribblehub.com/profile/2/reader/"
PASSWORD = "correct-horse-battery"


def run(coro):
    """Run ``coro`` on a private loop without touching the current event loop."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@pytest.fixture
def store(tmp_path) -> DocumentStore:
    engine, session_factory = build_session_factory(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool
    )
    document_store = DocumentStore(session_factory)

    async def _setup():
        await create_schema(engine)
        await document_store.init()

    run(_setup())
    yield document_store
    run(engine.dispose())


@pytest.fixture
def secret_manager() -> SecretManager:
    return SecretManager()


@pytest.fixture
def token_service() -> TokenService:
    return TokenService()


def seed_user(
    store: DocumentStore,
    username: str,
    profile_url: str,
    role: str = user_service.ROLE_USER,
    approved: bool = True,
    password: str = PASSWORD,
) -> dict:
    """Register a user straight into the store and adjust role and approval."""

    async def _seed():
        created = await user_service.register_user(store, username, profile_url, password)
        users = await store.get(USERS)
        users[str(created["id"])].update(role=role, approved=approved)
        await store.set(USERS, users)
        return {**created, "role": role, "approved": approved}

    return run(_seed())


@pytest.fixture
def admin(store) -> dict:
    return seed_user(store, "admin", ADMIN_PROFILE_URL, role=user_service.ROLE_ADMIN)


@pytest.fixture
def member(store) -> dict:
    return seed_user(store, "reader", USER_PROFILE_URL)


def bearer(token_service: TokenService, user: dict) -> dict[str, str]:
    token = token_service.issue(user["id"], user["username"], user["role"])
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(token_service, admin) -> dict[str, str]:
    return bearer(token_service, admin)


@pytest.fixture
def user_headers(token_service, member) -> dict[str, str]:
    return bearer(token_service, member)


@pytest.fixture
def test_client(store) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    return TestClient(app)
