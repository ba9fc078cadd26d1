"""Service test fixtures — SQLite-backed app client and in-memory stores.

Invariants:
    - Every test gets a fresh in-memory SQLite database with the full schema
    - Route tests go through the real DatabaseSessionManager.session() wrapper
    - db_manager is swapped for the test manager and restored afterwards
    - template_store/assignment_store are fresh fakes per test

Design Decisions:
    - SQLite in-memory via aiosqlite: one shared connection, no external service
      (PostgreSQL-specific behavior is not exercised here)
"""

import pytest
from httpx import ASGITransport, AsyncClient

from fleetconfig.db.base import Base
import fleetconfig.models  # noqa: F401
import fleetconfig.infrastructure.database as db_module
from fleetconfig.infrastructure.database import DatabaseSessionManager, get_db
from fleetconfig.main import app
from fleetconfig.services.config_template_service import ConfigTemplateService
from tests.services.fake_stores import InMemoryAssignmentStore, InMemoryTemplateStore


@pytest.fixture
async def test_manager():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    async with manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield manager
    await manager.dispose()


@pytest.fixture
async def test_db(test_manager):
    async with test_manager.session() as session:
        yield session


@pytest.fixture
async def client(test_manager, monkeypatch):
    """HTTP client against the app, every request on the test database."""
    async def override_get_db():
        async with test_manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(db_module, "db_manager", test_manager)
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test",
        ) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def template_store():
    return InMemoryTemplateStore()


@pytest.fixture
def assignment_store():
    return InMemoryAssignmentStore()


@pytest.fixture
def service(template_store, assignment_store):
    return ConfigTemplateService(template_store, assignment_store)
