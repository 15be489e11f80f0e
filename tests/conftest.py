"""
Products API - Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the whole suite.
How:   Endpoint tests run the real app against a throwaway SQLite file
       (sqlite+aiosqlite) through an injected Database; service tests use
       an AsyncMock session instead.

Fixtures:
    test_settings    Settings pointing at tmp_path/test.db
    database         Connected Database (tables created), disposed afterwards
    test_client      HTTPX AsyncClient bound to a fresh app via ASGITransport
    mock_db_session  AsyncMock standing in for AsyncSession
    make_product     Persisted-looking Product instance factory
"""

import os
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Must be set before products_api is imported: main.py builds a module-level app
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_products.db"
os.environ["FRONTEND_URL"] = "http://localhost:5173"
os.environ["LOG_LEVEL"] = "WARNING"

from products_api.config import Settings  # noqa: E402
from products_api.database import Database  # noqa: E402
from products_api.main import create_app  # noqa: E402
from products_api.models.product import Product  # noqa: E402

FRONTEND_URL = "http://localhost:5173"
BACKEND_URL = "http://localhost:4000"


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        frontend_url=FRONTEND_URL,
        backend_url=BACKEND_URL,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def database(test_settings):
    db = Database(test_settings.database_url)
    assert await db.connect()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def test_client(test_settings, database):
    """
    HTTPX client talking to a fresh app.

    ASGITransport does not run the lifespan; the ``database`` fixture has
    already connected and created the tables.
    """
    app = create_app(test_settings, database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_db_session():
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.commit = AsyncMock()
    session.refresh = AsyncMock()
    session.delete = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def make_product():
    """Build a Product as it would look after being loaded from the database."""

    def _make(**overrides) -> Product:
        now = datetime.now(timezone.utc)
        fields = {
            "id": 1,
            "name": "Monitor curvo",
            "price": 300.0,
            "availability": True,
            "created_at": now,
            "updated_at": now,
        }
        fields.update(overrides)
        return Product(**fields)

    return _make
