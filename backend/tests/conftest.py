"""
TrailMix Backend: Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   API tests run against a real SQLite database (aiosqlite) created
       fresh per test from the ORM metadata; unit tests use a mocked
       AsyncSession.

Fixture Hierarchy:
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── sample_image_bytes / sample_video_bytes: Fake media for uploads
    ├── db_engine: Per-test SQLite engine with all tables created
    ├── app: FastAPI instance wired to db_engine
    ├── test_client: HTTPX AsyncClient for API endpoint testing
    ├── create_user: Factory registering + logging in a user
    └── auth_headers: Bearer headers of a ready-made user
"""

import os
import tempfile

# Override settings BEFORE any trailmix import (settings are read at import time)
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["UPLOAD_ROOT"] = tempfile.mkdtemp(prefix="trailmix_test_")
os.environ["JWT_SECRET"] = "test-secret-not-for-production-000000"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event

import trailmix.models  # noqa: F401
from trailmix.database import Base, create_engine, create_session_factory


@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        async def test_get_profile(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = user
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    session.add_all = MagicMock()
    return session


@pytest.fixture
def sample_image_bytes():
    """Smallest valid JPEG: SOI + JFIF header + EOI."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def sample_video_bytes():
    """An MP4 `ftyp` box header; enough for declared-MIME checks."""
    return b'\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom'


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """
    Fresh SQLite database per test with every table created.

    Foreign keys are switched on so ON DELETE CASCADE behaves as in PostgreSQL.
    """
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'trailmix_test.db'}")

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def app(db_engine):
    """
    FastAPI instance bound to the test database.

    ASGITransport does not run the lifespan, so the state it would set up
    is assigned here.
    """
    from trailmix.main import create_app

    application = create_app()
    application.state.engine = db_engine
    application.state.session_factory = create_session_factory(db_engine)
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def create_user(test_client):
    """
    Factory: register a user, log in, and return the login payload plus headers.

    Usage:
        alice = await create_user("alice")
        await test_client.get("/api/users/profile", headers=alice["headers"])
    """

    async def _create(username: str = "hiker", password: str = "s3cret-pass"):
        email = f"{username}@example.com"
        response = await test_client.post(
            "/api/users/register",
            json={"username": username, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text

        response = await test_client.post(
            "/api/users/login",
            json={"email": email, "password": password},
        )
        assert response.status_code == 200, response.text
        body = response.json()
        return {
            "id": body["user"]["id"],
            "token": body["token"],
            "user": body["user"],
            "headers": {"Authorization": f"Bearer {body['token']}"},
        }

    return _create


@pytest_asyncio.fixture
async def auth_headers(create_user):
    user = await create_user("trailblazer")
    return user["headers"]
