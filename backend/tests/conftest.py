"""
Samanvi Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Every API test runs against a real app wired to a private in-memory
       SQLite database, so queries, constraints and error mapping are all
       exercised for real.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── test_settings:   Settings pointing at sqlite+aiosqlite:///:memory:
    ├── app:             create_app(test_settings) with all tables created
    ├── client:          HTTPX AsyncClient over ASGITransport
    ├── db_session:      AsyncSession on the same in-memory database
    ├── mock_db_session: AsyncMock session for service unit tests
    ├── api_headers / basic_headers: credentials for the two gates
    ├── in_days:         ISO timestamp helper for expiry dates
    └── make_bus / make_doc_type / make_document: API-level factories

Each `app` gets its own engine; with StaticPool the in-memory database lives
exactly as long as that engine, so tests never see each other's rows.
"""

import base64
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run BEFORE any app import: app.config builds `settings` at import time
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["BCRYPT_ROUNDS"] = "4"  # fast hashing in tests
os.environ["ADMIN_API_KEY"] = "test-admin-key"
os.environ["BASIC_AUTH_USERNAME"] = "dashboard"
os.environ["BASIC_AUTH_PASSWORD"] = "dashboard-secret"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.config import Settings  # noqa: E402
from app.main import create_app  # noqa: E402

API_KEY = "test-admin-key"
BASIC_USERNAME = "dashboard"
BASIC_PASSWORD = "dashboard-secret"


def basic_auth_header(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        environment="test",
        database_url="sqlite+aiosqlite:///:memory:",
        admin_api_key=API_KEY,
        basic_auth_username=BASIC_USERNAME,
        basic_auth_password=BASIC_PASSWORD,
        bcrypt_rounds=4,
        rate_limit_requests=100000,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def app(test_settings):
    """
    Fully wired application on a fresh in-memory database.

    ASGITransport does not run the lifespan, so tables are created here and
    the engine is disposed on teardown.
    """
    application = create_app(test_settings)
    await application.state.database.create_all()
    yield application
    await application.state.database.dispose()


@pytest_asyncio.fixture
async def client(app):
    """
    HTTPX AsyncClient talking to the app in-process.

    raise_app_exceptions=False: unhandled errors come back as the 500 JSON
    body the catch-all handler builds, as a real client would see them.
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest_asyncio.fixture
async def db_session(app):
    """AsyncSession on the app's database, for repository-level tests."""
    async with app.state.database.session_factory() as session:
        yield session


@pytest.fixture
def api_headers() -> Dict[str, str]:
    return {"x-api-key": API_KEY}


@pytest.fixture
def basic_headers() -> Dict[str, str]:
    return {"Authorization": basic_auth_header(BASIC_USERNAME, BASIC_PASSWORD)}


@pytest.fixture
def in_days():
    """ISO 8601 UTC timestamp `days` from now (negative for the past)."""
    def _in_days(days: float) -> str:
        return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()

    return _in_days


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Service unit tests patch the repositories, so the session itself is
    only passed through.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# API helpers
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_bus(client, api_headers):
    async def _make_bus(registration_no: str, **fields: Any) -> Dict[str, Any]:
        response = await client.post(
            "/api/buses",
            json={"registrationNo": registration_no, **fields},
            headers=api_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _make_bus


@pytest.fixture
def make_doc_type(client, api_headers):
    async def _make_doc_type(name: str, description: str = "") -> Dict[str, Any]:
        response = await client.post(
            "/api/document-types",
            json={"name": name, "description": description or None},
            headers=api_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _make_doc_type


@pytest.fixture
def make_document(client, api_headers):
    async def _make_document(bus_id: str, doc_type_id: str, **fields: Any) -> Dict[str, Any]:
        body = {"docTypeId": doc_type_id, "fileUrl": "https://files.example.com/doc.pdf", **fields}
        response = await client.post(
            f"/api/buses/{bus_id}/documents", json=body, headers=api_headers
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _make_document
