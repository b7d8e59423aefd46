"""
Pytest configuration and shared fixtures.

Settings are read at import time, so the environment is pinned here before
anything under app/ is imported: a throwaway SQLite database, a temporary
upload directory, no background cron and no e-mail.
"""
import os
import tempfile
from datetime import date
from pathlib import Path

_TMP_DIR = Path(tempfile.mkdtemp(prefix="subscription-desk-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR / 'app.db'}"
os.environ["ENVIRONMENT"] = "development"
os.environ["UPLOAD_DIR"] = str(_TMP_DIR / "uploads")
os.environ["S3_BUCKET_NAME"] = ""
os.environ["CRON_PAYMENT_REMINDER_ENABLED"] = "false"
os.environ["MAIL_SERVER"] = ""
os.environ["REMINDER_EMAIL_TO"] = ""
os.environ["CURRENCY"] = "USD"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.core.database import Base
from app.core.deps import get_db, get_session_maker
from app.main import app
from app.models.client import Client  # noqa: F401
from app.models.payment_reminder_log import PaymentReminderLog  # noqa: F401


@pytest.fixture
def db_path(tmp_path) -> Path:
    return tmp_path / "test.db"


@pytest.fixture
def sync_engine(db_path):
    """Plain sqlite3 engine on the test database, for schema setup and raw row edits."""
    engine = create_engine(f"sqlite:///{db_path}", poolclass=NullPool)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_engine(db_path, sync_engine):
    """Async engine the application code runs against. NullPool: no connection outlives its event loop."""
    return create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)


@pytest.fixture
def session_maker(db_engine):
    return async_sessionmaker(db_engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
def override_deps(session_maker):
    """Point the app's database dependencies at the per-test database."""

    async def _get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_session_maker] = lambda: session_maker
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(override_deps):
    """TestClient for the FastAPI app backed by the per-test database."""
    return TestClient(override_deps)


def _client_payload(**overrides) -> dict:
    payload = {
        "company_name": "Acme Corp",
        "contact_name": "Jane Doe",
        "phone": "555-0100",
        "email": "billing@acme.test",
        "subscription_date": "2026-01-15",
        "payment_due_day": 15,
        "quotation_amount": 1500.0,
    }
    payload.update(overrides)
    return payload


def _make_client(**overrides) -> Client:
    values = {
        "company_name": "Acme Corp",
        "contact_name": "Jane Doe",
        "phone": "555-0100",
        "subscription_date": date(2026, 1, 15),
        "subscription_status": "active",
        "payment_due_day": 15,
        "quotation_amount": 1500.0,
    }
    values.update(overrides)
    return Client(**values)


@pytest.fixture
def client_payload():
    """Factory for a valid create-client request body."""
    return _client_payload


@pytest.fixture
def make_client():
    """Factory for an unsaved Client row."""
    return _make_client


@pytest.fixture
def add_clients(session_maker):
    """Insert Client rows into the test database; returns them detached."""

    async def _add(*clients: Client) -> list[Client]:
        async with session_maker() as session:
            session.add_all(clients)
            await session.commit()
        return list(clients)

    return _add
