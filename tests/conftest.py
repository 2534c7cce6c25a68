import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from database import create_engine, init_db, make_session_factory
from notifications import NotificationLog
from store import BookingStore


@pytest.fixture
def database_url(tmp_path):
    # A throwaway SQLite file per test, never the repo's bookings.db
    return f"sqlite+aiosqlite:///{tmp_path / 'bookings.db'}"


@pytest_asyncio.fixture
async def session_factory(database_url):
    engine = create_engine(database_url)
    await init_db(engine)
    yield make_session_factory(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def broken_session_factory(tmp_path):
    # No init_db: every query hits "no such table"
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    yield make_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def store(session_factory):
    return BookingStore(session_factory)


@pytest.fixture
def notification_log(session_factory):
    return NotificationLog(session_factory)


@pytest.fixture
def client(database_url, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", database_url)
    monkeypatch.delenv("LEGACY_DATA_DIR", raising=False)
    from main import app

    with TestClient(app) as c:
        yield c
