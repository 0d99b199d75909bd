import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

import app.auth as auth  # noqa: E402
import app.main as main  # noqa: E402
import app.repositories.entries as entries_repo  # noqa: E402
from app.database import create_schema  # noqa: E402
from app.main import app  # noqa: E402

TEST_SECRET_KEY = "test-secret-key"


@pytest.fixture(autouse=True)
def disable_db_lifecycle(monkeypatch):
    async def noop():
        return None

    monkeypatch.setattr(main, "startup_db", noop)
    monkeypatch.setattr(main, "shutdown_db", noop)
    app.router.on_startup.clear()
    app.router.on_shutdown.clear()
    yield


@pytest.fixture(autouse=True)
def auth_secret(monkeypatch):
    monkeypatch.setattr(auth, "AUTH_SECRET_KEY", TEST_SECRET_KEY)
    yield TEST_SECRET_KEY


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock(monkeypatch):
    fake = FakeClock(datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))
    monkeypatch.setattr(entries_repo, "_utcnow", fake)
    return fake
