import os

# Settings are built once at import time, so the test values must be in the
# environment before anything under ``app`` is imported.
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-the-leave-service-suite")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./unused-test.db")

import httpx
import pytest

from app.core import database
from app.core.database import DatabaseSessionManager
from app.main import app


@pytest.fixture
async def db_manager(tmp_path, monkeypatch):
    manager = DatabaseSessionManager()
    await manager.init(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setattr(database, "session_manager", manager)
    yield manager
    await manager.close()


@pytest.fixture
async def db(db_manager):
    async with db_manager.session_factory() as session:
        yield session


@pytest.fixture
async def client(db_manager):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
