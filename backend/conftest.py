"""Pytest configuration: set test env before any app imports so DB and settings use test values."""

import base64
import os
import tempfile

import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis, FakeServer

# Set before files_manager.config or files_manager.limiter are used
_tmp = tempfile.mkdtemp(prefix="files_manager_test_")
os.environ.setdefault("FILES_MANAGER_DB_PATH", os.path.join(_tmp, "test.db"))
os.environ.setdefault("FILES_MANAGER_FOLDER_PATH", os.path.join(_tmp, "files"))
os.environ.setdefault("FILES_MANAGER_RATE_LIMIT_ENABLED", "false")
# Bootstrap user for API tests (login as test@example.com / testpass123)
os.environ.setdefault("FILES_MANAGER_BOOTSTRAP_USER_EMAIL", "test@example.com")
os.environ.setdefault("FILES_MANAGER_BOOTSTRAP_USER_PASSWORD", "testpass123")


@pytest_asyncio.fixture
async def database(tmp_path):
    """Fresh SQLite database with tables created."""
    from files_manager.db.session import Database
    from files_manager.files.models import File  # noqa: F401 - register with Base
    from files_manager.users.models import User  # noqa: F401 - register with Base

    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.init()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def session(database):
    """Yield a session; use for service and directory tests."""
    async with database.session() as s:
        yield s


@pytest.fixture
def redis_client():
    """In-memory Redis with its own server so tests do not share keys."""
    return FakeAsyncRedis(server=FakeServer(), decode_responses=True)


@pytest.fixture
def token_cache(redis_client):
    from files_manager.auth.cache import TokenCache

    return TokenCache(redis_client)


@pytest.fixture
def client(tmp_path, monkeypatch):
    """TestClient for the FastAPI app. Use as context manager so lifespan runs (init db, bootstrap user).
    Each test gets its own database, blob folder and in-memory Redis."""
    from fastapi.testclient import TestClient

    from files_manager import main

    monkeypatch.setenv("FILES_MANAGER_DB_PATH", str(tmp_path / "api.db"))
    monkeypatch.setenv("FILES_MANAGER_FOLDER_PATH", str(tmp_path / "files"))
    server = FakeServer()
    monkeypatch.setattr(
        main, "create_redis_client",
        lambda settings: FakeAsyncRedis(server=server, decode_responses=True),
    )
    with TestClient(main.app) as c:
        yield c


@pytest.fixture
def auth(client) -> dict:
    """X-Token header for the bootstrap user."""
    raw = base64.b64encode(b"test@example.com:testpass123").decode("ascii")
    r = client.get("/connect", headers={"Authorization": f"Basic {raw}"})
    assert r.status_code == 200
    return {"X-Token": r.json()["token"]}
