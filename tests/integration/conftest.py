from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Iterator

import pytest
from argon2 import PasswordHasher as Argon2Hasher
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

import qrmenu.infrastructure.db.models.menu  # noqa: F401
import qrmenu.infrastructure.db.models.user  # noqa: F401
from qrmenu.api import dependencies
from qrmenu.api.main import app
from qrmenu.application.ports.storage import StorageError
from qrmenu.domain.common.ids import UserId
from qrmenu.infrastructure.db.models.base import Base
from qrmenu.infrastructure.security.passwords import Argon2PasswordHasher

BACKEND_DIR = Path(__file__).resolve().parents[2]
PUBLIC_BASE_URL = "https://menu.example.com"


class InMemorySessionStore:
    def __init__(self) -> None:
        self.sessions: dict[str, str] = {}

    def create(self, user_id: UserId, ttl_seconds: int) -> str:
        session_id = f"session-{len(self.sessions) + 1}-{user_id}"
        self.sessions[session_id] = str(user_id)
        return session_id

    def resolve(self, session_id: str) -> UserId | None:
        value = self.sessions.get(session_id)
        return UserId(value) if value is not None else None

    def revoke(self, session_id: str) -> None:
        self.sessions.pop(session_id, None)


class RecordingImageStorage:
    def __init__(self) -> None:
        self.fail = False
        self.uploads: dict[str, tuple[bytes, str]] = {}

    def upload(self, key: str, content: bytes, content_type: str) -> str:
        if self.fail:
            raise StorageError("bucket not found")
        self.uploads[key] = (content, content_type)
        return f"https://cdn.example.com/images/{key}"


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def image_storage() -> RecordingImageStorage:
    return RecordingImageStorage()


@pytest.fixture
def api(
    monkeypatch,
    engine: Engine,
    session_store: InMemorySessionStore,
    image_storage: RecordingImageStorage,
) -> Iterator[None]:
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("PUBLIC_BASE_URL", PUBLIC_BASE_URL)
    fast_hasher = Argon2PasswordHasher(Argon2Hasher(time_cost=1, memory_cost=8, parallelism=1))

    app.dependency_overrides[dependencies.get_db_engine] = lambda: engine
    app.dependency_overrides[dependencies.get_session_store] = lambda: session_store
    app.dependency_overrides[dependencies.get_image_storage] = lambda: image_storage
    app.dependency_overrides[dependencies.get_password_hasher] = lambda: fast_hasher
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(api: None) -> TestClient:
    return TestClient(app)


@pytest.fixture
def owner_client(api: None) -> Callable[..., TestClient]:
    """Registers and logs in an owner; returns a client carrying the session cookie."""

    def _login(email: str = "owner@example.com", password: str = "secret1") -> TestClient:
        client = TestClient(app)
        registered = client.post(
            "/api/auth/register",
            json={"name": "Owner", "email": email, "password": password},
        )
        assert registered.status_code == 200, registered.text
        logged_in = client.post("/api/auth/login", json={"email": email, "password": password})
        assert logged_in.status_code == 200, logged_in.text
        return client

    return _login
