from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from qrmenu.application.ports.storage import StorageError
from qrmenu.domain.common.ids import UserId
from qrmenu.infrastructure.qr.segno_renderer import SegnoQrRenderer
from qrmenu.infrastructure.security.passwords import Argon2PasswordHasher
from qrmenu.infrastructure.sessions.redis_session_store import RedisSessionStore, session_key
from qrmenu.infrastructure.storage import supabase_storage
from qrmenu.infrastructure.storage.supabase_storage import (
    SupabaseImageStorage,
    SupabaseSettings,
    supabase_settings_from_env,
)


class FakeRedis:
    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.expiry: dict[str, int] = {}

    def set(self, name: str, value: str, ex: int | None = None) -> bool:
        self.values[name] = value
        if ex is not None:
            self.expiry[name] = ex
        return True

    def get(self, name: str) -> str | None:
        return self.values.get(name)

    def delete(self, name: str) -> int:
        return 1 if self.values.pop(name, None) is not None else 0


class FakeBucket:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.uploads: list[dict[str, object]] = []

    def upload(self, path: str, file: bytes, file_options: dict[str, str]) -> None:
        if self.error is not None:
            raise self.error
        self.uploads.append({"path": path, "file": file, "file_options": file_options})

    def get_public_url(self, path: str) -> str:
        return f"https://project.supabase.co/storage/v1/object/public/images/{path}"


class FakeStorageApi:
    def __init__(self, bucket: FakeBucket) -> None:
        self.bucket = bucket
        self.bucket_names: list[str] = []

    def from_(self, name: str) -> FakeBucket:
        self.bucket_names.append(name)
        return self.bucket


class FakeSupabaseClient:
    def __init__(self, bucket: FakeBucket) -> None:
        self.storage = FakeStorageApi(bucket)


def test_session_store_round_trip_with_ttl() -> None:
    client = FakeRedis()
    store = RedisSessionStore(client=client)

    session_id = store.create(UserId("usr_001"), ttl_seconds=120)

    assert len(session_id) >= 32
    assert client.expiry[session_key(session_id)] == 120
    assert store.resolve(session_id) == "usr_001"

    store.revoke(session_id)
    assert store.resolve(session_id) is None


def test_session_ids_are_unpredictable() -> None:
    store = RedisSessionStore(client=FakeRedis())
    ids = {store.create(UserId("usr_001"), ttl_seconds=60) for _ in range(20)}
    assert len(ids) == 20


def test_argon2_hasher_verifies_and_rejects() -> None:
    hasher = Argon2PasswordHasher()
    password_hash = hasher.hash("secret1")

    assert password_hash.startswith("$argon2")
    assert hasher.verify(password_hash, "secret1")
    assert not hasher.verify(password_hash, "secret2")
    assert not hasher.verify("not-a-hash", "secret1")


def test_segno_renderer_produces_png_and_svg() -> None:
    renderer = SegnoQrRenderer()

    png = renderer.render(
        "http://localhost:8000/menu/cafe-milano",
        kind="png",
        dark="#000000",
        light="#ffffff",
        width_px=400,
    )
    svg = renderer.render(
        "http://localhost:8000/menu/cafe-milano",
        kind="svg",
        dark="#f97316",
        light="#ffffff",
        width_px=400,
    )

    assert png.startswith(b"\x89PNG")
    assert b"<svg" in svg
    assert b"#f97316" in svg


def test_supabase_settings_from_env(monkeypatch) -> None:
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_SERVICE_ROLE_KEY", raising=False)
    monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)
    monkeypatch.delenv("SUPABASE_BUCKET", raising=False)
    assert supabase_settings_from_env() is None

    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")
    assert supabase_settings_from_env() is None

    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    settings = supabase_settings_from_env()
    assert settings == SupabaseSettings(url="https://project.supabase.co", key="anon")

    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service")
    monkeypatch.setenv("SUPABASE_BUCKET", "menus")
    settings = supabase_settings_from_env()
    assert settings is not None
    assert (settings.key, settings.bucket) == ("service", "menus")
    assert supabase_storage.get_image_storage_from_env() is not None


def test_supabase_storage_uploads_without_upsert() -> None:
    bucket = FakeBucket()
    client = FakeSupabaseClient(bucket)
    storage = SupabaseImageStorage(
        SupabaseSettings(url="https://project.supabase.co", key="service"),
        client=client,
    )

    url = storage.upload("menu-items/1-abc.png", b"data", "image/png")

    assert url.endswith("/images/menu-items/1-abc.png")
    assert client.storage.bucket_names == ["images"]
    options = bucket.uploads[0]["file_options"]
    assert options == {"content-type": "image/png", "cache-control": "3600", "upsert": "false"}


def test_supabase_storage_wraps_provider_errors() -> None:
    storage = SupabaseImageStorage(
        SupabaseSettings(url="https://project.supabase.co", key="service"),
        client=FakeSupabaseClient(FakeBucket(error=RuntimeError("bucket not found"))),
    )

    with pytest.raises(StorageError, match="bucket not found"):
        storage.upload("menu-items/1-abc.png", b"data", "image/png")


def test_redis_url_falls_back_only_in_dev_and_test(monkeypatch) -> None:
    from qrmenu.infrastructure.sessions import redis_client

    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.setenv("APP_ENV", "test")
    assert redis_client._redis_url() == redis_client.DEFAULT_REDIS_URL

    monkeypatch.setenv("APP_ENV", "prod")
    with pytest.raises(RuntimeError):
        redis_client._redis_url()
    assert redis_client.ping_redis() is False


def test_database_url_is_required(monkeypatch) -> None:
    from qrmenu.infrastructure.db import session as db_session

    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(RuntimeError):
        db_session.get_engine()
    assert db_session.ping_database() is False
