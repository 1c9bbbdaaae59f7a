from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from supabase import Client, create_client

from qrmenu.application.ports.storage import ImageStorage, StorageError

logger = logging.getLogger(__name__)

DEFAULT_BUCKET = "images"
CACHE_CONTROL_SECONDS = "3600"


@dataclass(frozen=True)
class SupabaseSettings:
    url: str
    key: str
    bucket: str = DEFAULT_BUCKET


def supabase_settings_from_env() -> SupabaseSettings | None:
    """Storage settings, or ``None`` when image upload is not configured."""
    url = os.getenv("SUPABASE_URL")
    # service role key for backend writes, anon key as a fallback
    key = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv("SUPABASE_ANON_KEY")
    if not url or not key:
        return None
    return SupabaseSettings(url=url, key=key, bucket=os.getenv("SUPABASE_BUCKET", DEFAULT_BUCKET))


@lru_cache(maxsize=4)
def _build_client(url: str, key: str) -> Client:
    client = create_client(url, key)
    logger.info("supabase_client_initialized")
    return client


class SupabaseImageStorage(ImageStorage):
    def __init__(self, settings: SupabaseSettings, client: Client | None = None) -> None:
        self._settings = settings
        self._client = client

    def _storage_client(self) -> Client:
        if self._client is None:
            self._client = _build_client(self._settings.url, self._settings.key)
        return self._client

    def upload(self, key: str, content: bytes, content_type: str) -> str:
        try:
            bucket = self._storage_client().storage.from_(self._settings.bucket)
            bucket.upload(
                path=key,
                file=content,
                file_options={
                    "content-type": content_type,
                    "cache-control": CACHE_CONTROL_SECONDS,
                    "upsert": "false",
                },
            )
            return bucket.get_public_url(key)
        except Exception as exc:
            raise StorageError(str(exc)) from exc


def get_image_storage_from_env() -> SupabaseImageStorage | None:
    settings = supabase_settings_from_env()
    if settings is None:
        return None
    return SupabaseImageStorage(settings)
