from __future__ import annotations

from typing import Protocol


class ImageStorage(Protocol):
    def upload(self, key: str, content: bytes, content_type: str) -> str:
        """Store ``content`` under ``key`` and return its public URL."""
        ...


class StorageError(Exception):
    pass
