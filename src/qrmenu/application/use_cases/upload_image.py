from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass
from typing import Callable

from qrmenu.application.dto.responses import UploadResponse
from qrmenu.application.metrics.menu_activity import record_image_upload
from qrmenu.application.ports.storage import ImageStorage, StorageError
from qrmenu.application.use_cases.context import AuthContext
from qrmenu.domain.menu.slug import slugify

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 5 * 1024 * 1024
DEFAULT_FOLDER = "menu-items"
ALLOWED_CONTENT_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


class InvalidUploadError(Exception):
    pass


class StorageNotConfiguredError(Exception):
    pass


class StorageUploadError(Exception):
    pass


@dataclass(frozen=True)
class ImageUpload:
    content_type: str | None
    content: bytes
    folder: str | None = None


def _epoch_millis() -> int:
    return int(time.time() * 1000)


def build_storage_key(
    upload: ImageUpload,
    content_type: str,
    now_ms: int,
    token: str,
) -> str:
    folder = slugify(upload.folder or "") or DEFAULT_FOLDER
    return f"{folder}/{now_ms}-{token}.{ALLOWED_CONTENT_TYPES[content_type]}"


class UploadImage:
    def __init__(
        self,
        storage: ImageStorage | None,
        max_bytes: int = MAX_UPLOAD_BYTES,
        clock_ms: Callable[[], int] = _epoch_millis,
    ) -> None:
        self._storage = storage
        self._max_bytes = max_bytes
        self._clock_ms = clock_ms

    def execute(self, auth: AuthContext, upload: ImageUpload | None) -> UploadResponse:
        if self._storage is None:
            record_image_upload("not_configured")
            raise StorageNotConfiguredError("image upload is not configured")
        if upload is None:
            raise InvalidUploadError("file is required")

        content_type = (upload.content_type or "").lower()
        if content_type not in ALLOWED_CONTENT_TYPES:
            record_image_upload("rejected")
            raise InvalidUploadError("only JPEG, PNG, WebP and GIF images are supported")
        if len(upload.content) > self._max_bytes:
            record_image_upload("rejected")
            raise InvalidUploadError(
                f"file must be smaller than {self._max_bytes // (1024 * 1024)}MB"
            )

        key = build_storage_key(
            upload,
            content_type,
            now_ms=self._clock_ms(),
            token=secrets.token_hex(8),
        )
        try:
            url = self._storage.upload(key, upload.content, content_type)
        except StorageError as exc:
            record_image_upload("failed")
            logger.exception("image_upload_failed", extra={"user_id": str(auth.user_id)})
            raise StorageUploadError(f"upload failed: {exc}") from exc

        record_image_upload("stored")
        logger.info("image_uploaded", extra={"user_id": str(auth.user_id)})
        return UploadResponse(url=url)
