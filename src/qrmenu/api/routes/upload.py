from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile

from qrmenu.api.dependencies import get_image_storage, require_auth
from qrmenu.application.dto.responses import UploadResponse
from qrmenu.application.ports.storage import ImageStorage
from qrmenu.application.use_cases.context import AuthContext
from qrmenu.application.use_cases.upload_image import MAX_UPLOAD_BYTES, ImageUpload, UploadImage

router = APIRouter(prefix="/api", tags=["upload"])


@router.post("/upload", response_model=UploadResponse)
def upload_image(
    auth: AuthContext = Depends(require_auth),
    storage: ImageStorage | None = Depends(get_image_storage),
    file: UploadFile | None = File(default=None),
    folder: str | None = Form(default=None),
) -> UploadResponse:
    upload: ImageUpload | None = None
    if file is not None:
        # one byte past the limit is enough to reject oversized files
        content = file.file.read(MAX_UPLOAD_BYTES + 1)
        upload = ImageUpload(
            content_type=file.content_type,
            content=content,
            folder=folder,
        )
    return UploadImage(storage).execute(auth, upload)
