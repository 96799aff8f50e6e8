"""
Attachment Endpoints.

Upload reference files and serve them back. Uploads go through the API
prefix; stored files are served from the storage url_prefix.
"""

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import FileResponse

from notehub.backend.core.concurrency import run_blocking
from notehub.backend.core.dependencies import AttachmentsDep
from notehub.backend.core.exceptions import NotFoundError, ValidationError
from notehub.backend.schemas.attachment import UploadResponse

router = APIRouter()
files_router = APIRouter()


@router.post(
    "",
    response_model=UploadResponse,
    status_code=201,
    summary="Upload an attachment",
    description="Store a file (multipart field 'file') and return its public path.",
)
async def upload_attachment(
    attachments: AttachmentsDep,
    file: UploadFile | None = File(default=None),
) -> UploadResponse:
    """Store an uploaded file."""
    if file is None:
        raise ValidationError("No file uploaded")
    try:
        path = await run_blocking(attachments.save, file.filename, file.file)
    finally:
        await file.close()
    return UploadResponse(path=path)


@files_router.get(
    "/{filename}",
    summary="Download an attachment",
    response_class=FileResponse,
)
async def download_attachment(filename: str, attachments: AttachmentsDep) -> FileResponse:
    """Serve a stored file."""
    path = await run_blocking(attachments.resolve, filename)
    if path is None:
        raise NotFoundError(f"Attachment {filename} not found")
    return FileResponse(path)
