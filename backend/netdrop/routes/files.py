"""Upload and download routes."""
import io
import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from netdrop.config import settings
from netdrop.database import get_db
from netdrop.exceptions import StorageError
from netdrop.schemas.file import ErrorResponse, UploadResponse
from netdrop.services.blob_store import blob_store
from netdrop.services.metadata_store import find_by_hash
from netdrop.services.upload import read_upload, store_upload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["files"])


@router.post(
    "/api/v1/upload",
    response_model=UploadResponse,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def upload_file(
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Upload a file as a raw body or as multipart field ``file``."""
    content, original_name = await read_upload(request, settings.MAX_UPLOAD_BYTES)
    record = await store_upload(db, content, original_name)
    return UploadResponse(
        file_id=record.id,
        file_hash=record.file_hash,
        download_url=str(request.app.url_path_for("download_file", file_hash=record.file_hash)),
    )


@router.get("/download/{file_hash}")
async def download_file(
    file_hash: str,
    db: AsyncSession = Depends(get_db),
):
    """Stream a stored file back under its original name."""
    record = await find_by_hash(db, file_hash)
    if not record:
        return Response(status_code=404)

    try:
        data = await blob_store.read(record.file_path)
    except StorageError as e:
        logger.error(f"File {record.id} has metadata but its blob is unreadable: {e.detail}")
        return Response(status_code=500)

    return StreamingResponse(
        io.BytesIO(data),
        media_type="application/octet-stream",
        headers={"Content-Disposition": content_disposition(record.file_name)},
    )


def content_disposition(file_name: str) -> str:
    """Attachment header value; non latin-1 names get an RFC 5987 filename*."""
    escaped = file_name.replace("\\", "\\\\").replace('"', '\\"')
    try:
        escaped.encode("latin-1")
    except UnicodeEncodeError:
        fallback = escaped.encode("ascii", "replace").decode("ascii").replace("?", "_")
        return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(file_name)}"
    return f'attachment; filename="{escaped}"'
