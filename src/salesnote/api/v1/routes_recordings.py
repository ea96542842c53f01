"""Recording storage API routes."""

import logging

from fastapi import APIRouter, File, Form, HTTPException, Response, UploadFile

from salesnote.core.config import settings
from salesnote.exceptions import StorageError
from salesnote.models.api import RecordingResponse
from salesnote.storage.base import build_object_path
from salesnote.storage.factory import get_object_store

router = APIRouter(prefix="/api/v1", tags=["recordings"])
logger = logging.getLogger(__name__)


@router.post("/recordings", response_model=RecordingResponse, status_code=201)
async def upload_recording(
    file: UploadFile = File(...), record_id: str = Form(...)
) -> RecordingResponse:
    """Store a recording for a record and return a signed URL for playback."""
    if not record_id or not record_id.strip():
        raise HTTPException(status_code=400, detail="record_id is required")

    file.file.seek(0, 2)  # Seek to end
    size_bytes = file.file.tell()
    file.file.seek(0)

    if size_bytes > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File size exceeds maximum allowed size of {settings.MAX_UPLOAD_MB}MB",
        )

    content_type = file.content_type or "application/octet-stream"
    if not content_type.startswith("audio/"):
        raise HTTPException(status_code=400, detail=f"Content type {content_type} not allowed")

    try:
        store = get_object_store()
    except ValueError as e:
        logger.error(f"Storage backend configuration error: {e}")
        raise HTTPException(status_code=500, detail="Storage configuration error")

    storage_path = build_object_path("audio", record_id.strip(), file.filename or "recording.webm")

    try:
        storage_uri = await store.upload(storage_path, file.file, content_type)
        signed_url = store.signed_url(storage_path, settings.SIGNED_URL_EXPIRATION_SECONDS)
    except StorageError as e:
        logger.error(f"Failed to store recording: {e}", exc_info=True)
        raise HTTPException(status_code=502, detail="Failed to store recording")

    logger.info(
        "Recording stored",
        extra={
            "record_id": record_id,
            "storage_backend": store.get_backend_name(),
            "storage_path": storage_path,
            "size_bytes": size_bytes,
        },
    )

    return RecordingResponse(
        record_id=record_id.strip(),
        storage_backend=store.get_backend_name(),
        storage_path=storage_path,
        storage_uri=storage_uri,
        signed_url=signed_url,
        content_type=content_type,
        size_bytes=size_bytes,
    )


@router.get("/recordings/{storage_path:path}/url")
async def get_recording_url(storage_path: str) -> dict:
    """Return a fresh signed URL for a stored recording."""
    try:
        url = get_object_store().signed_url(storage_path, settings.SIGNED_URL_EXPIRATION_SECONDS)
    except StorageError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"storage_path": storage_path, "signed_url": url}


@router.delete("/recordings/{storage_path:path}", status_code=204)
async def delete_recording(storage_path: str) -> Response:
    """Delete a stored recording."""
    try:
        get_object_store().delete(storage_path)
    except StorageError as e:
        logger.error(f"Failed to delete recording: {e}")
        raise HTTPException(status_code=502, detail="Failed to delete recording")
    return Response(status_code=204)
