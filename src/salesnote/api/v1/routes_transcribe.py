"""Transcription API routes."""

import logging

from fastapi import APIRouter, File, Form, HTTPException, UploadFile

from salesnote.core.config import settings
from salesnote.exceptions import DecodeError, TranscriptionFailedError
from salesnote.models.api import TranscriptionResponse
from salesnote.transcription import ChunkedTranscriber, OpenAITranscriptionClient

router = APIRouter(prefix="/api/v1", tags=["transcription"])
logger = logging.getLogger(__name__)


def build_transcriber(model: str | None = None, language: str | None = None) -> ChunkedTranscriber:
    """Create a transcriber backed by the OpenAI transcription API."""
    client = OpenAITranscriptionClient(
        model=model,
        language=language,
        timeout=settings.TRANSCRIPTION_TIMEOUT_SECONDS,
    )
    return ChunkedTranscriber(client)


@router.post("/transcribe", response_model=TranscriptionResponse)
async def transcribe_audio(
    file: UploadFile = File(...),
    model: str | None = Form(None),
    language: str | None = Form(None),
) -> TranscriptionResponse:
    """Transcribe an uploaded recording, splitting it when it is too large."""
    raw_audio = await file.read()
    size_bytes = len(raw_audio)

    if size_bytes == 0:
        raise HTTPException(status_code=400, detail="No file uploaded")

    if size_bytes > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File size exceeds maximum allowed size of {settings.MAX_UPLOAD_MB}MB",
        )

    filename = file.filename or "recording.webm"
    transcriber = build_transcriber(model=model, language=language)

    def log_progress(percent: float, message: str) -> None:
        logger.debug(message, extra={"progress": round(percent, 1), "audio_filename": filename})

    try:
        text = await transcriber.transcribe(raw_audio, filename=filename, progress=log_progress)
    except DecodeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TranscriptionFailedError as e:
        logger.error(
            "Transcription failed",
            extra={
                "audio_filename": filename,
                "chunk_index": e.chunk_index,
                "error": str(e),
            },
        )
        raise HTTPException(status_code=502, detail="Failed to transcribe audio")
    except Exception as e:
        logger.error(f"Unexpected error during transcription: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    logger.info(
        "Transcription request completed",
        extra={"audio_filename": filename, "size_bytes": size_bytes, "transcript_length": len(text)},
    )

    return TranscriptionResponse(
        text=text,
        chunked=transcriber.needs_splitting(raw_audio),
        size_bytes=size_bytes,
    )
