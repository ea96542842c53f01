"""Health check endpoint for SalesNote Engine."""

from fastapi import APIRouter

from salesnote.core.config import settings

router = APIRouter()


@router.get("/health")
async def health_check() -> dict:
    """Report service identity and the configured backends.

    Reads settings only, so it stays fast while the object store or the
    OpenAI API is unreachable.
    """
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "storage_backend": settings.STORAGE_BACKEND,
        "transcription_model": settings.TRANSCRIPTION_MODEL,
        "minutes_enabled": settings.LLM_ENABLED,
    }
