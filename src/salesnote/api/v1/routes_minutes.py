"""Meeting minutes API routes."""

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse

from salesnote.exceptions import MinutesGenerationError
from salesnote.minutes import Minutes, MinutesGenerator, build_minutes_document
from salesnote.minutes.models import MinutesExportRequest, MinutesRequest

router = APIRouter(prefix="/api/v1", tags=["minutes"])
logger = logging.getLogger(__name__)


def build_generator() -> MinutesGenerator:
    return MinutesGenerator()


@router.post("/minutes", response_model=Minutes)
async def generate_minutes(request: MinutesRequest) -> Minutes:
    """Generate structured minutes from a transcript."""
    if not request.transcript.strip():
        raise HTTPException(status_code=400, detail="transcript is required")

    try:
        return await build_generator().generate(request.transcript)
    except MinutesGenerationError as e:
        logger.error("Minutes generation failed", extra={"error": str(e)})
        raise HTTPException(status_code=502, detail="Failed to generate minutes")


@router.post("/minutes/export", response_class=PlainTextResponse)
async def export_minutes(request: MinutesExportRequest) -> PlainTextResponse:
    """Render minutes as a Markdown document."""
    document = build_minutes_document(request.minutes, transcript=request.transcript)
    return PlainTextResponse(document, media_type="text/markdown; charset=utf-8")
