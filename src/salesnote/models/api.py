"""API response models."""

from pydantic import BaseModel


class TranscriptionResponse(BaseModel):
    """Response model for audio transcription."""

    text: str
    chunked: bool
    size_bytes: int


class RecordingResponse(BaseModel):
    """Response model for a stored recording."""

    record_id: str
    storage_backend: str
    storage_path: str
    storage_uri: str
    signed_url: str
    content_type: str
    size_bytes: int
