"""Clients for the remote speech-to-text endpoint."""

import logging
from abc import ABC, abstractmethod

from openai import AsyncOpenAI

from salesnote.core.config import settings

logger = logging.getLogger(__name__)


class SpeechToTextClient(ABC):
    """Abstract remote transcription endpoint.

    Each call transcribes one self-contained audio payload, with no context
    shared between calls.
    """

    @abstractmethod
    async def transcribe(self, payload: bytes, filename: str) -> str:
        """Transcribe one audio payload and return the recognized text.

        Args:
            payload: Encoded audio file content
            filename: File name whose extension tells the service the format

        Returns:
            Recognized text
        """
        pass


class OpenAITranscriptionClient(SpeechToTextClient):
    """Speech-to-text through the OpenAI audio transcriptions API."""

    def __init__(
        self,
        model: str | None = None,
        language: str | None = None,
        timeout: float | None = None,
        client: AsyncOpenAI | None = None,
    ):
        """Initialize the transcription client.

        Args:
            model: Transcription model (default: from settings)
            language: ISO-639-1 language hint (default: from settings)
            timeout: Per-request timeout in seconds, None to wait indefinitely
            client: Preconfigured AsyncOpenAI instance
        """
        self.model = model or settings.TRANSCRIPTION_MODEL
        self.language = language or settings.TRANSCRIPTION_LANGUAGE
        self.timeout = timeout
        # SDK-level retries are disabled; retry policy belongs to the caller
        self._client = client or AsyncOpenAI(
            api_key=settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_BASE_URL,
            max_retries=0,
        )

    async def transcribe(self, payload: bytes, filename: str) -> str:
        logger.debug(
            "Sending audio to transcription API",
            extra={
                "audio_filename": filename,
                "size_bytes": len(payload),
                "model": self.model,
                "language": self.language,
            },
        )

        transcription = await self._client.audio.transcriptions.create(
            file=(filename, payload),
            model=self.model,
            language=self.language,
            timeout=self.timeout,
        )

        return transcription.text
