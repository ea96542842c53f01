"""Meeting minutes generation from transcripts using the OpenAI chat API.

The transcript is sent as the user message after a system prompt that asks
for a fixed JSON shape. JSON mode (``response_format={"type": "json_object"}``)
keeps the output parseable.
"""

import json
import logging

from openai import AsyncOpenAI
from pydantic import ValidationError

from salesnote.core.config import settings
from salesnote.exceptions import MinutesGenerationError
from salesnote.minutes.models import Minutes

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a professional sales assistant. Extract information from the following \
sales meeting transcript and output it as JSON.
Follow this format exactly and return valid JSON only.

{
  "customer": "Customer company name (empty string if unknown)",
  "contact": "Contact person name (empty string if unknown)",
  "project": "Project name (if it can be inferred)",
  "summary": "Summary of the meeting (about 3 lines)",
  "decisions": ["Decision 1", "Decision 2"],
  "todos": ["Task 1", "Task 2"],
  "keywords": ["Keyword 1", "Keyword 2"],
  "nextSchedule": "Next appointment (date and time, etc.)"
}

Write the values in the language of the transcript."""


class MinutesGenerator:
    """Client turning transcripts into structured meeting minutes."""

    def __init__(self, model: str | None = None, client: AsyncOpenAI | None = None):
        """Initialize minutes generator.

        Args:
            model: Chat model name (default: from settings)
            client: Preconfigured AsyncOpenAI instance
        """
        self.model_name = model or settings.MINUTES_MODEL
        self.enabled = settings.LLM_ENABLED
        self._client = client

        if not self.enabled:
            logger.warning("LLM is disabled in settings")
        elif self._client is None:
            self._client = AsyncOpenAI(
                api_key=settings.OPENAI_API_KEY,
                base_url=settings.OPENAI_BASE_URL,
            )

    async def generate(self, transcript: str) -> Minutes:
        """Extract minutes from a transcript.

        Args:
            transcript: Full meeting transcript

        Returns:
            Parsed minutes

        Raises:
            MinutesGenerationError: If the LLM is disabled, the transcript is
                empty, or the response is not valid minutes JSON
        """
        if not self.enabled or self._client is None:
            raise MinutesGenerationError("Minutes generation is disabled")

        if not transcript or not transcript.strip():
            raise MinutesGenerationError("Transcript is empty")

        try:
            content = await self._call_llm(transcript)
        except Exception as e:
            logger.error(
                "Minutes generation call failed",
                extra={"model": self.model_name, "error": str(e)},
            )
            raise MinutesGenerationError(f"Minutes generation failed: {e}") from e

        minutes = self._parse_response(content)

        logger.info(
            "Minutes generated",
            extra={
                "model": self.model_name,
                "transcript_length": len(transcript),
                "decisions": len(minutes.decisions),
                "todos": len(minutes.todos),
            },
        )
        return minutes

    async def _call_llm(self, transcript: str) -> str:
        response = await self._client.chat.completions.create(
            model=self.model_name,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": transcript},
            ],
            response_format={"type": "json_object"},
        )
        return response.choices[0].message.content or ""

    def _parse_response(self, content: str) -> Minutes:
        """Parse the JSON response into Minutes.

        Raises:
            MinutesGenerationError: If the content is not a valid minutes object
        """
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"Could not parse minutes JSON. Response: {content[:200]}...")
            raise MinutesGenerationError(f"Invalid JSON in minutes response: {e}") from e

        if not isinstance(data, dict):
            raise MinutesGenerationError(f"Expected a JSON object, got {type(data).__name__}")

        try:
            return Minutes.model_validate(data)
        except ValidationError as e:
            raise MinutesGenerationError(f"Minutes response has an invalid shape: {e}") from e
