"""Tests for minutes generation and Markdown export."""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import yaml

from salesnote.core.config import settings
from salesnote.exceptions import MinutesGenerationError
from salesnote.minutes import Minutes, MinutesGenerator, build_minutes_document
from salesnote.minutes.export import build_minutes_frontmatter

SAMPLE_MINUTES = {
    "customer": "Acme Corp",
    "contact": "Sato",
    "project": "CRM rollout",
    "summary": "Reviewed pricing and rollout timeline.",
    "decisions": ["Pilot with sales team"],
    "todos": ["Send revised quote", "Book demo"],
    "keywords": ["pricing", "pilot"],
    "nextSchedule": "2026-11-02 10:00",
}


def _chat_response(content):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


@pytest.fixture
def llm_enabled(monkeypatch):
    monkeypatch.setattr(settings, "LLM_ENABLED", True)


@pytest.fixture
def mock_openai():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=_chat_response(json.dumps(SAMPLE_MINUTES)))
    return client


@pytest.mark.asyncio
async def test_generate_minutes_success(llm_enabled, mock_openai):
    """Test a well-formed JSON response becomes Minutes."""
    generator = MinutesGenerator(model="gpt-4o-mini", client=mock_openai)

    minutes = await generator.generate("We agreed to pilot with the sales team.")

    assert minutes.customer == "Acme Corp"
    assert minutes.next_schedule == "2026-11-02 10:00"
    assert minutes.todos == ["Send revised quote", "Book demo"]

    kwargs = mock_openai.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["messages"][0]["role"] == "system"
    assert kwargs["messages"][1] == {
        "role": "user",
        "content": "We agreed to pilot with the sales team.",
    }


@pytest.mark.asyncio
async def test_generate_minutes_fills_missing_fields(llm_enabled, mock_openai):
    """Test null and absent fields default to empty values."""
    mock_openai.chat.completions.create.return_value = _chat_response(
        json.dumps({"summary": "Short call", "customer": None, "todos": "Follow up"})
    )
    generator = MinutesGenerator(client=mock_openai)

    minutes = await generator.generate("transcript")

    assert minutes.customer == ""
    assert minutes.decisions == []
    assert minutes.todos == ["Follow up"]
    assert minutes.next_schedule == ""


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["not json", "[1, 2]", '{"decisions": 5}'])
async def test_generate_minutes_invalid_response(llm_enabled, mock_openai, content):
    """Test unparseable or wrongly shaped responses raise MinutesGenerationError."""
    mock_openai.chat.completions.create.return_value = _chat_response(content)
    generator = MinutesGenerator(client=mock_openai)

    with pytest.raises(MinutesGenerationError):
        await generator.generate("transcript")


@pytest.mark.asyncio
async def test_generate_minutes_api_failure(llm_enabled, mock_openai):
    """Test API errors are wrapped and chained."""
    mock_openai.chat.completions.create.side_effect = RuntimeError("service unavailable")
    generator = MinutesGenerator(client=mock_openai)

    with pytest.raises(MinutesGenerationError) as exc_info:
        await generator.generate("transcript")

    assert isinstance(exc_info.value.__cause__, RuntimeError)


@pytest.mark.asyncio
async def test_generate_minutes_empty_transcript(llm_enabled, mock_openai):
    generator = MinutesGenerator(client=mock_openai)

    with pytest.raises(MinutesGenerationError, match="empty"):
        await generator.generate("   ")

    mock_openai.chat.completions.create.assert_not_called()


@pytest.mark.asyncio
async def test_generate_minutes_disabled(monkeypatch, mock_openai):
    """Test generation refuses to run when the LLM is disabled."""
    monkeypatch.setattr(settings, "LLM_ENABLED", False)
    generator = MinutesGenerator(client=mock_openai)

    with pytest.raises(MinutesGenerationError, match="disabled"):
        await generator.generate("transcript")


def test_minutes_alias_round_trip():
    """Test nextSchedule is accepted by alias or field name and dumped by alias."""
    by_alias = Minutes.model_validate(SAMPLE_MINUTES)
    by_name = Minutes(next_schedule="Friday")

    assert by_name.next_schedule == "Friday"
    assert by_alias.model_dump(by_alias=True)["nextSchedule"] == "2026-11-02 10:00"


def test_frontmatter_contains_meeting_metadata():
    """Test frontmatter carries meeting fields, keywords and content metrics."""
    minutes = Minutes.model_validate(SAMPLE_MINUTES)
    recorded_at = datetime(2026, 10, 19, 14, 30, tzinfo=timezone.utc)

    frontmatter = build_minutes_frontmatter(minutes, transcript="one two three", recorded_at=recorded_at)

    assert frontmatter.startswith("---\n")
    assert frontmatter.endswith("---\n")
    data = yaml.safe_load(frontmatter.strip("-\n"))
    assert data["type"] == "negotiation"
    assert data["recorded_at"] == "2026-10-19T14:30:00+00:00"
    assert data["meeting"] == {
        "customer": "Acme Corp",
        "contact": "Sato",
        "project": "CRM rollout",
        "next_schedule": "2026-11-02 10:00",
    }
    assert data["keywords"] == ["pricing", "pilot"]
    assert data["content"] == {"word_count": 3, "character_count": 13}


def test_frontmatter_omits_empty_sections():
    frontmatter = build_minutes_frontmatter(Minutes(), recorded_at=datetime(2026, 1, 1))

    data = yaml.safe_load(frontmatter.strip("-\n"))
    assert set(data) == {"type", "recorded_at"}


def test_document_sections():
    """Test the Markdown document lists every minutes section."""
    minutes = Minutes.model_validate(SAMPLE_MINUTES)
    recorded_at = datetime(2026, 10, 19, 14, 30, tzinfo=timezone.utc)

    document = build_minutes_document(minutes, transcript=" full transcript ", recorded_at=recorded_at)

    assert "# Minutes: Acme Corp" in document
    assert "_2026/10/19 14:30_" in document
    assert "## Summary\n\nReviewed pricing and rollout timeline.\n" in document
    assert "## Decisions\n\n- Pilot with sales team\n" in document
    assert "## To-dos\n\n- Send revised quote\n- Book demo\n" in document
    assert "## Next schedule\n\n2026-11-02 10:00\n" in document
    assert document.endswith("## Transcript\n\nfull transcript\n")


def test_document_placeholders_for_empty_minutes():
    document = build_minutes_document(Minutes(), recorded_at=datetime(2026, 1, 1))

    assert "# Minutes: Meeting" in document
    assert "## Decisions\n\n- None\n" in document
    assert "## Next schedule\n\nNot set\n" in document
    assert "## Transcript" not in document
