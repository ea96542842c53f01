"""Export meeting minutes as Markdown with YAML frontmatter."""

from datetime import datetime, timezone

import yaml

from salesnote.minutes.models import Minutes


def build_minutes_frontmatter(
    minutes: Minutes,
    transcript: str | None = None,
    recorded_at: datetime | None = None,
) -> str:
    """Build YAML frontmatter describing the meeting.

    Args:
        minutes: Generated minutes
        transcript: Source transcript, used for content metrics
        recorded_at: Meeting timestamp (default: now, UTC)

    Returns:
        YAML frontmatter string with delimiters
    """
    recorded_at = recorded_at or datetime.now(timezone.utc)

    metadata: dict = {
        "type": "negotiation",
        "recorded_at": recorded_at.isoformat(),
    }

    # Only keep the fields the model actually filled
    meeting = {}
    if minutes.customer:
        meeting["customer"] = minutes.customer
    if minutes.contact:
        meeting["contact"] = minutes.contact
    if minutes.project:
        meeting["project"] = minutes.project
    if minutes.next_schedule:
        meeting["next_schedule"] = minutes.next_schedule
    if meeting:
        metadata["meeting"] = meeting

    if minutes.keywords:
        metadata["keywords"] = list(minutes.keywords)

    if transcript is not None:
        metadata["content"] = {
            "word_count": len(transcript.split()),
            "character_count": len(transcript),
        }

    yaml_content = yaml.dump(
        metadata,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
    )
    return f"---\n{yaml_content}---\n"


def _bullet_list(items: list[str]) -> str:
    if not items:
        return "- None\n"
    return "".join(f"- {item}\n" for item in items)


def build_minutes_document(
    minutes: Minutes,
    transcript: str | None = None,
    recorded_at: datetime | None = None,
) -> str:
    """Render minutes as a Markdown document ready to save or share."""
    recorded_at = recorded_at or datetime.now(timezone.utc)
    title = minutes.customer or "Meeting"

    parts = [
        build_minutes_frontmatter(minutes, transcript, recorded_at),
        f"\n# Minutes: {title}\n",
        f"\n_{recorded_at.strftime('%Y/%m/%d %H:%M')}_\n",
        "\n## Summary\n\n",
        f"{minutes.summary or 'None'}\n",
        "\n## Decisions\n\n",
        _bullet_list(minutes.decisions),
        "\n## To-dos\n\n",
        _bullet_list(minutes.todos),
        "\n## Next schedule\n\n",
        f"{minutes.next_schedule or 'Not set'}\n",
    ]

    if transcript:
        parts.extend(["\n## Transcript\n\n", f"{transcript.strip()}\n"])

    return "".join(parts)
