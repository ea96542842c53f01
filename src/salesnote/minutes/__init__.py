"""Meeting minutes generation and export."""

from salesnote.minutes.export import build_minutes_document
from salesnote.minutes.generator import MinutesGenerator
from salesnote.minutes.models import Minutes

__all__ = [
    "Minutes",
    "MinutesGenerator",
    "build_minutes_document",
]
