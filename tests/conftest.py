"""Pytest configuration and shared fixtures."""

import asyncio
import re

import numpy as np
import pytest

from salesnote.transcription.clients import SpeechToTextClient
from salesnote.transcription.models import DecodedAudio

_CHUNK_NAME_RE = re.compile(r"chunk_(\d+)\.wav")


def make_audio(duration: float, sample_rate: int = 1000, channels: int = 1, seed: int = 7) -> DecodedAudio:
    """Build deterministic noise-like audio in [-1, 1]."""
    frames = int(round(duration * sample_rate))
    rng = np.random.default_rng(seed)
    samples = rng.uniform(-1.0, 1.0, size=(channels, frames)).astype(np.float32)
    return DecodedAudio(samples=samples, sample_rate=sample_rate)


class FakeSpeechClient(SpeechToTextClient):
    """In-memory speech-to-text endpoint that records call timing.

    Chunk payloads are answered with ``"text-{index}"``. Any other filename
    gets ``direct_text``.
    """

    def __init__(self, delays=None, fail_on=(), failures_before_success=None, direct_text="direct transcript"):
        self.delays = delays or {}
        self.fail_on = set(fail_on)
        self.failures_before_success = dict(failures_before_success or {})
        self.direct_text = direct_text
        self.calls: list[tuple[str, bytes]] = []
        self.events: list[tuple[str, int]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    @staticmethod
    def chunk_index(filename: str) -> int | None:
        match = _CHUNK_NAME_RE.fullmatch(filename)
        return int(match.group(1)) if match else None

    async def transcribe(self, payload: bytes, filename: str) -> str:
        index = self.chunk_index(filename)
        self.calls.append((filename, payload))
        self.events.append(("start", index))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(index, 0))
            if index in self.fail_on:
                raise RuntimeError(f"remote rejected chunk {index}")
            if self.failures_before_success.get(index, 0) > 0:
                self.failures_before_success[index] -= 1
                raise ConnectionError(f"connection reset on chunk {index}")
            return self.direct_text if index is None else f"text-{index}"
        finally:
            self.in_flight -= 1
            self.events.append(("end", index))


@pytest.fixture
def fake_client():
    return FakeSpeechClient()
