"""Data structures for chunked audio transcription."""

from dataclasses import dataclass
from typing import NamedTuple

import numpy as np


@dataclass(frozen=True)
class DecodedAudio:
    """Decoded multi-channel audio held in memory.

    ``samples`` has shape ``(channels, frames)`` with float32 values in
    [-1.0, 1.0]. The array is made read-only on construction.
    """

    samples: np.ndarray
    sample_rate: int

    def __post_init__(self):
        if self.samples.ndim != 2 or self.samples.shape[0] < 1:
            raise ValueError("samples must have shape (channels, frames) with at least one channel")
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        self.samples.setflags(write=False)

    @property
    def channels(self) -> int:
        return int(self.samples.shape[0])

    @property
    def frames(self) -> int:
        return int(self.samples.shape[1])

    @property
    def duration(self) -> float:
        """Total duration in seconds."""
        return self.frames / self.sample_rate


class ChunkInterval(NamedTuple):
    """Half-open time interval [start_time, end_time) in seconds."""
    start_time: float
    end_time: float

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time


@dataclass(frozen=True)
class ChunkPlan:
    """Contiguous, ascending intervals covering [0, total_duration]."""

    intervals: tuple[ChunkInterval, ...]
    chunk_duration: float
    total_duration: float

    def __len__(self) -> int:
        return len(self.intervals)

    def __iter__(self):
        return iter(self.intervals)

    def __getitem__(self, index: int) -> ChunkInterval:
        return self.intervals[index]


@dataclass(frozen=True)
class AudioChunk:
    """One encoded, independently transcribable slice of a recording."""

    index: int
    start_time: float
    duration: float
    payload: bytes

    @property
    def filename(self) -> str:
        return f"chunk_{self.index:04d}.wav"


class TranscriptionResult:
    """Per-chunk transcript slots, pre-sized to the chunk count.

    Slots may be filled in any order, each exactly once. Assembly always
    reads them back in ascending index order.
    """

    def __init__(self, chunk_count: int):
        self._texts: list[str | None] = [None] * chunk_count
        self.completed = 0

    def __len__(self) -> int:
        return len(self._texts)

    def record(self, index: int, text: str) -> int:
        """Store the text for ``index`` and return the new completion count."""
        if self._texts[index] is not None:
            raise ValueError(f"Chunk {index} already has a transcript")
        self._texts[index] = text
        self.completed += 1
        return self.completed

    @property
    def is_complete(self) -> bool:
        return self.completed == len(self._texts)

    def missing(self) -> list[int]:
        return [i for i, text in enumerate(self._texts) if text is None]

    def assemble(self) -> str:
        """Join the chunk texts in index order, trimmed and space separated."""
        if not self.is_complete:
            raise ValueError(f"Transcripts missing for chunks {self.missing()}")
        return " ".join(text.strip() for text in self._texts).strip()
