"""Chunked transcription of recordings above the speech-to-text size limit."""

import asyncio
import logging
import time
from pathlib import Path
from typing import Callable

from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from salesnote.core.config import settings
from salesnote.exceptions import DecodeError, TranscriptionFailedError
from salesnote.transcription.clients import SpeechToTextClient
from salesnote.transcription.decoder import decode_audio
from salesnote.transcription.encoder import encode_wav
from salesnote.transcription.models import AudioChunk, DecodedAudio, TranscriptionResult
from salesnote.transcription.planner import plan_chunks

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, str], None]

# Progress bar layout: decode/plan up to 20%, encoding up to 50%, dispatch to 100%
_PLANNED_PERCENT = 20.0
_ENCODED_PERCENT = 50.0


def _noop_progress(percent: float, message: str) -> None:
    pass


class ChunkedTranscriber:
    """Transcribe audio of any size through a size-limited remote endpoint.

    Payloads up to ``size_threshold_bytes`` go to the endpoint unchanged.
    Larger payloads are decoded, cut into WAV chunks and sent in batches of
    ``batch_size`` concurrent requests. A batch must fully resolve before the
    next one starts. Any failed chunk fails the whole transcription.
    """

    def __init__(
        self,
        client: SpeechToTextClient,
        size_threshold_bytes: int | None = None,
        target_chunk_bytes: int | None = None,
        min_chunk_seconds: float | None = None,
        max_chunk_seconds: float | None = None,
        batch_size: int | None = None,
        max_attempts: int | None = None,
        retry_wait: wait_base | None = None,
        decoder: Callable[..., DecodedAudio] = decode_audio,
    ):
        self.client = client
        self.size_threshold_bytes = (
            size_threshold_bytes if size_threshold_bytes is not None
            else settings.transcription_size_threshold_bytes
        )
        self.target_chunk_bytes = (
            target_chunk_bytes if target_chunk_bytes is not None else settings.chunk_target_bytes
        )
        self.min_chunk_seconds = (
            min_chunk_seconds if min_chunk_seconds is not None else settings.MIN_CHUNK_SECONDS
        )
        self.max_chunk_seconds = (
            max_chunk_seconds if max_chunk_seconds is not None else settings.MAX_CHUNK_SECONDS
        )
        self.batch_size = batch_size if batch_size is not None else settings.TRANSCRIPTION_BATCH_SIZE
        self.max_attempts = (
            max_attempts if max_attempts is not None else settings.TRANSCRIPTION_MAX_ATTEMPTS
        )
        self.retry_wait = retry_wait or wait_exponential(multiplier=1, min=2, max=10)
        self.decoder = decoder

        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    def needs_splitting(self, raw_audio: bytes) -> bool:
        return len(raw_audio) > self.size_threshold_bytes

    async def transcribe(
        self,
        raw_audio: bytes,
        filename: str = "recording.webm",
        progress: ProgressCallback | None = None,
    ) -> str:
        """Transcribe a recording, splitting it when it exceeds the size limit.

        Args:
            raw_audio: Original audio file content
            filename: Original file name, used for its format extension
            progress: Called with (percent, message) as work advances

        Returns:
            Complete transcript

        Raises:
            DecodeError: If a large recording cannot be decoded
            TranscriptionFailedError: If any remote call fails
        """
        progress = progress or _noop_progress
        start_time = time.time()

        if not self.needs_splitting(raw_audio):
            logger.info(
                "Audio within size limit, using direct transcription",
                extra={"size_bytes": len(raw_audio), "threshold_bytes": self.size_threshold_bytes},
            )
            progress(0.0, "Transcribing audio...")
            try:
                text = await self._transcribe_payload(raw_audio, filename)
            except Exception as e:
                logger.error(
                    "Direct transcription failed",
                    extra={"size_bytes": len(raw_audio), "error": str(e)},
                )
                raise TranscriptionFailedError(f"Transcription failed: {e}") from e
            progress(100.0, "Transcription complete")
            return text.strip()

        logger.info(
            "Audio exceeds size limit, using chunked transcription",
            extra={"size_bytes": len(raw_audio), "threshold_bytes": self.size_threshold_bytes},
        )

        chunks = self.split(raw_audio, filename, progress)
        transcript = await self.transcribe_chunks(chunks, progress)

        logger.info(
            "Chunked transcription completed",
            extra={
                "total_chunks": len(chunks),
                "transcript_length": len(transcript),
                "duration_ms": int((time.time() - start_time) * 1000),
            },
        )

        return transcript

    def split(
        self,
        raw_audio: bytes,
        filename: str = "recording.webm",
        progress: ProgressCallback | None = None,
    ) -> list[AudioChunk]:
        """Decode, plan and encode a recording into WAV chunks.

        The decoded audio is only referenced inside this call, so it can be
        released as soon as every chunk is encoded.

        Raises:
            DecodeError: If the recording cannot be decoded
        """
        progress = progress or _noop_progress

        progress(0.0, "Analyzing audio file...")
        try:
            audio = self.decoder(raw_audio, suffix=Path(filename).suffix)
        except DecodeError as e:
            logger.warning(
                "Audio decoding failed",
                extra={"audio_filename": filename, "error": e.detail or str(e)},
            )
            raise
        progress(10.0, "Audio decoded")

        plan = plan_chunks(
            total_duration=audio.duration,
            original_byte_size=len(raw_audio),
            target_chunk_bytes=self.target_chunk_bytes,
            min_chunk_seconds=self.min_chunk_seconds,
            max_chunk_seconds=self.max_chunk_seconds,
        )
        total = len(plan)
        progress(_PLANNED_PERCENT, f"Splitting into {total} chunks...")

        chunks: list[AudioChunk] = []
        for index, interval in enumerate(plan):
            chunks.append(
                AudioChunk(
                    index=index,
                    start_time=interval.start_time,
                    duration=interval.duration,
                    payload=encode_wav(audio, interval.start_time, interval.end_time),
                )
            )
            percent = _PLANNED_PERCENT + (index + 1) / total * (_ENCODED_PERCENT - _PLANNED_PERCENT)
            progress(percent, f"Encoded chunk {index + 1}/{total}")

            logger.debug(
                "Chunk encoded",
                extra={
                    "chunk_index": index,
                    "start_time": interval.start_time,
                    "duration": interval.duration,
                    "size_bytes": len(chunks[-1].payload),
                },
            )

        logger.info(
            "Audio split into chunks",
            extra={
                "total_chunks": total,
                "chunk_duration": plan.chunk_duration,
                "audio_duration": audio.duration,
                "sample_rate": audio.sample_rate,
                "channels": audio.channels,
            },
        )

        return chunks

    async def transcribe_chunks(
        self,
        chunks: list[AudioChunk],
        progress: ProgressCallback | None = None,
    ) -> str:
        """Transcribe chunks in fixed-size concurrent batches.

        Results land in per-index slots, so the transcript follows chunk order
        regardless of completion order.

        Raises:
            TranscriptionFailedError: If any chunk fails; no partial text is returned
        """
        progress = progress or _noop_progress
        total = len(chunks)
        result = TranscriptionResult(total)

        async def run(chunk: AudioChunk) -> None:
            text = await self._transcribe_payload(chunk.payload, chunk.filename)
            completed = result.record(chunk.index, text)
            percent = _ENCODED_PERCENT + completed / total * (100.0 - _ENCODED_PERCENT)
            progress(percent, f"Transcribed chunk {completed}/{total}")

        for batch_start in range(0, total, self.batch_size):
            batch = chunks[batch_start:batch_start + self.batch_size]

            logger.info(
                "Dispatching transcription batch",
                extra={
                    "batch_start": batch_start,
                    "batch_size": len(batch),
                    "total_chunks": total,
                },
            )

            # Barrier: every request in the batch resolves before the next batch
            outcomes = await asyncio.gather(*(run(chunk) for chunk in batch), return_exceptions=True)

            failures = [
                (chunk, outcome)
                for chunk, outcome in zip(batch, outcomes)
                if isinstance(outcome, BaseException)
            ]
            if failures:
                chunk, error = failures[0]
                logger.error(
                    "Chunk transcription failed",
                    extra={
                        "chunk_index": chunk.index,
                        "failed_chunks": [c.index for c, _ in failures],
                        "total_chunks": total,
                        "error": str(error),
                    },
                )
                raise TranscriptionFailedError(
                    f"Transcription of chunk {chunk.index + 1}/{total} failed: {error}",
                    chunk_index=chunk.index,
                ) from error

        return result.assemble()

    async def _transcribe_payload(self, payload: bytes, filename: str) -> str:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self.retry_wait,
            reraise=True,
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.warning(
                        "Retrying transcription request",
                        extra={
                            "audio_filename": filename,
                            "attempt": attempt.retry_state.attempt_number,
                        },
                    )
                return await self.client.transcribe(payload, filename)
