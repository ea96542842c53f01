"""
Chunked Transcription

Turns recordings of any size into a single transcript. Recordings above the
speech-to-text request limit are decoded, split into time-aligned WAV chunks
and transcribed in bounded concurrent batches, then reassembled in order.
"""

from salesnote.transcription.clients import OpenAITranscriptionClient, SpeechToTextClient
from salesnote.transcription.encoder import encode_wav
from salesnote.transcription.models import (
    AudioChunk,
    ChunkInterval,
    ChunkPlan,
    DecodedAudio,
    TranscriptionResult,
)
from salesnote.transcription.orchestrator import ChunkedTranscriber
from salesnote.transcription.planner import plan_chunks

__all__ = [
    "AudioChunk",
    "ChunkInterval",
    "ChunkPlan",
    "ChunkedTranscriber",
    "DecodedAudio",
    "OpenAITranscriptionClient",
    "SpeechToTextClient",
    "TranscriptionResult",
    "encode_wav",
    "plan_chunks",
]
