"""Encode slices of decoded audio as 16-bit PCM WAV files."""

import math
import struct

import numpy as np

from salesnote.exceptions import InvalidRangeError
from salesnote.transcription.models import DecodedAudio

WAV_HEADER_SIZE = 44
PCM_FORMAT_TAG = 1
BITS_PER_SAMPLE = 16


def build_wav_header(channels: int, sample_rate: int, data_length: int) -> bytes:
    """Build the canonical 44-byte RIFF/WAVE header for 16-bit PCM data."""
    block_align = channels * (BITS_PER_SAMPLE // 8)
    byte_rate = sample_rate * block_align
    return struct.pack(
        "<4sI4s4sIHHIIHH4sI",
        b"RIFF",
        WAV_HEADER_SIZE - 8 + data_length,
        b"WAVE",
        b"fmt ",
        16,  # fmt chunk size
        PCM_FORMAT_TAG,
        channels,
        sample_rate,
        byte_rate,
        block_align,
        BITS_PER_SAMPLE,
        b"data",
        data_length,
    )


def float_to_pcm16(samples: np.ndarray) -> np.ndarray:
    """Convert float samples to int16 with asymmetric scaling.

    Negative values scale by 32768 and positive values by 32767, so -1.0 and
    1.0 map to the ends of the signed 16-bit range. Values are truncated
    toward zero.
    """
    clipped = np.clip(samples.astype(np.float64), -1.0, 1.0)
    scaled = np.where(clipped < 0, clipped * 32768.0, clipped * 32767.0)
    return np.trunc(scaled).astype("<i2")


def sample_range(audio: DecodedAudio, start_time: float, end_time: float) -> tuple[int, int]:
    """Map [start_time, end_time) to a frame index range.

    Raises:
        InvalidRangeError: If the range is empty or falls outside the audio
    """
    if start_time < 0 or end_time <= start_time:
        raise InvalidRangeError(f"Invalid chunk range [{start_time}, {end_time})")

    if end_time > audio.duration:
        raise InvalidRangeError(
            f"Chunk range [{start_time}, {end_time}) exceeds audio duration {audio.duration:.3f}s"
        )

    start_sample = math.floor(start_time * audio.sample_rate)
    # duration is frames / rate, so end_time * rate can land just under frames
    if end_time == audio.duration:
        end_sample = audio.frames
    else:
        end_sample = min(math.floor(end_time * audio.sample_rate), audio.frames)

    if end_sample <= start_sample:
        raise InvalidRangeError(f"Chunk range [{start_time}, {end_time}) contains no samples")

    return start_sample, end_sample


def encode_wav(audio: DecodedAudio, start_time: float, end_time: float) -> bytes:
    """Encode the [start_time, end_time) slice of ``audio`` as a WAV file.

    Channels are interleaved per frame (channel 0, channel 1, ...). The result
    is self-contained and shares no buffers with ``audio``.
    """
    start_sample, end_sample = sample_range(audio, start_time, end_time)

    # (channels, frames) -> (frames, channels) gives frame-major interleaving
    pcm = float_to_pcm16(audio.samples[:, start_sample:end_sample]).T
    data = np.ascontiguousarray(pcm).tobytes()

    return build_wav_header(audio.channels, audio.sample_rate, len(data)) + data

