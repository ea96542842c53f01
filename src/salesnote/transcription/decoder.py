"""Decode compressed audio into in-memory float samples using ffmpeg."""

import json
import logging
import subprocess
import tempfile
from pathlib import Path
from typing import NamedTuple

import numpy as np

from salesnote.core.config import settings
from salesnote.exceptions import DecodeError
from salesnote.transcription.models import DecodedAudio

logger = logging.getLogger(__name__)


class StreamInfo(NamedTuple):
    """Native parameters of the first audio stream."""
    sample_rate: int
    channels: int
    codec: str


def probe_audio_stream(file_path: Path, timeout: int = 30) -> StreamInfo:
    """Read the native sample rate and channel count with ffprobe.

    Raises:
        DecodeError: If ffprobe fails or the file has no audio stream
    """
    cmd = [
        "ffprobe",
        "-v", "quiet",
        "-print_format", "json",
        "-show_streams",
        str(file_path),
    ]

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired as e:
        logger.error("ffprobe timeout", extra={"file_path": str(file_path)})
        raise DecodeError("ffprobe timed out") from e

    if result.returncode != 0:
        logger.warning(
            "ffprobe failed",
            extra={"file_path": str(file_path), "error": result.stderr.strip()},
        )
        raise DecodeError(f"ffprobe failed: {result.stderr.strip()}")

    try:
        probe_data = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Failed to parse ffprobe output: {e}") from e

    audio_stream = next(
        (s for s in probe_data.get("streams", []) if s.get("codec_type") == "audio"),
        None,
    )
    if audio_stream is None:
        raise DecodeError("No audio stream found in file")

    sample_rate = int(audio_stream.get("sample_rate", 0))
    channels = int(audio_stream.get("channels", 0))
    if sample_rate <= 0 or channels <= 0:
        raise DecodeError(f"Invalid audio stream parameters: {sample_rate} Hz, {channels} channels")

    return StreamInfo(
        sample_rate=sample_rate,
        channels=channels,
        codec=audio_stream.get("codec_name", "unknown").upper(),
    )


def decode_file(file_path: Path, timeout: int = 300) -> DecodedAudio:
    """Decode an audio file at its native rate and channel layout.

    ffmpeg writes interleaved 32-bit float samples to stdout, which are
    reshaped to ``(channels, frames)``.

    Raises:
        DecodeError: If the file cannot be decoded
    """
    info = probe_audio_stream(file_path)

    cmd = [
        "ffmpeg",
        "-v", "error",
        "-i", str(file_path),
        "-vn",
        "-f", "f32le",               # Raw 32-bit float, little-endian
        "-acodec", "pcm_f32le",
        "-ar", str(info.sample_rate),
        "-ac", str(info.channels),
        "pipe:1",
    ]

    try:
        result = subprocess.run(cmd, capture_output=True, timeout=timeout)
    except subprocess.TimeoutExpired as e:
        logger.error(
            "ffmpeg decode timeout",
            extra={"file_path": str(file_path), "timeout": timeout},
        )
        raise DecodeError(f"Audio decoding timed out after {timeout} seconds") from e

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        error_msg = stderr.split("\n")[-1] if stderr else "Unknown error"
        logger.warning(
            "ffmpeg decode failed",
            extra={
                "file_path": str(file_path),
                "error": error_msg,
                "returncode": result.returncode,
            },
        )
        raise DecodeError(error_msg)

    interleaved = np.frombuffer(result.stdout, dtype="<f4")
    frames = len(interleaved) // info.channels
    if frames == 0:
        raise DecodeError("Audio stream contains no samples")

    samples = interleaved[: frames * info.channels].reshape(frames, info.channels).T.copy()
    audio = DecodedAudio(samples=samples, sample_rate=info.sample_rate)

    logger.info(
        "Audio decoded",
        extra={
            "file_path": str(file_path),
            "codec": info.codec,
            "duration": audio.duration,
            "sample_rate": audio.sample_rate,
            "channels": audio.channels,
        },
    )

    return audio


def decode_audio(raw_audio: bytes, suffix: str = "", timeout: int | None = None) -> DecodedAudio:
    """Decode raw audio bytes by spilling them to a temporary file.

    Containers like M4A keep their index at the end of the file, so ffmpeg
    needs a seekable input rather than a pipe.

    Raises:
        DecodeError: If the bytes cannot be decoded
    """
    if not raw_audio:
        raise DecodeError("Audio payload is empty")

    with tempfile.TemporaryDirectory(prefix="salesnote_decode_") as temp_dir:
        file_path = Path(temp_dir) / f"input{suffix}"
        file_path.write_bytes(raw_audio)
        return decode_file(file_path, timeout=timeout or settings.FFMPEG_TIMEOUT_SECONDS)
