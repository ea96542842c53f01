"""Time-based chunk planning for oversized audio recordings."""

import logging
import math

from salesnote.exceptions import InvalidInputError
from salesnote.transcription.models import ChunkInterval, ChunkPlan

logger = logging.getLogger(__name__)


def plan_chunks(
    total_duration: float,
    original_byte_size: int,
    target_chunk_bytes: int,
    min_chunk_seconds: float = 30.0,
    max_chunk_seconds: float = 600.0,
) -> ChunkPlan:
    """Split a recording's timeline so each chunk stays under a byte budget.

    The source bitrate is estimated as ``original_byte_size / total_duration``,
    which assumes uniform byte density. Variable-bitrate recordings can end up
    with chunks above or below the target.

    Args:
        total_duration: Recording duration in seconds
        original_byte_size: Size of the original (compressed) file in bytes
        target_chunk_bytes: Byte budget for one chunk
        min_chunk_seconds: Lower bound for the chunk duration
        max_chunk_seconds: Upper bound for the chunk duration

    Returns:
        Contiguous plan covering [0, total_duration]

    Raises:
        InvalidInputError: If a duration, size or bound is non-positive, or
            the bounds are inverted
    """
    if total_duration <= 0:
        raise InvalidInputError(f"total_duration must be positive, got {total_duration}")
    if original_byte_size <= 0:
        raise InvalidInputError(f"original_byte_size must be positive, got {original_byte_size}")
    if target_chunk_bytes <= 0:
        raise InvalidInputError(f"target_chunk_bytes must be positive, got {target_chunk_bytes}")
    if min_chunk_seconds <= 0 or max_chunk_seconds <= 0:
        raise InvalidInputError(
            f"chunk duration bounds must be positive, got [{min_chunk_seconds}, {max_chunk_seconds}]"
        )
    if min_chunk_seconds > max_chunk_seconds:
        raise InvalidInputError(
            f"min_chunk_seconds ({min_chunk_seconds}) exceeds max_chunk_seconds ({max_chunk_seconds})"
        )

    bytes_per_second = original_byte_size / total_duration
    # Same as target / bytes_per_second, without the extra rounding step
    candidate = math.floor(target_chunk_bytes * total_duration / original_byte_size)
    chunk_duration = max(min_chunk_seconds, min(max_chunk_seconds, candidate))

    chunk_count = math.ceil(total_duration / chunk_duration)
    intervals = tuple(
        ChunkInterval(
            start_time=i * chunk_duration,
            end_time=min((i + 1) * chunk_duration, total_duration),
        )
        for i in range(chunk_count)
    )

    logger.info(
        "Chunk plan computed",
        extra={
            "total_duration": total_duration,
            "original_byte_size": original_byte_size,
            "bytes_per_second": bytes_per_second,
            "candidate_chunk_seconds": candidate,
            "chunk_duration": chunk_duration,
            "total_chunks": chunk_count,
        },
    )

    return ChunkPlan(
        intervals=intervals,
        chunk_duration=chunk_duration,
        total_duration=total_duration,
    )
