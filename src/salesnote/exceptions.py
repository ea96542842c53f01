"""Custom exceptions for SalesNote Engine."""

SUPPORTED_AUDIO_FORMATS = ("MP3", "M4A", "WAV", "WebM")


class SalesNoteError(Exception):
    """Base exception for SalesNote Engine."""
    pass


class DecodeError(SalesNoteError):
    """Exception raised when audio bytes cannot be decoded into samples."""

    def __init__(self, detail: str | None = None):
        self.detail = detail
        message = (
            "Failed to decode the audio file. "
            f"Supported formats: {', '.join(SUPPORTED_AUDIO_FORMATS)}"
        )
        super().__init__(message)


class InvalidInputError(SalesNoteError, ValueError):
    """Exception raised when chunk planning receives invalid parameters."""
    pass


class InvalidRangeError(SalesNoteError, ValueError):
    """Exception raised when a chunk time range maps to no valid samples."""
    pass


class TranscriptionFailedError(SalesNoteError):
    """Exception raised when a remote transcription call fails.

    The triggering error is kept as ``__cause__``.
    """

    def __init__(self, message: str, chunk_index: int | None = None):
        super().__init__(message)
        self.chunk_index = chunk_index


class MinutesGenerationError(SalesNoteError):
    """Exception raised when meeting minutes cannot be generated."""
    pass


class StorageError(SalesNoteError):
    """Exception raised when object storage operations fail."""
    pass
