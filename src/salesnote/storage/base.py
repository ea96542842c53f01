"""Abstract object storage interface."""

import re
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import BinaryIO


def sanitize_filename(filename: str) -> str:
    """Remove path traversal and dangerous characters."""
    safe = filename.replace("../", "").replace("..\\", "")
    safe = safe.replace("/", "_").replace("\\", "_")
    safe = re.sub(r"[^a-zA-Z0-9._-]", "_", safe)
    return safe[:255]


def build_object_path(kind: str, record_id: str, file_name: str, now: datetime | None = None) -> str:
    """Build an object path like ``audio/{record_id}/{timestamp}_{file_name}``.

    The millisecond timestamp keeps repeated uploads of the same file name
    apart.
    """
    now = now or datetime.now(timezone.utc)
    timestamp = int(now.timestamp() * 1000)
    return f"{kind}/{sanitize_filename(record_id)}/{timestamp}_{sanitize_filename(file_name)}"


class ObjectStore(ABC):
    """Abstract base class for binary object storage backends."""

    @abstractmethod
    async def upload(self, path: str, data: BinaryIO, content_type: str) -> str:
        """Store an object.

        Args:
            path: Object path inside the store
            data: Object content stream
            content_type: MIME type

        Returns:
            Final storage URI
        """
        pass

    @abstractmethod
    def delete(self, path: str) -> None:
        """Delete an object. Deleting a missing object is not an error."""
        pass

    @abstractmethod
    def signed_url(self, path: str, expires_in_seconds: int) -> str:
        """Return a time-limited read URL for an object."""
        pass

    @abstractmethod
    def get_backend_name(self) -> str:
        """Return backend identifier."""
        pass
