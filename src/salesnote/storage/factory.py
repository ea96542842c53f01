"""Object storage backend selection."""

from functools import lru_cache

from salesnote.core.config import settings
from salesnote.storage.base import ObjectStore


@lru_cache(maxsize=1)
def get_object_store() -> ObjectStore:
    """Return the configured storage backend.

    Raises:
        ValueError: If STORAGE_BACKEND is not recognized
    """
    if settings.STORAGE_BACKEND == "gcs":
        from salesnote.storage.gcs import GCSObjectStore

        return GCSObjectStore()
    if settings.STORAGE_BACKEND == "local":
        from salesnote.storage.local import LocalObjectStore

        return LocalObjectStore()
    raise ValueError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND!r}")
