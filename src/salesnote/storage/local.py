"""Local filesystem object storage backend."""

from pathlib import Path
from typing import BinaryIO

from salesnote.core.config import settings
from salesnote.exceptions import StorageError
from salesnote.storage.base import ObjectStore


class LocalObjectStore(ObjectStore):
    """Local filesystem storage backend for development and tests."""

    def __init__(self, base_path: str | Path | None = None):
        self.base_path = Path(base_path or settings.LOCAL_STORAGE_PATH)

    def _resolve(self, path: str) -> Path:
        target = (self.base_path / path).resolve()
        if not target.is_relative_to(self.base_path.resolve()):
            raise StorageError(f"Object path escapes storage root: {path}")
        return target

    async def upload(self, path: str, data: BinaryIO, content_type: str) -> str:
        target_path = self._resolve(path)
        target_path.parent.mkdir(parents=True, exist_ok=True)

        # Stream write in chunks
        with open(target_path, "wb") as f:
            while chunk := data.read(65536):  # 64KB chunks
                f.write(chunk)

        return str(target_path)

    def delete(self, path: str) -> None:
        self._resolve(path).unlink(missing_ok=True)

    def signed_url(self, path: str, expires_in_seconds: int) -> str:
        # Local files have no access control, so the expiry is not enforced
        target_path = self._resolve(path)
        if not target_path.exists():
            raise StorageError(f"Object not found: {path}")
        return target_path.as_uri()

    def get_backend_name(self) -> str:
        return "local"
