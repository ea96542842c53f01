"""Google Cloud Storage object storage backend."""

import logging
from datetime import timedelta
from typing import BinaryIO, Optional

from google.cloud import storage
from google.cloud.exceptions import GoogleCloudError, NotFound

from salesnote.core.config import settings
from salesnote.exceptions import StorageError
from salesnote.storage.base import ObjectStore

logger = logging.getLogger(__name__)


class GCSObjectStore(ObjectStore):
    """Google Cloud Storage backend."""

    def __init__(self, bucket_name: str | None = None, project_id: str | None = None):
        self.bucket_name = bucket_name or settings.GCS_BUCKET_NAME
        self.project_id = project_id or settings.GCP_PROJECT_ID or None
        self._client: Optional[storage.Client] = None
        self._bucket: Optional[storage.Bucket] = None

    def _get_bucket(self) -> storage.Bucket:
        """Lazy-load and cache GCS bucket."""
        if self._bucket is None:
            if not self.bucket_name:
                raise StorageError("GCS_BUCKET_NAME not configured")

            self._client = storage.Client(project=self.project_id)
            self._bucket = self._client.bucket(self.bucket_name)

        return self._bucket

    async def upload(self, path: str, data: BinaryIO, content_type: str) -> str:
        blob = self._get_bucket().blob(path)
        blob.content_type = content_type
        try:
            blob.upload_from_file(data, rewind=True, content_type=content_type)
        except GoogleCloudError as e:
            logger.error(
                "Failed to upload object to GCS",
                extra={"bucket": self.bucket_name, "object_name": path, "error": str(e)},
            )
            raise StorageError(f"Failed to upload {path}: {e}") from e

        return f"gs://{self.bucket_name}/{path}"

    def delete(self, path: str) -> None:
        try:
            self._get_bucket().blob(path).delete()
        except NotFound:
            logger.debug("Object already deleted", extra={"object_name": path})
        except GoogleCloudError as e:
            logger.error(
                "Failed to delete object from GCS",
                extra={"bucket": self.bucket_name, "object_name": path, "error": str(e)},
            )
            raise StorageError(f"Failed to delete {path}: {e}") from e

    def signed_url(self, path: str, expires_in_seconds: int) -> str:
        """Generate a V4 signed GET URL.

        Requires credentials that can sign, e.g. a service account key or a
        runtime account with roles/iam.serviceAccountTokenCreator on itself.
        """
        blob = self._get_bucket().blob(path)
        try:
            return blob.generate_signed_url(
                version="v4",
                expiration=timedelta(seconds=expires_in_seconds),
                method="GET",
            )
        except Exception as e:
            logger.error(
                "Failed to sign GCS URL",
                extra={"bucket": self.bucket_name, "object_name": path, "error": str(e)},
            )
            raise StorageError(f"Failed to sign URL for {path}: {e}") from e

    def get_backend_name(self) -> str:
        return "gcs"
