"""Tests for object storage backends."""

import io
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from google.cloud.exceptions import GoogleCloudError, NotFound

from salesnote.exceptions import StorageError
from salesnote.storage.base import build_object_path, sanitize_filename
from salesnote.storage.gcs import GCSObjectStore
from salesnote.storage.local import LocalObjectStore


def test_sanitize_filename():
    """Test filename sanitization."""
    # Test path traversal removal
    assert "../" not in sanitize_filename("../etc/passwd")
    assert "..\\" not in sanitize_filename("..\\windows\\system32")

    # Test directory separator replacement
    assert "/" not in sanitize_filename("path/to/file.webm")

    # Test special character replacement
    assert sanitize_filename("商談 memo@#$.m4a") == "___memo___.m4a"

    # Test valid characters preserved
    assert sanitize_filename("valid-file_name.123.mp3") == "valid-file_name.123.mp3"


def test_build_object_path():
    """Test object paths are grouped by kind and record."""
    now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

    path = build_object_path("audio", "rec/42", "meeting 1.webm", now=now)

    assert path == f"audio/rec_42/{int(now.timestamp() * 1000)}_meeting_1.webm"


class TestLocalObjectStore:
    """Tests for local object store."""

    @pytest.mark.asyncio
    async def test_upload(self, tmp_path):
        """Test objects are written below the base path."""
        store = LocalObjectStore(base_path=tmp_path)
        content = b"RIFF" + b"\x00" * 200_000

        uri = await store.upload("audio/rec-1/1_meeting.wav", io.BytesIO(content), "audio/wav")

        assert Path(uri).read_bytes() == content
        assert Path(uri).is_relative_to(tmp_path)

    @pytest.mark.asyncio
    async def test_signed_url_and_delete(self, tmp_path):
        """Test a stored object yields a file URL and can be deleted."""
        store = LocalObjectStore(base_path=tmp_path)
        uri = await store.upload("audio/rec-1/a.webm", io.BytesIO(b"data"), "audio/webm")

        url = store.signed_url("audio/rec-1/a.webm", 3600)
        assert url.startswith("file://")
        assert url.endswith("audio/rec-1/a.webm")

        store.delete("audio/rec-1/a.webm")
        assert not Path(uri).exists()
        # Deleting again is not an error
        store.delete("audio/rec-1/a.webm")

    def test_signed_url_missing_object(self, tmp_path):
        store = LocalObjectStore(base_path=tmp_path)

        with pytest.raises(StorageError, match="not found"):
            store.signed_url("audio/missing.webm", 60)

    @pytest.mark.asyncio
    async def test_rejects_path_traversal(self, tmp_path):
        """Test paths escaping the storage root are refused."""
        store = LocalObjectStore(base_path=tmp_path / "objects")

        with pytest.raises(StorageError):
            await store.upload("../outside.webm", io.BytesIO(b"x"), "audio/webm")

    def test_get_backend_name(self, tmp_path):
        assert LocalObjectStore(base_path=tmp_path).get_backend_name() == "local"


class TestGCSObjectStore:
    """Tests for GCS object store."""

    @pytest.fixture
    def mock_blob(self):
        with patch("salesnote.storage.gcs.storage.Client") as mock_client_class:
            mock_client = MagicMock()
            mock_bucket = MagicMock()
            mock_blob = MagicMock()

            mock_client_class.return_value = mock_client
            mock_client.bucket.return_value = mock_bucket
            mock_bucket.blob.return_value = mock_blob

            yield mock_blob

    @pytest.mark.asyncio
    async def test_upload(self, mock_blob):
        """Test upload streams the file and returns a gs:// URI."""
        store = GCSObjectStore(bucket_name="test-bucket", project_id="test-project")
        data = io.BytesIO(b"audio")

        uri = await store.upload("audio/rec-1/a.m4a", data, "audio/mp4")

        assert uri == "gs://test-bucket/audio/rec-1/a.m4a"
        mock_blob.upload_from_file.assert_called_once_with(data, rewind=True, content_type="audio/mp4")

    @pytest.mark.asyncio
    async def test_upload_failure(self, mock_blob):
        mock_blob.upload_from_file.side_effect = GoogleCloudError("quota exceeded")
        store = GCSObjectStore(bucket_name="test-bucket")

        with pytest.raises(StorageError):
            await store.upload("audio/a.m4a", io.BytesIO(b"audio"), "audio/mp4")

    @pytest.mark.asyncio
    async def test_missing_bucket_name(self, mock_blob, monkeypatch):
        """Test operations fail clearly when no bucket is configured."""
        from salesnote.core.config import settings

        monkeypatch.setattr(settings, "GCS_BUCKET_NAME", "")
        store = GCSObjectStore()

        with pytest.raises(StorageError, match="GCS_BUCKET_NAME"):
            await store.upload("audio/a.m4a", io.BytesIO(b"audio"), "audio/mp4")

    def test_delete_ignores_missing_object(self, mock_blob):
        mock_blob.delete.side_effect = NotFound("gone")
        store = GCSObjectStore(bucket_name="test-bucket")

        store.delete("audio/a.m4a")

        mock_blob.delete.assert_called_once()

    def test_signed_url(self, mock_blob):
        """Test V4 signed GET URLs are requested with the given expiry."""
        mock_blob.generate_signed_url.return_value = "https://storage.googleapis.com/signed"
        store = GCSObjectStore(bucket_name="test-bucket")

        url = store.signed_url("audio/a.m4a", 900)

        assert url == "https://storage.googleapis.com/signed"
        kwargs = mock_blob.generate_signed_url.call_args.kwargs
        assert kwargs["version"] == "v4"
        assert kwargs["method"] == "GET"
        assert kwargs["expiration"].total_seconds() == 900

    def test_signed_url_failure(self, mock_blob):
        mock_blob.generate_signed_url.side_effect = AttributeError("no private key")
        store = GCSObjectStore(bucket_name="test-bucket")

        with pytest.raises(StorageError):
            store.signed_url("audio/a.m4a", 900)

    def test_get_backend_name(self):
        assert GCSObjectStore(bucket_name="test-bucket").get_backend_name() == "gcs"
