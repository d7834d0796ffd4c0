"""Service for Google Cloud Storage operations"""

import logging
from typing import Optional
from google.cloud import storage

from app.config import settings
from app.core.errors import StorageError

logger = logging.getLogger(__name__)

PUBLIC_URL_BASE = "https://storage.googleapis.com"


class GCSService:
    """Service for GCS operations"""

    def __init__(
        self,
        bucket_name: Optional[str] = None,
        client: Optional[storage.Client] = None,
        cache_control: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.bucket_name = bucket_name or settings.GCS_BUCKET
        self.cache_control = cache_control or settings.AUDIO_CACHE_CONTROL
        # per-call deadline so an abandoned upload does not keep running
        self.timeout = timeout or settings.STORAGE_TIMEOUT_SECONDS
        self._client = client

        if not self.bucket_name:
            logger.warning("GCS_BUCKET is not set; audio uploads will fail.")

    @property
    def client(self) -> storage.Client:
        if self._client is None:
            self._client = storage.Client()
        return self._client

    def public_url(self, key: str) -> str:
        return f"{PUBLIC_URL_BASE}/{self.bucket_name}/{key}"

    def store(self, data: bytes, key: str, content_type: str = "audio/webm") -> str:
        """
        Upload audio bytes to GCS and make the object publicly readable.

        Args:
            data: Raw audio bytes
            key: Object name inside the bucket
            content_type: MIME type recorded on the object

        Returns:
            Public HTTPS URL of the stored object
        """
        if not self.bucket_name:
            raise StorageError("GCS_BUCKET is not configured in settings.")

        try:
            bucket = self.client.bucket(self.bucket_name)
            blob = bucket.blob(key)
            blob.cache_control = self.cache_control

            blob.upload_from_string(data, content_type=content_type, timeout=self.timeout)
            blob.make_public(timeout=self.timeout)
            logger.info("Uploaded audio to GCS: bucket=%s key=%s size_bytes=%d", self.bucket_name, key, len(data))
        except Exception as e:
            logger.error("Error uploading to GCS: %s", e, exc_info=True)
            raise StorageError(f"Failed to store audio: {e}") from e

        return self.public_url(key)
