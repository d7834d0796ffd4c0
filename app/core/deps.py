"""Shared service instances for request handlers"""

from functools import lru_cache

from app.config import settings
from app.services.gcs_service import GCSService
from app.services.google_stt_service import GoogleSTTService
from app.services.recording_pipeline import RecordingPipeline


@lru_cache
def get_pipeline() -> RecordingPipeline:
    """
    Build the pipeline once per process.

    The GCS and Speech clients are created lazily on first use and shared
    across requests; tests replace this dependency with fakes.
    """
    return RecordingPipeline(
        storage=GCSService(),
        transcriber=GoogleSTTService(),
        storage_timeout=settings.STORAGE_TIMEOUT_SECONDS,
        transcription_timeout=settings.TRANSCRIPTION_TIMEOUT_SECONDS,
        max_audio_bytes=settings.MAX_AUDIO_SIZE_MB * 1024 * 1024,
    )
