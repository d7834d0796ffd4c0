"""Application configuration and environment variables"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Google Cloud (Storage + Speech-to-Text)
    GOOGLE_APPLICATION_CREDENTIALS: Optional[str] = None  # Path to service account JSON
    GCS_BUCKET: Optional[str] = None  # Bucket for recorded audio (public read)
    AUDIO_CACHE_CONTROL: str = "public, max-age=31536000"

    # Speech-to-Text recognition config
    STT_LANGUAGE_CODE: str = "en-US"
    STT_ENCODING: str = "WEBM_OPUS"  # what MediaRecorder produces in the browser
    STT_MODEL: str = "default"
    STT_USE_ENHANCED: bool = True

    # Limits
    MAX_AUDIO_SIZE_MB: int = 10
    STORAGE_TIMEOUT_SECONDS: float = 60.0
    TRANSCRIPTION_TIMEOUT_SECONDS: float = 120.0

    # Server
    LOG_LEVEL: str = "INFO"
    PORT: int = 8080

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
