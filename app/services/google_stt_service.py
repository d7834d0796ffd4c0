import logging
import os
from typing import Optional

from google.cloud import speech

from app.config import settings
from app.core.errors import TranscriptionError
from app.core.models import TranscriptionResult

logger = logging.getLogger(__name__)


class GoogleSTTService:
    """Service for Google Cloud Speech-to-Text (synchronous recognize on inline audio)."""

    def __init__(
        self,
        client: Optional[speech.SpeechClient] = None,
        language_code: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        # Configure credentials before the Speech client is created
        if settings.GOOGLE_APPLICATION_CREDENTIALS:
            os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = settings.GOOGLE_APPLICATION_CREDENTIALS

        self._client = client
        self.language_code = language_code or settings.STT_LANGUAGE_CODE
        self.timeout = timeout or settings.TRANSCRIPTION_TIMEOUT_SECONDS

    @property
    def client(self) -> speech.SpeechClient:
        if self._client is None:
            self._client = speech.SpeechClient()
        return self._client

    def build_config(self) -> speech.RecognitionConfig:
        return speech.RecognitionConfig(
            encoding=speech.RecognitionConfig.AudioEncoding[settings.STT_ENCODING],
            language_code=self.language_code,
            enable_automatic_punctuation=True,
            model=settings.STT_MODEL,
            use_enhanced=settings.STT_USE_ENHANCED,
        )

    def transcribe(self, data: bytes) -> TranscriptionResult:
        """
        Transcribe a short recording.

        Only the top alternative of the first result is used. A response with
        no results means no speech was recognized and yields an empty transcript.
        """
        try:
            audio = speech.RecognitionAudio(content=data)
            config = self.build_config()

            logger.info("STT: calling recognize size_bytes=%d language=%s", len(data), self.language_code)
            response = self.client.recognize(config=config, audio=audio, timeout=self.timeout)
        except Exception as e:
            logger.error("Error in Google STT: %s", e, exc_info=True)
            raise TranscriptionError(f"Failed to transcribe audio: {e}") from e

        if not response.results or not response.results[0].alternatives:
            logger.info("STT: no speech recognized")
            return TranscriptionResult(transcript="", confidence=0.0)

        alternative = response.results[0].alternatives[0]
        result = TranscriptionResult(
            transcript=alternative.transcript or "",
            confidence=alternative.confidence or 0.0,
        )
        logger.info("Google STT completed: transcript=%r confidence=%.3f", result.transcript, result.confidence)
        return result
