"""Orchestrates one recording request: validate, store, transcribe, score"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional, Protocol

from anyio import to_thread

from app.core.errors import (
    InternalError,
    PipelineError,
    StorageError,
    TranscriptionError,
    ValidationError,
)
from app.core.models import (
    DEFAULT_QUESTION_ID,
    PipelineResponse,
    PipelineStage,
    ScoreRequest,
    SimilarityResult,
    TranscriptionResult,
)
from app.services.similarity import calculate_proximity_score, round_half_up
from app.utils.storage_keys import DEFAULT_EXTENSION, build_audio_key

logger = logging.getLogger(__name__)


async def _in_thread(func: Callable, *args):
    # Same worker pool as fastapi's run_in_threadpool, but a cancelled or timed
    # out request stops waiting instead of blocking until the thread returns.
    return await to_thread.run_sync(func, *args, abandon_on_cancel=True)


class AudioStorage(Protocol):
    def store(self, data: bytes, key: str, content_type: str = ...) -> str: ...


class Transcriber(Protocol):
    def transcribe(self, data: bytes) -> TranscriptionResult: ...


class RecordingPipeline:
    """
    Runs the stages of one request strictly in order:

        received -> validated -> stored -> transcribed -> scored -> completed

    The first failing stage aborts the rest and surfaces as a PipelineError
    subclass. Audio that was stored before a later failure stays stored.
    Collaborators are blocking clients and run in worker threads so one
    request never stalls another.
    """

    def __init__(
        self,
        storage: AudioStorage,
        transcriber: Transcriber,
        storage_timeout: Optional[float] = None,
        transcription_timeout: Optional[float] = None,
        max_audio_bytes: Optional[int] = None,
        clock: Callable[[], Optional[datetime]] = lambda: None,
    ):
        self.storage = storage
        self.transcriber = transcriber
        self.storage_timeout = storage_timeout
        self.transcription_timeout = transcription_timeout
        self.max_audio_bytes = max_audio_bytes
        self.clock = clock

    async def run(
        self,
        audio_bytes: Optional[bytes],
        target_word: Optional[str],
        question_id: Optional[str] = None,
        content_type: Optional[str] = None,
        extension: Optional[str] = None,
    ) -> PipelineResponse:
        stage = PipelineStage.RECEIVED
        try:
            request = self.validate(audio_bytes, target_word, question_id, content_type, extension)
            stage = self._advance(request, stage, PipelineStage.VALIDATED)

            key = build_audio_key(request.question_id, request.extension, now=self.clock())
            url = await self.store(request, key)
            stage = self._advance(request, stage, PipelineStage.STORED)

            transcription = await self.transcribe(request)
            stage = self._advance(request, stage, PipelineStage.TRANSCRIBED)

            similarity = self.score(transcription, request)
            stage = self._advance(request, stage, PipelineStage.SCORED)

            response = self.assemble(request, key, url, transcription, similarity)
            self._advance(request, stage, PipelineStage.COMPLETED)
            return response
        except PipelineError as e:
            logger.warning("Request %s -> %s: %s", stage.value, PipelineStage.FAILED.value, e.message)
            raise
        except Exception as e:
            logger.error("Request %s -> %s: unexpected error %s", stage.value, PipelineStage.FAILED.value, e, exc_info=True)
            raise InternalError(str(e) or "Internal server error") from e

    def validate(
        self,
        audio_bytes: Optional[bytes],
        target_word: Optional[str],
        question_id: Optional[str] = None,
        content_type: Optional[str] = None,
        extension: Optional[str] = None,
    ) -> ScoreRequest:
        if not audio_bytes:
            raise ValidationError("No audio file provided")
        if target_word is None or not target_word.strip():
            raise ValidationError("No target word provided")
        if self.max_audio_bytes is not None and len(audio_bytes) > self.max_audio_bytes:
            raise ValidationError(
                f"Audio file too large: {len(audio_bytes)} bytes (limit {self.max_audio_bytes})"
            )

        return ScoreRequest(
            audio_bytes=audio_bytes,
            target_word=target_word,
            question_id=(question_id or "").strip() or DEFAULT_QUESTION_ID,
            content_type=content_type or "audio/webm",
            extension=extension or DEFAULT_EXTENSION,
        )

    async def store(self, request: ScoreRequest, key: str) -> str:
        logger.info("Processing audio for question %s...", request.question_id)
        try:
            url = await asyncio.wait_for(
                _in_thread(self.storage.store, request.audio_bytes, key, request.content_type),
                timeout=self.storage_timeout,
            )
        except StorageError:
            raise
        except asyncio.TimeoutError as e:
            raise StorageError(f"Storage timed out after {self.storage_timeout}s") from e
        except Exception as e:
            raise StorageError(f"Failed to store audio: {e}") from e

        logger.info("Uploaded to GCS: %s", url)
        return url

    async def transcribe(self, request: ScoreRequest) -> TranscriptionResult:
        try:
            result = await asyncio.wait_for(
                _in_thread(self.transcriber.transcribe, request.audio_bytes),
                timeout=self.transcription_timeout,
            )
        except TranscriptionError:
            raise
        except asyncio.TimeoutError as e:
            raise TranscriptionError(f"Transcription timed out after {self.transcription_timeout}s") from e
        except Exception as e:
            raise TranscriptionError(f"Failed to transcribe audio: {e}") from e

        logger.info("Transcribed: %r", result.transcript)
        return result

    def score(self, transcription: TranscriptionResult, request: ScoreRequest) -> SimilarityResult:
        # Target goes in as supplied; normalization happens inside the scorer.
        similarity = calculate_proximity_score(transcription.transcript, request.target_word)
        logger.info("Proximity score: %s%%", similarity.final_score)
        return similarity

    def assemble(
        self,
        request: ScoreRequest,
        key: str,
        url: str,
        transcription: TranscriptionResult,
        similarity: SimilarityResult,
    ) -> PipelineResponse:
        return PipelineResponse(
            url=url,
            transcript=transcription.transcript,
            transcription_confidence=round_half_up((transcription.confidence or 0.0) * 100),
            target_word=request.target_word,
            proximity_score=similarity.final_score,
            exact_match=similarity.exact_match,
            levenshtein_similarity=similarity.levenshtein_similarity,
            filename=key,
            file_size_kb=round_half_up(len(request.audio_bytes) / 1024),
        )

    def _advance(self, request: ScoreRequest, current: PipelineStage, nxt: PipelineStage) -> PipelineStage:
        logger.debug("question=%s stage %s -> %s", request.question_id, current.value, nxt.value)
        return nxt
