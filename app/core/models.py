"""Domain models for one recording request"""

import enum
from dataclasses import dataclass
from typing import Any, Dict


DEFAULT_QUESTION_ID = "unknown"


class PipelineStage(str, enum.Enum):
    """Stage of a single recording request"""

    RECEIVED = "received"
    VALIDATED = "validated"
    STORED = "stored"
    TRANSCRIBED = "transcribed"
    SCORED = "scored"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ScoreRequest:
    """Inbound recording plus the word the speaker was asked to say."""

    audio_bytes: bytes
    target_word: str
    question_id: str = DEFAULT_QUESTION_ID
    content_type: str = "audio/webm"
    extension: str = "webm"


@dataclass
class TranscriptionResult:
    """Result of speech-to-text. An empty transcript means no speech was recognized."""

    transcript: str = ""
    confidence: float = 0.0


@dataclass(frozen=True)
class SimilarityResult:
    """Proximity of a transcript to its target word, as percentages."""

    final_score: float
    exact_match: bool
    levenshtein_similarity: float


@dataclass(frozen=True)
class PipelineResponse:
    """Outward-facing result of a completed request."""

    url: str
    transcript: str
    transcription_confidence: float
    target_word: str
    proximity_score: float
    exact_match: bool
    levenshtein_similarity: float
    filename: str
    file_size_kb: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "url": self.url,
            "transcript": self.transcript,
            "transcription_confidence": self.transcription_confidence,
            "target_word": self.target_word,
            "proximity_score": self.proximity_score,
            "exact_match": self.exact_match,
            "levenshtein_similarity": self.levenshtein_similarity,
            "filename": self.filename,
            "file_size_kb": self.file_size_kb,
        }
