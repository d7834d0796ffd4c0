"""Pydantic schemas for recording upload responses"""

from pydantic import BaseModel, Field


class RecordingResponse(BaseModel):
    """Response schema for a scored recording"""
    success: bool = True
    url: str
    transcript: str
    transcription_confidence: float = Field(..., ge=0.0, le=100.0)
    target_word: str
    proximity_score: float = Field(..., ge=0.0, le=100.0)
    exact_match: bool
    levenshtein_similarity: float = Field(..., ge=0.0, le=100.0)
    filename: str = Field(..., description="Storage key of the uploaded audio")
    file_size_kb: float


class ErrorResponse(BaseModel):
    """Response schema for a failed recording request"""
    success: bool = False
    error: str
