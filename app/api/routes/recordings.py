"""API routes for scoring recorded words"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse

from app.api.schemas.recordings import ErrorResponse, RecordingResponse
from app.core.deps import get_pipeline
from app.core.errors import PipelineError
from app.services.recording_pipeline import RecordingPipeline

logger = logging.getLogger(__name__)

router = APIRouter(tags=["recordings"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


@router.post(
    "/upload-audio",
    response_model=RecordingResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Upload a recording and score it against the target word",
)
async def upload_audio(
    audio: Optional[UploadFile] = File(None, description="Recorded audio (webm/opus)"),
    targetWord: Optional[str] = Form(None, description="Word the speaker was asked to say"),
    questionId: Optional[str] = Form(None, description="Survey question label"),
    pipeline: RecordingPipeline = Depends(get_pipeline),
):
    """
    Store the recording, transcribe it and return its proximity to the target word.

    Recordings are always stored as audio/webm, the only container the
    recognizer is configured for.
    """
    try:
        content = await audio.read() if audio is not None else b""
        result = await pipeline.run(
            audio_bytes=content,
            target_word=targetWord,
            question_id=questionId,
        )
    except PipelineError as e:
        return _error(e.status_code, e.message)
    except Exception as e:
        logger.exception("Error processing audio")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e) or "Internal server error")

    logger.info("Request completed successfully")
    return result.to_dict()
