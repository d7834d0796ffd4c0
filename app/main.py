"""FastAPI application entry point"""

import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.api.routes import recordings
from app.api.schemas.recordings import ErrorResponse

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "Audio Transcription & Proximity Service"
VERSION = "1.0.0"

# Create FastAPI app
app = FastAPI(
    title=SERVICE_NAME,
    description="Stores recorded words, transcribes them and scores them against a target word",
    version=VERSION
)

# CORS middleware: the recorder is embedded in third-party survey pages
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(recordings.router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed requests in the same {success, error} shape as the routes"""
    errors = exc.errors()
    if any(tuple(err.get("loc", ()))[-1:] == ("audio",) for err in errors):
        # a text field named "audio" is not a recording
        message = "No audio file provided"
    else:
        message = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}" for err in errors
        ) or "Invalid request"

    logger.warning("Rejected request to %s: %s", request.url.path, message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(error=message).model_dump(),
    )


@app.on_event("startup")
async def startup_event():
    """Report storage configuration on startup"""
    if not settings.GCS_BUCKET:
        logger.error("GCS_BUCKET environment variable is not set; uploads will fail")
    else:
        logger.info("Using GCS bucket: %s", settings.GCS_BUCKET)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "endpoints": {
            "/upload-audio": "POST - Upload and process audio",
            "/health": "GET - Health check"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
