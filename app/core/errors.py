"""Error taxonomy for the recording pipeline"""


class PipelineError(Exception):
    """Base class for every failure the pipeline reports to its caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PipelineError):
    """Missing or empty required input. Raised before any collaborator call."""

    status_code = 400


class StorageError(PipelineError):
    """The storage backend failed to persist the audio."""


class TranscriptionError(PipelineError):
    """The speech backend failed to transcribe the audio."""


class InternalError(PipelineError):
    """Anything the pipeline did not anticipate."""
