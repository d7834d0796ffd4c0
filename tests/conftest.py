import pytest
from fastapi.testclient import TestClient

from app.core.models import TranscriptionResult
from app.services.recording_pipeline import RecordingPipeline


class FakeStorage:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def store(self, data, key, content_type="audio/webm"):
        self.calls.append((data, key, content_type))
        if self.error:
            raise self.error
        return f"https://storage.googleapis.com/test-bucket/{key}"


class FakeTranscriber:
    def __init__(self, transcript="Heisenberg", confidence=0.95, error=None):
        self.result = TranscriptionResult(transcript=transcript, confidence=confidence)
        self.error = error
        self.calls = []

    def transcribe(self, data):
        self.calls.append(data)
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def transcriber():
    return FakeTranscriber()


@pytest.fixture
def pipeline(storage, transcriber):
    return RecordingPipeline(storage=storage, transcriber=transcriber)


@pytest.fixture
def client(pipeline):
    from app.core.deps import get_pipeline
    from app.main import app

    app.dependency_overrides[get_pipeline] = lambda: pipeline
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
