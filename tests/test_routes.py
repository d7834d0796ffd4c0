from app.core.deps import get_pipeline
from app.services.recording_pipeline import RecordingPipeline
from tests.conftest import FakeStorage, FakeTranscriber

AUDIO = b"\x1aE\xdf\xa3" + b"\x00" * 1020


def _use_pipeline(client, pipeline):
    client.app.dependency_overrides[get_pipeline] = lambda: pipeline


def test_root_lists_endpoints(client):
    response = client.get("/")

    assert response.status_code == 200
    payload = response.json()
    assert "/upload-audio" in payload["endpoints"]
    assert "/health" in payload["endpoints"]


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_upload_happy_path(client, storage, transcriber):
    response = client.post(
        "/upload-audio",
        data={"targetWord": "Heisenberg", "questionId": "QID3"},
        files={"audio": ("QID3.webm", AUDIO, "audio/webm")},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["proximity_score"] == 100.00
    assert payload["exact_match"] is True
    assert payload["levenshtein_similarity"] == 100.00
    assert payload["transcription_confidence"] == 95.00
    assert payload["target_word"] == "Heisenberg"
    assert payload["transcript"] == "Heisenberg"
    assert payload["file_size_kb"] == 1.00
    assert payload["filename"].startswith("audio/QID3/")
    assert payload["filename"].endswith(".webm")
    assert payload["url"].endswith(payload["filename"])

    assert len(storage.calls) == 1
    assert transcriber.calls == [AUDIO]


def test_upload_missing_target_word(client, storage, transcriber):
    response = client.post(
        "/upload-audio",
        data={"questionId": "QID3"},
        files={"audio": ("QID3.webm", AUDIO, "audio/webm")},
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "No target word provided"}
    assert storage.calls == []
    assert transcriber.calls == []


def test_upload_missing_audio(client, storage):
    response = client.post("/upload-audio", data={"targetWord": "Heisenberg"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "No audio file provided"}
    assert storage.calls == []


def test_upload_storage_failure(client):
    transcriber = FakeTranscriber()
    _use_pipeline(
        client,
        RecordingPipeline(storage=FakeStorage(error=RuntimeError("403 Forbidden")), transcriber=transcriber),
    )

    response = client.post(
        "/upload-audio",
        data={"targetWord": "Heisenberg"},
        files={"audio": ("q.webm", AUDIO, "audio/webm")},
    )

    assert response.status_code == 500
    payload = response.json()
    assert payload["success"] is False
    assert "Failed to store audio" in payload["error"]
    assert transcriber.calls == []


def test_upload_transcription_failure(client):
    _use_pipeline(
        client,
        RecordingPipeline(
            storage=FakeStorage(),
            transcriber=FakeTranscriber(error=RuntimeError("deadline exceeded")),
        ),
    )

    response = client.post(
        "/upload-audio",
        data={"targetWord": "Heisenberg"},
        files={"audio": ("q.webm", AUDIO, "audio/webm")},
    )

    assert response.status_code == 500
    assert response.json()["success"] is False
    assert "Failed to transcribe audio" in response.json()["error"]


def test_upload_without_question_id_uses_unknown(client):
    response = client.post(
        "/upload-audio",
        data={"targetWord": "Heisenberg"},
        files={"audio": ("recording.webm", AUDIO, "audio/webm")},
    )

    assert response.status_code == 200
    assert response.json()["filename"].startswith("audio/unknown/")


def test_cors_allows_any_origin(client):
    response = client.options(
        "/upload-audio",
        headers={
            "Origin": "https://survey.example.com",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] in ("*", "https://survey.example.com")


def test_upload_audio_sent_as_text_field(client, storage, transcriber):
    response = client.post(
        "/upload-audio",
        data={"targetWord": "Heisenberg", "audio": "not-a-file"},
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "No audio file provided"}
    assert storage.calls == []
    assert transcriber.calls == []


def test_non_webm_upload_is_stored_as_webm(client, storage):
    response = client.post(
        "/upload-audio",
        data={"targetWord": "Heisenberg"},
        files={"audio": ("clip.ogg", AUDIO, "audio/ogg")},
    )

    assert response.status_code == 200
    assert response.json()["filename"].endswith(".webm")
    _, key, content_type = storage.calls[0]
    assert key.endswith(".webm")
    assert content_type == "audio/webm"
