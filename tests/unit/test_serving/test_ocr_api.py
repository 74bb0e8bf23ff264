"""
Unit tests for serving.ocr_api module.
"""
import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_vision_recognizer
from core.exceptions import RecognitionError
from serving.ocr_api import ocr_app

DATA_URL = "data:image/jpeg;base64,/9j/AAAA"


class StubVisionRecognizer:
    """Stands in for VisionLLMRecognizer."""

    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def extract_question_text(self, image_data_url):
        self.calls.append(image_data_url)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def client_with():
    """Build a TestClient whose vision recognizer is replaced."""
    def _client(recognizer):
        ocr_app.dependency_overrides[get_vision_recognizer] = lambda: recognizer
        return TestClient(ocr_app)

    yield _client
    ocr_app.dependency_overrides.clear()


class TestOcrQuestion:
    """Tests for POST /ocr-question."""

    def test_success(self, client_with):
        recognizer = StubVisionRecognizer(text="Solve 2x + 3 = 11 for x.")

        response = client_with(recognizer).post("/ocr-question", json={"imageDataUrl": DATA_URL})

        assert response.status_code == 200
        assert response.json() == {"questionText": "Solve 2x + 3 = 11 for x."}
        assert recognizer.calls == [DATA_URL]

    def test_empty_text_is_not_an_error(self, client_with):
        response = client_with(StubVisionRecognizer(text="")).post(
            "/ocr-question", json={"imageDataUrl": DATA_URL}
        )

        assert response.status_code == 200
        assert response.json() == {"questionText": ""}

    @pytest.mark.parametrize("body", [
        {},
        {"imageDataUrl": ""},
        {"imageDataUrl": "https://example.test/q.png"},
    ])
    def test_invalid_data_url(self, client_with, body):
        recognizer = StubVisionRecognizer(text="unused")

        response = client_with(recognizer).post("/ocr-question", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid imageDataUrl"}
        assert recognizer.calls == []

    def test_not_configured(self, client_with):
        response = client_with(None).post("/ocr-question", json={"imageDataUrl": DATA_URL})

        assert response.status_code == 500
        assert response.json() == {"error": "Server env is not configured."}

    def test_upstream_failure(self, client_with):
        error = RecognitionError("Vision OCR request failed", detail="model overloaded")

        response = client_with(StubVisionRecognizer(error=error)).post(
            "/ocr-question", json={"imageDataUrl": DATA_URL}
        )

        assert response.status_code == 502
        assert response.json() == {"error": "model overloaded"}

    def test_unexpected_failure_returns_json(self, client_with):
        response = client_with(StubVisionRecognizer(error=ValueError("boom"))).post(
            "/ocr-question", json={"imageDataUrl": DATA_URL}
        )

        assert response.status_code == 500
        assert response.json() == {"error": "boom"}


def test_health(client_with):
    response = client_with(StubVisionRecognizer()).get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
