"""
Unit tests for services.ocr_service module.
"""
import asyncio
import json
from types import SimpleNamespace

import httpx
import pytest
from openai import OpenAIError

from core.constants import MESSAGES, OCR_PROMPTS
from core.exceptions import RecognitionError
from services.ocr_service import EdgeFunctionRecognizer, VisionLLMRecognizer

DATA_URL = "data:image/jpeg;base64,/9j/AAAA"
ENDPOINT = "https://functions.example.test/ocr-question"


def _recognizer(handler, token=None) -> EdgeFunctionRecognizer:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return EdgeFunctionRecognizer(ENDPOINT, access_token=token, client=client)


class TestEdgeFunctionRecognizer:
    """Tests for EdgeFunctionRecognizer."""

    def test_success(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen['body'] = json.loads(request.content)
            seen['auth'] = request.headers.get('Authorization')
            return httpx.Response(200, json={"questionText": "What is 6 × 7?"})

        text = asyncio.run(_recognizer(handler, token="abc").recognize_question(DATA_URL))

        assert text == "What is 6 × 7?"
        assert seen['body'] == {"imageDataUrl": DATA_URL}
        assert seen['auth'] == "Bearer abc"

    def test_no_token_no_header(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen['auth'] = request.headers.get('Authorization')
            return httpx.Response(200, json={"questionText": "text"})

        asyncio.run(_recognizer(handler).recognize_question(DATA_URL))

        assert seen['auth'] is None

    def test_error_detail_from_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"error": "Unauthorized"})

        with pytest.raises(RecognitionError) as exc_info:
            asyncio.run(_recognizer(handler).recognize_question(DATA_URL))

        assert str(exc_info.value) == "Unauthorized"
        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Unauthorized"

    def test_error_without_json(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="boom")

        with pytest.raises(RecognitionError) as exc_info:
            asyncio.run(_recognizer(handler).recognize_question(DATA_URL))

        assert str(exc_info.value) == "Internal Server Error"
        assert exc_info.value.status_code == 500

    def test_missing_question_text(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"questionText": ""})

        with pytest.raises(RecognitionError, match=MESSAGES['empty_result']):
            asyncio.run(_recognizer(handler).recognize_question(DATA_URL))

    def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        with pytest.raises(RecognitionError, match="OCR request failed"):
            asyncio.run(_recognizer(handler).recognize_question(DATA_URL))

    def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow")

        with pytest.raises(RecognitionError) as exc_info:
            asyncio.run(_recognizer(handler).recognize_question(DATA_URL))

        assert str(exc_info.value) == MESSAGES['timeout']


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _vision(content=None, error=None):
    completions = FakeCompletions(content=content, error=error)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return VisionLLMRecognizer(client=client, model="vision-test"), completions


class TestVisionLLMRecognizer:
    """Tests for VisionLLMRecognizer."""

    def test_request_shape(self):
        recognizer, completions = _vision(content="Find x: 2x = 10, what is x?")

        asyncio.run(recognizer.recognize_question(DATA_URL))

        kwargs = completions.kwargs
        assert kwargs['model'] == "vision-test"
        assert kwargs['temperature'] == 0.2
        assert kwargs['max_tokens'] == 800
        assert kwargs['messages'][0] == {"role": "system", "content": OCR_PROMPTS['system']}
        user_content = kwargs['messages'][1]['content']
        assert user_content[0] == {"type": "text", "text": OCR_PROMPTS['user']}
        assert user_content[1]['image_url']['url'] == DATA_URL

    def test_output_cleaned(self):
        recognizer, _ = _vision(content="```\n$2 \\times 3$\n```")

        assert asyncio.run(recognizer.recognize_question(DATA_URL)) == "2 × 3"

    def test_empty_output_raises(self):
        recognizer, _ = _vision(content="   ")

        assert asyncio.run(recognizer.extract_question_text(DATA_URL)) == ""
        with pytest.raises(RecognitionError, match=MESSAGES['empty_result']):
            asyncio.run(recognizer.recognize_question(DATA_URL))

    def test_api_error_wrapped(self):
        recognizer, _ = _vision(error=OpenAIError("rate limited"))

        with pytest.raises(RecognitionError) as exc_info:
            asyncio.run(recognizer.recognize_question(DATA_URL))

        assert exc_info.value.detail == "rate limited"
