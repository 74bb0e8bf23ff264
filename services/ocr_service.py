"""
OCR Service - Recognizes question text in a cropped image.

Two recognizers implement the same interface: one calls the ocr-question
HTTP endpoint, the other calls an OpenAI-compatible vision model directly.
"""
from abc import ABC, abstractmethod
from typing import Dict, Optional

import httpx
from openai import AsyncOpenAI, OpenAIError

from core.constants import DEFAULT_VISION_PARAMS, MESSAGES, OCR_PROMPTS
from core.exceptions import RecognitionError
from utils.text_utils import normalize_ocr_text


class BaseRecognizer(ABC):
    """
    Abstract base class for question recognizers.

    Implementations must return non-empty text or raise RecognitionError.
    """

    @abstractmethod
    async def recognize_question(self, image_data_url: str) -> str:
        """
        Recognize the question shown in an image.

        Args:
            image_data_url: JPEG/PNG image as a base64 data URL

        Returns:
            Recognized question text

        Raises:
            RecognitionError: On transport, authorization or empty-result failure
        """
        pass


class EdgeFunctionRecognizer(BaseRecognizer):
    """Recognizer backed by the ocr-question HTTP endpoint."""

    def __init__(
        self,
        endpoint_url: str,
        access_token: Optional[str] = None,
        timeout: float = 15.0,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize the endpoint recognizer.

        Args:
            endpoint_url: Full URL of the ocr-question endpoint
            access_token: Bearer token for the endpoint (optional)
            timeout: Request timeout in seconds
            client: Shared httpx.AsyncClient (optional, one per call if omitted)
        """
        self.endpoint_url = endpoint_url
        self.access_token = access_token
        self.timeout = timeout
        self.client = client

    def _headers(self) -> Dict[str, str]:
        if self.access_token:
            return {"Authorization": f"Bearer {self.access_token}"}
        return {}

    async def _post(self, payload: dict) -> httpx.Response:
        if self.client is not None:
            return await self.client.post(
                self.endpoint_url,
                json=payload,
                headers=self._headers(),
                timeout=self.timeout
            )
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(
                self.endpoint_url,
                json=payload,
                headers=self._headers()
            )

    async def recognize_question(self, image_data_url: str) -> str:
        try:
            response = await self._post({"imageDataUrl": image_data_url})
        except httpx.TimeoutException as e:
            raise RecognitionError(MESSAGES['timeout']) from e
        except httpx.HTTPError as e:
            raise RecognitionError(f"OCR request failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.is_error:
            detail = None
            if isinstance(data, dict) and data.get("error"):
                detail = str(data["error"])
            raise RecognitionError(
                detail or response.reason_phrase or "OCR function failed",
                status_code=response.status_code,
                detail=detail
            )

        question_text = data.get("questionText") if isinstance(data, dict) else None
        if not question_text:
            raise RecognitionError(MESSAGES['empty_result'], status_code=response.status_code)

        return str(question_text)


class VisionLLMRecognizer(BaseRecognizer):
    """Recognizer calling an OpenAI-compatible vision model."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        temperature: float = DEFAULT_VISION_PARAMS['temperature'],
        max_tokens: int = DEFAULT_VISION_PARAMS['max_tokens']
    ):
        """
        Initialize the vision recognizer.

        Args:
            client: AsyncOpenAI client instance
            model: Vision model name
            temperature: Sampling temperature
            max_tokens: Maximum tokens in the answer
        """
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def _call_vision_model(self, image_data_url: str):
        """Call the chat completions API with the image and prompts."""
        return await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": OCR_PROMPTS['system']},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": OCR_PROMPTS['user']},
                        {"type": "image_url", "image_url": {"url": image_data_url}}
                    ]
                }
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            stream=False
        )

    async def extract_question_text(self, image_data_url: str) -> str:
        """
        Run the model and clean its output.

        Returns:
            Cleaned text, possibly empty
        """
        try:
            response = await self._call_vision_model(image_data_url)
        except OpenAIError as e:
            raise RecognitionError(
                f"Vision OCR request failed: {e}",
                status_code=getattr(e, 'status_code', None),
                detail=str(e)
            ) from e

        if not response.choices:
            return ""
        content = response.choices[0].message.content or ""
        return normalize_ocr_text(content.strip())

    async def recognize_question(self, image_data_url: str) -> str:
        text = await self.extract_question_text(image_data_url)
        if not text:
            raise RecognitionError(MESSAGES['empty_result'])
        return text
