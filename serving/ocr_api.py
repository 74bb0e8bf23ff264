"""
OCR API for question recognition.

Provides endpoints for:
- Recognizing the question in a cropped image (data URL in, text out)
- Health check
"""
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from api.dependencies import get_vision_recognizer
from api.schemas import ErrorResponse, OcrQuestionRequest, OcrQuestionResponse
from config.settings import settings
from core.exceptions import RecognitionError
from services.ocr_service import VisionLLMRecognizer


ocr_app = FastAPI(
    title="Question OCR API",
    description="Recognizes question text in cropped photos via a vision model",
    version="1.0.0"
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@ocr_app.on_event("startup")
async def startup_event():
    """Report configuration on startup."""
    if settings.vision_api_key:
        print(f"✓ OCR API initialized (model: {settings.vision_model})")
    else:
        print("❌ VISION_API_KEY is not set, /ocr-question will return 500")


@ocr_app.post(
    "/ocr-question",
    response_model=OcrQuestionResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}}
)
async def ocr_question(
    request: OcrQuestionRequest,
    recognizer: Optional[VisionLLMRecognizer] = Depends(get_vision_recognizer)
):
    """
    Recognize the question shown in an image.

    Args:
        request: Body with imageDataUrl (data:image/... base64 URL)
        recognizer: Vision recognizer

    Returns:
        questionText (may be empty when the model saw no text)
    """
    if recognizer is None:
        return _error(500, "Server env is not configured.")

    image_data_url = (request.imageDataUrl or "").strip()
    if not image_data_url.startswith("data:image/"):
        return _error(400, "Invalid imageDataUrl")

    try:
        question_text = await recognizer.extract_question_text(image_data_url)
    except RecognitionError as e:
        return _error(502, e.detail or str(e) or "Vision OCR request failed")
    except Exception as e:
        return _error(500, str(e) or "Unknown error")

    return OcrQuestionResponse(questionText=question_text)


@ocr_app.get("/health")
def health():
    return {"status": "ok", "model": settings.vision_model}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(ocr_app, host=settings.api_host, port=settings.api_port)
