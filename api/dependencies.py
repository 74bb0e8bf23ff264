"""
API Dependencies - Dependency injection for FastAPI and the CLI.

Provides recognizers, the recognition pipeline and capture sessions
configured from settings.
"""
from typing import Optional
from openai import AsyncOpenAI

from config.recognition import RecognitionConfig, resolve_recognition_config
from config.settings import settings
from services.capture_service import CaptureSession
from services.ocr_service import BaseRecognizer, EdgeFunctionRecognizer, VisionLLMRecognizer
from services.recognition_pipeline import RecognitionPipeline


def get_vision_client() -> Optional[AsyncOpenAI]:
    """
    Dependency for the vision model client.

    Returns:
        AsyncOpenAI client, or None when no API key is configured
    """
    if not settings.vision_api_key:
        return None
    return AsyncOpenAI(
        api_key=settings.vision_api_key,
        base_url=settings.vision_base_url,
        timeout=settings.ocr_request_timeout
    )


def get_vision_recognizer() -> Optional[VisionLLMRecognizer]:
    """
    Dependency for the vision recognizer used by the OCR endpoint.

    Returns:
        VisionLLMRecognizer, or None when the server env is not configured
    """
    client = get_vision_client()
    if client is None:
        return None
    vision_config = settings.get_vision_config()
    return VisionLLMRecognizer(
        client=client,
        model=vision_config['model'],
        temperature=vision_config['temperature'],
        max_tokens=vision_config['max_tokens']
    )


def get_endpoint_recognizer() -> EdgeFunctionRecognizer:
    """
    Recognizer calling the ocr-question endpoint.

    Returns:
        EdgeFunctionRecognizer configured from settings
    """
    return EdgeFunctionRecognizer(**settings.get_endpoint_config())


def get_recognition_pipeline(
    recognizer: BaseRecognizer = None,
    config: RecognitionConfig = None,
    logger=None
) -> RecognitionPipeline:
    """
    Build the recognition pipeline.

    Args:
        recognizer: Recognizer (optional, endpoint recognizer if not provided)
        config: Recognition configuration (optional, resolved from settings)
        logger: Optional logger

    Returns:
        RecognitionPipeline instance
    """
    if recognizer is None:
        recognizer = get_endpoint_recognizer()
    if config is None:
        config = resolve_recognition_config(settings)
    return RecognitionPipeline(recognizer=recognizer, config=config, logger=logger)


def get_capture_session(
    recognizer: BaseRecognizer = None,
    config: RecognitionConfig = None,
    logger=None
) -> CaptureSession:
    """
    Build a capture session around a recognition pipeline.

    Returns:
        CaptureSession instance
    """
    pipeline = get_recognition_pipeline(recognizer, config, logger)
    return CaptureSession(pipeline=pipeline, logger=logger)
