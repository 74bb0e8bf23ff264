"""Core package - Domain models, constants and errors."""

from .models import (
    CropBox,
    DragMode,
    DragSession,
    RenderGeometry,
    SourceRect,
    EditorImage,
    OcrCandidate,
    OcrResult,
    CaptureResult,
    DEFAULT_CROP,
    FULL_IMAGE_CROP
)
from .constants import (
    MIN_CROP_W,
    MIN_CROP_H,
    TIER_LIMITS,
    STORAGE_MAX_EDGE,
    JPEG_QUALITY,
    DEFAULT_RECOGNITION_PARAMS,
    OCR_PROMPTS,
    MESSAGES
)
from .exceptions import (
    CaptureError,
    ImageDecodeError,
    ImageNotReadyError,
    CanvasUnavailableError,
    RecognitionError
)

__all__ = [
    'CropBox',
    'DragMode',
    'DragSession',
    'RenderGeometry',
    'SourceRect',
    'EditorImage',
    'OcrCandidate',
    'OcrResult',
    'CaptureResult',
    'DEFAULT_CROP',
    'FULL_IMAGE_CROP',
    'MIN_CROP_W',
    'MIN_CROP_H',
    'TIER_LIMITS',
    'STORAGE_MAX_EDGE',
    'JPEG_QUALITY',
    'DEFAULT_RECOGNITION_PARAMS',
    'OCR_PROMPTS',
    'MESSAGES',
    'CaptureError',
    'ImageDecodeError',
    'ImageNotReadyError',
    'CanvasUnavailableError',
    'RecognitionError'
]
