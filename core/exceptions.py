"""
Error taxonomy for the capture workflow.
"""
from typing import Optional


class CaptureError(Exception):
    """Base class for capture workflow errors."""


class ImageDecodeError(CaptureError):
    """The selected file could not be decoded as a raster image."""


class ImageNotReadyError(CaptureError):
    """Geometry was queried before the image was laid out or decoded."""


class CanvasUnavailableError(CaptureError):
    """The crop could not be rasterized or encoded."""


class RecognitionError(CaptureError):
    """The recognition service failed (transport, auth or empty result)."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: Optional[str] = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail
