"""
Pydantic schemas for API request/response validation.
"""
from typing import Optional
from pydantic import BaseModel


class OcrQuestionRequest(BaseModel):
    """Request body for question recognition."""
    imageDataUrl: Optional[str] = None


class OcrQuestionResponse(BaseModel):
    """Recognized question text."""
    questionText: str


class ErrorResponse(BaseModel):
    """Error body returned by the OCR endpoint."""
    error: str
