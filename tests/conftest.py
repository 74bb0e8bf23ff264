"""
Pytest configuration and global fixtures.
"""
import sys
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image, ImageDraw

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.recognition import RecognitionConfig
from services.ocr_service import BaseRecognizer


class ScriptedRecognizer(BaseRecognizer):
    """Recognizer returning (or raising) scripted responses in order."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    async def recognize_question(self, image_data_url: str) -> str:
        self.calls.append(image_data_url)
        index = min(len(self.calls), len(self.responses)) - 1
        response = self.responses[index]
        if isinstance(response, Exception):
            raise response
        return response


def _make_image(width: int, height: int) -> Image.Image:
    img = Image.new('RGB', (width, height), color='white')
    draw = ImageDraw.Draw(img)
    draw.rectangle([width // 8, height // 8, width // 2, height // 3], fill='black')
    return img


def _encode(img: Image.Image, fmt: str = 'PNG') -> bytes:
    buf = BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def make_image():
    """Factory for RGB test images with some content."""
    return _make_image


@pytest.fixture
def encode_image():
    """Encode a PIL image to bytes."""
    return _encode


@pytest.fixture
def sample_image():
    """800x600 test image."""
    return _make_image(800, 600)


@pytest.fixture
def sample_image_bytes(sample_image):
    """800x600 test image encoded as PNG."""
    return _encode(sample_image)


@pytest.fixture
def scripted_recognizer():
    """Factory for ScriptedRecognizer."""
    return ScriptedRecognizer


@pytest.fixture
def fast_config():
    """Standard tier config without the pause between candidates."""
    return RecognitionConfig.standard(candidate_pause=0)


@pytest.fixture
def temp_dir(tmp_path):
    """Provide temporary directory for test files."""
    return tmp_path
