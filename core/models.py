"""
Core domain models for the capture workflow.

These are pure data structures without business logic.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from PIL import Image

from .constants import DEFAULT_CROP_BOX


@dataclass(frozen=True)
class CropBox:
    """Crop rectangle normalized to the displayed image bounds."""
    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        """Right edge."""
        return self.x + self.w

    @property
    def bottom(self) -> float:
        """Bottom edge."""
        return self.y + self.h

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary."""
        return {'x': self.x, 'y': self.y, 'w': self.w, 'h': self.h}

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> 'CropBox':
        """Create from a dictionary with x, y, w, h keys."""
        return cls(
            x=float(data['x']),
            y=float(data['y']),
            w=float(data['w']),
            h=float(data['h'])
        )


DEFAULT_CROP = CropBox.from_dict(DEFAULT_CROP_BOX)
FULL_IMAGE_CROP = CropBox(x=0.0, y=0.0, w=1.0, h=1.0)


class DragMode(str, Enum):
    """Which part of the crop box a drag gesture grabbed."""
    MOVE = 'move'
    RESIZE_NW = 'resize-nw'
    RESIZE_NE = 'resize-ne'
    RESIZE_SW = 'resize-sw'
    RESIZE_SE = 'resize-se'

    @property
    def touches_left(self) -> bool:
        return self in (DragMode.RESIZE_NW, DragMode.RESIZE_SW)

    @property
    def touches_right(self) -> bool:
        return self in (DragMode.RESIZE_NE, DragMode.RESIZE_SE)

    @property
    def touches_top(self) -> bool:
        return self in (DragMode.RESIZE_NW, DragMode.RESIZE_NE)

    @property
    def touches_bottom(self) -> bool:
        return self in (DragMode.RESIZE_SW, DragMode.RESIZE_SE)


@dataclass(frozen=True)
class DragSession:
    """Pointer position and crop box captured when a drag starts."""
    origin_x: float
    origin_y: float
    origin_crop: CropBox
    mode: DragMode = DragMode.MOVE


@dataclass(frozen=True)
class RenderGeometry:
    """On-screen size of the element displaying the image (contain fit)."""
    client_width: float
    client_height: float


@dataclass(frozen=True)
class SourceRect:
    """Pixel rectangle inside the decoded image."""
    sx: int
    sy: int
    sw: int
    sh: int

    def to_box(self) -> Tuple[int, int, int, int]:
        """Convert to a PIL (left, upper, right, lower) box."""
        return (self.sx, self.sy, self.sx + self.sw, self.sy + self.sh)


@dataclass
class EditorImage:
    """Decoded image loaded into the crop editor."""
    image: Image.Image
    data: bytes
    was_downscaled: bool = False

    @property
    def natural_size(self) -> Tuple[int, int]:
        """Decoded (width, height)."""
        return self.image.size


@dataclass(frozen=True)
class OcrCandidate:
    """One crop region tried during adaptive recognition."""
    label: str
    box: CropBox


@dataclass
class OcrResult:
    """Recognized text and the validity verdict for it."""
    text: str
    is_valid: bool
    attempts: int = 0
    candidate_label: Optional[str] = None


@dataclass
class CaptureResult:
    """Output of a finished capture handed to the tagging workflow."""
    captured_image: bytes
    recognized_question: str
    metadata: Dict[str, object] = field(default_factory=dict)
