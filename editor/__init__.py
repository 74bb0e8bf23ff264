"""Editor package - Interactive crop box state."""

from .crop_state import (
    Idle,
    Dragging,
    PointerDown,
    PointerMove,
    PointerUp,
    PointerCancel,
    CropEditor,
    transition
)

__all__ = [
    'Idle',
    'Dragging',
    'PointerDown',
    'PointerMove',
    'PointerUp',
    'PointerCancel',
    'CropEditor',
    'transition'
]
