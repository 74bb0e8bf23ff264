"""
Crop box drag state machine.

States are Idle and Dragging(session); pointer events drive a pure
transition function so the interaction can be tested without any UI.
"""
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from core.models import DEFAULT_CROP, CropBox, DragMode, DragSession
from utils.bbox_utils import apply_drag


@dataclass(frozen=True)
class Idle:
    """No gesture in progress."""


@dataclass(frozen=True)
class Dragging:
    """A single pointer is dragging the box or one of its handles."""
    session: DragSession


DragState = Union[Idle, Dragging]


@dataclass(frozen=True)
class PointerDown:
    client_x: float
    client_y: float
    mode: DragMode = DragMode.MOVE


@dataclass(frozen=True)
class PointerMove:
    client_x: float
    client_y: float
    rect_width: float
    rect_height: float


@dataclass(frozen=True)
class PointerUp:
    pass


@dataclass(frozen=True)
class PointerCancel:
    pass


PointerEvent = Union[PointerDown, PointerMove, PointerUp, PointerCancel]

IDLE = Idle()


def transition(
    state: DragState,
    event: PointerEvent,
    crop: CropBox
) -> Tuple[DragState, CropBox]:
    """
    Apply one pointer event.

    Args:
        state: Current drag state
        event: Pointer event
        crop: Current crop box

    Returns:
        Tuple of (next state, next crop box)
    """
    if isinstance(event, PointerDown):
        if isinstance(state, Dragging):
            # Only one active session; extra pointers are ignored
            return state, crop
        session = DragSession(
            origin_x=event.client_x,
            origin_y=event.client_y,
            origin_crop=crop,
            mode=DragMode(event.mode)
        )
        return Dragging(session=session), crop

    if isinstance(event, PointerMove):
        if not isinstance(state, Dragging):
            return state, crop
        next_crop = apply_drag(
            state.session,
            event.client_x,
            event.client_y,
            event.rect_width,
            event.rect_height
        )
        return state, next_crop

    if isinstance(event, (PointerUp, PointerCancel)):
        return IDLE, crop

    raise TypeError(f"Unsupported pointer event: {event!r}")


class CropEditor:
    """Holds the current crop box and drag state for one displayed image."""

    def __init__(self, crop: Optional[CropBox] = None):
        self.state: DragState = IDLE
        self.crop: CropBox = crop or DEFAULT_CROP

    @property
    def is_dragging(self) -> bool:
        return isinstance(self.state, Dragging)

    def dispatch(self, event: PointerEvent) -> CropBox:
        """Apply an event and return the resulting crop box."""
        self.state, self.crop = transition(self.state, event, self.crop)
        return self.crop

    def reset(self, crop: Optional[CropBox] = None) -> None:
        """Drop any gesture and restore the default (or given) crop box."""
        self.state = IDLE
        self.crop = crop or DEFAULT_CROP
