"""
Crop box utilities for the capture workflow.

Handles crop box clamping, drag/resize math, and mapping between the
normalized on-screen box and pixel rectangles of the decoded image.
"""
import math
from typing import Tuple

from core.constants import MIN_CROP_H, MIN_CROP_W
from core.exceptions import ImageNotReadyError
from core.models import CropBox, DragMode, DragSession, RenderGeometry, SourceRect


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp value into [lower, upper]."""
    return min(upper, max(lower, value))


def move_crop(origin: CropBox, dx: float, dy: float) -> CropBox:
    """
    Translate a crop box by a normalized delta, keeping it inside the image.

    Args:
        origin: Crop box at the start of the gesture
        dx: Normalized horizontal delta
        dy: Normalized vertical delta

    Returns:
        Translated crop box with unchanged width and height
    """
    return CropBox(
        x=clamp(origin.x + dx, 0.0, 1.0 - origin.w),
        y=clamp(origin.y + dy, 0.0, 1.0 - origin.h),
        w=origin.w,
        h=origin.h
    )


def resize_crop(
    origin: CropBox,
    mode: DragMode,
    dx: float,
    dy: float,
    min_w: float = MIN_CROP_W,
    min_h: float = MIN_CROP_H
) -> CropBox:
    """
    Resize a crop box by dragging one of its corner handles.

    The handle moves the two edges it touches. Edges are clamped to the
    image first; when the box would get narrower (or shorter) than the
    minimum, the edge owned by the active handle is pushed back so the
    opposite edge stays put. A final clamp keeps everything inside [0, 1].

    Args:
        origin: Crop box at the start of the gesture
        mode: One of the resize-* drag modes
        dx: Normalized horizontal delta
        dy: Normalized vertical delta
        min_w: Minimum normalized width
        min_h: Minimum normalized height

    Returns:
        Resized crop box, never inverted
    """
    left = origin.x
    top = origin.y
    right = origin.right
    bottom = origin.bottom

    if mode.touches_left:
        left += dx
    if mode.touches_right:
        right += dx
    if mode.touches_top:
        top += dy
    if mode.touches_bottom:
        bottom += dy

    left = clamp(left, 0.0, 1.0 - min_w)
    right = clamp(right, min_w, 1.0)
    top = clamp(top, 0.0, 1.0 - min_h)
    bottom = clamp(bottom, min_h, 1.0)

    if right - left < min_w:
        if mode.touches_left:
            left = right - min_w
        else:
            right = left + min_w

    if bottom - top < min_h:
        if mode.touches_top:
            top = bottom - min_h
        else:
            bottom = top + min_h

    left = clamp(left, 0.0, 1.0 - min_w)
    right = clamp(right, left + min_w, 1.0)
    top = clamp(top, 0.0, 1.0 - min_h)
    bottom = clamp(bottom, top + min_h, 1.0)

    return CropBox(x=left, y=top, w=right - left, h=bottom - top)


def apply_drag(
    session: DragSession,
    client_x: float,
    client_y: float,
    rect_width: float,
    rect_height: float
) -> CropBox:
    """
    Recompute the crop box for the current pointer position.

    The delta is measured from the session origin and normalized by the
    on-screen size of the displayed image element.

    Args:
        session: Active drag session
        client_x: Current pointer x in client pixels
        client_y: Current pointer y in client pixels
        rect_width: Rendered element width in client pixels
        rect_height: Rendered element height in client pixels

    Returns:
        New crop box
    """
    if rect_width <= 0 or rect_height <= 0:
        return session.origin_crop

    dx = (client_x - session.origin_x) / rect_width
    dy = (client_y - session.origin_y) / rect_height

    if session.mode == DragMode.MOVE:
        return move_crop(session.origin_crop, dx, dy)
    return resize_crop(session.origin_crop, session.mode, dx, dy)


def contain_layout(
    geometry: RenderGeometry,
    natural_size: Tuple[int, int]
) -> Tuple[float, float, float, float, float]:
    """
    Compute how an image is laid out inside its element with contain fit.

    Args:
        geometry: On-screen element size
        natural_size: Decoded image (width, height)

    Returns:
        Tuple of (scale, rendered_width, rendered_height, offset_x, offset_y)

    Raises:
        ImageNotReadyError: If the element or the image has no size yet
    """
    cw, ch = geometry.client_width, geometry.client_height
    nw, nh = natural_size
    if not cw or not ch or not nw or not nh:
        raise ImageNotReadyError(
            f"Image dimensions are invalid (client={cw}x{ch}, natural={nw}x{nh})"
        )

    scale = min(cw / nw, ch / nh)
    rendered_w = nw * scale
    rendered_h = nh * scale
    offset_x = (cw - rendered_w) / 2
    offset_y = (ch - rendered_h) / 2
    return scale, rendered_w, rendered_h, offset_x, offset_y


def crop_source_rect(
    box: CropBox,
    geometry: RenderGeometry,
    natural_size: Tuple[int, int]
) -> SourceRect:
    """
    Map a normalized crop box to a pixel rectangle in the decoded image.

    The box is expressed relative to the element, which may letterbox the
    image. The box is intersected with the rendered image first so padding
    never ends up in the crop.

    Args:
        box: Normalized crop box
        geometry: On-screen element size
        natural_size: Decoded image (width, height)

    Returns:
        SourceRect with width and height of at least 2 pixels
    """
    scale, rendered_w, rendered_h, offset_x, offset_y = contain_layout(
        geometry, natural_size
    )
    cw, ch = geometry.client_width, geometry.client_height
    nw, nh = natural_size

    bx = box.x * cw
    by = box.y * ch
    bw = box.w * cw
    bh = box.h * ch

    ix = max(offset_x, bx)
    iy = max(offset_y, by)
    ir = min(offset_x + rendered_w, bx + bw)
    ib = min(offset_y + rendered_h, by + bh)

    iw = max(2.0, ir - ix)
    ih = max(2.0, ib - iy)

    sx = max(0, _round_half_up((ix - offset_x) / scale))
    sy = max(0, _round_half_up((iy - offset_y) / scale))
    sw = max(2, _round_half_up(iw / scale))
    sh = max(2, _round_half_up(ih / scale))

    # Keep the rectangle inside the decoded image
    if nw >= 2:
        sx = min(sx, nw - 2)
        sw = max(2, min(sw, nw - sx))
    if nh >= 2:
        sy = min(sy, nh - 2)
        sh = max(2, min(sh, nh - sy))

    return SourceRect(sx=sx, sy=sy, sw=sw, sh=sh)


def source_rect_to_crop_box(
    rect: SourceRect,
    geometry: RenderGeometry,
    natural_size: Tuple[int, int]
) -> CropBox:
    """
    Map a pixel rectangle back to a normalized crop box.

    Inverse of crop_source_rect for boxes inside the rendered image.

    Args:
        rect: Pixel rectangle in the decoded image
        geometry: On-screen element size
        natural_size: Decoded image (width, height)

    Returns:
        Normalized crop box
    """
    scale, _, _, offset_x, offset_y = contain_layout(geometry, natural_size)
    cw, ch = geometry.client_width, geometry.client_height

    return CropBox(
        x=(rect.sx * scale + offset_x) / cw,
        y=(rect.sy * scale + offset_y) / ch,
        w=rect.sw * scale / cw,
        h=rect.sh * scale / ch
    )


def expand_crop(box: CropBox, ratio: float) -> CropBox:
    """
    Grow a crop box around its centre, clamped to the image.

    Args:
        box: Crop box to expand
        ratio: Growth factor applied to width and height

    Returns:
        Expanded crop box
    """
    cx = box.x + box.w / 2
    cy = box.y + box.h / 2
    new_w = min(1.0, box.w * ratio)
    new_h = min(1.0, box.h * ratio)
    return CropBox(
        x=clamp(cx - new_w / 2, 0.0, 1.0 - new_w),
        y=clamp(cy - new_h / 2, 0.0, 1.0 - new_h),
        w=new_w,
        h=new_h
    )


def fit_scale(width: int, height: int, max_edge: int, max_pixels: int = 0) -> float:
    """
    Scale factor (never above 1) that bounds the longest edge and,
    optionally, the total pixel count.
    """
    scale = min(1.0, max_edge / max(width, height))
    if max_pixels:
        scale = min(scale, math.sqrt(max_pixels / max(1, width * height)))
    return scale


def scaled_size(width: int, height: int, scale: float) -> Tuple[int, int]:
    """Target size for a scale factor, at least 2x2."""
    return (
        max(2, _round_half_up(width * scale)),
        max(2, _round_half_up(height * scale))
    )


def _round_half_up(value: float) -> int:
    # Half-up, not banker's rounding
    return int(math.floor(value + 0.5))
