"""
Image utilities for the capture workflow.

Handles image decoding, editor downscaling, crop rasterization and
data URL conversion.
"""
import base64
import binascii
from io import BytesIO
from typing import Tuple

from PIL import Image, ImageOps

from core.exceptions import CanvasUnavailableError, ImageDecodeError
from core.models import CropBox, EditorImage, RenderGeometry, SourceRect
from .bbox_utils import crop_source_rect, fit_scale, scaled_size


def decode_image(data: bytes) -> Image.Image:
    """
    Decode raw bytes into an RGB PIL Image.

    Args:
        data: Encoded image bytes (JPEG, PNG, ...)

    Returns:
        Decoded RGB image with EXIF orientation applied

    Raises:
        ImageDecodeError: If the bytes are not a readable raster image
    """
    if not data:
        raise ImageDecodeError("Empty image payload")

    try:
        img = Image.open(BytesIO(data))
        img.load()
        img = ImageOps.exif_transpose(img)
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        raise ImageDecodeError(f"Unsupported/undecodable image: {e}") from e

    if img.mode != 'RGB':
        img = img.convert('RGB')
    return img


def encode_jpeg(image: Image.Image, quality: float) -> bytes:
    """
    Encode an image as JPEG.

    Args:
        image: PIL Image to encode
        quality: Quality in [0, 1]

    Returns:
        JPEG bytes
    """
    if image.mode in ('RGBA', 'LA', 'P'):
        image = image.convert('RGB')

    buf = BytesIO()
    image.save(buf, format='JPEG', quality=int(round(quality * 100)))
    return buf.getvalue()


def load_editor_image(data: bytes, max_edge: int, quality: float = 0.88) -> EditorImage:
    """
    Decode a captured image and bound it for interactive editing.

    Images whose longest edge exceeds max_edge are downscaled uniformly and
    re-encoded; smaller images pass through unchanged (never upscaled).

    Args:
        data: Encoded image bytes from camera or gallery
        max_edge: Maximum edge length in pixels
        quality: JPEG quality for re-encoding

    Returns:
        EditorImage with the decoded image and its encoded bytes
    """
    img = decode_image(data)
    width, height = img.size

    scale = fit_scale(width, height, max_edge)
    if scale >= 0.999:
        return EditorImage(image=img, data=data, was_downscaled=False)

    target = scaled_size(width, height, scale)
    resized = img.resize(target, Image.Resampling.LANCZOS)
    return EditorImage(
        image=resized,
        data=encode_jpeg(resized, quality),
        was_downscaled=True
    )


def rasterize_region(
    image: Image.Image,
    rect: SourceRect,
    target_size: Tuple[int, int],
    quality: float
) -> bytes:
    """
    Crop a pixel rectangle, scale it to target_size and encode as JPEG.

    Raises:
        CanvasUnavailableError: If Pillow cannot crop, resize or encode
    """
    try:
        region = image.crop(rect.to_box())
        if region.size != target_size:
            region = region.resize(target_size, Image.Resampling.LANCZOS)
        return encode_jpeg(region, quality)
    except (OSError, ValueError) as e:
        raise CanvasUnavailableError(f"Canvas not available: {e}") from e


def export_storage_crop(
    image: Image.Image,
    box: CropBox,
    geometry: RenderGeometry,
    max_edge: int = 1800,
    quality: float = 0.86
) -> bytes:
    """
    Export the crop for storage and display.

    Args:
        image: Decoded editor image
        box: Current crop box
        geometry: On-screen element size
        max_edge: Longest edge cap for the exported crop
        quality: JPEG quality

    Returns:
        JPEG bytes of the cropped region
    """
    rect = crop_source_rect(box, geometry, image.size)
    scale = fit_scale(rect.sw, rect.sh, max_edge)
    return rasterize_region(image, rect, scaled_size(rect.sw, rect.sh, scale), quality)


def export_recognition_crop(
    image: Image.Image,
    box: CropBox,
    geometry: RenderGeometry,
    max_edge: int,
    max_pixels: int,
    quality: float = 0.84
) -> bytes:
    """
    Export a candidate crop for OCR.

    The crop is bounded by both an edge cap and a total pixel cap, whichever
    is tighter, so very wide or very tall crops stay small.

    Args:
        image: Decoded editor image
        box: Candidate crop box
        geometry: On-screen element size
        max_edge: Longest edge cap
        max_pixels: Total pixel cap
        quality: JPEG quality

    Returns:
        JPEG bytes of the cropped region
    """
    rect = crop_source_rect(box, geometry, image.size)
    scale = fit_scale(rect.sw, rect.sh, max_edge, max_pixels)
    return rasterize_region(image, rect, scaled_size(rect.sw, rect.sh, scale), quality)


def to_data_url(data: bytes, mime_type: str = "image/jpeg") -> str:
    """Encode bytes as a base64 data URL."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode()}"


def from_data_url(data_url: str) -> bytes:
    """
    Decode a base64 data URL back to bytes.

    Raises:
        ImageDecodeError: If the URL is not a base64 image data URL
    """
    header, sep, payload = data_url.partition(',')
    if not sep or not header.startswith('data:image/') or ';base64' not in header:
        raise ImageDecodeError("Invalid image data URL")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"Invalid base64: {e}") from e
