"""Utilities package - Helper functions for image, crop box, and text processing."""

from .image_utils import (
    decode_image,
    encode_jpeg,
    load_editor_image,
    export_storage_crop,
    export_recognition_crop,
    to_data_url,
    from_data_url
)

from .bbox_utils import (
    clamp,
    move_crop,
    resize_crop,
    apply_drag,
    crop_source_rect,
    source_rect_to_crop_box,
    expand_crop
)

from .text_utils import (
    normalize_math_like_text,
    normalize_ocr_text,
    looks_valid_ocr_text,
    collapse_whitespace
)

__all__ = [
    # Image utils
    'decode_image',
    'encode_jpeg',
    'load_editor_image',
    'export_storage_crop',
    'export_recognition_crop',
    'to_data_url',
    'from_data_url',

    # Crop box utils
    'clamp',
    'move_crop',
    'resize_crop',
    'apply_drag',
    'crop_source_rect',
    'source_rect_to_crop_box',
    'expand_crop',

    # Text utils
    'normalize_math_like_text',
    'normalize_ocr_text',
    'looks_valid_ocr_text',
    'collapse_whitespace'
]
