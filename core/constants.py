"""
Constants and configuration values for the question capture workflow.
"""

# Minimum crop box size (normalized to displayed image bounds)
MIN_CROP_W = 0.16
MIN_CROP_H = 0.08

# Crop box shown after a new image is loaded
DEFAULT_CROP_BOX = {'x': 0.1, 'y': 0.15, 'w': 0.8, 'h': 0.7}

# Platform tiers: constrained devices get smaller rasters and fewer OCR passes
PLATFORM_TIERS = ('standard', 'constrained')

TIER_LIMITS = {
    'standard': {
        'max_editor_edge': 2200,
        'max_ocr_edge': 1400,
        'max_ocr_pixels': 1_500_000,
        'expansion_ratios': (1.2, 1.4),
    },
    'constrained': {
        'max_editor_edge': 1600,
        'max_ocr_edge': 1024,
        'max_ocr_pixels': 900_000,
        'expansion_ratios': (1.15,),
    },
}

# Export parameters
STORAGE_MAX_EDGE = 1800
JPEG_QUALITY = {
    'editor': 0.88,
    'storage': 0.86,
    'recognition': 0.84,
}

# Recognition parameters
DEFAULT_RECOGNITION_PARAMS = {
    'min_text_length': 10,
    'max_result_chars': 5000,
    'candidate_pause': 0.05,
    'request_timeout': 15.0,
}

DEFAULT_VISION_PARAMS = {
    'temperature': 0.2,
    'max_tokens': 800,
}

# Prompts for the vision model behind the ocr-question endpoint
OCR_PROMPTS = {
    'system': (
        "You are an OCR and question-structuring assistant. Reproduce the question "
        "as completely as possible, keeping line breaks, numbering, options and "
        "sub-questions. Prefer directly readable math symbols (such as × ÷ ≤ ≥) "
        "over \\times. Use LaTeX only for complex formulas (fractions, roots, "
        "sub/superscripts) and always in matched $...$ or $$...$$ pairs. If the "
        "question contains a geometry figure, function graph, chart, diagram or "
        "table, first extract the visible text and labels, then describe the "
        "figure relationships (points, lines, angles, parallel/perpendicular, "
        "lengths, coordinates, units, table headers and data). Describe figure "
        "information you cannot read directly on separate lines starting with "
        "\"Figure info:\". Output only the question, no explanations."
    ),
    'user': (
        "Recognize the full question in this image. Check the operator in every "
        "option carefully and restore x/*/· to ×. Do not drop units, brackets, "
        "separators or decimal points. If there is a diagram, geometry figure, "
        "function graph or table, include its key information as well."
    ),
}

# User-facing messages
MESSAGES = {
    'read_failed': "Failed to read the image, please try again.",
    'no_image': "Please take a photo or choose one from the gallery first.",
    'incomplete': "No complete question recognized, adjust the crop box and recognize again.",
    'partial': "The result may be incomplete, adjust the crop box and recognize again.",
    'not_recognized': "No question content recognized, adjust the crop box and try again.",
    'recognition_failed': "Recognition failed, please try again later.",
    'timeout': "OCR recognition timed out, retry or shrink the recognition area.",
    'empty_result': "No question text recognized",
}
