"""
Text utilities for the capture workflow.

Handles cleanup of OCR/LLM output: LaTeX-ish escapes to readable math,
markdown residue, whitespace, and the OCR validity heuristic.
"""
import re
from typing import Callable, List, Tuple, Union


_Rule = Tuple[str, Union[str, Callable], int]

# Applied in order, once per pass
MATH_LIKE_RULES: List[_Rule] = [
    (r'\r\n', '\n', 0),
    (r'\*\*(.*?)\*\*', r'\1', 0),
    (r'__(.*?)__', r'\1', 0),
    (r'`([^`]+)`', r'\1', 0),
    (r'\$\$([^$]+)\$\$', r'\1', 0),
    (r'\$([^$]+)\$', r'\1', 0),
    (r'\\\((.*?)\\\)', r'\1', 0),
    (r'\\\[(.*?)\\\]', r'\1', 0),
    (r'\\left\s*([(\[{|])', r'\1', 0),
    (r'\\right\s*([)\]}|])', r'\1', 0),
    (r'\\left|\\right', '', 0),
    (r'\\frac\s*\{([^{}]+)\}\s*\{([^{}]+)\}', r'(\1)/(\2)', 0),
    (r'\\times|\\cdot', '×', 0),
    (r'\\div', '÷', 0),
    (r'\\leq\b|\\le\b', '≤', 0),
    (r'\\geq\b|\\ge\b', '≥', 0),
    (r'\\neq\b', '≠', 0),
    (r'\\approx\b', '≈', 0),
    (r'\\text\s*\{([^}]*)\}', r'\1', 0),
    (r'\\operatorname\s*\{([^}]*)\}', r'\1', 0),
    (r'\\[a-zA-Z]+', '', 0),
    (r'[{}]', '', 0),
    (r'\s*([=+\-×÷<>≤≥≠≈])\s*', r' \1 ', 0),
    (r'\(\s+', '(', 0),
    (r'\s+\)', ')', 0),
    (r'[ \t]{2,}', ' ', 0),
    (r'\n{3,}', '\n\n', 0),
]

OCR_RULES: List[_Rule] = [
    (r'```(?:markdown|md|text)?', '', re.IGNORECASE),
    (r'```', '', 0),
    (r'\r\n', '\n', 0),
    (r'\\frac\s*\{([^{}]+)\}\s*\{([^{}]+)\}', r'\1/\2', 0),
    (r'\t+', ' × ', 0),
    (r'\\times|\\cdot', '×', 0),
    (r'\\div', '÷', 0),
    (r'\\leq\b|\\le\b', '≤', 0),
    (r'\\geq\b|\\ge\b', '≥', 0),
    (r'\\neq', '≠', 0),
    (r'\\approx', '≈', 0),
    (r'\$\$([^$]+)\$\$', r'\1', 0),
    (r'\$([^$]+)\$', r'\1', 0),
    (r'\\\((.*?)\\\)', r'\1', 0),
    (r'\\\[(.*?)\\\]', r'\1', 0),
    (r'^\s*\$\$\s*$', '', re.MULTILINE),
    (r'\$\$\s*$', '', re.MULTILINE),
    (r'[{}]', '', 0),
    (r'[ \t]{2,}', ' ', 0),
    (r'\n{3,}', '\n\n', 0),
]

MAX_NORMALIZE_PASSES = 16


def _apply_rules(text: str, rules: List[_Rule]) -> str:
    for pattern, replacement, flags in rules:
        text = re.sub(pattern, replacement, text, flags=flags)
    return text


def collapse_backslashes(text: str) -> str:
    """Collapse runs of repeated backslashes into a single one."""
    return re.sub(r'\\{2,}', r'\\', text)


def collapse_whitespace(text: str) -> str:
    """Collapse all whitespace runs to single spaces and trim."""
    return re.sub(r'\s+', ' ', text or '').strip()


def _normalize_pass(text: str) -> str:
    text = collapse_backslashes(text)
    return _apply_rules(text, MATH_LIKE_RULES).strip()


def normalize_math_like_text(raw: str) -> str:
    """
    Convert LaTeX-ish OCR/LLM output into readable math text.

    Unwraps math delimiters and markdown emphasis, replaces known macros
    with Unicode glyphs, strips braces and tidies whitespace. Passes repeat
    until the text is stable, so the result is a fixed point:
    normalize_math_like_text(normalize_math_like_text(s)) == normalize_math_like_text(s).

    Args:
        raw: Text as returned by the recognizer

    Returns:
        Normalized text
    """
    text = raw or ''
    for _ in range(MAX_NORMALIZE_PASSES):
        normalized = _normalize_pass(text)
        if normalized == text:
            break
        text = normalized
    return text


def normalize_ocr_text(raw: str) -> str:
    """
    Clean raw vision model output before returning it from the OCR endpoint.

    Args:
        raw: Model response content

    Returns:
        Cleaned question text
    """
    if not raw:
        return ""
    return _apply_rules(raw, OCR_RULES).strip()


def looks_valid_ocr_text(text: str, min_length: int = 10) -> bool:
    """
    Cheap check that recognized text looks like a complete question.

    Rejects empty text, text shorter than min_length after whitespace is
    collapsed, and text ending in an unterminated $$ delimiter.

    Args:
        text: Recognized text
        min_length: Minimum number of characters

    Returns:
        True if the text should be accepted
    """
    clean = collapse_whitespace(text)
    if not clean:
        return False
    if len(clean) < min_length:
        return False
    return not re.search(r'\$\$\s*$', clean)
