"""
Unit tests for utils.text_utils module.
"""
import numpy as np
import pytest
from utils.text_utils import (
    collapse_backslashes,
    collapse_whitespace,
    looks_valid_ocr_text,
    normalize_math_like_text,
    normalize_ocr_text
)


class TestNormalizeMathLikeText:
    """Tests for normalize_math_like_text function."""

    def test_empty_text(self):
        assert normalize_math_like_text("") == ""
        assert normalize_math_like_text(None) == ""

    def test_macros_to_glyphs(self):
        result = normalize_math_like_text(r"$3 \times 4 \div 2 \leq 6 \geq 1 \neq 0 \approx 0$")

        assert result == "3 × 4 ÷ 2 ≤ 6 ≥ 1 ≠ 0 ≈ 0"

    def test_fraction(self):
        assert normalize_math_like_text(r"\frac{1}{2}") == "(1)/(2)"

    def test_repeated_backslashes_collapsed(self):
        assert normalize_math_like_text(r"2 \\\\times 3") == "2 × 3"

    def test_strip_markdown_emphasis(self):
        result = normalize_math_like_text("**Question** __one__ `code`")

        assert result == "Question one code"

    def test_unwrap_delimiters(self):
        assert normalize_math_like_text(r"\(x\)") == "x"
        assert normalize_math_like_text(r"\[y\]") == "y"
        assert normalize_math_like_text("$$z$$") == "z"

    def test_left_right_dropped(self):
        assert normalize_math_like_text(r"\left( a \right)") == "(a)"

    def test_text_macro_unwrapped(self):
        assert normalize_math_like_text(r"5\text{cm}") == "5cm"

    def test_unknown_macro_removed(self):
        assert normalize_math_like_text(r"\alpha x") == "x"

    def test_braces_removed(self):
        assert "{" not in normalize_math_like_text("x^{2}")

    def test_operator_spacing(self):
        assert normalize_math_like_text("a+b=c") == "a + b = c"

    def test_blank_lines_collapsed(self):
        assert normalize_math_like_text("line1\n\n\n\nline2") == "line1\n\nline2"

    def test_crlf(self):
        assert normalize_math_like_text("a\r\nb") == "a\nb"

    @pytest.mark.parametrize("text", [
        "",
        "   ",
        "*{}*x*{}*",
        "$$a$",
        "$a$ $b",
        "***a***",
        "******",
        r"\\\\frac{1}{2}",
        r"$\frac{a}{b}$ \times 3",
        r"\left( x \right)",
        "a--b",
        "(+a)",
        "a -)",
        "x\n \n\n\ny",
        "_{_{}_}_",
        r"\{}a",
        "1. Compute: $$2\\times(3+4)=$$ ?\n\nA. 14  B. 12",
    ])
    def test_idempotent_examples(self, text):
        once = normalize_math_like_text(text)

        assert normalize_math_like_text(once) == once

    def test_idempotent_random(self):
        """normalize(normalize(s)) == normalize(s) for random markup soup."""
        alphabet = list("ab1 $*_`{}\\\n+-=()[]×") + [r"\times", r"\frac", r"\left", "**", "$$"]
        rng = np.random.default_rng(42)

        for _ in range(300):
            parts = rng.choice(alphabet, size=int(rng.integers(0, 20)))
            text = "".join(parts)
            once = normalize_math_like_text(text)
            assert normalize_math_like_text(once) == once, repr(text)


class TestNormalizeOcrText:
    """Tests for normalize_ocr_text function."""

    def test_strip_code_fences(self):
        assert normalize_ocr_text("```markdown\nWhat is 2+2?\n```") == "What is 2+2?"

    def test_fraction_inline(self):
        assert normalize_ocr_text(r"\frac{3}{4} of 20") == "3/4 of 20"

    def test_tab_as_times(self):
        assert normalize_ocr_text("3\t4") == "3 × 4"

    def test_dangling_dollars_removed(self):
        assert normalize_ocr_text("Solve x\n$$") == "Solve x"

    def test_empty(self):
        assert normalize_ocr_text("") == ""


class TestLooksValidOcrText:
    """Tests for looks_valid_ocr_text function."""

    def test_empty_rejected(self):
        assert not looks_valid_ocr_text("")
        assert not looks_valid_ocr_text("   \n\t ")

    def test_short_rejected(self):
        assert not looks_valid_ocr_text("3+4")
        assert not looks_valid_ocr_text("123456789")

    def test_whitespace_collapsed_before_length(self):
        assert not looks_valid_ocr_text("1    2    3")

    def test_unterminated_math_rejected(self):
        assert not looks_valid_ocr_text("Compute the value of $$")

    def test_complete_question_accepted(self):
        assert looks_valid_ocr_text("What is the value of x if 2x + 3 = 11?")

    def test_custom_min_length(self):
        assert looks_valid_ocr_text("abc", min_length=3)


class TestHelpers:
    """Tests for small text helpers."""

    def test_collapse_whitespace(self):
        assert collapse_whitespace("  a \n\n b\t c ") == "a b c"

    def test_collapse_backslashes(self):
        assert collapse_backslashes("a\\\\\\b") == "a\\b"
