"""Unit tests for ingredient list and OCR extraction checks."""

from __future__ import annotations

import pytest

from label_analyzer.parsing.pipeline import parse
from label_analyzer.parsing.quality import (
    validate_ingredient_list,
    validate_ocr_extraction,
)
from label_analyzer.schemas.ocr import OCRResult


pytestmark = pytest.mark.unit


class TestValidateIngredientList:
    """Tests for validate_ingredient_list."""

    def test_full_ingredient_list(self) -> None:
        """Should score a real list at full confidence."""
        check = validate_ingredient_list(
            "Ingredients: water, sugar, salt, natural flavor"
        )

        assert check.is_valid is True
        assert check.confidence == 1.0
        assert check.suggestions == []

    def test_unrelated_text(self) -> None:
        """Should score unrelated text at zero with suggestions."""
        check = validate_ingredient_list("hello")

        assert check.is_valid is False
        assert check.confidence == 0.0
        assert len(check.suggestions) == 3

    def test_long_text_suggests_focusing(self) -> None:
        """Should suggest focusing when the text is very long."""
        check = validate_ingredient_list("Ingredients: sugar, " + "x" * 2500)

        assert any("too long" in s for s in check.suggestions)


class TestValidateOcrExtraction:
    """Tests for validate_ocr_extraction."""

    def test_clean_extraction(self) -> None:
        """Should report no warnings for a confident, complete list."""
        text = "Water, Sugar, Flour, Salt, Yeast"
        result = OCRResult(text=text, confidence=0.95)

        check = validate_ocr_extraction(result, parse(text))

        assert check.is_valid is True
        assert check.warnings == []

    def test_truncated_after_minor_marker(self) -> None:
        """Should warn when fewer than two ingredients follow a minor marker."""
        text = "Water, Sugar, Flour, less than 2% of Salt"
        result = OCRResult(text=text, confidence=0.95)

        check = validate_ocr_extraction(result, parse(text))

        assert check.is_valid is False
        assert len(check.warnings) == 1
        assert "Minor ingredient marker" in check.warnings[0]

    def test_low_confidence_short_text_and_error(self) -> None:
        """Should collect every problem that applies."""
        result = OCRResult(text="Salt", confidence=0.4, error="blurry")

        check = validate_ocr_extraction(result, parse("Salt"))

        assert check.is_valid is False
        assert len(check.warnings) == 4
        assert check.warnings[0] == "OCR reported an error: blurry"
