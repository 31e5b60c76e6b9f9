"""Quality checks on extracted label text and its parse."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from label_analyzer.parsing.constants import (
    LOW_OCR_CONFIDENCE,
    MAX_FOCUSED_TEXT_LENGTH,
    MIN_EXPECTED_INGREDIENTS,
    MIN_EXTRACTED_TEXT_LENGTH,
    MINOR_MARKER_PATTERN,
    VALID_LIST_CONFIDENCE,
)
from label_analyzer.parsing.exceptions import LabelTextError
from label_analyzer.parsing.pipeline import parse_names
from label_analyzer.schemas.ocr import IngredientListCheck, OCRExtractionCheck


if TYPE_CHECKING:
    from label_analyzer.schemas.ingredient import ParsedIngredient
    from label_analyzer.schemas.ocr import OCRResult


_LIST_KEYWORDS = re.compile(
    r"ingredients?|nedents?|contains?|made\s+with", re.IGNORECASE
)
_LIST_SEPARATORS = re.compile(r"[,;]")
_FOOD_TERMS = re.compile(
    r"organic|natural|sugar|salt|oil|water|flour|milk|egg|peanuts?|wheat|corn|rice|soy",
    re.IGNORECASE,
)
_ADDITIVE_TERMS = re.compile(
    r"preservative|color|flavor|stabilizer|emulsifier", re.IGNORECASE
)

_LOW_INGREDIENT_CONFIDENCE = 0.5
_MIN_AFTER_MINOR_MARKER = 2


def validate_ingredient_list(text: str) -> IngredientListCheck:
    """Estimate whether extracted text is an ingredient list at all.

    Args:
        text: Extracted label text.

    Returns:
        Check result with a confidence score and capture suggestions.
    """
    suggestions: list[str] = []
    confidence = 0.0

    if _LIST_KEYWORDS.search(text):
        confidence += 0.3
    else:
        suggestions.append('Try to capture the "Ingredients" section of the product')

    if _LIST_SEPARATORS.search(text):
        confidence += 0.2
    else:
        suggestions.append("Ensure the ingredient list is clearly separated by commas")

    if MIN_EXTRACTED_TEXT_LENGTH < len(text) < MAX_FOCUSED_TEXT_LENGTH:
        confidence += 0.2
    elif len(text) <= MIN_EXTRACTED_TEXT_LENGTH:
        suggestions.append(
            "The text seems too short - try capturing more of the ingredient list"
        )
    else:
        suggestions.append(
            "The text seems too long - try focusing on just the ingredient list"
        )

    if _FOOD_TERMS.search(text):
        confidence += 0.2
    if _ADDITIVE_TERMS.search(text):
        confidence += 0.1

    confidence = round(confidence, 2)
    return IngredientListCheck(
        is_valid=confidence > VALID_LIST_CONFIDENCE,
        confidence=confidence,
        suggestions=suggestions,
    )


def _count_after_minor_marker(text: str) -> int | None:
    marker = MINOR_MARKER_PATTERN.search(text)
    if marker is None:
        return None
    try:
        return len(parse_names(text[marker.end() :]))
    except LabelTextError:
        return 0


def validate_ocr_extraction(
    ocr_result: OCRResult,
    parsed: list[ParsedIngredient],
) -> OCRExtractionCheck:
    """Flag signs that OCR missed part of the ingredient list.

    Args:
        ocr_result: Text and confidence reported by the OCR collaborator.
        parsed: Ingredients parsed from ``ocr_result.text``.

    Returns:
        Check result; valid only when there are no warnings.
    """
    warnings: list[str] = []
    text = ocr_result.text

    if ocr_result.error:
        warnings.append(f"OCR reported an error: {ocr_result.error}")
    if ocr_result.confidence < LOW_OCR_CONFIDENCE:
        warnings.append(
            f"Low OCR confidence ({ocr_result.confidence:.2f}) - "
            "try a sharper, well-lit photo"
        )
    if len(text) < MIN_EXTRACTED_TEXT_LENGTH:
        warnings.append(
            "Extracted text is very short (< 20 characters) - OCR may be incomplete"
        )
    if len(parsed) < MIN_EXPECTED_INGREDIENTS:
        warnings.append(
            f"Only {len(parsed)} ingredients found - OCR may be incomplete. "
            f"Expected at least {MIN_EXPECTED_INGREDIENTS} ingredients."
        )

    after_marker = _count_after_minor_marker(text)
    if after_marker is not None and after_marker < _MIN_AFTER_MINOR_MARKER:
        warnings.append(
            "Minor ingredient marker found but < 2 ingredients detected after it "
            "- OCR may be incomplete"
        )

    low_confidence = [p for p in parsed if p.confidence < _LOW_INGREDIENT_CONFIDENCE]
    if parsed and len(low_confidence) > len(parsed) / 2:
        warnings.append(
            f"{len(low_confidence)} of {len(parsed)} ingredients were read with "
            "low confidence - the photo may be blurry"
        )

    return OCRExtractionCheck(is_valid=not warnings, warnings=warnings)
