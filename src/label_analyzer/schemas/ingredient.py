"""Parsed ingredient schemas."""

from __future__ import annotations

from pydantic import Field

from label_analyzer.schemas.base import APIRequest, APIResponse
from label_analyzer.schemas.ocr import IngredientListCheck, OCRExtractionCheck


class ParsedIngredient(APIResponse):
    """One ingredient recovered from label text."""

    name: str = Field(..., min_length=1, description="Cleaned ingredient name")
    modifiers: list[str] = Field(
        default_factory=list,
        description="Parenthetical, bracketed or trailing descriptive text",
    )
    confidence: float = Field(..., ge=0.0, le=1.0, description="Parse confidence")
    original_text: str = Field(..., description="Token the ingredient was parsed from")
    is_minor_ingredient: bool = Field(
        default=False,
        description="Listed after a 'less than N%' marker",
    )
    minor_threshold: float | None = Field(
        default=None,
        description="Percentage of the governing minor marker",
    )
    section: str | None = Field(
        default=None,
        description="Label section header the ingredient sits under",
    )
    parent_ingredient: str | None = Field(
        default=None,
        description="Compound ingredient whose parenthetical list names this one",
    )


class ParseRequest(APIRequest):
    """Request to parse label text without classifying it."""

    text: str = Field(..., description="Raw OCR text from the label")
    ocr_confidence: float | None = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Confidence reported by the OCR step, if known",
    )
    ocr_error: str | None = Field(default=None, description="OCR error, if any")


class ParseResponse(APIResponse):
    """Parsed ingredients plus quality checks."""

    ingredients: list[ParsedIngredient] = Field(default_factory=list)
    total_ingredients: int = Field(..., ge=0)
    list_check: IngredientListCheck
    extraction_check: OCRExtractionCheck | None = None
