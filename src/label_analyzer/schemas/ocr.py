"""Schemas for text handed over by the OCR collaborator and its quality checks."""

from __future__ import annotations

from pydantic import Field

from label_analyzer.schemas.base import APIResponse, DownstreamResponse


class OCRResult(DownstreamResponse):
    """Output of the OCR step, consumed as-is."""

    text: str = ""
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    error: str | None = None


class IngredientListCheck(APIResponse):
    """Whether extracted text looks like an ingredient list."""

    is_valid: bool
    confidence: float = Field(..., ge=0.0, le=1.0)
    suggestions: list[str] = Field(default_factory=list)


class OCRExtractionCheck(APIResponse):
    """Warnings suggesting the OCR step missed part of the list."""

    is_valid: bool
    warnings: list[str] = Field(default_factory=list)
