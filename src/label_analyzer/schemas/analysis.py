"""Analysis request and result schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from label_analyzer.schemas.base import APIRequest, APIResponse
from label_analyzer.schemas.classification import Source
from label_analyzer.schemas.enums import IngredientStatus, OverallVerdict
from label_analyzer.schemas.progress import ProgressEvent


class AnalyzeRequest(APIRequest):
    """Label text to analyze."""

    text: str = Field(..., description="Raw OCR text from the label")


class ClassifiedIngredient(APIResponse):
    """A parsed ingredient with its classification attached."""

    name: str = Field(..., description="Display name, title-cased")
    status: IngredientStatus
    confidence: float = Field(..., ge=0.0, le=1.0)
    educational_note: str
    basic_note: str
    sources: list[Source] = Field(default_factory=list)
    modifiers: list[str] = Field(default_factory=list)
    is_minor_ingredient: bool = False
    minor_threshold: float | None = None
    section: str | None = None
    parent_ingredient: str | None = None
    from_cache: bool = False


class AnalysisResult(APIResponse):
    """Per-ingredient classifications and the product verdict."""

    overall_verdict: OverallVerdict
    ingredients: list[ClassifiedIngredient] = Field(default_factory=list)
    total_ingredients: int = Field(..., ge=0)
    concerning_count: int = Field(
        ..., ge=0, description="Concerning plus unknown ingredients"
    )
    clean_count: int = Field(..., ge=0)
    unknown_count: int = Field(..., ge=0)
    product_identification: str | None = None


class AnalysisStreamMessage(APIResponse):
    """One NDJSON line of a streamed analysis."""

    event: Literal["progress", "result", "error"]
    progress: ProgressEvent | None = None
    result: AnalysisResult | None = None
    error: str | None = None
