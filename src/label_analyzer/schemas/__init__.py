"""Pydantic schemas for request/response validation."""

from label_analyzer.schemas.analysis import (
    AnalysisResult,
    AnalysisStreamMessage,
    AnalyzeRequest,
    ClassifiedIngredient,
)
from label_analyzer.schemas.base import APIRequest, APIResponse, DownstreamResponse
from label_analyzer.schemas.classification import (
    CacheEntry,
    IngredientClassification,
    Source,
)
from label_analyzer.schemas.enums import (
    HealthStatus,
    IngredientStatus,
    OverallVerdict,
    ProgressEventType,
    ReadinessStatus,
    SourceType,
)
from label_analyzer.schemas.health import (
    HealthCheckItem,
    HealthCheckResponse,
    ReadinessResponse,
)
from label_analyzer.schemas.ingredient import (
    ParsedIngredient,
    ParseRequest,
    ParseResponse,
)
from label_analyzer.schemas.ocr import (
    IngredientListCheck,
    OCRExtractionCheck,
    OCRResult,
)
from label_analyzer.schemas.progress import ProgressEvent


__all__ = [
    "APIRequest",
    "APIResponse",
    "AnalysisResult",
    "AnalysisStreamMessage",
    "AnalyzeRequest",
    "CacheEntry",
    "ClassifiedIngredient",
    "DownstreamResponse",
    "HealthCheckItem",
    "HealthCheckResponse",
    "HealthStatus",
    "IngredientClassification",
    "IngredientListCheck",
    "IngredientStatus",
    "OCRExtractionCheck",
    "OCRResult",
    "OverallVerdict",
    "ParseRequest",
    "ParseResponse",
    "ParsedIngredient",
    "ProgressEvent",
    "ProgressEventType",
    "ReadinessResponse",
    "ReadinessStatus",
    "Source",
    "SourceType",
]
