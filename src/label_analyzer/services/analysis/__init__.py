"""Ingredient analysis: classification orchestration over cache and LLM."""

from label_analyzer.services.analysis.classifier import (
    IngredientClassifierProtocol,
    LLMIngredientClassifier,
)
from label_analyzer.services.analysis.exceptions import (
    AnalysisError,
    ServiceNotInitializedError,
)
from label_analyzer.services.analysis.progress import ProgressReporter
from label_analyzer.services.analysis.retry import (
    is_retryable_error,
    is_service_down_error,
    retry_with_backoff,
)
from label_analyzer.services.analysis.service import AnalysisService


__all__ = [
    "AnalysisError",
    "AnalysisService",
    "IngredientClassifierProtocol",
    "LLMIngredientClassifier",
    "ProgressReporter",
    "ServiceNotInitializedError",
    "is_retryable_error",
    "is_service_down_error",
    "retry_with_backoff",
]
