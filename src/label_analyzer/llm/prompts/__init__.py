"""LLM prompt templates."""

from label_analyzer.llm.prompts.base import BasePrompt
from label_analyzer.llm.prompts.classification import (
    BatchClassificationItem,
    BatchClassificationPayload,
    BatchClassificationPrompt,
    ClassificationPayload,
    ClassificationSource,
    IngredientClassificationPrompt,
)
from label_analyzer.llm.prompts.product import (
    ProductIdentification,
    ProductIdentificationPrompt,
)


__all__ = [
    "BasePrompt",
    "BatchClassificationItem",
    "BatchClassificationPayload",
    "BatchClassificationPrompt",
    "ClassificationPayload",
    "ClassificationSource",
    "IngredientClassificationPrompt",
    "ProductIdentification",
    "ProductIdentificationPrompt",
]
