"""Ingredient classification prompts and their output schemas.

The service answers with its own vocabulary ("generally_clean" /
"potentially_toxic"); mapping to ingredient statuses happens in the
classifier.
"""

from __future__ import annotations

from typing import Any, ClassVar, Literal

from pydantic import BaseModel, Field, field_validator

from label_analyzer.schemas.enums import SourceType

from .base import BasePrompt


CLASSIFICATION_SYSTEM_PROMPT = """You are a food ingredient analyst helping \
wellness-conscious consumers understand what is in packaged food.

Classify each ingredient as either "generally_clean" or "potentially_toxic".

GENERALLY_CLEAN (whole and minimally processed):
- Whole foods: fruits, vegetables, whole grains, legumes, nuts, seeds
- Traditional ingredients with a long record of safe use
- Organic oils, herbs and spices
- Naturally fermented ingredients and cultures
- Vitamins and minerals in whole-food form

POTENTIALLY_TOXIC (synthetic, refined or disruptive):
- Artificial colors, flavors, preservatives and sweeteners
- Refined sugars, trans fats and highly processed seed oils
- Additives associated with gut irritation or inflammation (e.g. carrageenan)
- Undefined umbrella terms that may hide synthetic compounds ("natural flavors")
- Ingredients commonly derived from GMO crops when not specified otherwise

PRECAUTIONARY STANCE:
- When in doubt, classify as "potentially_toxic"
- Organic or non-GMO qualifiers in the name count in the ingredient's favor

For each ingredient provide:
- status: "generally_clean" or "potentially_toxic"
- confidence: 0.0-1.0
- educational_note: 2-3 sentences on how the ingredient affects the body
- basic_note: one plain-language sentence
- reasoning: brief technical rationale
- sources: optional references (title, url, type: research|database|regulatory|other)
"""

# Output tokens budgeted per ingredient in a batch
TOKENS_PER_INGREDIENT = 600


class ClassificationSource(BaseModel):
    """Reference cited by the classifier."""

    title: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    type: SourceType = SourceType.OTHER

    @field_validator("type", mode="before")
    @classmethod
    def _unknown_type_is_other(cls, value: Any) -> Any:
        if value not in {member.value for member in SourceType}:
            return SourceType.OTHER
        return value


class ClassificationPayload(BaseModel):
    """Classifier verdict for a single ingredient."""

    status: Literal["generally_clean", "potentially_toxic"]
    confidence: float = Field(..., description="Confidence 0.0-1.0")
    educational_note: str = Field(..., min_length=1)
    basic_note: str = Field(..., min_length=1)
    reasoning: str = ""
    sources: list[ClassificationSource] = Field(default_factory=list)

    @field_validator("confidence")
    @classmethod
    def _clamp_confidence(cls, value: float) -> float:
        return min(max(value, 0.0), 1.0)


class BatchClassificationItem(BaseModel):
    """One entry of a batch response."""

    name: str = Field(..., min_length=1)
    analysis: ClassificationPayload


class BatchClassificationPayload(BaseModel):
    """Batch response; entries must mirror the request order."""

    ingredients: list[BatchClassificationItem] = Field(..., min_length=1)


class IngredientClassificationPrompt(BasePrompt[ClassificationPayload]):
    """Prompt classifying one ingredient.

    Example output:
        {
            "status": "generally_clean",
            "confidence": 0.9,
            "educational_note": "Sea salt provides sodium and trace minerals...",
            "basic_note": "A minimally processed mineral seasoning.",
            "reasoning": "Unrefined, single-ingredient mineral.",
            "sources": []
        }
    """

    output_schema: ClassVar[type[BaseModel]] = ClassificationPayload
    system_prompt: ClassVar[str | None] = CLASSIFICATION_SYSTEM_PROMPT
    max_tokens: ClassVar[int | None] = TOKENS_PER_INGREDIENT

    def format(self, **kwargs: Any) -> str:
        """Format the prompt for one ingredient.

        Raises:
            ValueError: If ``ingredient`` is missing.
        """
        ingredient: str = self.require(kwargs, "ingredient")
        return f'Classify this food ingredient: "{ingredient}"'


class BatchClassificationPrompt(BasePrompt[BatchClassificationPayload]):
    """Prompt classifying several ingredients in one request."""

    output_schema: ClassVar[type[BaseModel]] = BatchClassificationPayload
    system_prompt: ClassVar[str | None] = CLASSIFICATION_SYSTEM_PROMPT

    def __init__(
        self,
        tokens_per_ingredient: int = TOKENS_PER_INGREDIENT,
        max_tokens_cap: int = 16000,
    ) -> None:
        self._tokens_per_ingredient = tokens_per_ingredient
        self._max_tokens_cap = max_tokens_cap

    def format(self, **kwargs: Any) -> str:
        """Format the prompt for a list of ingredients.

        Raises:
            ValueError: If ``ingredients`` is missing or empty.
        """
        ingredients: list[str] = self.require(kwargs, "ingredients")

        numbered = "\n".join(f'{i}. "{name}"' for i, name in enumerate(ingredients, 1))
        return (
            "Classify each of these food ingredients.\n\n"
            f"{numbered}\n\n"
            "Return an object with an \"ingredients\" array containing exactly "
            f"{len(ingredients)} entries, in the same order, each with the "
            'ingredient "name" exactly as given and its "analysis".'
        )

    def get_options_for(self, count: int) -> dict[str, Any]:
        """Get options with a token budget sized for ``count`` ingredients."""
        return self.get_options(
            max_tokens=min(self._tokens_per_ingredient * count, self._max_tokens_cap)
        )
