"""Unit tests for classification and product prompts."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from label_analyzer.llm.prompts import (
    BatchClassificationPayload,
    BatchClassificationPrompt,
    ClassificationPayload,
    IngredientClassificationPrompt,
    ProductIdentificationPrompt,
)
from label_analyzer.schemas.enums import SourceType
from tests.fixtures.llm_responses import CLASSIFICATION_CLEAN, CLASSIFICATION_TOXIC


pytestmark = pytest.mark.unit


class TestIngredientClassificationPrompt:
    """Tests for IngredientClassificationPrompt."""

    def test_format(self) -> None:
        """Should quote the ingredient name."""
        prompt = IngredientClassificationPrompt()

        assert prompt.format(ingredient="sea salt") == (
            'Classify this food ingredient: "sea salt"'
        )

    def test_format_requires_ingredient(self) -> None:
        """Should raise ValueError without an ingredient."""
        with pytest.raises(ValueError, match="ingredient is required"):
            IngredientClassificationPrompt().format()

    def test_options(self) -> None:
        """Should use low temperature and a per-ingredient token budget."""
        options = IngredientClassificationPrompt().get_options()

        assert options == {"temperature": 0.2, "max_tokens": 600}


class TestBatchClassificationPrompt:
    """Tests for BatchClassificationPrompt."""

    def test_format_numbers_ingredients(self) -> None:
        """Should number ingredients and state the expected count."""
        text = BatchClassificationPrompt().format(ingredients=["sugar", "bht"])

        assert '1. "sugar"' in text
        assert '2. "bht"' in text
        assert "exactly 2 entries" in text

    def test_format_requires_ingredients(self) -> None:
        """Should raise ValueError for an empty list."""
        with pytest.raises(ValueError, match="ingredients is required"):
            BatchClassificationPrompt().format(ingredients=[])

    @pytest.mark.parametrize(("count", "expected"), [(1, 600), (8, 4800), (40, 16000)])
    def test_token_budget_scales_and_caps(self, count: int, expected: int) -> None:
        """Should budget tokens per ingredient up to the cap."""
        prompt = BatchClassificationPrompt(tokens_per_ingredient=600)

        assert prompt.get_options_for(count)["max_tokens"] == expected


class TestClassificationPayload:
    """Tests for the classification output schemas."""

    def test_clamps_confidence(self) -> None:
        """Should clamp confidence into [0, 1]."""
        payload = ClassificationPayload.model_validate(
            {**CLASSIFICATION_CLEAN, "confidence": 1.7}
        )

        assert payload.confidence == 1.0

    def test_unknown_source_type_is_other(self) -> None:
        """Should map unrecognized source types to other."""
        payload = ClassificationPayload.model_validate(
            {
                **CLASSIFICATION_TOXIC,
                "sources": [{"title": "Blog", "url": "https://x", "type": "blog"}],
            }
        )

        assert payload.sources[0].type == SourceType.OTHER

    def test_rejects_unknown_status(self) -> None:
        """Should reject statuses outside the two-word vocabulary."""
        with pytest.raises(ValidationError):
            ClassificationPayload.model_validate(
                {**CLASSIFICATION_CLEAN, "status": "maybe"}
            )

    def test_batch_requires_entries(self) -> None:
        """Should reject an empty batch."""
        with pytest.raises(ValidationError):
            BatchClassificationPayload.model_validate({"ingredients": []})


class TestProductIdentificationPrompt:
    """Tests for ProductIdentificationPrompt."""

    def test_format_and_options(self) -> None:
        """Should include the list and use a short token budget."""
        prompt = ProductIdentificationPrompt()

        assert "Sugar, Flour" in prompt.format(ingredient_list="Sugar, Flour")
        assert prompt.get_options() == {"temperature": 0.3, "max_tokens": 60}

    def test_format_requires_list(self) -> None:
        """Should raise ValueError without an ingredient list."""
        with pytest.raises(ValueError, match="ingredient_list is required"):
            ProductIdentificationPrompt().format(ingredient_list="")
