"""Ingredient classifier backed by an LLM chat service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from label_analyzer.cache.store import normalize_ingredient_name
from label_analyzer.llm.exceptions import LLMValidationError
from label_analyzer.llm.prompts import (
    BatchClassificationPayload,
    BatchClassificationPrompt,
    ClassificationPayload,
    IngredientClassificationPrompt,
    ProductIdentification,
    ProductIdentificationPrompt,
)
from label_analyzer.observability.logging import get_logger
from label_analyzer.parsing.exceptions import IngredientNameError
from label_analyzer.parsing.sanitize import sanitize_ingredient_name
from label_analyzer.schemas.classification import IngredientClassification, Source
from label_analyzer.schemas.enums import IngredientStatus


if TYPE_CHECKING:
    from collections.abc import Sequence

    from label_analyzer.llm.client.protocol import LLMClientProtocol


logger = get_logger(__name__)

_STATUS_MAP: dict[str, IngredientStatus] = {
    "generally_clean": IngredientStatus.CLEAN,
    "potentially_toxic": IngredientStatus.CONCERNING,
}


@runtime_checkable
class IngredientClassifierProtocol(Protocol):
    """Interface of the external ingredient classifier."""

    async def classify(self, name: str) -> IngredientClassification:
        """Classify one ingredient."""
        ...

    async def classify_batch(
        self, names: Sequence[str]
    ) -> list[IngredientClassification]:
        """Classify several ingredients; results mirror ``names`` in order."""
        ...

    async def identify_product(self, ingredient_list: str) -> str:
        """Describe the product an ingredient list belongs to."""
        ...


def _to_classification(payload: ClassificationPayload) -> IngredientClassification:
    return IngredientClassification(
        status=_STATUS_MAP[payload.status],
        confidence=payload.confidence,
        educational_note=payload.educational_note,
        basic_note=payload.basic_note,
        reasoning=payload.reasoning,
        sources=[
            Source(title=source.title, url=source.url, type=source.type)
            for source in payload.sources
        ],
    )


def _sanitize(name: str) -> str:
    try:
        return sanitize_ingredient_name(name)
    except IngredientNameError as e:
        msg = f"Ingredient name rejected before classification: {e}"
        raise LLMValidationError(msg) from e


class LLMIngredientClassifier:
    """Classify ingredients through an OpenAI-compatible LLM client.

    Every response is validated against a strict schema. A batch answer
    whose length or names don't mirror the request is rejected as
    malformed rather than guessed at.
    """

    def __init__(
        self,
        llm_client: LLMClientProtocol,
        *,
        temperature: float | None = None,
        tokens_per_ingredient: int = 600,
        max_tokens_cap: int = 16000,
    ) -> None:
        """Initialize the classifier.

        Args:
            llm_client: Client used for every request.
            temperature: Overrides the prompts' default temperature.
            tokens_per_ingredient: Output token budget per batch member.
            max_tokens_cap: Upper bound on a batch's output tokens.
        """
        self._llm_client = llm_client
        self._temperature = temperature
        self._single_prompt = IngredientClassificationPrompt()
        self._batch_prompt = BatchClassificationPrompt(
            tokens_per_ingredient=tokens_per_ingredient,
            max_tokens_cap=max_tokens_cap,
        )
        self._product_prompt = ProductIdentificationPrompt()

    def _with_temperature(self, options: dict[str, object]) -> dict[str, object]:
        if self._temperature is not None:
            options["temperature"] = self._temperature
        return options

    async def classify(self, name: str) -> IngredientClassification:
        """Classify one ingredient.

        Raises:
            LLMError: Any client failure, including malformed output.
        """
        clean_name = _sanitize(name)
        payload = await self._llm_client.generate_structured(
            prompt=self._single_prompt.format(ingredient=clean_name),
            schema=ClassificationPayload,
            system=self._single_prompt.system_prompt,
            options=self._with_temperature(self._single_prompt.get_options()),
        )
        return _to_classification(payload)

    async def classify_batch(
        self, names: Sequence[str]
    ) -> list[IngredientClassification]:
        """Classify several ingredients in one request.

        Raises:
            LLMValidationError: If the answer doesn't mirror the request.
            LLMError: Any other client failure.
        """
        clean_names = [_sanitize(name) for name in names]
        if not clean_names:
            return []

        payload = await self._llm_client.generate_structured(
            prompt=self._batch_prompt.format(ingredients=clean_names),
            schema=BatchClassificationPayload,
            system=self._batch_prompt.system_prompt,
            options=self._with_temperature(
                self._batch_prompt.get_options_for(len(clean_names))
            ),
        )

        if len(payload.ingredients) != len(clean_names):
            msg = (
                f"Batch answer has {len(payload.ingredients)} entries "
                f"for {len(clean_names)} ingredients"
            )
            raise LLMValidationError(msg)

        for requested, item in zip(clean_names, payload.ingredients, strict=True):
            if normalize_ingredient_name(item.name) != normalize_ingredient_name(
                requested
            ):
                msg = (
                    f"Batch answer out of order: expected {requested!r}, "
                    f"got {item.name!r}"
                )
                raise LLMValidationError(msg)

        logger.debug("Batch classified", count=len(clean_names))
        return [_to_classification(item.analysis) for item in payload.ingredients]

    async def identify_product(self, ingredient_list: str) -> str:
        """Describe the product an ingredient list belongs to.

        Raises:
            LLMError: Any client failure.
        """
        result = await self._llm_client.generate_structured(
            prompt=self._product_prompt.format(ingredient_list=ingredient_list),
            schema=ProductIdentification,
            system=self._product_prompt.system_prompt,
            options=self._product_prompt.get_options(),
        )
        return result.product_name.strip()
