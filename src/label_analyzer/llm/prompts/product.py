"""Product identification prompt."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, Field

from .base import BasePrompt


class ProductIdentification(BaseModel):
    """Short description of the product an ingredient list belongs to."""

    product_name: str = Field(..., min_length=1, max_length=120)


class ProductIdentificationPrompt(BasePrompt[ProductIdentification]):
    """Guess the kind of product from its ingredient list.

    Example output:
        {"product_name": "Chocolate chip cookies"}
    """

    output_schema: ClassVar[type[BaseModel]] = ProductIdentification
    system_prompt: ClassVar[str | None] = (
        "You identify packaged food products from their ingredient lists. "
        "Answer with a short generic product description (2-6 words), "
        "never a brand name."
    )
    temperature: ClassVar[float] = 0.3
    max_tokens: ClassVar[int | None] = 60

    def format(self, **kwargs: Any) -> str:
        """Format the prompt for an ingredient list.

        Raises:
            ValueError: If ``ingredient_list`` is missing.
        """
        ingredient_list: str = self.require(kwargs, "ingredient_list")
        return f"What product has these ingredients?\n\n{ingredient_list}"
