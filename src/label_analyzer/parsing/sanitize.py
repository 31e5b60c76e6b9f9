"""Input sanitization for OCR text and ingredient names."""

from __future__ import annotations

import re

from label_analyzer.parsing.constants import (
    MAX_INGREDIENT_NAME_LENGTH,
    MAX_LABEL_TEXT_LENGTH,
    MIN_SANITIZED_RATIO,
)
from label_analyzer.parsing.exceptions import IngredientNameError, LabelTextError


# Keeps tab, newline and carriage return
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_DISALLOWED_NAME_CHARS = re.compile(r"[^\w\s\-\(\)\[\],\.%]")
_WHITESPACE = re.compile(r"\s+")


def validate_extracted_text(text: object) -> str:
    """Validate and sanitize text handed over by the OCR collaborator.

    Args:
        text: Raw extracted text.

    Returns:
        The text with control characters removed and surrounding
        whitespace trimmed.

    Raises:
        LabelTextError: If the text is missing, too long, or consisted
            mostly of control characters.
    """
    if not isinstance(text, str) or not text:
        msg = "Label text must be a non-empty string"
        raise LabelTextError(msg)

    if len(text) > MAX_LABEL_TEXT_LENGTH:
        msg = (
            f"Label text is too long ({len(text)} characters, "
            f"maximum {MAX_LABEL_TEXT_LENGTH})"
        )
        raise LabelTextError(msg)

    sanitized = _CONTROL_CHARS.sub("", text).strip()
    if len(sanitized) < len(text) * MIN_SANITIZED_RATIO:
        msg = "Label text contains too many invalid characters"
        raise LabelTextError(msg)

    return sanitized


def sanitize_ingredient_name(name: str) -> str:
    """Reduce an ingredient name to a safe character set.

    Raises:
        IngredientNameError: If nothing usable remains.
    """
    cleaned = name[:MAX_INGREDIENT_NAME_LENGTH]
    cleaned = _DISALLOWED_NAME_CHARS.sub("", cleaned)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    if not cleaned:
        msg = f"Ingredient name is empty after sanitization: {name!r}"
        raise IngredientNameError(msg)
    return cleaned
