"""Heuristic confidence scoring for parsed ingredient names."""

from __future__ import annotations

import re

from label_analyzer.parsing.constants import (
    BASE_CONFIDENCE,
    CASING_BONUS,
    COMMON_INGREDIENT_WORDS,
    COMMON_WORD_BONUS,
    DIGIT_PENALTY,
    LENGTH_BONUS,
    LONG_NAME_PENALTY,
    MAX_CONFIDENCE,
    MIN_CONFIDENCE,
    MODIFIER_BONUS,
    SHORT_NAME_PENALTY,
)


_PROPER_CASING = re.compile(r"^(?:[A-Z][a-z]|[a-z])")
_MAX_DIGITS = 3


def score_confidence(name: str, modifiers: list[str]) -> float:
    """Score how likely ``name`` is a real ingredient, in [0.1, 1.0]."""
    confidence = BASE_CONFIDENCE

    lowered = name.lower()
    if any(word in lowered for word in COMMON_INGREDIENT_WORDS):
        confidence += COMMON_WORD_BONUS
    if modifiers:
        confidence += MODIFIER_BONUS
    if _PROPER_CASING.match(name):
        confidence += CASING_BONUS
    if 3 <= len(name) <= 50:
        confidence += LENGTH_BONUS

    if len(name) < 3:
        confidence -= SHORT_NAME_PENALTY
    if len(name) > 100:
        confidence -= LONG_NAME_PENALTY
    if sum(char.isdigit() for char in name) > _MAX_DIGITS:
        confidence -= DIGIT_PENALTY

    return round(max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, confidence)), 4)
