"""Rejection rules for candidate ingredient names."""

from __future__ import annotations

import re

from label_analyzer.parsing.constants import (
    CONTAINS_FRAGMENT_PATTERN,
    MAX_CONTAINS_FRAGMENT_LENGTH,
    MAX_NAME_LENGTH,
    MIN_NAME_LENGTH,
    REJECT_PATTERNS,
)


_HAS_LETTER = re.compile(r"[A-Za-z]")


def is_valid_ingredient(name: str) -> bool:
    """Check that a cleaned name looks like an ingredient, not label boilerplate.

    Rejects measurements, bare percentages, "2% or less" fragments, short
    "contains ..." warnings, nutrition panel text, street addresses,
    state and ZIP lines, producer boilerplate and company names.
    """
    if not MIN_NAME_LENGTH <= len(name) <= MAX_NAME_LENGTH:
        return False
    if (
        CONTAINS_FRAGMENT_PATTERN.match(name)
        and len(name) < MAX_CONTAINS_FRAGMENT_LENGTH
    ):
        return False
    if any(pattern.search(name) for pattern in REJECT_PATTERNS):
        return False
    return bool(_HAS_LETTER.search(name))
