"""OCR artifact cleanup and non-ingredient truncation."""

from __future__ import annotations

import re

from label_analyzer.parsing.constants import ACRONYMS, STOP_PATTERNS


_LEADING_LABEL = re.compile(r"^(?:\s*ingredients?\s*:\s*)+", re.IGNORECASE)
_PERIOD_BETWEEN_LETTERS = re.compile(r"(?<=[a-z])\.(?=[a-z])", re.IGNORECASE)
_ALL_CAPS_WORD = re.compile(r"\b([A-Z]{4,})\b")
_WHITESPACE = re.compile(r"\s+")

# Character confusions typical of label OCR, applied in order
_OCR_SUBSTITUTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\brn\b"), "m"),
    (re.compile(r"\bcl\b"), "d"),
    (re.compile(r"\bvv\b"), "w"),
    (re.compile(r"\b0([a-z])", re.IGNORECASE), r"o\1"),
    (re.compile(r"\bl([A-Z])"), r"I\1"),
    (re.compile(r"\b1([A-Z])"), r"I\1"),
)


def truncate_at_stop_marker(text: str) -> str:
    """Cut the text at the earliest allergen, company, contact or nutrition marker."""
    earliest = len(text)
    for pattern in STOP_PATTERNS:
        match = pattern.search(text)
        if match and match.start() < earliest:
            earliest = match.start()
    return text[:earliest]


def _retitle(match: re.Match[str]) -> str:
    word = match.group(1)
    if word in ACRONYMS:
        return word
    return word.capitalize()


def clean_artifacts(text: str) -> str:
    """Repair common OCR mistakes and drop everything after the ingredient list.

    Truncation runs before character repairs so web addresses are still
    recognizable, and again after them for markers the repairs complete
    (``"example.0rg"``). Applying the function twice gives the same result as
    applying it once.

    Args:
        text: Raw (sanitized) label text.

    Returns:
        Cleaned text with whitespace collapsed.
    """
    if not text:
        return ""

    cleaned = truncate_at_stop_marker(text)
    cleaned = _PERIOD_BETWEEN_LETTERS.sub("", cleaned)
    for pattern, replacement in _OCR_SUBSTITUTIONS:
        cleaned = pattern.sub(replacement, cleaned)
    cleaned = truncate_at_stop_marker(cleaned)
    cleaned = _ALL_CAPS_WORD.sub(_retitle, cleaned)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    return _LEADING_LABEL.sub("", cleaned).strip()
