"""Detection of "less than 2% of" style minor-ingredient sections."""

from __future__ import annotations

import re
from dataclasses import dataclass

from label_analyzer.parsing.constants import (
    DEFAULT_MINOR_THRESHOLD,
    MINOR_MARKER_PATTERN,
)
from label_analyzer.parsing.splitter import count_top_level_separators, depth_at


_TRAILING_AND = re.compile(r",?\s*and\s*$", re.IGNORECASE)
_LEADING_OF = re.compile(r"^(?:of\b)?\s*:?\s*", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class MinorSection:
    """Ingredients from ``start_index`` on are present below ``threshold`` percent."""

    start_index: int
    threshold: float


def _next_top_level_marker(text: str, start: int) -> re.Match[str] | None:
    for match in MINOR_MARKER_PATTERN.finditer(text, start):
        if depth_at(text, match.start()) == 0:
            return match
    return None


def tag_minor_sections(text: str) -> tuple[str, list[MinorSection]]:
    """Remove top-level minor markers and record where each section starts.

    Markers nested inside a compound ingredient's parentheses are left in
    place; they describe that ingredient's own sub-list.

    Args:
        text: Ingredient list text.

    Returns:
        Tuple of (text without markers, sections in label order). Each
        section's ``start_index`` is the position, among top-level tokens
        of the returned text, of the first ingredient it covers.
    """
    sections: list[MinorSection] = []
    position = 0

    while (match := _next_top_level_marker(text, position)) is not None:
        raw_threshold = match.group(1) or match.group(2)
        threshold = float(raw_threshold) if raw_threshold else DEFAULT_MINOR_THRESHOLD

        before = _TRAILING_AND.sub("", text[: match.start()].rstrip()).rstrip()
        before = before.rstrip(",").rstrip()
        after = _LEADING_OF.sub("", text[match.end() :].strip(), count=1).strip()

        if before:
            start_index = count_top_level_separators(before) + 1
            head = f"{before}, " if after else before
        else:
            start_index = 0
            head = ""

        sections.append(MinorSection(start_index=start_index, threshold=threshold))
        text = head + after
        position = len(head)

    return text, sections


def threshold_for(index: int, sections: list[MinorSection]) -> float | None:
    """Return the threshold of the latest section starting at or before ``index``."""
    threshold = None
    for section in sections:
        if section.start_index <= index:
            threshold = section.threshold
    return threshold
