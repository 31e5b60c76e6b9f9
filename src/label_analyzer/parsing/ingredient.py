"""Parsing of a single ingredient token into name, modifiers and confidence."""

from __future__ import annotations

import re

from label_analyzer.parsing.confidence import score_confidence
from label_analyzer.parsing.constants import (
    ALIAS_PATTERN,
    THRESHOLD_MODIFIER_PATTERN,
    TRADEMARK_SYMBOLS,
)
from label_analyzer.parsing.footnotes import (
    FootnoteMap,
    strip_stray_markers,
    take_markers,
    with_prefix,
)
from label_analyzer.parsing.validation import is_valid_ingredient
from label_analyzer.schemas.ingredient import ParsedIngredient


_LEADING_CONJUNCTION = re.compile(r"^(?:and|or)\s+", re.IGNORECASE)
_TRADEMARKS = re.compile(f"[{TRADEMARK_SYMBOLS}]")
_FIRST_PARENTHETICAL = re.compile(r"\(([^)]+)\)")
_ANY_PARENTHETICAL = re.compile(r"\s*\([^)]*\)")
_BRACKETED = re.compile(r"\[([^\]]+)\]")
_ANY_BRACKETED = re.compile(r"\s*\[[^\]]*\]")
_WHITESPACE = re.compile(r"\s+")
_LEADING_COMMA = re.compile(r"^\s*,\s*")
_TRAILING_COMMA = re.compile(r"\s*,\s*$")
_TRAILING_PUNCTUATION = re.compile(r"\s*[.!?;:]+\s*$")


def extract_parentheticals(text: str) -> list[str]:
    """Return the content of each top-level parenthetical group.

    Inner parentheses are kept, so ``"A (B (C), D)"`` yields ``["B (C), D"]``.
    """
    groups: list[str] = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char == "(":
            if depth > 0:
                current.append(char)
            depth += 1
        elif char == ")":
            if depth == 0:
                continue
            depth -= 1
            if depth > 0:
                current.append(char)
            else:
                content = "".join(current).strip()
                if content:
                    groups.append(content)
                current = []
        elif depth > 0:
            current.append(char)
    return groups


def strip_parentheticals(text: str) -> str:
    """Remove every parenthetical group, however deeply nested."""
    kept: list[str] = []
    depth = 0
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        elif depth == 0:
            kept.append(char)
    return "".join(kept)


def _split_trademark(text: str, modifiers: list[str]) -> str:
    """Separate a trademarked brand from the ingredient it stands for.

    ``"Splenda® (sucralose)"`` names sucralose, branded Splenda;
    ``"Good Seed® mix (flax, oats)"`` keeps the brand and lists its contents.
    """
    match = _FIRST_PARENTHETICAL.search(text)
    if match:
        content = match.group(1).strip()
        brand = _TRADEMARKS.sub("", _ANY_PARENTHETICAL.sub("", text)).strip()
        if "," in content:
            text = brand
            modifiers.append(content)
        elif not ALIAS_PATTERN.search(content) and len(content) > 2:
            if brand:
                modifiers.append(brand)
            text = content
    text = _TRADEMARKS.sub("", text)
    return _ANY_PARENTHETICAL.sub("", text).strip()


def _clean_name(text: str) -> str:
    text = _WHITESPACE.sub(" ", text)
    text = _LEADING_COMMA.sub("", text)
    text = _TRAILING_COMMA.sub("", text)
    text = _TRAILING_PUNCTUATION.sub("", text)
    return text.strip()


def parse_ingredient(
    token: str,
    footnotes: FootnoteMap | None = None,
    *,
    minor_threshold: float | None = None,
    section: str | None = None,
) -> ParsedIngredient | None:
    """Parse one top-level token of an ingredient list.

    Args:
        token: Text between two top-level separators.
        footnotes: Marker definitions found in the label text.
        minor_threshold: Threshold of the minor section covering this token.
        section: Label section header covering this token.

    Returns:
        The parsed ingredient, or None when the token is not an ingredient.
    """
    footnotes = footnotes or {}
    text = _LEADING_CONJUNCTION.sub("", token.strip()).strip()

    # Markers like "(1)" must go before parentheticals become modifiers.
    markers: list[str] = []
    if footnotes:
        text, markers = take_markers(text, footnotes)

    modifiers: list[str] = []
    if _TRADEMARKS.search(text):
        text = _split_trademark(text, modifiers)
    else:
        modifiers.extend(extract_parentheticals(text))
        text = strip_parentheticals(text)

    modifiers.extend(
        content.strip() for content in _BRACKETED.findall(text) if content.strip()
    )
    text = _ANY_BRACKETED.sub("", text)

    name = _clean_name(strip_stray_markers(text))
    if not is_valid_ingredient(name):
        return None

    modifiers = [m for m in modifiers if not THRESHOLD_MODIFIER_PATTERN.match(m)]
    confidence = score_confidence(name, modifiers)

    return ParsedIngredient(
        name=with_prefix(name, markers, footnotes),
        modifiers=modifiers,
        confidence=confidence,
        original_text=token,
        is_minor_ingredient=minor_threshold is not None,
        minor_threshold=minor_threshold,
        section=section,
    )
