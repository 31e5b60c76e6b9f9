"""End-to-end parsing of OCR label text into ingredients."""

from __future__ import annotations

import re

from label_analyzer.observability.logging import get_logger
from label_analyzer.parsing.cleaner import clean_artifacts
from label_analyzer.parsing.constants import (
    DESCRIPTIVE_CLAUSE_PATTERN,
    MIN_KEPT_CONFIDENCE,
    MINOR_MARKER_PATTERN,
    SECTION_HEADER_PATTERN,
    STANDALONE_SECTION_PATTERN,
)
from label_analyzer.parsing.footnotes import (
    FootnoteMap,
    extract_footnotes,
    is_footer_note,
)
from label_analyzer.parsing.ingredient import extract_parentheticals, parse_ingredient
from label_analyzer.parsing.minor_sections import tag_minor_sections, threshold_for
from label_analyzer.parsing.sanitize import validate_extracted_text
from label_analyzer.parsing.splitter import (
    count_top_level_separators,
    split_top_level,
)
from label_analyzer.schemas.ingredient import ParsedIngredient


logger = get_logger(__name__)

_AND_OR = re.compile(r"\s+and/or\s+", re.IGNORECASE)
# "(mixed tocopherols, to preserve freshness)": the purpose is not a member
_PURPOSE_CLAUSE = re.compile(r"^(?:to|for)\s", re.IGNORECASE)


def _take_section_header(token: str, current: str | None) -> tuple[str, str | None]:
    """Split a leading ``"Organic Filling:"`` header off a token."""
    standalone = STANDALONE_SECTION_PATTERN.match(token)
    if standalone:
        return "", standalone.group(1).strip()
    inline = SECTION_HEADER_PATTERN.match(token)
    if inline and not MINOR_MARKER_PATTERN.search(inline.group(2)):
        return inline.group(2).strip(), inline.group(1).strip()
    return token, current


def _is_kept(parsed: ParsedIngredient, seen: set[str]) -> bool:
    """Apply the duplicate and confidence filters, recording the name as seen."""
    key = parsed.name.lower()
    kept = key not in seen and parsed.confidence > MIN_KEPT_CONFIDENCE
    seen.add(key)
    return kept


def expand_sub_ingredients(
    parent: ParsedIngredient,
    footnotes: FootnoteMap | None = None,
) -> list[ParsedIngredient]:
    """Parse the members of a compound ingredient's parenthetical list.

    ``"Chocolate Chips (Sugar, Cocoa Butter)"`` yields Sugar and Cocoa Butter
    with ``parent_ingredient`` set to "Chocolate Chips". Only parentheticals
    holding a top-level comma are lists; ``"Salt (iodized)"`` has no members.
    Members inherit the parent's section and, unless a nested "less than 2%"
    marker says otherwise, its minor threshold.
    """
    subs: list[ParsedIngredient] = []
    seen: set[str] = set()
    for group in extract_parentheticals(parent.original_text):
        if count_top_level_separators(group) == 0:
            continue
        content, sections = tag_minor_sections(group)
        for index, token in enumerate(split_top_level(content, keep_empty=True)):
            if not token or _PURPOSE_CLAUSE.match(token):
                continue
            if DESCRIPTIVE_CLAUSE_PATTERN.match(token):
                continue
            threshold = threshold_for(index, sections)
            if threshold is None:
                threshold = parent.minor_threshold
            parsed = parse_ingredient(
                token,
                footnotes,
                minor_threshold=threshold,
                section=parent.section,
            )
            if parsed is None or not _is_kept(parsed, seen):
                continue
            subs.append(
                parsed.model_copy(update={"parent_ingredient": parent.name})
            )
    return subs


def parse(text: str) -> list[ParsedIngredient]:
    """Parse raw label text into ingredients in label order.

    Stages: sanitize, clean OCR artifacts, extract footnote definitions,
    expand "and/or", tag minor sections, split at top-level commas, parse
    each token, then drop duplicates (case-insensitive, first wins),
    low-confidence names and footer notes. Descriptive clauses such as
    ", including vanilla beans" join the modifiers of the ingredient before
    them. Members of a compound ingredient's parenthetical list follow it
    as entries flagged with ``parent_ingredient``.

    Args:
        text: Raw OCR text.

    Returns:
        Parsed ingredients. Tokens that are not ingredients are dropped,
        never fatal.

    Raises:
        LabelTextError: If the text itself is unusable.
    """
    body = clean_artifacts(validate_extracted_text(text))
    body, footnotes = extract_footnotes(body)
    body = _AND_OR.sub(", ", body)
    body, sections = tag_minor_sections(body)

    ingredients: list[ParsedIngredient] = []
    seen: set[str] = set()
    section: str | None = None
    previous: ParsedIngredient | None = None
    dropped = 0
    sub_count = 0

    for index, raw_token in enumerate(split_top_level(body, keep_empty=True)):
        token, section = _take_section_header(raw_token, section)
        if not token:
            continue
        if DESCRIPTIVE_CLAUSE_PATTERN.match(token):
            if previous is not None:
                previous.modifiers = [*previous.modifiers, token]
            continue
        if is_footer_note(token):
            dropped += 1
            continue

        parsed = parse_ingredient(
            token,
            footnotes,
            minor_threshold=threshold_for(index, sections),
            section=section,
        )
        if parsed is None or not _is_kept(parsed, seen):
            previous = None
            dropped += 1
            continue

        previous = parsed
        subs = expand_sub_ingredients(parsed, footnotes)
        sub_count += len(subs)
        ingredients.append(parsed)
        ingredients.extend(subs)

    logger.debug(
        "Parsed label text",
        ingredients=len(ingredients),
        sub_ingredients=sub_count,
        dropped=dropped,
        footnotes=len(footnotes),
        minor_sections=len(sections),
    )
    return ingredients


def parse_names(text: str) -> list[str]:
    """Parse label text and return only the top-level ingredient names."""
    return [
        ingredient.name
        for ingredient in parse(text)
        if ingredient.parent_ingredient is None
    ]
