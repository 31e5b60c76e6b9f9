"""Two-pass footnote resolution.

Pass one finds definitions such as ``". * Organic"`` or ``". (1) Non-GMO"``
and removes them from the body text. Pass two strips the markers from
ingredient names and turns meaningful definitions into a name prefix, so
``"Honey*"`` becomes ``"Organic Honey"``.
"""

from __future__ import annotations

import re

from label_analyzer.parsing.constants import (
    CERTIFICATION_KEYWORDS,
    FOOTER_NOTE_PATTERNS,
    FOOTNOTE_SYMBOLS,
    TRIVIAL_FOOTNOTE_KEYWORDS,
)
from label_analyzer.parsing.splitter import depth_at


FootnoteMap = dict[str, str]

_STANDALONE_DEFINITION = re.compile(
    rf"\.\s*([{FOOTNOTE_SYMBOLS}]+)\s*([A-Z][^.]+?)"
    rf"(?=\s*\.\s*[{FOOTNOTE_SYMBOLS}()\[]|$)"
)
_NUMBERED_DEFINITION = re.compile(r"\.\s*\((\d+)\)\s*([A-Z][^.()]+?)(?=\s*\.\s*\(|$)")
_LETTERED_DEFINITION = re.compile(
    r"\.\s*\[([a-z])\]\s*([A-Z][^.\[\]]+?)(?=\s*\.\s*\[|$)", re.IGNORECASE
)
# A trailing note starts a sentence; a marker glued to a word belongs to it
_TRAILING_NOTE = re.compile(
    rf"(?:^|(?<=[.\s]))([{FOOTNOTE_SYMBOLS}]+)\s*([A-Z][^.,{FOOTNOTE_SYMBOLS}]+?)\.?$"
)
_LETTERED_MARKER = re.compile(r"^\[[a-z]\]$", re.IGNORECASE)

# "#" followed by a digit is a color number ("Red #40"), not a marker
_STRAY_MARKER = re.compile(r"[*†‡§¶]|#(?!\d)")
_WHITESPACE = re.compile(r"\s+")

_MIN_MEANING_LENGTH = 3


def _is_definition(meaning: str) -> bool:
    lowered = meaning.lower()
    return len(meaning) > _MIN_MEANING_LENGTH and any(
        keyword in lowered for keyword in CERTIFICATION_KEYWORDS
    )


def _is_trivial(meaning: str) -> bool:
    lowered = meaning.lower()
    return any(keyword in lowered for keyword in TRIVIAL_FOOTNOTE_KEYWORDS)


def _collect(
    pattern: re.Pattern[str],
    text: str,
    footnotes: FootnoteMap,
    key: str,
) -> str:
    """Record every definition ``pattern`` finds and replace it with a period."""
    found: list[str] = []
    for match in pattern.finditer(text):
        meaning = match.group(2).strip()
        if _is_definition(meaning):
            footnotes[key.format(match.group(1).strip().lower())] = meaning
            found.append(match.group(0))
    for definition in found:
        text = text.replace(definition, ".", 1)
    return text


def extract_footnotes(text: str) -> tuple[str, FootnoteMap]:
    """Find footnote definitions and remove them from the label text.

    Args:
        text: Cleaned label text.

    Returns:
        Tuple of (text without definitions, marker -> meaning map).

    Example:
        >>> extract_footnotes("Flour, Honey*. * Organic")
        ('Flour, Honey*.', {'*': 'Organic'})
    """
    footnotes: FootnoteMap = {}
    cleaned = _collect(_STANDALONE_DEFINITION, text, footnotes, "{}")
    cleaned = _collect(_NUMBERED_DEFINITION, cleaned, footnotes, "({})")
    cleaned = _collect(_LETTERED_DEFINITION, cleaned, footnotes, "[{}]")

    trailing = _TRAILING_NOTE.search(cleaned)
    if trailing:
        meaning = trailing.group(2).strip()
        if _is_definition(meaning):
            footnotes[trailing.group(1).strip()] = meaning
            cleaned = cleaned[: trailing.start()] + cleaned[trailing.end() :]

    return cleaned.strip(), footnotes


def take_markers(text: str, footnotes: FootnoteMap) -> tuple[str, list[str]]:
    """Remove recorded markers from ``text``.

    Only markers outside parentheses and brackets belong to the ingredient
    itself; nested ones belong to its sub-ingredients and are removed
    without being reported.

    Returns:
        Tuple of (text without markers, markers found at the top level).
    """
    top_level: set[str] = set()
    for marker in sorted(footnotes, key=len, reverse=True):
        flags = re.IGNORECASE if _LETTERED_MARKER.match(marker) else 0
        pattern = re.compile(re.escape(marker), flags)
        if any(depth_at(text, m.start()) == 0 for m in pattern.finditer(text)):
            top_level.add(marker)
        text = pattern.sub("", text)
    return text, [marker for marker in footnotes if marker in top_level]


def strip_stray_markers(text: str) -> str:
    """Drop marker glyphs that have no recorded definition."""
    return _WHITESPACE.sub(" ", _STRAY_MARKER.sub("", text)).strip()


def with_prefix(name: str, markers: list[str], footnotes: FootnoteMap) -> str:
    """Prefix ``name`` with the meanings of ``markers``, skipping trivial notes."""
    meanings = [footnotes[m] for m in markers if not _is_trivial(footnotes[m])]
    if not meanings:
        return name
    prefix = ", ".join(meanings)
    if name.lower().startswith(prefix.lower()):
        return name
    return f"{prefix} {name}"


def apply_footnotes(name: str, footnotes: FootnoteMap) -> str:
    """Replace footnote markers in a name with their meaning as a prefix.

    >>> apply_footnotes("Butter*†", {"*": "Organic", "†": "Fair Trade"})
    'Organic, Fair Trade Butter'
    """
    stripped, markers = take_markers(name, footnotes)
    return with_prefix(strip_stray_markers(stripped), markers, footnotes)


def is_footer_note(text: str) -> bool:
    """Check whether a token explains markers rather than naming an ingredient."""
    candidate = text.strip()
    return any(pattern.search(candidate) for pattern in FOOTER_NOTE_PATTERNS)
