"""Nesting-aware splitting of ingredient lists.

Compound ingredients carry their own comma-separated sub-lists inside
parentheses or brackets, so separators only count at depth zero.
"""

from __future__ import annotations

from collections.abc import Iterator


_OPENERS = frozenset("([")
_CLOSERS = frozenset(")]")


def _walk(text: str) -> Iterator[tuple[int, str, int]]:
    """Yield (index, char, depth before char); depth never drops below zero."""
    depth = 0
    for index, char in enumerate(text):
        yield index, char, depth
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth = max(depth - 1, 0)


def depth_at(text: str, index: int) -> int:
    """Return the nesting depth just before ``text[index]``."""
    depth = 0
    for position, _char, current in _walk(text):
        if position == index:
            return current
        depth = current
    # Past the end: account for the final character
    if text and text[-1] in _OPENERS:
        return depth + 1
    if text and text[-1] in _CLOSERS:
        return max(depth - 1, 0)
    return depth


def split_top_level(
    text: str,
    separators: str = ",",
    *,
    keep_empty: bool = False,
) -> list[str]:
    """Split ``text`` on separators outside parentheses and brackets.

    Args:
        text: Ingredient list text.
        separators: Characters that separate ingredients.
        keep_empty: Keep empty tokens so positions line up with
            ``count_top_level_separators``.

    Returns:
        Trimmed tokens in order.
    """
    tokens: list[str] = []
    start = 0
    for index, char, depth in _walk(text):
        if char in separators and depth == 0:
            tokens.append(text[start:index])
            start = index + 1
    tokens.append(text[start:])
    stripped = [token.strip() for token in tokens]
    if keep_empty:
        return stripped
    return [token for token in stripped if token]


def count_top_level_separators(text: str, separators: str = ",") -> int:
    """Count separators that ``split_top_level`` would split on."""
    return sum(
        1 for _index, char, depth in _walk(text) if char in separators and depth == 0
    )
