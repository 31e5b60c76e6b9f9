"""Parsing exceptions.

Only input-level problems raise; a single malformed token is dropped by the
pipeline instead of failing the whole label.
"""

from __future__ import annotations


class ParsingError(Exception):
    """Base exception for label parsing errors."""


class LabelTextError(ParsingError):
    """Raised when label text is empty, oversized or mostly control characters."""


class IngredientNameError(ParsingError):
    """Raised when an ingredient name is empty after sanitization."""
