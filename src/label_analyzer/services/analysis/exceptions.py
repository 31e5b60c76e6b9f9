"""Exceptions for ingredient analysis."""

from __future__ import annotations


class AnalysisError(Exception):
    """Base exception for analysis errors."""

    def __init__(self, message: str, ingredient: str | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Error message.
            ingredient: The ingredient involved, if any.
        """
        self.message = message
        self.ingredient = ingredient
        super().__init__(message)


class ServiceNotInitializedError(AnalysisError):
    """Raised when the service is used before ``initialize()``."""
