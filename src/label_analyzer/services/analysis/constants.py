"""Constants for ingredient classification orchestration."""

from __future__ import annotations

from typing import Final

from label_analyzer.schemas.enums import IngredientStatus


# HTTP statuses worth retrying
RETRYABLE_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})

# Connection failures that mean the service cannot be reached at all
SERVICE_DOWN_SIGNATURES: Final[tuple[str, ...]] = (
    "enotfound",
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo",
    "temporary failure in name resolution",
    "dns",
    "connection refused",
    "network is unreachable",
)

# Conservative fallback for ingredients the classifier could not resolve
FALLBACK_CONFIDENCE: Final[float] = 0.3
SERVICE_DOWN_NOTE: Final[str] = (
    'Unable to analyze "{name}" - {reason}. For safety, we classify unknown '
    "ingredients as potentially concerning. Please try again later or consult "
    "with healthcare providers."
)
SERVICE_DOWN_BASIC_NOTE: Final[str] = "Analysis unavailable - service temporarily down"
ITEM_FAILED_NOTE: Final[str] = (
    'Unable to analyze "{name}". For safety, we classify unknown ingredients '
    "as potentially concerning. Please try again or consult with healthcare "
    "providers."
)
ITEM_FAILED_BASIC_NOTE: Final[str] = "Analysis unavailable"

SERVICE_DOWN_REASON: Final[str] = (
    "Service is temporarily unavailable. Please check your connection and try again"
)
TRANSIENT_REASON: Final[str] = (
    "Service is experiencing temporary issues. Please try again in a moment"
)

# Notes attached to cache hits; cached entries keep only the full note
CACHED_BASIC_NOTES: Final[dict[IngredientStatus, str]] = {
    IngredientStatus.CLEAN: "Generally recognized as safe for consumption",
    IngredientStatus.CONCERNING: (
        "May contain concerning compounds - upgrade for detailed explanation"
    ),
}
CACHED_CONFIDENCE: Final[float] = 1.0

# Progress emoji by substring of the ingredient name, first match wins
INGREDIENT_EMOJI: Final[tuple[tuple[str, str], ...]] = (
    ("sugar", "\U0001f36c"),
    ("salt", "\U0001f9c2"),
    ("water", "\U0001f4a7"),
    ("color", "\U0001f3a8"),
    ("acid", "\U0001f9ea"),
    ("vitamin", "\U0001f48a"),
    ("oil", "\U0001fad2"),
)
DEFAULT_INGREDIENT_EMOJI: Final[str] = "\U0001f52c"
CLEAN_EMOJI: Final[str] = "✨"
CONCERNING_EMOJI: Final[str] = "⚠️"
ENCOURAGEMENT_EMOJI: Final[str] = "\U0001f4aa"

CLEAN_MESSAGE: Final[str] = "{name} looks clean!"
CONCERNING_MESSAGE: Final[str] = "{name} raises flags"
UNKNOWN_MESSAGE: Final[str] = "{name} could not be analyzed"
ANALYZING_MESSAGE: Final[str] = "Analyzed {name}..."
CACHE_HIT_ENCOURAGEMENT: Final[str] = "Found {count} ingredients we already know"
HALFWAY_ENCOURAGEMENT: Final[str] = "Halfway there, keep going!"
