"""Enumeration types shared across schemas and services."""

from __future__ import annotations

from enum import StrEnum


class IngredientStatus(StrEnum):
    """Classification of a single ingredient."""

    CLEAN = "clean"
    CONCERNING = "concerning"
    UNKNOWN = "unknown"


class OverallVerdict(StrEnum):
    """Product-level verdict; there is deliberately no "unknown"."""

    CLEAN = "clean"
    CONCERNING = "concerning"


class SourceType(StrEnum):
    """Kind of reference backing a classification."""

    RESEARCH = "research"
    DATABASE = "database"
    REGULATORY = "regulatory"
    OTHER = "other"


class ProgressEventType(StrEnum):
    """Kinds of progress events emitted during classification."""

    ANALYZING = "analyzing"
    CLASSIFIED = "classified"
    ENCOURAGEMENT = "encouragement"


class HealthStatus(StrEnum):
    """Health check status values."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ReadinessStatus(StrEnum):
    """Readiness probe status values."""

    READY = "ready"
    DEGRADED = "degraded"
    NOT_READY = "not_ready"
