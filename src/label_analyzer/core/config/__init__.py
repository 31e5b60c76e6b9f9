"""Configuration module with YAML and environment variable support."""

from .settings import (
    AnalysisSettings,
    CacheSettings,
    ClassifierSettings,
    RateLimitingSettings,
    RateLimitRule,
    Settings,
    get_settings,
)


__all__ = [
    "AnalysisSettings",
    "CacheSettings",
    "ClassifierSettings",
    "RateLimitRule",
    "RateLimitingSettings",
    "Settings",
    "get_settings",
]
