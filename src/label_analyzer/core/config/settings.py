"""Application configuration using Pydantic Settings with YAML support.

This module provides centralized configuration management with:
- YAML-based configuration files organized by domain
- Environment-specific overrides (development, test, production)
- Environment variable loading for secrets
- Type validation and coercion
- Caching for performance
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_source import MultiYamlConfigSettingsSource


if TYPE_CHECKING:
    from pydantic_settings import PydanticBaseSettingsSource


# =============================================================================
# Nested Configuration Models (from YAML)
# =============================================================================


class AppSettings(BaseModel):
    """Application identity settings."""

    name: str = "Ingredient Label Analyzer"
    version: str = "0.1.0"
    debug: bool = False


class ServerSettings(BaseModel):
    """Server configuration settings."""

    host: str = "127.0.0.1"
    port: int = 8000


class ApiSettings(BaseModel):
    """API configuration settings."""

    v1_prefix: str = "/api/v1/label-analyzer"
    cors_origins: list[str] = []
    caller_identity_header: str = "X-User-ID"


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "json"


class RedisSettings(BaseModel):
    """Redis configuration settings."""

    host: str = "localhost"
    port: int = 6379
    user: str | None = None  # Redis ACL username (Redis 6.0+)
    cache_db: int = 0
    max_connections: int = 20


class CacheSettings(BaseModel):
    """Ingredient classification cache settings."""

    enabled: bool = True
    key_prefix: str = "ingredient"
    ttl_days: int = 180
    # Expired entries linger this long in Redis before eviction; reads
    # treat them as misses as soon as expires_at passes.
    eviction_grace_days: int = 30
    write_queue_size: int = 500
    write_workers: int = 2


class ClassifierSettings(BaseModel):
    """External ingredient classifier (OpenAI-compatible chat API)."""

    url: str = "https://api.openai.com/v1"
    model: str = "gpt-4o-mini"
    timeout: float = 30.0
    temperature: float = 0.2
    max_tokens_per_ingredient: int = 600
    max_tokens_cap: int = 16000
    requests_per_minute: float = 120.0


class AnalysisSettings(BaseModel):
    """Classification orchestration settings."""

    chunk_size: int = Field(default=8, ge=1)
    batch_max_retries: int = 2
    item_max_retries: int = 1
    initial_backoff_seconds: float = 1.0
    backoff_factor: float = 2.0
    max_backoff_seconds: float = Field(default=30.0, gt=0)
    progress_stagger_seconds: float = 0.15
    product_fallback: str = "A packaged food product"


class RateLimitRule(BaseModel):
    """Window, quota and block duration for one operation class."""

    window_seconds: float
    max_requests: int
    block_seconds: float = 0.0


class RateLimitingSettings(BaseModel):
    """Per-caller rate limiting configuration."""

    enabled: bool = True
    sweep_interval_seconds: float = 600.0
    rules: dict[str, RateLimitRule] = {
        "ocr": RateLimitRule(window_seconds=60, max_requests=10, block_seconds=300),
        "classification": RateLimitRule(
            window_seconds=60, max_requests=15, block_seconds=300
        ),
        "photo_upload": RateLimitRule(
            window_seconds=60, max_requests=20, block_seconds=120
        ),
        "general": RateLimitRule(window_seconds=60, max_requests=100, block_seconds=60),
    }


class OcrSettings(BaseModel):
    """Settings for validating text handed over by the OCR collaborator."""

    low_confidence_threshold: float = 0.7


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """Application settings with YAML + environment variable support.

    Configuration is loaded from multiple sources with the following priority
    (highest to lowest):
    1. Environment variables
    2. .env file (secrets only)
    3. Environment-specific YAML files (config/environments/{APP_ENV}/)
    4. Base YAML files (config/base/)
    5. Default values in code

    Environment variables can override any setting using the nested delimiter '__'.
    For example: ANALYSIS__CHUNK_SIZE=4 overrides analysis.chunk_size.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    # =========================================================================
    # Environment Selection (from .env)
    # =========================================================================
    APP_ENV: str = "development"

    # =========================================================================
    # Nested Configuration Sections (from YAML)
    # =========================================================================
    app: AppSettings = AppSettings()
    server: ServerSettings = ServerSettings()
    api: ApiSettings = ApiSettings()
    logging: LoggingSettings = LoggingSettings()
    redis: RedisSettings = RedisSettings()
    cache: CacheSettings = CacheSettings()
    classifier: ClassifierSettings = ClassifierSettings()
    analysis: AnalysisSettings = AnalysisSettings()
    rate_limiting: RateLimitingSettings = RateLimitingSettings()
    ocr: OcrSettings = OcrSettings()

    # =========================================================================
    # Secrets (from .env only - never in YAML)
    # =========================================================================
    REDIS_PASSWORD: str = ""
    CLASSIFIER_API_KEY: str = ""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings loading order.

        Priority (highest to lowest):
        1. init_settings - Values passed to Settings()
        2. env_settings - Environment variables
        3. dotenv_settings - .env file (secrets)
        4. yaml_settings - YAML files (base + environment)
        5. file_secret_settings - Docker secrets
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            MultiYamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    # =========================================================================
    # Computed Fields
    # =========================================================================

    @property
    def redis_cache_url(self) -> str:
        """Build the Redis cache connection URL.

        Supports Redis 6.0+ ACL authentication with username.
        URL format: redis://[user:password@]host:port/db
        """
        auth_part = ""
        if self.redis.user and self.REDIS_PASSWORD:
            auth_part = f"{self.redis.user}:{self.REDIS_PASSWORD}@"
        elif self.REDIS_PASSWORD:
            auth_part = f":{self.REDIS_PASSWORD}@"
        elif self.redis.user:
            auth_part = f"{self.redis.user}@"

        return (
            f"redis://{auth_part}{self.redis.host}:{self.redis.port}"
            f"/{self.redis.cache_db}"
        )

    # =========================================================================
    # Environment Helpers
    # =========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.APP_ENV == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in test environment."""
        return self.APP_ENV == "test"

    @property
    def is_non_production(self) -> bool:
        """Check if running somewhere API docs and debug output are allowed."""
        return self.APP_ENV in ("local", "test", "development")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Using lru_cache ensures settings are only loaded once,
    improving performance and consistency.
    """
    return Settings()
