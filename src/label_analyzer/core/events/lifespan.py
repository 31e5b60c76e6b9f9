"""Application lifespan event handlers.

This module defines the lifespan context manager that handles:
- Application startup: connect Redis, build and start services
- Application shutdown: drain cache writes, close connections
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from label_analyzer.cache.redis import close_redis_pool, init_redis_pool
from label_analyzer.cache.store import IngredientCacheStore
from label_analyzer.cache.writer import BackgroundCacheWriter
from label_analyzer.core.config import Settings, get_settings
from label_analyzer.llm.client.openai_chat import OpenAIChatClient
from label_analyzer.observability.logging import get_logger, setup_logging
from label_analyzer.services.analysis.classifier import LLMIngredientClassifier
from label_analyzer.services.analysis.service import AnalysisService
from label_analyzer.services.rate_limit.service import RateLimiter


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI


logger = get_logger(__name__)


async def _startup(app: FastAPI, settings: Settings) -> None:
    """Initialize all application services during startup.

    Args:
        app: The FastAPI application instance.
        settings: Application settings.
    """
    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
    )
    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.APP_ENV,
        debug=settings.app.debug,
    )

    # Rate limiter (critical - every operation is charged to it)
    rate_limiter = RateLimiter(
        settings.rate_limiting.rules,
        sweep_interval_seconds=settings.rate_limiting.sweep_interval_seconds,
        enabled=settings.rate_limiting.enabled,
    )
    await rate_limiter.start()
    app.state.rate_limiter = rate_limiter

    # Classification cache (optional - non-critical)
    cache_store, cache_writer = await _init_cache(settings)

    # Classifier + analysis service (optional - parsing still works without)
    await _init_analysis_service(app, settings, rate_limiter, cache_store, cache_writer)

    logger.info("Application startup complete")


async def _init_cache(
    settings: Settings,
) -> tuple[IngredientCacheStore | None, BackgroundCacheWriter | None]:
    """Connect Redis and build the cache store and its background writer."""
    if not settings.cache.enabled:
        logger.info("Classification cache disabled")
        return None, None
    try:
        client = await init_redis_pool(settings)
    except Exception:
        logger.exception("Failed to initialize Redis - continuing without cache")
        return None, None

    store = IngredientCacheStore(
        client,
        key_prefix=settings.cache.key_prefix,
        eviction_grace_days=settings.cache.eviction_grace_days,
    )
    writer = BackgroundCacheWriter(
        store,
        max_queue_size=settings.cache.write_queue_size,
        workers=settings.cache.write_workers,
        ttl_days=settings.cache.ttl_days,
    )
    return store, writer


async def _init_analysis_service(
    app: FastAPI,
    settings: Settings,
    rate_limiter: RateLimiter,
    cache_store: IngredientCacheStore | None,
    cache_writer: BackgroundCacheWriter | None,
) -> None:
    """Build the classifier client and the analysis service."""
    app.state.llm_client = None
    app.state.analysis_service = None
    try:
        llm_client = OpenAIChatClient(
            api_key=settings.CLASSIFIER_API_KEY,
            model=settings.classifier.model,
            base_url=settings.classifier.url,
            timeout=settings.classifier.timeout,
            requests_per_minute=settings.classifier.requests_per_minute,
        )
        await llm_client.initialize()
        app.state.llm_client = llm_client

        service = AnalysisService(
            classifier=LLMIngredientClassifier(
                llm_client,
                temperature=settings.classifier.temperature,
                tokens_per_ingredient=settings.classifier.max_tokens_per_ingredient,
                max_tokens_cap=settings.classifier.max_tokens_cap,
            ),
            rate_limiter=rate_limiter,
            settings=settings.analysis,
            cache_store=cache_store,
            cache_writer=cache_writer,
        )
        await service.initialize()
        app.state.analysis_service = service
    except Exception:
        logger.exception(
            "Failed to initialize AnalysisService - label analysis unavailable"
        )


async def _shutdown(app: FastAPI) -> None:
    """Shutdown all application services.

    Args:
        app: The FastAPI application instance.
    """
    logger.info("Shutting down application")

    # Drain pending cache writes before Redis goes away
    if getattr(app.state, "analysis_service", None):
        await app.state.analysis_service.shutdown()
        logger.debug("AnalysisService shutdown")

    if getattr(app.state, "llm_client", None):
        await app.state.llm_client.shutdown()

    if getattr(app.state, "rate_limiter", None):
        await app.state.rate_limiter.stop()

    await close_redis_pool()

    logger.info("Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None - control returns to the application to handle requests.
    """
    settings = getattr(app.state, "settings", None) or get_settings()
    await _startup(app, settings)
    yield
    await _shutdown(app)
