"""Ingredient analysis service.

Turns raw label text into a per-ingredient classification and a
conservative product verdict.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

from label_analyzer.cache.store import normalize_ingredient_name
from label_analyzer.cache.writer import CacheWrite
from label_analyzer.observability.logging import get_logger
from label_analyzer.parsing.pipeline import parse
from label_analyzer.schemas.analysis import AnalysisResult, ClassifiedIngredient
from label_analyzer.schemas.classification import IngredientClassification
from label_analyzer.schemas.enums import IngredientStatus, OverallVerdict
from label_analyzer.services.analysis.constants import (
    CACHED_BASIC_NOTES,
    CACHED_CONFIDENCE,
    FALLBACK_CONFIDENCE,
    ITEM_FAILED_BASIC_NOTE,
    ITEM_FAILED_NOTE,
    SERVICE_DOWN_BASIC_NOTE,
    SERVICE_DOWN_NOTE,
)
from label_analyzer.services.analysis.exceptions import ServiceNotInitializedError
from label_analyzer.services.analysis.progress import ProgressReporter
from label_analyzer.services.analysis.retry import (
    describe_failure,
    is_retryable_error,
    is_service_down_error,
    retry_with_backoff,
)
from label_analyzer.services.rate_limit.constants import OperationClass


if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from label_analyzer.cache.store import CacheStoreProtocol
    from label_analyzer.cache.writer import BackgroundCacheWriter
    from label_analyzer.core.config import AnalysisSettings
    from label_analyzer.schemas.classification import CacheEntry
    from label_analyzer.schemas.ingredient import ParsedIngredient
    from label_analyzer.services.analysis.classifier import (
        IngredientClassifierProtocol,
    )
    from label_analyzer.services.analysis.progress import ProgressCallback
    from label_analyzer.services.rate_limit.service import RateLimiter


logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Resolution:
    """Classification of one unique ingredient key and where it came from."""

    classification: IngredientClassification
    from_cache: bool = False
    is_fallback: bool = False


def display_name(name: str) -> str:
    """Capitalize each word, leaving the rest of the word untouched.

    >>> display_name("organic cane sugar")
    'Organic Cane Sugar'
    >>> display_name("vitamin B12")
    'Vitamin B12'
    """
    return " ".join(word[:1].upper() + word[1:] for word in name.split(" "))


def service_down_fallback(name: str, error: BaseException) -> IngredientClassification:
    """Conservative result for an ingredient the classifier could not reach."""
    return IngredientClassification(
        status=IngredientStatus.UNKNOWN,
        confidence=FALLBACK_CONFIDENCE,
        educational_note=SERVICE_DOWN_NOTE.format(
            name=name, reason=describe_failure(error)
        ),
        basic_note=SERVICE_DOWN_BASIC_NOTE,
        reasoning="Classification service unavailable",
    )


def item_failed_fallback(name: str) -> IngredientClassification:
    """Conservative result for an ingredient whose classification failed."""
    return IngredientClassification(
        status=IngredientStatus.UNKNOWN,
        confidence=FALLBACK_CONFIDENCE,
        educational_note=ITEM_FAILED_NOTE.format(name=name),
        basic_note=ITEM_FAILED_BASIC_NOTE,
        reasoning="Individual classification failed",
    )


def from_cache_entry(entry: CacheEntry) -> IngredientClassification:
    """Build a classification from a cache hit."""
    return IngredientClassification(
        status=entry.status,
        confidence=CACHED_CONFIDENCE,
        educational_note=entry.educational_note,
        basic_note=CACHED_BASIC_NOTES.get(
            IngredientStatus(entry.status), entry.basic_note
        ),
    )


def compute_verdict(ingredients: Sequence[ClassifiedIngredient]) -> OverallVerdict:
    """Return CLEAN only when there is at least one ingredient and all are clean.

    Unknown ingredients count against the product.
    """
    if ingredients and all(i.status == IngredientStatus.CLEAN for i in ingredients):
        return OverallVerdict.CLEAN
    return OverallVerdict.CONCERNING


class AnalysisService:
    """Service for analyzing ingredient labels.

    Orchestrates:
    1. Per-caller rate limiting (classification quota)
    2. Label text parsing
    3. Cache lookup for every unique ingredient
    4. Concurrent chunked classification of cache misses
    5. Background cache writes for fresh classifications
    6. Re-assembly in label order and the product verdict

    Failure Strategy:
    - Transient classifier errors: chunk retried with exponential backoff
    - Classifier down: every chunk member gets an "unknown" fallback
    - Malformed batch answer: chunk members classified one by one
    - Cache errors: treated as misses; writes are best effort
    """

    def __init__(
        self,
        classifier: IngredientClassifierProtocol,
        rate_limiter: RateLimiter,
        settings: AnalysisSettings,
        cache_store: CacheStoreProtocol | None = None,
        cache_writer: BackgroundCacheWriter | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            classifier: Classifies ingredients and identifies products.
            rate_limiter: Limiter checked before any work.
            settings: Chunking, retry and progress settings.
            cache_store: Optional classification cache.
            cache_writer: Optional background writer for cache upserts.
        """
        self._classifier = classifier
        self._rate_limiter = rate_limiter
        self._settings = settings
        self._cache_store = cache_store
        self._cache_writer = cache_writer
        self._initialized = False

    async def initialize(self) -> None:
        """Start the background cache writer.

        Called during application startup.
        """
        if self._cache_writer is not None:
            await self._cache_writer.start()
        self._initialized = True
        logger.info(
            "AnalysisService initialized",
            cache_enabled=self._cache_store is not None,
        )

    async def shutdown(self) -> None:
        """Flush pending cache writes.

        Called during application shutdown.
        """
        if self._cache_writer is not None:
            await self._cache_writer.stop()
        self._initialized = False
        logger.info("AnalysisService shutdown")

    async def analyze(
        self,
        text: str,
        caller_identity: str,
        on_progress: ProgressCallback | None = None,
    ) -> AnalysisResult:
        """Analyze a label's ingredient text.

        Args:
            text: Raw OCR text.
            caller_identity: Identity the classification quota is charged to.
            on_progress: Optional sync or async callback receiving progress
                events.

        Returns:
            One classified entry per parsed ingredient, in label order.

        Raises:
            ServiceNotInitializedError: If called before ``initialize()``.
            RateLimitExceededError: If the caller is over quota.
            LabelTextError: If the text is unusable.
        """
        if not self._initialized:
            msg = "AnalysisService not initialized"
            raise ServiceNotInitializedError(msg)

        await self._rate_limiter.enforce(
            caller_identity, OperationClass.CLASSIFICATION
        )

        parsed = parse(text)
        if not parsed:
            logger.info("No ingredients parsed, returning conservative verdict")
            return AnalysisResult(
                overall_verdict=OverallVerdict.CONCERNING,
                ingredients=[],
                total_ingredients=0,
                concerning_count=0,
                clean_count=0,
                unknown_count=0,
            )

        keys = [normalize_ingredient_name(ingredient.name) for ingredient in parsed]
        unique_keys = list(dict.fromkeys(keys))
        reporter = ProgressReporter(
            on_progress,
            total=len(unique_keys),
            stagger_seconds=self._settings.progress_stagger_seconds,
        )

        product_task = asyncio.create_task(
            self._identify_product(
                ", ".join(i.name for i in parsed if i.parent_ingredient is None)
            )
        )
        try:
            resolutions = await self._resolve(unique_keys, reporter)
            product = await product_task
        finally:
            if not product_task.done():
                product_task.cancel()

        ingredients = [
            self._merge(ingredient, resolutions[key])
            for ingredient, key in zip(parsed, keys, strict=True)
        ]
        clean = sum(1 for i in ingredients if i.status == IngredientStatus.CLEAN)
        unknown = sum(1 for i in ingredients if i.status == IngredientStatus.UNKNOWN)

        result = AnalysisResult(
            overall_verdict=compute_verdict(ingredients),
            ingredients=ingredients,
            total_ingredients=len(ingredients),
            concerning_count=len(ingredients) - clean,
            clean_count=clean,
            unknown_count=unknown,
            product_identification=product,
        )
        logger.info(
            "Analysis complete",
            verdict=result.overall_verdict,
            total=result.total_ingredients,
            concerning=result.concerning_count,
            unknown=unknown,
            cache_hits=sum(1 for i in ingredients if i.from_cache),
        )
        return result

    async def _resolve(
        self,
        keys: list[str],
        reporter: ProgressReporter,
    ) -> dict[str, Resolution]:
        cached = await self._lookup_cache(keys)
        resolutions = {
            key: Resolution(from_cache_entry(entry), from_cache=True)
            for key, entry in cached.items()
        }
        await reporter.cache_hits(len(resolutions))

        misses = [key for key in keys if key not in resolutions]
        if not misses:
            return resolutions

        size = self._settings.chunk_size
        chunks = [misses[i : i + size] for i in range(0, len(misses), size)]
        chunk_results = await asyncio.gather(
            *(
                self._classify_chunk(chunk, index * size, reporter)
                for index, chunk in enumerate(chunks)
            )
        )
        for chunk_result in chunk_results:
            resolutions.update(chunk_result)

        self._queue_cache_writes(
            (key, resolutions[key]) for key in misses if key in resolutions
        )
        return resolutions

    async def _lookup_cache(self, keys: list[str]) -> dict[str, CacheEntry]:
        if self._cache_store is None:
            return {}
        try:
            return await self._cache_store.get_many(keys)
        except Exception:
            logger.exception("Cache lookup failed, treating all as misses")
            return {}

    async def _classify_chunk(
        self,
        chunk: list[str],
        offset: int,
        reporter: ProgressReporter,
    ) -> dict[str, Resolution]:
        """Classify one chunk, degrading instead of raising."""
        try:
            results = await retry_with_backoff(
                lambda: self._classifier.classify_batch(chunk),
                should_retry=is_retryable_error,
                max_attempts=self._settings.batch_max_retries + 1,
                initial_delay=self._settings.initial_backoff_seconds,
                factor=self._settings.backoff_factor,
                max_delay=self._settings.max_backoff_seconds,
            )
            resolutions = {
                name: Resolution(classification)
                for name, classification in zip(chunk, results, strict=True)
            }
        except Exception as e:
            if is_service_down_error(e):
                logger.warning(
                    "Classifier unavailable, using fallback for chunk",
                    chunk_size=len(chunk),
                    error=str(e),
                )
                resolutions = {
                    name: Resolution(service_down_fallback(name, e), is_fallback=True)
                    for name in chunk
                }
            else:
                logger.warning(
                    "Batch classification failed, classifying individually",
                    chunk_size=len(chunk),
                    error=str(e),
                )
                resolutions = await self._classify_individually(chunk)

        await reporter.analyzing(chunk, offset)
        await reporter.classified(
            [(name, resolutions[name].classification) for name in chunk]
        )
        return resolutions

    async def _classify_individually(self, names: list[str]) -> dict[str, Resolution]:
        results = await asyncio.gather(*(self._classify_one(name) for name in names))
        return dict(zip(names, results, strict=True))

    async def _classify_one(self, name: str) -> Resolution:
        try:
            classification = await retry_with_backoff(
                lambda: self._classifier.classify(name),
                should_retry=is_retryable_error,
                max_attempts=self._settings.item_max_retries + 1,
                initial_delay=self._settings.initial_backoff_seconds,
                factor=self._settings.backoff_factor,
                max_delay=self._settings.max_backoff_seconds,
            )
        except Exception as e:
            logger.warning(
                "Ingredient classification failed", ingredient=name, error=str(e)
            )
            return Resolution(item_failed_fallback(name), is_fallback=True)
        return Resolution(classification)

    def _queue_cache_writes(self, items: Iterable[tuple[str, Resolution]]) -> None:
        if self._cache_writer is None:
            return
        queued = 0
        for key, resolution in items:
            classification = resolution.classification
            if resolution.is_fallback:
                continue
            if self._cache_writer.enqueue(
                CacheWrite(
                    name=key,
                    status=classification.status,
                    educational_note=classification.educational_note,
                    basic_note=classification.basic_note,
                )
            ):
                queued += 1
        logger.debug("Queued cache writes", count=queued)

    async def _identify_product(self, ingredient_list: str) -> str:
        try:
            product = await self._classifier.identify_product(ingredient_list)
        except Exception as e:
            logger.warning("Product identification failed", error=str(e))
            return self._settings.product_fallback
        return product or self._settings.product_fallback

    @staticmethod
    def _merge(
        ingredient: ParsedIngredient,
        resolution: Resolution,
    ) -> ClassifiedIngredient:
        classification = resolution.classification
        return ClassifiedIngredient(
            name=display_name(ingredient.name),
            status=classification.status,
            confidence=classification.confidence,
            educational_note=classification.educational_note,
            basic_note=classification.basic_note,
            sources=classification.sources,
            modifiers=ingredient.modifiers,
            is_minor_ingredient=ingredient.is_minor_ingredient,
            minor_threshold=ingredient.minor_threshold,
            section=ingredient.section,
            parent_ingredient=(
                display_name(ingredient.parent_ingredient)
                if ingredient.parent_ingredient
                else None
            ),
            from_cache=resolution.from_cache,
        )
