"""Classification cache keyed by normalized ingredient name.

Entries carry their own ``expires_at`` and are treated as misses once it
passes (lazy expiry). Redis evicts them later, after a grace period.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import orjson

from label_analyzer.observability.logging import get_logger
from label_analyzer.schemas.classification import CacheEntry
from label_analyzer.schemas.enums import IngredientStatus


if TYPE_CHECKING:
    from collections.abc import Iterable

    from redis.asyncio import Redis

logger = get_logger(__name__)

DEFAULT_TTL_DAYS = 180

_TRAILING_PUNCTUATION = re.compile(r"[.!?;:]+$")
_WHITESPACE = re.compile(r"\s+")


def normalize_ingredient_name(name: str) -> str:
    """Normalize a name into its cache key form.

    >>> normalize_ingredient_name("  Natural Flavors: ")
    'natural flavors'
    """
    normalized = name.lower().replace(":", " ").strip()
    normalized = _TRAILING_PUNCTUATION.sub("", normalized)
    return _WHITESPACE.sub(" ", normalized).strip()


@runtime_checkable
class CacheStoreProtocol(Protocol):
    """Interface of the classification cache."""

    async def get_many(self, names: Iterable[str]) -> dict[str, CacheEntry]:
        """Return unexpired entries keyed by normalized name; misses are absent."""
        ...

    async def upsert(
        self,
        name: str,
        status: IngredientStatus,
        educational_note: str,
        basic_note: str,
        ttl_days: int = DEFAULT_TTL_DAYS,
    ) -> bool:
        """Store a classification; return False when it was not stored."""
        ...


class IngredientCacheStore:
    """Redis-backed classification cache.

    Failures are logged and degrade to "miss" on read and "not stored" on
    write; nothing here raises into the analysis path.
    """

    def __init__(
        self,
        client: Redis[Any],
        *,
        key_prefix: str = "ingredient",
        eviction_grace_days: int = 30,
    ) -> None:
        """Initialize the store.

        Args:
            client: Redis client (bytes responses).
            key_prefix: Namespace for cache keys.
            eviction_grace_days: How long Redis keeps an entry past its
                logical expiry.
        """
        self._client = client
        self._key_prefix = key_prefix
        self._eviction_grace = timedelta(days=eviction_grace_days)

    def _make_key(self, normalized: str) -> str:
        return f"{self._key_prefix}:{normalized}"

    async def get_many(self, names: Iterable[str]) -> dict[str, CacheEntry]:
        """Look up many names in one round trip.

        Args:
            names: Ingredient names, normalized or not.

        Returns:
            Unexpired entries keyed by normalized name.
        """
        keys = list(dict.fromkeys(normalize_ingredient_name(n) for n in names))
        keys = [key for key in keys if key]
        if not keys:
            return {}

        try:
            raw_values = await self._client.mget([self._make_key(k) for k in keys])
        except Exception:
            logger.exception("Cache lookup failed", keys=len(keys))
            return {}

        now = datetime.now(UTC)
        entries: dict[str, CacheEntry] = {}
        expired = 0
        for key, raw in zip(keys, raw_values, strict=True):
            if raw is None:
                continue
            try:
                entry = CacheEntry.model_validate(orjson.loads(raw))
            except (orjson.JSONDecodeError, ValueError):
                logger.warning("Discarding unreadable cache entry", key=key)
                continue
            if entry.is_expired(now):
                expired += 1
                continue
            entries[key] = entry

        logger.debug(
            "Cache lookup complete",
            requested=len(keys),
            hits=len(entries),
            expired=expired,
        )
        return entries

    async def upsert(
        self,
        name: str,
        status: IngredientStatus,
        educational_note: str,
        basic_note: str,
        ttl_days: int = DEFAULT_TTL_DAYS,
    ) -> bool:
        """Insert or replace the entry for ``name``.

        Unknown statuses are fallbacks, not classifications, and are never
        stored.

        Returns:
            True if the entry was written.
        """
        key = normalize_ingredient_name(name)
        if not key or status == IngredientStatus.UNKNOWN:
            return False

        now = datetime.now(UTC)
        ttl = timedelta(days=ttl_days)
        entry = CacheEntry(
            ingredient_name=key,
            status=status,
            educational_note=educational_note,
            basic_note=basic_note,
            cached_at=now,
            expires_at=now + ttl,
        )

        try:
            await self._client.set(
                self._make_key(key),
                orjson.dumps(entry.model_dump(mode="json")),
                ex=ttl + self._eviction_grace,
            )
        except Exception:
            logger.exception("Cache write failed", ingredient=key)
            return False

        logger.debug("Cached classification", ingredient=key, status=status)
        return True
