"""Progress events for a running analysis.

Events are advisory: a failing or slow consumer never affects the result.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import TYPE_CHECKING

from label_analyzer.observability.logging import get_logger
from label_analyzer.schemas.enums import IngredientStatus, ProgressEventType
from label_analyzer.schemas.progress import ProgressEvent
from label_analyzer.services.analysis.constants import (
    ANALYZING_MESSAGE,
    CACHE_HIT_ENCOURAGEMENT,
    CLEAN_EMOJI,
    CLEAN_MESSAGE,
    CONCERNING_EMOJI,
    CONCERNING_MESSAGE,
    DEFAULT_INGREDIENT_EMOJI,
    ENCOURAGEMENT_EMOJI,
    HALFWAY_ENCOURAGEMENT,
    INGREDIENT_EMOJI,
    UNKNOWN_MESSAGE,
)


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from label_analyzer.schemas.classification import IngredientClassification

    ProgressCallback = Callable[[ProgressEvent], Awaitable[None] | None]


logger = get_logger(__name__)


def ingredient_emoji(name: str) -> str:
    """Pick an emoji for an ingredient name."""
    lowered = name.lower()
    for fragment, emoji in INGREDIENT_EMOJI:
        if fragment in lowered:
            return emoji
    return DEFAULT_INGREDIENT_EMOJI


def _classified_message(name: str, status: IngredientStatus) -> tuple[str, str]:
    if status == IngredientStatus.CLEAN:
        return CLEAN_MESSAGE.format(name=name), CLEAN_EMOJI
    if status == IngredientStatus.CONCERNING:
        return CONCERNING_MESSAGE.format(name=name), CONCERNING_EMOJI
    return UNKNOWN_MESSAGE.format(name=name), CONCERNING_EMOJI


class ProgressReporter:
    """Emit progress events for one analysis run.

    ``total`` counts unique ingredients; cache hits and classified
    ingredients both advance ``completed``.
    """

    def __init__(
        self,
        callback: ProgressCallback | None,
        total: int,
        *,
        stagger_seconds: float = 0.15,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._callback = callback
        self._total = total
        self._stagger = stagger_seconds
        self._sleep = sleep
        self._completed = 0
        self._halfway_sent = False

    @property
    def completed(self) -> int:
        """Ingredients resolved so far."""
        return self._completed

    def _percent(self, current: int) -> float:
        if self._total <= 0:
            return 100.0
        return round(min(current / self._total, 1.0) * 100, 1)

    async def emit(self, event: ProgressEvent) -> None:
        """Deliver one event; callback errors are logged and ignored."""
        if self._callback is None:
            return
        try:
            result = self._callback(event)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Progress callback failed", event_type=event.type)

    async def cache_hits(self, count: int) -> None:
        """Record ingredients resolved from the cache."""
        if count <= 0:
            return
        self._completed += count
        await self.emit(
            ProgressEvent(
                type=ProgressEventType.ENCOURAGEMENT,
                current=self._completed,
                total=self._total,
                progress=self._percent(self._completed),
                message=CACHE_HIT_ENCOURAGEMENT.format(count=count),
                emoji=ENCOURAGEMENT_EMOJI,
            )
        )
        await self._maybe_halfway()

    async def analyzing(self, names: Sequence[str], offset: int) -> None:
        """Emit one ``analyzing`` event per ingredient of a returned chunk."""
        for position, name in enumerate(names, start=1):
            current = min(offset + position, self._total)
            await self.emit(
                ProgressEvent(
                    type=ProgressEventType.ANALYZING,
                    current=current,
                    total=self._total,
                    progress=self._percent(current),
                    message=ANALYZING_MESSAGE.format(name=name),
                    emoji=ingredient_emoji(name),
                    ingredient=name,
                )
            )

    async def classified(
        self,
        results: Sequence[tuple[str, IngredientClassification]],
    ) -> None:
        """Emit staggered ``classified`` events for a resolved chunk."""
        for position, (name, classification) in enumerate(results):
            if position and self._stagger > 0:
                await self._sleep(self._stagger)
            self._completed += 1
            message, emoji = _classified_message(name, classification.status)
            await self.emit(
                ProgressEvent(
                    type=ProgressEventType.CLASSIFIED,
                    current=self._completed,
                    total=self._total,
                    progress=self._percent(self._completed),
                    message=message,
                    emoji=emoji,
                    ingredient=name,
                    status=classification.status,
                )
            )
            await self._maybe_halfway()

    async def _maybe_halfway(self) -> None:
        if self._halfway_sent or self._total < 2:
            return
        if self._completed * 2 < self._total:
            return
        self._halfway_sent = True
        await self.emit(
            ProgressEvent(
                type=ProgressEventType.ENCOURAGEMENT,
                current=self._completed,
                total=self._total,
                progress=self._percent(self._completed),
                message=HALFWAY_ENCOURAGEMENT,
                emoji=ENCOURAGEMENT_EMOJI,
            )
        )
