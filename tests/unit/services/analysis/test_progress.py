"""Unit tests for progress reporting."""

from __future__ import annotations

import pytest

from label_analyzer.schemas.enums import IngredientStatus, ProgressEventType
from label_analyzer.schemas.progress import ProgressEvent
from label_analyzer.services.analysis.progress import (
    ProgressReporter,
    ingredient_emoji,
)
from tests.fixtures.classifications import make_classification


pytestmark = pytest.mark.unit


class TestIngredientEmoji:
    """Tests for ingredient_emoji."""

    def test_matches_name_fragment(self) -> None:
        """Should pick the emoji of the first matching fragment."""
        assert ingredient_emoji("Cane Sugar") == "\U0001f36c"
        assert ingredient_emoji("Citric Acid") == "\U0001f9ea"

    def test_default(self) -> None:
        """Should fall back to the microscope."""
        assert ingredient_emoji("Xanthan Gum") == "\U0001f52c"


class TestProgressReporter:
    """Tests for ProgressReporter."""

    async def test_analyzing_events_use_offset(self) -> None:
        """Should number analyzing events from the chunk offset."""
        events: list[ProgressEvent] = []
        reporter = ProgressReporter(events.append, total=4, stagger_seconds=0)

        await reporter.analyzing(["salt", "water"], offset=2)

        assert [(e.type, e.current, e.progress) for e in events] == [
            (ProgressEventType.ANALYZING, 3, 75.0),
            (ProgressEventType.ANALYZING, 4, 100.0),
        ]
        assert events[0].ingredient == "salt"
        assert events[0].message == "Analyzed salt..."
        assert reporter.completed == 0

    async def test_classified_events_and_halfway(self) -> None:
        """Should advance completion and send the halfway message once."""
        events: list[ProgressEvent] = []

        async def collect(event: ProgressEvent) -> None:
            events.append(event)

        reporter = ProgressReporter(collect, total=3, stagger_seconds=0)

        await reporter.classified(
            [
                ("water", make_classification(IngredientStatus.CLEAN)),
                ("bht", make_classification(IngredientStatus.CONCERNING)),
                ("dye", make_classification(IngredientStatus.UNKNOWN)),
            ]
        )

        assert [e.type for e in events] == [
            ProgressEventType.CLASSIFIED,
            ProgressEventType.CLASSIFIED,
            ProgressEventType.ENCOURAGEMENT,
            ProgressEventType.CLASSIFIED,
        ]
        assert [e.message for e in events if e.type == "classified"] == [
            "water looks clean!",
            "bht raises flags",
            "dye could not be analyzed",
        ]
        assert events[-1].current == 3
        assert events[-1].progress == 100.0
        assert reporter.completed == 3

    async def test_staggers_classified_events(self) -> None:
        """Should pause between classified events but not before the first."""
        delays: list[float] = []

        async def fake_sleep(delay: float) -> None:
            delays.append(delay)

        reporter = ProgressReporter(
            None, total=3, stagger_seconds=0.15, sleep=fake_sleep
        )

        await reporter.classified(
            [(name, make_classification()) for name in ("a", "b", "c")]
        )

        assert delays == [0.15, 0.15]

    async def test_cache_hits_count_toward_progress(self) -> None:
        """Should report cache hits as an encouragement event."""
        events: list[ProgressEvent] = []
        reporter = ProgressReporter(events.append, total=10, stagger_seconds=0)

        await reporter.cache_hits(3)
        await reporter.cache_hits(0)

        assert len(events) == 1
        assert events[0].type == ProgressEventType.ENCOURAGEMENT
        assert events[0].message == "Found 3 ingredients we already know"
        assert events[0].progress == 30.0
        assert reporter.completed == 3

    async def test_failing_callback_is_ignored(self) -> None:
        """Should keep going when the consumer raises."""

        def broken(event: ProgressEvent) -> None:
            raise RuntimeError("consumer gone")

        reporter = ProgressReporter(broken, total=2, stagger_seconds=0)

        await reporter.classified([("salt", make_classification())])

        assert reporter.completed == 1

    async def test_single_ingredient_has_no_halfway_message(self) -> None:
        """Should skip the halfway message for one ingredient."""
        events: list[ProgressEvent] = []
        reporter = ProgressReporter(events.append, total=1, stagger_seconds=0)

        await reporter.classified([("salt", make_classification())])

        assert [e.type for e in events] == [ProgressEventType.CLASSIFIED]
