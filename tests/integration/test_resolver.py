"""Tests for rate-limited resolution of uncached Steam IDs."""

import time

import pytest

from price_cache.cache import GameIndex
from price_cache.ingestion.contracts import GameRecord
from price_cache.ingestion.extractors import ExtractionResult
from price_cache.ingestion.resolver import resolve_uncached
from price_cache.ingestion.utils.rate_limiter import RateLimiter, RateLimiterConfig


class TimedLookupExtractor:
    """Resolves Steam IDs from a table and records when each lookup happened."""

    def __init__(self, games: dict[str, str], events: list[str] | None = None) -> None:
        self.games = games
        self.events = events if events is not None else []
        self.calls: list[str] = []
        self.times: list[float] = []

    async def extract(self, steam_id: str) -> ExtractionResult[GameRecord]:
        self.calls.append(steam_id)
        self.times.append(time.perf_counter())
        self.events.append(f"lookup:{steam_id}")
        game_id = self.games.get(steam_id)
        if game_id is None:
            return ExtractionResult(
                success=False,
                error_message=f"Game not found for steam_id={steam_id}",
                status_code=404,
                source="timed_lookup",
                endpoint="fake",
            )
        return ExtractionResult(
            success=True,
            data=GameRecord(steam_id=steam_id, game_id=game_id, title=f"Title {game_id}"),
            source="timed_lookup",
            endpoint="fake",
        )


class RecordingRateLimiter(RateLimiter):
    """Real limiter that also logs each acquire into a shared event list."""

    def __init__(self, config: RateLimiterConfig, events: list[str]) -> None:
        super().__init__(config)
        self.events = events

    async def acquire(self) -> None:
        self.events.append("acquire")
        await super().acquire()


class TestResolveUncached:
    """Tests for resolve_uncached()."""

    @pytest.mark.asyncio
    async def test_lookups_spaced_by_interval(self) -> None:
        interval = 0.2
        limiter = RateLimiter(RateLimiterConfig(min_interval_seconds=interval))
        extractor = TimedLookupExtractor({"100": "g1", "200": "g2", "300": "g3"})

        start = time.perf_counter()
        await resolve_uncached(["100", "200", "300"], GameIndex(), extractor, limiter)  # type: ignore[arg-type]
        end = time.perf_counter()

        # No delay before the first lookup
        assert extractor.times[0] - start < interval / 2
        gaps = [b - a for a, b in zip(extractor.times, extractor.times[1:])]
        assert len(gaps) == 2
        assert all(gap >= interval * 0.9 for gap in gaps)
        # No delay after the last lookup
        assert end - extractor.times[-1] < interval / 2
        assert limiter.total_wait_seconds == pytest.approx(2 * interval, abs=interval / 2)

    @pytest.mark.asyncio
    async def test_limiter_acquired_before_every_lookup(self) -> None:
        events: list[str] = []
        limiter = RecordingRateLimiter(RateLimiterConfig(min_interval_seconds=0), events)
        extractor = TimedLookupExtractor({"100": "g1", "300": "g3"}, events)

        await resolve_uncached(["100", "200", "300"], GameIndex(), extractor, limiter)  # type: ignore[arg-type]

        assert events == [
            "acquire",
            "lookup:100",
            "acquire",
            "lookup:200",
            "acquire",
            "lookup:300",
        ]

    @pytest.mark.asyncio
    async def test_order_and_failures_reported(self) -> None:
        index = GameIndex()
        limiter = RateLimiter(RateLimiterConfig(min_interval_seconds=0))
        extractor = TimedLookupExtractor({"300": "g3", "100": "g1"})
        progress: list[tuple[int, int]] = []

        report = await resolve_uncached(
            ["300", "200", "100"],
            index,
            extractor,  # type: ignore[arg-type]
            limiter,
            on_progress=lambda done, total: progress.append((done, total)),
        )

        assert extractor.calls == ["300", "200", "100"]
        assert report.requested == 3
        assert [r.steam_id for r in report.resolved] == ["300", "100"]
        assert report.failed_ids == ["200"]
        assert report.failed[0]["status_code"] == 404
        assert "not found" in report.failed[0]["error"]
        assert progress == [(1, 3), (2, 3), (3, 3)]
        assert index.game_ids == ["g3", "g1"]
        assert not index.has_steam_id("200")

    @pytest.mark.asyncio
    async def test_empty_input(self) -> None:
        limiter = RateLimiter(RateLimiterConfig(min_interval_seconds=1.0))
        extractor = TimedLookupExtractor({})

        report = await resolve_uncached([], GameIndex(), extractor, limiter)  # type: ignore[arg-type]

        assert report.requested == 0
        assert extractor.calls == []
        assert limiter.total_wait_seconds == 0.0
