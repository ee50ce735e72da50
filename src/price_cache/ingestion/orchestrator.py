"""
Price cache refresh orchestrator.

Loads the previous snapshot and the catalog, resolves only the games
the snapshot does not know, fetches prices for every known game in a
single request, and replaces the snapshot with the merged result.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from uuid import UUID, uuid4

from price_cache.cache import (
    GameIndex,
    SnapshotSummary,
    load_snapshot,
    merge_prices,
    reconcile,
    summarize,
    write_snapshot,
)
from price_cache.catalog import catalog_steam_ids, load_catalog
from price_cache.config import Settings, get_settings
from price_cache.ingestion.contracts import PriceBatch
from price_cache.ingestion.extractors import GameLookupExtractor, GamePricesExtractor
from price_cache.ingestion.resolver import resolve_uncached
from price_cache.ingestion.utils.rate_limiter import RateLimiter, RateLimiterConfig
from price_cache.logger import get_logger, run_context


class RefreshAbortedError(Exception):
    """A refresh stopped before writing; the previous snapshot is untouched."""

    pass


class NoResolvableGamesError(RefreshAbortedError):
    """No catalog game could be resolved to an ITAD game."""

    pass


class PriceFetchError(RefreshAbortedError):
    """The batch price request failed."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass
class RefreshResult:
    """Result of a complete refresh run."""

    run_id: UUID
    started_at: datetime
    completed_at: datetime
    catalog_games: int
    unique_games: int
    cached: int
    looked_up: int
    resolved: int
    retired: int
    snapshot_path: Path
    summary: SnapshotSummary
    errors: list[dict[str, Any]] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.errors)

    @property
    def duration_seconds(self) -> float:
        return (self.completed_at - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": str(self.run_id),
            "duration_seconds": round(self.duration_seconds, 2),
            "catalog_games": self.catalog_games,
            "unique_games": self.unique_games,
            "cached": self.cached,
            "looked_up": self.looked_up,
            "resolved": self.resolved,
            "failed": self.failed,
            "retired": self.retired,
            "snapshot_path": str(self.snapshot_path),
            "summary": self.summary.to_dict(),
            "errors": self.errors,
        }


class PriceCacheOrchestrator:
    """
    Orchestrates one refresh of the price snapshot.

    Example:
        >>> async with PriceCacheOrchestrator() as orchestrator:
        ...     result = await orchestrator.run()
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        lookup_extractor: GameLookupExtractor | None = None,
        prices_extractor: GamePricesExtractor | None = None,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._logger = get_logger(__name__, component="orchestrator")

        self._owned: list[Any] = []
        if lookup_extractor is None:
            lookup_extractor = GameLookupExtractor(
                config=self._settings.itad,
                retry_config=self._settings.retry,
            )
            self._owned.append(lookup_extractor)
        if prices_extractor is None:
            prices_extractor = GamePricesExtractor(
                config=self._settings.itad,
                retry_config=self._settings.retry,
            )
            self._owned.append(prices_extractor)

        self._lookup = lookup_extractor
        self._prices = prices_extractor
        self._rate_limiter = rate_limiter or RateLimiter(
            RateLimiterConfig(min_interval_seconds=self._settings.itad.lookup_interval_seconds)
        )

    async def close(self) -> None:
        for extractor in self._owned:
            await extractor.close()

    async def __aenter__(self) -> "PriceCacheOrchestrator":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def run(
        self,
        *,
        on_progress: Callable[[int, int], None] | None = None,
    ) -> RefreshResult:
        """
        Refresh the snapshot.

        Raises:
            CatalogError: If the catalog cannot be loaded
            NoResolvableGamesError: If no game is known after resolution
            PriceFetchError: If the batch price request fails
        """
        run_id = uuid4()
        with run_context(str(run_id)):
            return await self._refresh(run_id, on_progress)

    async def _refresh(
        self,
        run_id: UUID,
        on_progress: Callable[[int, int], None] | None,
    ) -> RefreshResult:
        started_at = datetime.now(timezone.utc)
        cache = self._settings.cache
        log = self._logger

        log.info("Starting price cache refresh", snapshot=str(cache.snapshot_path))

        index = load_snapshot(cache.snapshot_path)

        entries = load_catalog(cache.catalog_path)
        steam_ids = catalog_steam_ids(entries)
        log.info("Processing unique Steam IDs", catalog_games=len(entries), unique=len(steam_ids))

        retired = 0
        if not cache.retain_delisted:
            retired = len(index.retain_steam_ids(steam_ids))
            if retired:
                log.info("Retired games no longer in the catalog", retired=retired)

        plan = reconcile(steam_ids, index)
        log.info(
            "Reconciled catalog against cache",
            cached=len(plan.cached_ids),
            to_lookup=len(plan.uncached_ids),
            hit_rate=f"{plan.hit_rate:.1f}%",
        )

        report = await resolve_uncached(
            plan.uncached_ids,
            index,
            self._lookup,
            self._rate_limiter,
            on_progress=on_progress,
        )

        game_ids = index.game_ids
        log.info(
            "Known games after resolution",
            games=len(game_ids),
            cached=len(plan.cached_ids),
            resolved=len(report.resolved),
        )
        if not game_ids:
            raise NoResolvableGamesError("No valid games found; snapshot left untouched")

        prices = await self._fetch_prices(index)
        records = merge_prices(prices.prices, index)
        snapshot_path = write_snapshot(cache.snapshot_path, records)
        summary = summarize(records)

        result = RefreshResult(
            run_id=run_id,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
            catalog_games=len(entries),
            unique_games=len(steam_ids),
            cached=len(plan.cached_ids),
            looked_up=report.requested,
            resolved=len(report.resolved),
            retired=retired,
            snapshot_path=snapshot_path,
            summary=summary,
            errors=report.failed,
        )

        log.info(
            "Refresh complete",
            duration_seconds=round(result.duration_seconds, 2),
            records=summary.total,
            with_deals=summary.with_deals,
            on_sale=summary.on_sale,
            unmatched=summary.unmatched,
            failed_lookups=result.failed,
        )
        return result

    async def _fetch_prices(self, index: GameIndex) -> PriceBatch:
        result = await self._prices.extract(index.game_ids, country_code=self._settings.itad.country)
        if not result.success or result.data is None:
            raise PriceFetchError(
                f"Price fetch failed: {result.error_message}",
                status_code=result.status_code,
            )
        return result.data
