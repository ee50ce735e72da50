"""
Rate-limited resolution of uncached Steam IDs.

Lookups run one at a time, in catalog order. A failed lookup is
logged and skipped; it never aborts the run.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from price_cache.cache.index import GameIndex
from price_cache.ingestion.contracts import GameRecord
from price_cache.ingestion.extractors.game_lookup import GameLookupExtractor
from price_cache.ingestion.utils.rate_limiter import RateLimiter
from price_cache.logger import get_logger

logger = get_logger(__name__, component="resolver")


@dataclass
class ResolutionReport:
    """Outcome of resolving a list of Steam IDs."""

    requested: int = 0
    resolved: list[GameRecord] = field(default_factory=list)
    failed: list[dict[str, Any]] = field(default_factory=list)

    @property
    def failed_ids(self) -> list[str]:
        return [f["steam_id"] for f in self.failed]


async def resolve_uncached(
    steam_ids: list[str],
    index: GameIndex,
    extractor: GameLookupExtractor,
    rate_limiter: RateLimiter,
    *,
    on_progress: Callable[[int, int], None] | None = None,
) -> ResolutionReport:
    """
    Look up each Steam ID and add the resolved games to ``index``.

    Args:
        steam_ids: Uncached Steam IDs, already deduplicated
        index: Working index, extended in place as lookups succeed
        extractor: Lookup client
        rate_limiter: Spaces consecutive lookups
        on_progress: Called with (completed, total) after each lookup

    Returns:
        ResolutionReport: Resolved records and per-ID failures
    """
    report = ResolutionReport(requested=len(steam_ids))
    total = len(steam_ids)

    for i, steam_id in enumerate(steam_ids, 1):
        await rate_limiter.acquire()
        logger.info("Looking up game", steam_id=steam_id, progress=f"{i}/{total}")

        result = await extractor.extract(steam_id)

        if result.success and result.data is not None:
            index.add(result.data)
            report.resolved.append(result.data)
        else:
            logger.warning(
                "Skipping unresolved game",
                steam_id=steam_id,
                error=result.error_message,
            )
            report.failed.append(
                {
                    "steam_id": steam_id,
                    "error": result.error_message or "unknown error",
                    "status_code": result.status_code,
                }
            )

        if on_progress:
            on_progress(i, total)

    logger.info(
        "Resolution complete",
        requested=report.requested,
        resolved=len(report.resolved),
        failed=len(report.failed),
    )
    return report
