"""
Catalog reconciliation.

Splits the catalog's Steam IDs into those the cached index already
resolves and those that need a remote lookup.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from price_cache.cache.index import GameIndex


@dataclass
class ReconciliationPlan:
    """Cache hits and misses, both in first-occurrence catalog order."""

    cached_ids: list[str] = field(default_factory=list)
    uncached_ids: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.cached_ids) + len(self.uncached_ids)

    @property
    def hit_rate(self) -> float:
        if self.total == 0:
            return 100.0
        return (len(self.cached_ids) / self.total) * 100


def unique_steam_ids(steam_ids: Iterable[str]) -> list[str]:
    """Deduplicate, keeping the first occurrence of each ID."""
    return list(dict.fromkeys(steam_ids))


def reconcile(steam_ids: Iterable[str], index: GameIndex) -> ReconciliationPlan:
    """
    Partition Steam IDs into cached and uncached.

    Duplicates in ``steam_ids`` are collapsed first.
    """
    plan = ReconciliationPlan()
    for steam_id in unique_steam_ids(steam_ids):
        if index.has_steam_id(steam_id):
            plan.cached_ids.append(steam_id)
        else:
            plan.uncached_ids.append(steam_id)
    return plan
