"""
Snapshot cache: index, reconciliation, merge and persistence.
"""

from price_cache.cache.index import GameIndex
from price_cache.cache.merge import SnapshotSummary, merge_prices, summarize
from price_cache.cache.reconcile import ReconciliationPlan, reconcile, unique_steam_ids
from price_cache.cache.snapshot import (
    decode_snapshot,
    load_snapshot,
    serialize_snapshot,
    write_snapshot,
)

__all__ = [
    "GameIndex",
    "ReconciliationPlan",
    "SnapshotSummary",
    "decode_snapshot",
    "load_snapshot",
    "merge_prices",
    "reconcile",
    "serialize_snapshot",
    "summarize",
    "unique_steam_ids",
    "write_snapshot",
]
