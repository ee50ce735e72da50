"""
Join of fresh price data onto game metadata.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from price_cache.cache.index import GameIndex
from price_cache.ingestion.contracts import EnrichedPriceRecord, PriceRecord


@dataclass
class SnapshotSummary:
    """Counts reported after a refresh."""

    total: int
    with_deals: int
    on_sale: int
    unmatched: int

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "with_deals": self.with_deals,
            "on_sale": self.on_sale,
            "unmatched": self.unmatched,
        }


def merge_prices(prices: Sequence[PriceRecord], index: GameIndex) -> list[EnrichedPriceRecord]:
    """
    Left-join price records onto the index by ITAD game ID.

    Output order is the order of ``prices``. Records with no known
    game get None for steamID, slug, title and assets.
    """
    return [
        EnrichedPriceRecord.from_price(price, index.get_by_game_id(price.id))
        for price in prices
    ]


def summarize(records: Sequence[EnrichedPriceRecord]) -> SnapshotSummary:
    return SnapshotSummary(
        total=len(records),
        with_deals=sum(1 for r in records if r.has_deals),
        on_sale=sum(1 for r in records if r.on_sale),
        unmatched=sum(1 for r in records if r.steam_id is None),
    )
