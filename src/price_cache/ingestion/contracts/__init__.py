"""
Data contracts for IsThereAnyDeal API responses.

Pydantic models describing the lookup and price payloads and
the records persisted in the price snapshot.
"""

from price_cache.ingestion.contracts.itad import (
    Deal,
    EnrichedPriceRecord,
    GameId,
    GameRecord,
    LookupGame,
    LookupResponse,
    PriceBatch,
    PriceRecord,
    SteamId,
)

__all__ = [
    "Deal",
    "EnrichedPriceRecord",
    "GameId",
    "GameRecord",
    "LookupGame",
    "LookupResponse",
    "PriceBatch",
    "PriceRecord",
    "SteamId",
]
