"""
Data extractors for the IsThereAnyDeal API.

Both extractors share a common base with retry logic
and structured logging.
"""

from price_cache.ingestion.extractors.base import (
    APIError,
    BaseExtractor,
    ExtractionError,
    ExtractionResult,
    RateLimitError,
    ServerError,
    ValidationError,
)
from price_cache.ingestion.extractors.game_lookup import GameLookupExtractor
from price_cache.ingestion.extractors.game_prices import GamePricesExtractor

__all__ = [
    # Base classes and errors
    "APIError",
    "BaseExtractor",
    "ExtractionError",
    "ExtractionResult",
    "RateLimitError",
    "ServerError",
    "ValidationError",
    # Extractors
    "GameLookupExtractor",
    "GamePricesExtractor",
]
