"""Utility modules for ingestion."""

from price_cache.ingestion.utils.rate_limiter import (
    RateLimiter,
    RateLimiterConfig,
)

__all__ = [
    "RateLimiter",
    "RateLimiterConfig",
]
