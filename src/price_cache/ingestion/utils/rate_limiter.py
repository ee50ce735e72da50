"""
Rate limiter for IsThereAnyDeal lookups.

Token bucket refilled at one token per ``min_interval_seconds``.
With the default burst of one token this spaces consecutive
requests at least ``min_interval_seconds`` apart: the first
request never waits and nothing waits after the last one.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any

from price_cache.logger import get_logger


@dataclass
class RateLimiterConfig:
    """Configuration for rate limiter."""

    min_interval_seconds: float = 0.1
    burst_size: int = 1

    def __post_init__(self) -> None:
        if self.min_interval_seconds < 0:
            raise ValueError("min_interval_seconds must be >= 0")
        if self.burst_size < 1:
            raise ValueError("burst_size must be >= 1")

    @classmethod
    def from_requests_per_minute(cls, requests_per_minute: float, burst_size: int = 1) -> "RateLimiterConfig":
        return cls(min_interval_seconds=60.0 / requests_per_minute, burst_size=burst_size)


@dataclass
class RateLimiter:
    """
    Token bucket rate limiter for API requests.

    Example:
        >>> limiter = RateLimiter(RateLimiterConfig(min_interval_seconds=0.1))
        >>> async with limiter:
        ...     await make_request()
    """

    config: RateLimiterConfig = field(default_factory=RateLimiterConfig)
    _tokens: float = field(init=False)
    _last_update: float = field(init=False)
    _lock: asyncio.Lock = field(init=False, default_factory=asyncio.Lock)
    _logger: Any = field(init=False)
    total_wait_seconds: float = field(init=False, default=0.0)

    def __post_init__(self) -> None:
        self._tokens = float(self.config.burst_size)
        self._last_update = time.monotonic()
        self._logger = get_logger(__name__, component="rate_limiter")

    def _refill_tokens(self) -> None:
        now = time.monotonic()
        interval = self.config.min_interval_seconds
        if interval == 0:
            self._tokens = float(self.config.burst_size)
        else:
            elapsed = now - self._last_update
            self._tokens = min(
                float(self.config.burst_size),
                self._tokens + elapsed / interval,
            )
        self._last_update = now

    async def acquire(self) -> None:
        """Block until a token is available, then consume it."""
        async with self._lock:
            self._refill_tokens()

            if self._tokens < 1:
                wait_time = (1 - self._tokens) * self.config.min_interval_seconds
                self._logger.debug(
                    "Rate limit reached, waiting",
                    wait_seconds=round(wait_time, 3),
                )
                await asyncio.sleep(wait_time)
                self.total_wait_seconds += wait_time
                self._refill_tokens()

            self._tokens = max(self._tokens - 1, 0.0)

    async def __aenter__(self) -> "RateLimiter":
        await self.acquire()
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass

    @property
    def available_tokens(self) -> float:
        """Current available tokens (for monitoring)."""
        self._refill_tokens()
        return self._tokens
