"""
Base extractor with retry logic and error handling.

Owns the httpx client, retries transient failures with exponential
backoff, and wraps every outcome in an ExtractionResult so callers
can always tell a failed call from an empty answer.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict, Field
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from price_cache import __version__
from price_cache.config import ITADConfig, RetryConfig, get_settings
from price_cache.logger import get_logger

T = TypeVar("T", bound=BaseModel)


class ExtractionError(Exception):
    """Base exception for extraction errors."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        endpoint: str | None = None,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.endpoint = endpoint
        self.status_code = status_code
        self.original_error = original_error
        self.timestamp = datetime.now(timezone.utc)


class RateLimitError(ExtractionError):
    """Raised when the API answers 429."""

    pass


class APIError(ExtractionError):
    """Raised when the API returns an error response."""

    pass


class ServerError(APIError):
    """5xx response; worth retrying."""

    pass


class ValidationError(ExtractionError):
    """Raised when response validation fails."""

    pass


class ExtractionResult(BaseModel, Generic[T]):
    """
    Wrapper for extraction results with metadata.

    ``success=False`` always means the call failed; a successful call
    with nothing to report still carries ``success=True``.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    data: T | None = None
    error_message: str | None = None
    status_code: int | None = None
    extracted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source: str
    endpoint: str
    duration_ms: float | None = None


class BaseExtractor(ABC, Generic[T]):
    """
    Abstract base class for IsThereAnyDeal extractors.

    Subclasses must implement:
    - source_name: Identifier for the endpoint
    - extract(): Main extraction logic
    - _parse_response(): Response parsing and validation
    """

    def __init__(
        self,
        *,
        config: ITADConfig | None = None,
        retry_config: RetryConfig | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the extractor.

        Args:
            config: API configuration (read from settings if None)
            retry_config: Custom retry configuration (read from settings if None)
            timeout: HTTP request timeout in seconds
            client: Shared HTTP client; the extractor will not close it
        """
        if config is None or retry_config is None:
            settings = get_settings()
            config = config or settings.itad
            retry_config = retry_config or settings.retry
        self._config = config
        self._retry_config = retry_config
        self._timeout = timeout or config.timeout_seconds
        self._logger = get_logger(
            self.__class__.__name__,
            component="extractor",
            source=self.source_name,
        )
        self._client = client
        self._owns_client = client is None

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return identifier for this endpoint."""
        ...

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
                headers={
                    "User-Agent": f"SteamPriceCache/{__version__}",
                    "Accept": "application/json",
                },
            )
            self._owns_client = True
        return self._client

    def _url(self, path: str) -> str:
        return f"{self._config.base_url}/{path.lstrip('/')}"

    def _auth_params(self, **params: Any) -> dict[str, Any]:
        return {**params, "key": self._config.api_key.get_secret_value()}

    async def close(self) -> None:
        """Close HTTP client if this extractor created it."""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "BaseExtractor[T]":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _create_retry_decorator(self) -> Any:
        """Create retry decorator with current configuration."""
        return retry(
            retry=retry_if_exception_type((httpx.TransportError, RateLimitError, ServerError)),
            stop=stop_after_attempt(self._retry_config.max_attempts),
            wait=wait_exponential(
                multiplier=self._retry_config.base_delay_seconds,
                max=self._retry_config.max_delay_seconds,
                exp_base=self._retry_config.exponential_base,
            ),
            before_sleep=self._log_retry_attempt,
            reraise=True,
        )

    def _log_retry_attempt(self, retry_state: Any) -> None:
        self._logger.warning(
            "Retrying request",
            attempt=retry_state.attempt_number,
            wait_seconds=retry_state.next_action.sleep if retry_state.next_action else 0,
            exception=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _make_request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make HTTP request with retry logic.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Request URL
            **kwargs: Additional arguments passed to httpx

        Returns:
            httpx.Response: Successful response

        Raises:
            RateLimitError: If still rate limited after retries
            APIError: If the API returns an error response
            ExtractionError: For transport failures
        """
        retry_decorator = self._create_retry_decorator()

        @retry_decorator
        async def _request() -> httpx.Response:
            self._logger.debug("Making request", method=method, url=url)

            response = await self.client.request(method, url, **kwargs)

            if response.status_code == 429:
                retry_after = response.headers.get("Retry-After", "60")
                raise RateLimitError(
                    f"Rate limit exceeded. Retry after {retry_after}s",
                    source=self.source_name,
                    endpoint=url,
                    status_code=429,
                )

            if response.status_code >= 500:
                raise ServerError(
                    f"Server error: {response.status_code}",
                    source=self.source_name,
                    endpoint=url,
                    status_code=response.status_code,
                )

            if response.status_code >= 400:
                raise APIError(
                    f"API error: {response.status_code}",
                    source=self.source_name,
                    endpoint=url,
                    status_code=response.status_code,
                )

            return response

        try:
            return await _request()  # type: ignore[no-any-return]
        except httpx.HTTPError as e:
            self._logger.error(
                "Request failed after retries",
                url=url,
                attempts=self._retry_config.max_attempts,
                error=type(e).__name__,
            )
            raise ExtractionError(
                f"Request failed: {type(e).__name__}: {e}",
                source=self.source_name,
                endpoint=url,
                original_error=e,
            ) from e

    @abstractmethod
    async def extract(self, *args: Any, **kwargs: Any) -> ExtractionResult[T]:
        """Execute extraction logic."""
        ...

    @abstractmethod
    def _parse_response(self, raw_data: Any) -> BaseModel:
        """
        Parse and validate raw API response.

        Raises:
            ValidationError: If response doesn't match expected schema
        """
        ...
