"""
IsThereAnyDeal batch price extractor.

One POST covers every known game; the response order is kept
because it becomes the snapshot order.
"""

import time
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from price_cache.ingestion.contracts import PriceBatch
from price_cache.ingestion.extractors.base import (
    BaseExtractor,
    ExtractionError,
    ExtractionResult,
    ValidationError,
)


class GamePricesExtractor(BaseExtractor[PriceBatch]):
    """
    Extractor for ``POST /games/prices/v3``.

    Example:
        >>> async with GamePricesExtractor() as extractor:
        ...     result = await extractor.extract(["018d937f-..."], country_code="CA")
        ...     if not result.success:
        ...         raise SystemExit(result.error_message)
    """

    ENDPOINT = "games/prices/v3"

    @property
    def source_name(self) -> str:
        return "itad_game_prices"

    def _parse_response(self, raw_data: Any) -> PriceBatch:
        if not isinstance(raw_data, list):
            raise ValidationError(
                f"Expected a JSON array, got {type(raw_data).__name__}",
                source=self.source_name,
            )
        try:
            return PriceBatch.model_validate({"prices": raw_data})
        except PydanticValidationError as e:
            raise ValidationError(
                f"Response validation failed: {e}",
                source=self.source_name,
            ) from e

    async def extract(
        self,
        game_ids: list[str],
        *,
        country_code: str | None = None,
    ) -> ExtractionResult[PriceBatch]:
        """
        Fetch current prices and deals for a set of ITAD games.

        Args:
            game_ids: ITAD game IDs, in request order
            country_code: Country for pricing (settings default if None)

        Returns:
            ExtractionResult[PriceBatch]: ``success=False`` on any failure
        """
        country = country_code or self._config.country
        url = self._url(self.ENDPOINT)
        endpoint = f"{url}?country={country}"
        start_time = time.perf_counter()

        self._logger.info(
            "Fetching prices",
            games=len(game_ids),
            country=country,
        )

        try:
            response = await self._make_request(
                "POST",
                url,
                params=self._auth_params(country=country),
                json=list(game_ids),
            )
            try:
                raw_data = response.json()
            except ValueError as e:
                raise ValidationError(
                    "Response is not valid JSON",
                    source=self.source_name,
                    endpoint=endpoint,
                ) from e
            batch = self._parse_response(raw_data)
        except ExtractionError as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            self._logger.error(
                "Price fetch failed",
                games=len(game_ids),
                error=str(e),
                status_code=e.status_code,
            )
            return ExtractionResult(
                success=False,
                error_message=str(e),
                status_code=e.status_code,
                source=self.source_name,
                endpoint=endpoint,
                duration_ms=duration_ms,
            )

        duration_ms = (time.perf_counter() - start_time) * 1000
        self._logger.info(
            "Price fetch successful",
            requested=len(game_ids),
            returned=len(batch.prices),
            duration_ms=round(duration_ms, 2),
        )
        return ExtractionResult(
            success=True,
            data=batch,
            status_code=response.status_code,
            source=self.source_name,
            endpoint=endpoint,
            duration_ms=duration_ms,
        )
