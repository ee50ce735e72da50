"""
IsThereAnyDeal game lookup extractor.

Resolves a single Steam app ID to the ITAD game it belongs to.
"""

import time
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from price_cache.ingestion.contracts import GameRecord, LookupResponse
from price_cache.ingestion.extractors.base import (
    BaseExtractor,
    ExtractionError,
    ExtractionResult,
    ValidationError,
)


class GameLookupExtractor(BaseExtractor[GameRecord]):
    """
    Extractor for ``GET /games/lookup/v1``.

    A lookup that finds nothing is a failed result, same as a
    transport or status failure; callers skip all three alike.

    Example:
        >>> async with GameLookupExtractor() as extractor:
        ...     result = await extractor.extract("620")
        ...     if result.success:
        ...         print(result.data.game_id)
    """

    ENDPOINT = "games/lookup/v1"

    @property
    def source_name(self) -> str:
        return "itad_game_lookup"

    def _parse_response(self, raw_data: Any) -> LookupResponse:
        try:
            return LookupResponse.model_validate(raw_data)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Response validation failed: {e}",
                source=self.source_name,
            ) from e

    async def extract(self, steam_id: str) -> ExtractionResult[GameRecord]:
        """
        Look up the ITAD game for a Steam app ID.

        Args:
            steam_id: Steam application ID

        Returns:
            ExtractionResult[GameRecord]: The binding on success
        """
        url = self._url(self.ENDPOINT)
        endpoint = f"{url}?appid={steam_id}"
        start_time = time.perf_counter()

        try:
            response = await self._make_request(
                "GET",
                url,
                params=self._auth_params(appid=steam_id),
            )
            try:
                raw_data = response.json()
            except ValueError as e:
                raise ValidationError(
                    "Response is not valid JSON",
                    source=self.source_name,
                    endpoint=endpoint,
                ) from e
            lookup = self._parse_response(raw_data)
        except ExtractionError as e:
            self._logger.warning(
                "Lookup failed",
                steam_id=steam_id,
                error=str(e),
                status_code=e.status_code,
            )
            return ExtractionResult(
                success=False,
                error_message=str(e),
                status_code=e.status_code,
                source=self.source_name,
                endpoint=endpoint,
                duration_ms=(time.perf_counter() - start_time) * 1000,
            )

        duration_ms = (time.perf_counter() - start_time) * 1000

        if not lookup.found or lookup.game is None:
            self._logger.warning("Game not found", steam_id=steam_id)
            return ExtractionResult(
                success=False,
                error_message=f"Game not found for steam_id={steam_id}",
                status_code=response.status_code,
                source=self.source_name,
                endpoint=endpoint,
                duration_ms=duration_ms,
            )

        record = GameRecord.from_lookup(steam_id, lookup.game)
        self._logger.debug(
            "Lookup successful",
            steam_id=steam_id,
            game_id=record.game_id,
            title=record.title,
            duration_ms=round(duration_ms, 2),
        )
        return ExtractionResult(
            success=True,
            data=record,
            status_code=response.status_code,
            source=self.source_name,
            endpoint=endpoint,
            duration_ms=duration_ms,
        )
