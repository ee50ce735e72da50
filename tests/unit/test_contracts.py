"""Tests for data contracts."""

from typing import Any

import pytest

from price_cache.ingestion.contracts import (
    EnrichedPriceRecord,
    GameRecord,
    LookupResponse,
    PriceBatch,
    PriceRecord,
)


class TestLookupResponse:
    """Tests for LookupResponse contract."""

    def test_found(self, lookup_response: dict[str, Any]) -> None:
        lookup = LookupResponse.model_validate(lookup_response)

        assert lookup.found is True
        assert lookup.game is not None
        assert lookup.game.id == "018d937f-590c-728b-ac35-38bcff85f086"
        assert lookup.game.slug == "portal-2"
        assert lookup.game.assets is not None
        assert "boxart" in lookup.game.assets

    def test_not_found(self) -> None:
        lookup = LookupResponse.model_validate({"found": False})

        assert lookup.found is False
        assert lookup.game is None


class TestGameRecord:
    """Tests for GameRecord contract."""

    def test_numeric_steam_id_coerced(self) -> None:
        """Catalog Steam IDs are JSON numbers; they are compared as strings."""
        record = GameRecord(steam_id=620, game_id="g1")

        assert record.steam_id == "620"

    def test_empty_steam_id_rejected(self) -> None:
        with pytest.raises(ValueError):
            GameRecord(steam_id="", game_id="g1")

    def test_from_lookup(self, lookup_response: dict[str, Any]) -> None:
        lookup = LookupResponse.model_validate(lookup_response)
        assert lookup.game is not None

        record = GameRecord.from_lookup("620", lookup.game)

        assert record.steam_id == "620"
        assert record.game_id == lookup.game.id
        assert record.title == "Portal 2"
        assert record.assets == lookup.game.assets


class TestPriceRecord:
    """Tests for PriceRecord contract."""

    def test_unknown_fields_pass_through(self, prices_response: list[dict[str, Any]]) -> None:
        price = PriceRecord.model_validate(prices_response[0])
        dumped = price.model_dump(mode="json")

        assert dumped["historyLow"] == prices_response[0]["historyLow"]
        assert dumped["deals"][0]["shop"] == {"id": 61, "name": "Steam"}
        assert dumped["deals"][0]["url"] == "https://itad.link/018d937f/"

    def test_sale_flags(self, prices_response: list[dict[str, Any]]) -> None:
        on_sale = PriceRecord.model_validate(prices_response[0])
        no_deals = PriceRecord.model_validate(prices_response[1])

        assert on_sale.has_deals is True
        assert on_sale.on_sale is True
        assert no_deals.has_deals is False
        assert no_deals.on_sale is False

    def test_deals_without_cut_not_on_sale(self) -> None:
        price = PriceRecord.model_validate({"id": "g1", "deals": [{"shop": {"id": 1}}]})

        assert price.has_deals is True
        assert price.on_sale is False

    def test_batch_game_ids(self, prices_response: list[dict[str, Any]]) -> None:
        batch = PriceBatch.model_validate({"prices": prices_response})

        assert batch.game_ids == [
            "018d937f-590c-728b-ac35-38bcff85f086",
            "018d937e-fd2c-70a5-b4a5-0e22fbd1c1ae",
        ]


class TestEnrichedPriceRecord:
    """Tests for EnrichedPriceRecord contract."""

    def test_from_price_with_game(self, prices_response: list[dict[str, Any]]) -> None:
        price = PriceRecord.model_validate(prices_response[0])
        game = GameRecord(
            steam_id="620",
            game_id=price.id,
            slug="portal-2",
            title="Portal 2",
            assets={"boxart": "x"},
        )

        snapshot = EnrichedPriceRecord.from_price(price, game).to_snapshot()

        assert snapshot["id"] == price.id
        assert snapshot["steamID"] == "620"
        assert snapshot["slug"] == "portal-2"
        assert snapshot["title"] == "Portal 2"
        assert snapshot["assets"] == {"boxart": "x"}
        assert snapshot["historyLow"] == prices_response[0]["historyLow"]
        assert "steam_id" not in snapshot

    def test_from_price_without_game(self, prices_response: list[dict[str, Any]]) -> None:
        price = PriceRecord.model_validate(prices_response[1])

        snapshot = EnrichedPriceRecord.from_price(price, None).to_snapshot()

        assert snapshot["steamID"] is None
        assert snapshot["slug"] is None
        assert snapshot["title"] is None
        assert snapshot["assets"] is None
        assert snapshot["deals"] == []

    def test_snapshot_entry_reparses(self, prices_response: list[dict[str, Any]]) -> None:
        price = PriceRecord.model_validate(prices_response[0])
        game = GameRecord(steam_id="620", game_id=price.id, title="Portal 2")
        entry = EnrichedPriceRecord.from_price(price, game).to_snapshot()

        again = EnrichedPriceRecord.model_validate(entry)

        assert again.to_snapshot() == entry
