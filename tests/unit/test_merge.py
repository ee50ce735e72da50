"""Tests for the price/metadata join."""

from typing import Any

from price_cache.cache import GameIndex, merge_prices, summarize
from price_cache.ingestion.contracts import GameRecord, PriceRecord


def _prices(*items: dict[str, Any]) -> list[PriceRecord]:
    return [PriceRecord.model_validate(item) for item in items]


class TestMergePrices:
    """Tests for merge_prices()."""

    def test_matched_records_get_metadata(self) -> None:
        game = GameRecord(
            steam_id="100",
            game_id="g1",
            slug="portal-2",
            title="Portal 2",
            assets={"boxart": "b.jpg"},
        )
        index = GameIndex.from_records([game])

        [record] = merge_prices(_prices({"id": "g1", "deals": []}), index)

        assert record.steam_id == game.steam_id
        assert record.slug == game.slug
        assert record.title == game.title
        assert record.assets == game.assets

    def test_unmatched_records_get_nulls(self) -> None:
        index = GameIndex.from_records([GameRecord(steam_id="100", game_id="g1")])

        [record] = merge_prices(_prices({"id": "unknown", "deals": []}), index)

        snapshot = record.to_snapshot()
        assert snapshot["id"] == "unknown"
        assert snapshot["steamID"] is None
        assert snapshot["slug"] is None
        assert snapshot["title"] is None
        assert snapshot["assets"] is None

    def test_follows_price_response_order(self) -> None:
        index = GameIndex.from_records(
            [
                GameRecord(steam_id="1", game_id="a"),
                GameRecord(steam_id="2", game_id="b"),
                GameRecord(steam_id="3", game_id="c"),
            ]
        )

        records = merge_prices(_prices({"id": "c"}, {"id": "a"}, {"id": "b"}), index)

        assert [r.id for r in records] == ["c", "a", "b"]
        assert [r.steam_id for r in records] == ["3", "1", "2"]

    def test_price_fields_preserved(self) -> None:
        index = GameIndex.from_records([GameRecord(steam_id="100", game_id="g1")])
        raw = {
            "id": "g1",
            "historyLow": {"all": {"amount": 1.0}},
            "deals": [{"cut": 25, "shop": {"id": 61, "name": "Steam"}, "url": "u"}],
        }

        [record] = merge_prices(_prices(raw), index)
        snapshot = record.to_snapshot()

        assert snapshot["historyLow"] == raw["historyLow"]
        assert snapshot["deals"] == raw["deals"]

    def test_empty(self) -> None:
        assert merge_prices([], GameIndex()) == []


class TestSummarize:
    def test_counts(self) -> None:
        index = GameIndex.from_records(
            [GameRecord(steam_id="1", game_id="a"), GameRecord(steam_id="2", game_id="b")]
        )
        records = merge_prices(
            _prices(
                {"id": "a", "deals": [{"cut": 50}]},
                {"id": "b", "deals": [{"cut": 0}]},
                {"id": "z", "deals": []},
            ),
            index,
        )

        summary = summarize(records)

        assert summary.to_dict() == {"total": 3, "with_deals": 2, "on_sale": 1, "unmatched": 1}
