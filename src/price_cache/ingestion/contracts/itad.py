"""
Data contracts for IsThereAnyDeal API payloads and the price snapshot.

Pricing-service fields this pipeline does not interpret are kept as
extras so they round-trip into the snapshot verbatim.
"""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _coerce_id(v: Any) -> Any:
    """Steam app IDs arrive as JSON numbers or strings; compare them as strings."""
    if isinstance(v, bool):
        return v
    if isinstance(v, int):
        return str(v)
    if isinstance(v, str):
        return v.strip()
    return v


SteamId = Annotated[str, BeforeValidator(_coerce_id), Field(min_length=1)]
OptionalSteamId = Annotated[str | None, BeforeValidator(_coerce_id)]
GameId = Annotated[str, Field(min_length=1, description="ITAD game UUID")]


class LookupGame(BaseModel):
    """Game metadata returned by /games/lookup/v1."""

    model_config = ConfigDict(extra="ignore")

    id: GameId
    slug: str | None = None
    title: str | None = None
    type: str | None = None
    mature: bool = False
    assets: dict[str, Any] | None = None


class LookupResponse(BaseModel):
    """Envelope of /games/lookup/v1: {found: bool, game?: {...}}."""

    found: bool
    game: LookupGame | None = None


class GameRecord(BaseModel):
    """
    Binding between a Steam app ID and an ITAD game ID.

    Carries the display metadata copied onto every price record
    for that game.
    """

    steam_id: SteamId
    game_id: GameId
    slug: str | None = None
    title: str | None = None
    assets: dict[str, Any] | None = None

    @classmethod
    def from_lookup(cls, steam_id: str, game: LookupGame) -> "GameRecord":
        return cls(
            steam_id=steam_id,
            game_id=game.id,
            slug=game.slug,
            title=game.title,
            assets=game.assets,
        )


class Deal(BaseModel):
    """A single shop offer. Only the discount percentage is interpreted."""

    model_config = ConfigDict(extra="allow")

    cut: int = Field(default=0, description="Discount percentage")


class PriceRecord(BaseModel):
    """Per-game entry of the /games/prices/v3 response."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: GameId
    deals: list[Deal] = Field(default_factory=list)

    @property
    def has_deals(self) -> bool:
        return len(self.deals) > 0

    @property
    def on_sale(self) -> bool:
        return any(deal.cut > 0 for deal in self.deals)


class PriceBatch(BaseModel):
    """Wrapper for a batch price response so it fits ExtractionResult."""

    prices: list[PriceRecord] = Field(default_factory=list)

    @property
    def game_ids(self) -> list[str]:
        return [price.id for price in self.prices]


class EnrichedPriceRecord(PriceRecord):
    """
    A price record joined with its game metadata.

    This is the unit of the persisted snapshot. When the price record's
    game is unknown all four metadata fields are None.
    """

    steam_id: OptionalSteamId = Field(default=None, alias="steamID")
    slug: str | None = None
    title: str | None = None
    assets: dict[str, Any] | None = None

    @classmethod
    def from_price(cls, price: PriceRecord, game: GameRecord | None) -> "EnrichedPriceRecord":
        payload = price.model_dump(mode="json")
        payload.update(
            steamID=game.steam_id if game else None,
            slug=game.slug if game else None,
            title=game.title if game else None,
            assets=game.assets if game else None,
        )
        return cls.model_validate(payload)

    def to_snapshot(self) -> dict[str, Any]:
        """Serialize with the snapshot's JSON key names."""
        return self.model_dump(mode="json", by_alias=True)
