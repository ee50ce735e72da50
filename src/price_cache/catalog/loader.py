"""
Game catalog loader.

Reads the canonical game list (a JSON array of ``{steamID, baseID,
name}`` objects). Only ``steamID`` matters to the price cache.
"""

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from price_cache.cache.reconcile import unique_steam_ids
from price_cache.ingestion.contracts import SteamId
from price_cache.logger import get_logger

logger = get_logger(__name__, component="catalog")


class CatalogError(Exception):
    """Raised when the catalog is missing or cannot be parsed."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class CatalogEntry(BaseModel):
    """A game in the canonical catalog."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    steam_id: SteamId = Field(..., alias="steamID")
    base_id: int | str | None = Field(default=None, alias="baseID")
    name: str | None = None


def load_catalog(path: Path) -> list[CatalogEntry]:
    """
    Load the catalog.

    Entries without a usable ``steamID`` are dropped and counted.

    Raises:
        CatalogError: If the file is missing, unreadable or not a JSON array
    """
    try:
        with path.open(encoding="utf-8") as f:
            raw_entries = json.load(f)
    except FileNotFoundError as e:
        raise CatalogError(f"Catalog not found: {path}", path=path) from e
    except (OSError, ValueError) as e:
        raise CatalogError(f"Catalog could not be read: {path}: {e}", path=path) from e

    if not isinstance(raw_entries, list):
        raise CatalogError(
            f"Catalog must be a JSON array, got {type(raw_entries).__name__}",
            path=path,
        )

    entries: list[CatalogEntry] = []
    dropped = 0
    for raw in raw_entries:
        try:
            entries.append(CatalogEntry.model_validate(raw))
        except PydanticValidationError:
            dropped += 1

    if dropped:
        logger.warning("Dropped catalog entries without a steamID", dropped=dropped)

    logger.info("Loaded catalog", path=str(path), games=len(entries))
    return entries


def catalog_steam_ids(entries: list[CatalogEntry]) -> list[str]:
    """Distinct Steam IDs in catalog order."""
    return unique_steam_ids(entry.steam_id for entry in entries)
