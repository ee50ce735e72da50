"""
Price snapshot persistence.

The snapshot is a pretty-printed JSON array of enriched price
records. It is read at the start of a run to rebuild the game index
and replaced wholesale at the end.
"""

import json
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from price_cache.cache.index import GameIndex
from price_cache.ingestion.contracts import EnrichedPriceRecord, GameRecord
from price_cache.logger import get_logger

logger = get_logger(__name__, component="snapshot")


def decode_snapshot(raw_entries: Any) -> tuple[list[GameRecord], int]:
    """
    Permissively decode snapshot entries into game bindings.

    Only the binding fields are checked; the price payload of an
    entry is ignored here. Entries without both a Steam ID and an
    ITAD game ID, or with metadata of the wrong shape, are skipped.

    Returns:
        Tuple of (decoded game records, number of skipped entries)
    """
    if not isinstance(raw_entries, list):
        raise ValueError(f"Snapshot must be a JSON array, got {type(raw_entries).__name__}")

    records: list[GameRecord] = []
    skipped = 0
    for position, entry in enumerate(raw_entries):
        if not isinstance(entry, dict) or not entry.get("steamID") or not entry.get("id"):
            skipped += 1
            continue
        try:
            record = GameRecord(
                steam_id=entry["steamID"],
                game_id=entry["id"],
                slug=entry.get("slug"),
                title=entry.get("title"),
                assets=entry.get("assets"),
            )
        except PydanticValidationError as e:
            logger.debug("Skipping invalid snapshot entry", position=position, errors=e.error_count())
            skipped += 1
            continue
        records.append(record)
    return records, skipped


def load_snapshot(path: Path) -> GameIndex:
    """
    Rebuild the game index from a previous snapshot.

    A missing or unreadable snapshot is a cold cache, not an error.

    Args:
        path: Snapshot file location

    Returns:
        GameIndex: Index of every usable binding (possibly empty)
    """
    try:
        with path.open(encoding="utf-8") as f:
            raw_entries = json.load(f)
        records, skipped = decode_snapshot(raw_entries)
    except FileNotFoundError:
        logger.info("No existing snapshot, starting with a cold cache", path=str(path))
        return GameIndex()
    except (OSError, ValueError) as e:
        logger.warning(
            "Could not read snapshot, starting with a cold cache",
            path=str(path),
            error=str(e),
        )
        return GameIndex()

    index = GameIndex.from_records(records)
    logger.info(
        "Loaded cached game mappings",
        path=str(path),
        cached_games=len(index),
        skipped_entries=skipped,
    )
    return index


def serialize_snapshot(records: Sequence[EnrichedPriceRecord]) -> str:
    payload = [record.to_snapshot() for record in records]
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def write_snapshot(path: Path, records: Sequence[EnrichedPriceRecord]) -> Path:
    """
    Replace the snapshot at ``path`` with ``records``.

    Written to a temporary file in the same directory and moved into
    place, so readers never observe a truncated snapshot.

    Returns:
        Path: Where the snapshot was written
    """
    content = serialize_snapshot(records)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info("Wrote snapshot", path=str(path), records=len(records))
    return path
