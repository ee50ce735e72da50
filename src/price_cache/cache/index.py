"""
Two-way game index.

Maps Steam app IDs and ITAD game IDs to the same GameRecord. Built
fresh for every run from the previous snapshot, then extended by
the resolver.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from price_cache.ingestion.contracts import GameRecord


@dataclass
class GameIndex:
    """
    Index pair ``steam_id -> GameRecord`` and ``game_id -> GameRecord``.

    Every record in ``by_steam_id`` has its ``game_id`` present in
    ``by_game_id``, and every record in ``by_game_id`` is present in
    ``by_steam_id``. Several Steam IDs may share one ITAD game; the
    game side then points at the most recently added of them.
    """

    by_steam_id: dict[str, GameRecord] = field(default_factory=dict)
    by_game_id: dict[str, GameRecord] = field(default_factory=dict)

    @classmethod
    def from_records(cls, records: Iterable[GameRecord]) -> "GameIndex":
        index = cls()
        for record in records:
            index.add(record)
        return index

    def add(self, record: GameRecord) -> None:
        """Insert or replace the binding for ``record.steam_id`` in both maps."""
        previous = self.by_steam_id.get(record.steam_id)
        self.by_steam_id[record.steam_id] = record
        if previous is not None and previous.game_id != record.game_id:
            self._repoint_game(previous.game_id, dropped_steam_id=record.steam_id)
        self.by_game_id[record.game_id] = record

    def discard(self, steam_id: str) -> GameRecord | None:
        """Remove a Steam ID from both maps. Returns the removed record."""
        record = self.by_steam_id.pop(steam_id, None)
        if record is not None:
            self._repoint_game(record.game_id, dropped_steam_id=steam_id)
        return record

    def retain_steam_ids(self, steam_ids: Iterable[str]) -> list[GameRecord]:
        """Drop every binding whose Steam ID is not in ``steam_ids``."""
        keep = set(steam_ids)
        removed = []
        for steam_id in [s for s in self.by_steam_id if s not in keep]:
            record = self.discard(steam_id)
            if record is not None:
                removed.append(record)
        return removed

    def _repoint_game(self, game_id: str, *, dropped_steam_id: str) -> None:
        current = self.by_game_id.get(game_id)
        if current is None or current.steam_id != dropped_steam_id:
            return
        for candidate in reversed(self.by_steam_id.values()):
            if candidate.game_id == game_id and candidate.steam_id != dropped_steam_id:
                self.by_game_id[game_id] = candidate
                return
        del self.by_game_id[game_id]

    def get_by_steam_id(self, steam_id: str) -> GameRecord | None:
        return self.by_steam_id.get(steam_id)

    def get_by_game_id(self, game_id: str) -> GameRecord | None:
        return self.by_game_id.get(game_id)

    def has_steam_id(self, steam_id: str) -> bool:
        return steam_id in self.by_steam_id

    @property
    def game_ids(self) -> list[str]:
        """Known ITAD game IDs, each once, in insertion order."""
        return list(self.by_game_id)

    def __len__(self) -> int:
        return len(self.by_steam_id)

    def __iter__(self) -> Iterator[GameRecord]:
        return iter(self.by_steam_id.values())
