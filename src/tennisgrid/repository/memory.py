"""In-memory repository backed by a JSON snapshot."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List, Sequence

from pydantic import ValidationError

from tennisgrid.errors import DataAccessError
from tennisgrid.models import Player, Tournament


logger = logging.getLogger(__name__)


class InMemoryPlayerRepository:
    """Repository over a fixed list of players and tournaments.

    Player order is preserved, so ``sample_players`` always returns the same
    prefix for the same limit.
    """

    def __init__(self, players: Iterable[Player], tournaments: Iterable[Tournament] = ()):
        self._players: List[Player] = list(players)
        self._tournaments: List[Tournament] = list(tournaments)

    def __len__(self) -> int:
        return len(self._players)

    def nationalities(self) -> Sequence[str]:
        return [player.nationality for player in self._players if player.nationality]

    def tournaments(self) -> Sequence[Tournament]:
        return list(self._tournaments)

    def achievement_types(self) -> Sequence[str]:
        return [
            achievement.achievement_type
            for player in self._players
            for achievement in player.achievements
            if achievement.achievement_type
        ]

    def sample_players(self, limit: int) -> List[Player]:
        return self._players[: max(0, limit)]

    def find_players(self, query: str, limit: int) -> List[Player]:
        needle = query.strip().lower()
        if not needle:
            return []
        found = [player for player in self._players if needle in player.name.lower()]
        found.sort(key=lambda player: player.name)
        return found[: max(0, limit)]


def load_snapshot(path: Path) -> InMemoryPlayerRepository:
    """Load a ``{"players": [...], "tournaments": [...]}`` JSON snapshot."""

    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise DataAccessError(f"Unable to read player snapshot {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise DataAccessError(f"Player snapshot {path} must be a JSON object")

    try:
        players = [Player.model_validate(item) for item in data.get("players", [])]
        tournaments = [Tournament.model_validate(item) for item in data.get("tournaments", [])]
    except ValidationError as exc:
        raise DataAccessError(f"Malformed player snapshot {path}: {exc}") from exc

    logger.info(
        "Loaded snapshot %s (%s players, %s tournaments)", path, len(players), len(tournaments)
    )
    return InMemoryPlayerRepository(players, tournaments)
