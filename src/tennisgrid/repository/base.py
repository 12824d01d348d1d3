"""Read-only interface the generation core expects from player storage."""

from __future__ import annotations

from typing import List, Protocol, Sequence, runtime_checkable

from tennisgrid.models import Player, Tournament


@runtime_checkable
class PlayerRepository(Protocol):
    """Queryable store of players, tournaments and achievement tags.

    Implementations may raise any exception on transport failure; callers
    decide whether that is fatal or fail-open.
    """

    def nationalities(self) -> Sequence[str]:
        """Nationality code of every player that has one (duplicates kept)."""
        ...

    def tournaments(self) -> Sequence[Tournament]:
        ...

    def achievement_types(self) -> Sequence[str]:
        """Achievement tags present on any player (duplicates allowed)."""
        ...

    def sample_players(self, limit: int) -> List[Player]:
        """Bounded read of players with achievements and rankings preloaded."""
        ...

    def find_players(self, query: str, limit: int) -> List[Player]:
        """Case-insensitive substring search on player name."""
        ...
