"""Caller-facing operations: daily puzzle, cell diagnostics, guess checks."""

from __future__ import annotations

import logging
import sqlite3
import threading
import time
from dataclasses import dataclass
from datetime import date
from typing import Callable, List, Optional, Tuple, Union

from tennisgrid.catalog import build_catalog, matches
from tennisgrid.compat import RebuildSummary, rebuild_compatibility_matrix
from tennisgrid.config import GridSettings
from tennisgrid.errors import DataAccessError
from tennisgrid.generator import CellExplanation, explain_cell, generate, seed_for_date
from tennisgrid.generator.validator import CompatibilityLookup
from tennisgrid.models import Category, CategoryMetadata, DailyQuiz, Player
from tennisgrid.persistence import CompatibilityStore
from tennisgrid.repository import PlayerRepository


logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2


@dataclass(frozen=True)
class DailyPuzzle:
    date: date
    quiz: DailyQuiz
    seed: int
    attempts: int
    solvable: bool
    warning: Optional[str] = None


@dataclass(frozen=True)
class GuessValidation:
    valid: bool
    row_match: bool = False
    column_match: bool = False
    player: Optional[Player] = None
    error: Optional[str] = None


class PuzzleService:
    """Puzzle operations bound to one repository and an optional matrix cache."""

    def __init__(
        self,
        repository: PlayerRepository,
        *,
        settings: Optional[GridSettings] = None,
        store: Optional[CompatibilityStore] = None,
    ):
        self.repository = repository
        self.settings = settings or GridSettings()
        self.store = store

    def catalog(self) -> List[Category]:
        return build_catalog(self.repository, self.settings)

    def _cached_matrix(self) -> Tuple[Optional[List[CategoryMetadata]], Optional[CompatibilityLookup]]:
        if self.store is None:
            return None, None
        try:
            metadata = self.store.load_metadata()
            matrix = self.store.load_matrix()
        except sqlite3.Error as exc:
            logger.warning("Compatibility cache unavailable; probing live: %s", exc)
            return None, None
        if not metadata:
            logger.info("Compatibility cache is empty; probing live")
            return None, None
        return metadata, matrix

    def generate_daily_puzzle(
        self,
        day: Optional[date] = None,
        test_token: Optional[Union[str, int]] = None,
        *,
        max_attempts: Optional[int] = None,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> DailyPuzzle:
        """Generate the grid for ``day`` (today by default).

        Raises ``CatalogInsufficientError`` or ``DataAccessError`` when no grid
        can be produced; a grid with unsolvable cells comes back with a warning.
        """

        day = day or date.today()
        seed = seed_for_date(day, test_token)
        logger.info("Generating daily quiz for %s (seed %s)", day.isoformat(), seed)

        catalog = self.catalog()
        metadata, matrix = self._cached_matrix()
        deadline = time.monotonic() + timeout if timeout is not None else None
        result = generate(
            catalog,
            seed,
            self.repository,
            max_attempts,
            settings=self.settings,
            metadata=metadata,
            compatibility=matrix,
            deadline=deadline,
            cancel_event=cancel_event,
        )
        return DailyPuzzle(
            date=day,
            quiz=result.quiz,
            seed=seed,
            attempts=result.attempts,
            solvable=result.solvable,
            warning=result.warning,
        )

    def explain_cell(self, row: Category, column: Category) -> CellExplanation:
        if self.store is not None:
            try:
                record = self.store.get_pair(row.id, column.id)
            except sqlite3.Error as exc:
                logger.warning("Compatibility cache lookup failed: %s", exc)
                record = None
            if record is not None:
                return CellExplanation(
                    row_id=row.id,
                    column_id=column.id,
                    count=record.player_count,
                    sample_solutions=list(record.sample_players),
                    source="matrix",
                )
        return explain_cell(row, column, self.repository, sample_size=self.settings.sample_size)

    def search_players(self, query: str, limit: int = 10) -> List[Player]:
        if len(query.strip()) < MIN_SEARCH_LENGTH:
            return []
        try:
            return self.repository.find_players(query, limit)
        except DataAccessError:
            raise
        except Exception as exc:
            raise DataAccessError(f"Player search failed: {exc}") from exc

    def validate_guess(self, player_name: str, row: Category, column: Category) -> GuessValidation:
        """Check a submitted answer against a cell using the category matcher."""

        name = player_name.strip()
        candidates = self.search_players(name, limit=25)
        exact = [player for player in candidates if player.name.lower() == name.lower()]
        if exact:
            player = exact[0]
        elif len(candidates) == 1:
            player = candidates[0]
        elif not candidates:
            return GuessValidation(valid=False, error="Player not found")
        else:
            return GuessValidation(valid=False, error="Ambiguous player name")

        row_match = matches(player, row)
        column_match = matches(player, column)
        return GuessValidation(
            valid=row_match and column_match,
            row_match=row_match,
            column_match=column_match,
            player=player,
        )

    def rebuild_compatibility_matrix(
        self,
        *,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> RebuildSummary:
        if self.store is None:
            raise RuntimeError("No compatibility store configured")
        return rebuild_compatibility_matrix(
            self.repository,
            self.store,
            settings=self.settings,
            should_cancel=should_cancel,
        )
