"""Existence probes that check every grid cell has at least one answer."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

from tennisgrid.catalog import matches_cell
from tennisgrid.config import GridSettings
from tennisgrid.errors import DataAccessError
from tennisgrid.models import Category, CompatibilityRecord, DailyQuiz
from tennisgrid.repository import PlayerRepository


logger = logging.getLogger(__name__)

MAX_SAMPLE_SOLUTIONS = 5

CompatibilityLookup = Mapping[Tuple[str, str], CompatibilityRecord]


@dataclass(frozen=True)
class CellVerdict:
    row_id: str
    column_id: str
    solved: bool
    source: str = "sample"
    probe_failed: bool = False


@dataclass(frozen=True)
class QuizCheck:
    cells: Tuple[CellVerdict, ...]

    @property
    def solvable(self) -> bool:
        return all(cell.solved for cell in self.cells)

    @property
    def failed_probes(self) -> int:
        return sum(1 for cell in self.cells if cell.probe_failed)

    @property
    def unsolved(self) -> List[CellVerdict]:
        return [cell for cell in self.cells if not cell.solved]


@dataclass(frozen=True)
class CellExplanation:
    row_id: str
    column_id: str
    count: int
    sample_solutions: List[str]
    source: str = "sample"


def _probe_cell(
    row: Category,
    column: Category,
    repository: PlayerRepository,
    sample_size: int,
    compatibility: Optional[CompatibilityLookup],
) -> CellVerdict:
    if compatibility:
        record = compatibility.get((row.id, column.id))
        if record is not None:
            return CellVerdict(row.id, column.id, record.is_compatible, source="matrix")

    try:
        solved = any(
            matches_cell(player, row, column) for player in repository.sample_players(sample_size)
        )
    except Exception as exc:
        logger.warning(
            "Player sample failed for cell %s x %s; assuming solvable: %s", row.id, column.id, exc
        )
        return CellVerdict(row.id, column.id, True, source="fail_open", probe_failed=True)
    return CellVerdict(row.id, column.id, solved)


def cell_has_solution(
    row: Category,
    column: Category,
    repository: PlayerRepository,
    *,
    sample_size: Optional[int] = None,
    compatibility: Optional[CompatibilityLookup] = None,
) -> bool:
    """Return True if some sampled player satisfies both categories.

    Repository failures are treated as solvable so a transient outage never
    blocks generation.
    """

    size = sample_size if sample_size is not None else GridSettings().sample_size
    return _probe_cell(row, column, repository, size, compatibility).solved


def check_quiz(
    quiz: DailyQuiz,
    repository: PlayerRepository,
    *,
    settings: Optional[GridSettings] = None,
    compatibility: Optional[CompatibilityLookup] = None,
) -> QuizCheck:
    """Probe all nine cells and collect per-cell verdicts.

    Cells are independent, so they are probed concurrently; the result is only
    built once every probe has finished.
    """

    settings = settings or GridSettings()
    cells = quiz.cells()

    def probe(cell: Tuple[Category, Category]) -> CellVerdict:
        return _probe_cell(cell[0], cell[1], repository, settings.sample_size, compatibility)

    workers = max(1, min(settings.validator_workers, len(cells)))
    if workers == 1:
        verdicts = [probe(cell) for cell in cells]
    else:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="cell-probe") as executor:
            verdicts = list(executor.map(probe, cells))

    check = QuizCheck(tuple(verdicts))
    limit = settings.max_probe_errors
    if limit is not None and check.failed_probes > limit:
        raise DataAccessError(
            f"{check.failed_probes} of {len(cells)} cell probes failed (limit {limit})"
        )
    return check


def is_solvable(
    quiz: DailyQuiz,
    repository: PlayerRepository,
    *,
    settings: Optional[GridSettings] = None,
    compatibility: Optional[CompatibilityLookup] = None,
) -> bool:
    return check_quiz(quiz, repository, settings=settings, compatibility=compatibility).solvable


def explain_cell(
    row: Category,
    column: Category,
    repository: PlayerRepository,
    *,
    sample_size: Optional[int] = None,
) -> CellExplanation:
    """Count sampled players answering a cell and list a few of them.

    Unlike the solvability probe this is diagnostic, so repository errors
    propagate as ``DataAccessError``.
    """

    size = sample_size if sample_size is not None else GridSettings().sample_size
    try:
        names = [
            player.name
            for player in repository.sample_players(size)
            if matches_cell(player, row, column)
        ]
    except DataAccessError:
        raise
    except Exception as exc:
        raise DataAccessError(f"Failed to sample players: {exc}") from exc

    return CellExplanation(
        row_id=row.id,
        column_id=column.id,
        count=len(names),
        sample_solutions=names[:MAX_SAMPLE_SOLUTIONS],
    )
