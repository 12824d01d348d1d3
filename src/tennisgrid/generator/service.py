"""Retry loop that turns a catalog and a date seed into a playable grid."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, Optional, Sequence, Tuple, Union

from tennisgrid.catalog import require_playable
from tennisgrid.config import GridSettings
from tennisgrid.models import Category, CategoryMetadata, DailyQuiz
from tennisgrid.repository import PlayerRepository

from .selector import select
from .validator import CellVerdict, CompatibilityLookup, check_quiz


logger = logging.getLogger(__name__)

# Large prime spacing consecutive attempt seeds.
SEED_STEP = 1_000_003


@dataclass(frozen=True)
class GenerationResult:
    quiz: DailyQuiz
    seed: int
    attempts: int
    solvable: bool
    warning: Optional[str] = None
    cells: Tuple[CellVerdict, ...] = ()

    @property
    def unsolved_cells(self) -> list[tuple[str, str]]:
        return [(cell.row_id, cell.column_id) for cell in self.cells if not cell.solved]


def seed_for_date(day: date, test_token: Optional[Union[str, int]] = None) -> int:
    """Return ``YYYYMMDD`` as an int, optionally shifted by a test token.

    A token (typically a millisecond timestamp) adds
    ``(token // 1000) % 10000`` so verification runs can explore other grids
    for the same day.
    """

    seed = int(day.strftime("%Y%m%d"))
    if test_token is not None and str(test_token).strip() != "":
        seed += (int(test_token) // 1000) % 10000
    return seed


def attempt_seed(base_seed: int, attempt: int) -> int:
    return base_seed + attempt * SEED_STEP


def _stop_requested(deadline: Optional[float], cancel_event: Optional[threading.Event]) -> Optional[str]:
    if cancel_event is not None and cancel_event.is_set():
        return "cancelled"
    if deadline is not None and time.monotonic() >= deadline:
        return "deadline reached"
    return None


def generate(
    catalog: Sequence[Category],
    base_seed: int,
    repository: PlayerRepository,
    max_attempts: Optional[int] = None,
    *,
    settings: Optional[GridSettings] = None,
    metadata: Optional[Iterable[CategoryMetadata]] = None,
    compatibility: Optional[CompatibilityLookup] = None,
    deadline: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
) -> GenerationResult:
    """Select and validate grids until one is solvable or attempts run out.

    Exhausting ``max_attempts`` (or hitting ``deadline``, a
    ``time.monotonic()`` value, or ``cancel_event``) is not an error: the last
    candidate is returned with ``solvable=False`` and a warning. Only an
    undersized catalog raises.
    """

    settings = settings or GridSettings()
    require_playable(catalog)
    limit = max_attempts if max_attempts is not None else settings.max_attempts
    if limit < 1:
        raise ValueError("max_attempts must be at least 1")
    metadata = list(metadata) if metadata is not None else None

    last: Optional[GenerationResult] = None
    for attempt in range(limit):
        if last is not None:
            reason = _stop_requested(deadline, cancel_event)
            if reason:
                warning = f"Generation stopped after {attempt} attempts ({reason}); grid may have unsolvable cells"
                logger.warning("Generation stopped after %s attempts: %s", attempt, reason)
                return replace(last, warning=warning)

        seed = attempt_seed(base_seed, attempt)
        quiz = DailyQuiz.from_selection(select(catalog, seed, metadata=metadata, settings=settings))

        row_countries, column_countries = quiz.axis_country_counts()
        if row_countries > 1 or column_countries > 1:
            logger.info("Attempt %s (seed %s) rejected: two countries on one axis", attempt + 1, seed)
            last = GenerationResult(quiz=quiz, seed=seed, attempts=attempt + 1, solvable=False)
            continue

        check = check_quiz(quiz, repository, settings=settings, compatibility=compatibility)
        result = GenerationResult(
            quiz=quiz,
            seed=seed,
            attempts=attempt + 1,
            solvable=check.solvable,
            cells=check.cells,
        )
        if check.solvable:
            if check.failed_probes:
                logger.warning(
                    "Seed %s accepted with %s fail-open cells", seed, check.failed_probes
                )
            logger.info("Found solvable grid on attempt %s (seed %s)", attempt + 1, seed)
            return result

        logger.info(
            "Attempt %s (seed %s) has %s unsolvable cells: %s",
            attempt + 1,
            seed,
            len(check.unsolved),
            ", ".join(f"{cell.row_id} x {cell.column_id}" for cell in check.unsolved),
        )
        last = result

    assert last is not None
    warning = f"No fully solvable grid found in {limit} attempts; returning last candidate"
    logger.warning("%s (base seed %s)", warning, base_seed)
    return replace(last, warning=warning)
