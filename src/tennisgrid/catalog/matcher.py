"""Predicate evaluation of a player against a single category."""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Mapping, Optional, Tuple

from tennisgrid.models import (
    ACHIEVEMENT,
    COUNTRY,
    ERA,
    RANKING,
    STYLE,
    TOURNAMENT,
    Category,
    EraRange,
    Player,
)


logger = logging.getLogger(__name__)

DEFAULT_CAREER_START = 1990
YEAR_END_NO1 = "Year-End #1"

# Inclusive year bounds; None means open-ended.
DECADE_BOUNDS: Mapping[str, Tuple[int, Optional[int]]] = {
    "1990s": (1990, 1999),
    "2000s": (2000, 2009),
    "2010s": (2010, 2019),
    "2020s": (2020, None),
}


def career_span(player: Player, *, current_year: Optional[int] = None) -> Tuple[int, int]:
    """Return (start, end) with missing years filled in."""

    start = player.turned_pro or DEFAULT_CAREER_START
    end = player.retired or (current_year or date.today().year)
    return start, end


def _parse_era_range(value: EraRange | str) -> Optional[EraRange]:
    if isinstance(value, EraRange):
        return value
    if not value.startswith("{"):
        return None
    payload = json.loads(value)
    years = payload.get("active_years", payload)
    return EraRange(start=int(years["start"]), end=int(years["end"]))


def _matches_era(player: Player, value: EraRange | str, current_year: Optional[int]) -> bool:
    start, end = career_span(player, current_year=current_year)

    explicit = _parse_era_range(value)
    if explicit is not None:
        return start <= explicit.end and end >= explicit.start

    bounds = DECADE_BOUNDS.get(value)
    if bounds is None:
        return False
    decade_start, decade_end = bounds
    if decade_end is not None and start > decade_end:
        return False
    return end >= decade_start


def _matches_ranking(player: Player, value: str) -> bool:
    if value == "world_no1":
        if any(snapshot.singles_ranking == 1 for snapshot in player.rankings):
            return True
        return any(achievement.tournament == YEAR_END_NO1 for achievement in player.achievements)
    if value == "top10":
        return any(
            snapshot.singles_ranking is not None and snapshot.singles_ranking <= 10
            for snapshot in player.rankings
        )
    return False


def _evaluate(player: Player, category: Category, current_year: Optional[int]) -> bool:
    kind = category.type
    value = category.value

    if kind == ERA:
        return _matches_era(player, value, current_year)
    if not isinstance(value, str):
        return False
    if kind == COUNTRY:
        return player.nationality == value
    if kind == TOURNAMENT:
        return any(
            achievement.result == "winner" and achievement.tournament == value
            for achievement in player.achievements
        )
    if kind == STYLE:
        return player.plays_hand == value
    if kind == RANKING:
        return _matches_ranking(player, value)
    if kind == ACHIEVEMENT:
        return any(achievement.achievement_type == value for achievement in player.achievements)
    return False


def matches(player: Player, category: Category, *, current_year: Optional[int] = None) -> bool:
    """Return True if ``player`` satisfies ``category``.

    Never raises: malformed category values and unknown types evaluate to
    False so grid validation stays total.
    """

    try:
        return _evaluate(player, category, current_year)
    except Exception as exc:
        logger.debug("Category %s evaluation failed for %s: %s", category.id, player.player_id, exc)
        return False


def matches_cell(
    player: Player,
    row: Category,
    column: Category,
    *,
    current_year: Optional[int] = None,
) -> bool:
    return matches(player, row, current_year=current_year) and matches(
        player, column, current_year=current_year
    )
