"""Derive the candidate category catalog from the player repository."""

from __future__ import annotations

import logging
import re
from collections import Counter
from typing import Iterable, List, Optional, Sequence

from tennisgrid.config import GridSettings, country_name
from tennisgrid.errors import CatalogBuildError, CatalogInsufficientError, DataAccessError
from tennisgrid.models import (
    ACHIEVEMENT,
    COUNTRY,
    ERA,
    RANKING,
    STYLE,
    TOURNAMENT,
    Category,
    Tournament,
)
from tennisgrid.repository import PlayerRepository

from .matcher import DECADE_BOUNDS


logger = logging.getLogger(__name__)

GRID_SIZE = 6

GRAND_SLAM_LEVEL = "grand_slam"
MASTERS_LEVEL = "atp_masters_1000"
ATP500_LEVEL = "atp_500"
ACHIEVEMENT_LEVEL = "achievement"

_STYLES = (("left", "Left-Handed"), ("right", "Right-Handed"))
_RANKINGS = (
    ("world_no1", "World #1", "Reached #1 in the singles rankings"),
    ("top10", "Top 10", "Reached the top 10 in the singles rankings"),
)


def _slug(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", value.strip().lower()).strip("_")


def _category_ids(prefix: str, values: Sequence[str]) -> List[str]:
    """Slugged ids for ``values``, suffixed in order when two values share a slug."""

    ids: List[str] = []
    issued: set[str] = set()
    for value in values:
        base = f"{prefix}_{_slug(value)}"
        candidate = base
        suffix = 2
        while candidate in issued:
            candidate = f"{base}_{suffix}"
            suffix += 1
        if candidate != base:
            logger.info("%r shares id %s with another value; using %s", value, base, candidate)
        issued.add(candidate)
        ids.append(candidate)
    return ids


def _country_categories(nationalities: Iterable[str], min_players: int) -> List[Category]:
    counts = Counter(code for code in nationalities if code)
    viable = sorted(code for code, count in counts.items() if count >= min_players)
    dropped = len(counts) - len(viable)
    if dropped:
        logger.info("Skipping %s countries with fewer than %s players", dropped, min_players)
    return [
        Category(
            type=COUNTRY,
            id=f"country_{code}",
            label=country_name(code),
            description=f"Tennis player from {country_name(code)}",
            value=code,
        )
        for code in viable
    ]


def _tournament_categories(tournaments: Sequence[Tournament], max_atp500: int) -> List[Category]:
    seen: set[str] = set()
    by_level: dict[str, list[Tournament]] = {GRAND_SLAM_LEVEL: [], MASTERS_LEVEL: [], ATP500_LEVEL: []}
    for tournament in tournaments:
        if tournament.level == ACHIEVEMENT_LEVEL or tournament.short_name in seen:
            continue
        if tournament.level in by_level:
            seen.add(tournament.short_name)
            by_level[tournament.level].append(tournament)

    chosen = (
        by_level[GRAND_SLAM_LEVEL]
        + by_level[MASTERS_LEVEL]
        + by_level[ATP500_LEVEL][:max_atp500]
    )
    ids = _category_ids("tournament", [tournament.short_name for tournament in chosen])
    return [
        Category(
            type=TOURNAMENT,
            id=category_id,
            label=f"{tournament.short_name} Winner",
            description=f"Won {tournament.short_name}",
            value=tournament.short_name,
        )
        for category_id, tournament in zip(ids, chosen)
    ]


def _fixed_categories() -> List[Category]:
    categories = [
        Category(
            type=ERA,
            id=f"era_{token}",
            label=f"Active in {token}",
            description=f"Played professionally in the {token}",
            value=token,
        )
        for token in sorted(DECADE_BOUNDS, reverse=True)
    ]
    categories.extend(
        Category(type=STYLE, id=f"style_{hand}", label=label, description=f"{label} player", value=hand)
        for hand, label in _STYLES
    )
    categories.extend(
        Category(type=RANKING, id=f"ranking_{token}", label=label, description=description, value=token)
        for token, label, description in _RANKINGS
    )
    return categories


def _achievement_categories(tags: Iterable[str], limit: int) -> List[Category]:
    distinct = sorted({tag for tag in tags if tag})
    if len(distinct) > limit:
        logger.info("Capping achievement categories at %s of %s tags", limit, len(distinct))
    kept = distinct[:limit]
    return [
        Category(
            type=ACHIEVEMENT,
            id=category_id,
            label=tag.replace("_", " ").title(),
            description=tag.replace("_", " "),
            value=tag,
        )
        for category_id, tag in zip(_category_ids("achievement", kept), kept)
    ]


def _ensure_unique(categories: Sequence[Category]) -> None:
    counts = Counter(category.id for category in categories)
    duplicates = sorted(category_id for category_id, count in counts.items() if count > 1)
    if duplicates:
        raise CatalogBuildError(f"Duplicate category ids in catalog: {', '.join(duplicates)}")


def build_catalog(
    repository: PlayerRepository,
    settings: Optional[GridSettings] = None,
) -> List[Category]:
    """Query the repository once and return every candidate category.

    Ordering is stable (countries, tournaments, eras, styles, rankings,
    achievements) so seeded selection reproduces across processes.
    """

    settings = settings or GridSettings()
    try:
        nationalities = list(repository.nationalities())
        tournaments = list(repository.tournaments())
        achievement_tags = list(repository.achievement_types())
    except DataAccessError:
        raise
    except Exception as exc:
        raise DataAccessError(f"Failed to read catalog data: {exc}") from exc

    categories: List[Category] = []
    categories.extend(_country_categories(nationalities, settings.min_country_players))
    categories.extend(_tournament_categories(tournaments, settings.max_atp500))
    categories.extend(_fixed_categories())
    categories.extend(_achievement_categories(achievement_tags, settings.max_achievement_categories))

    _ensure_unique(categories)
    logger.info(
        "Built catalog with %s categories (%s players with nationality, %s tournaments)",
        len(categories),
        len(nationalities),
        len(tournaments),
    )
    return categories


def require_playable(catalog: Sequence[Category]) -> None:
    """Raise ``CatalogInsufficientError`` unless a full grid can be drawn."""

    if len(catalog) < GRID_SIZE:
        raise CatalogInsufficientError(len(catalog), GRID_SIZE)
