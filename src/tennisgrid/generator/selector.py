"""Deterministic seeded selection of six grid categories."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

from tennisgrid.catalog import require_playable
from tennisgrid.config import GRAND_SLAMS, POPULAR_COUNTRIES, GridSettings
from tennisgrid.errors import CatalogInsufficientError
from tennisgrid.models import COUNTRY, ERA, RANKING, TOURNAMENT, Category, CategoryMetadata


logger = logging.getLogger(__name__)

SEED_MULTIPLIER = 9973
OFFSET_MULTIPLIER = 7919

ROW_AXIS = 0
COLUMN_AXIS = 1
AXIS_SLOTS = 3

# Offset ranges per slot never overlap: rows use [0, 300), columns [1000, 1300).
AXIS_OFFSET_BASE = {ROW_AXIS: 0, COLUMN_AXIS: 1000}
SLOT_OFFSET_STRIDE = 100


def seeded_index(seed: int, max_value: int, offset: int = 0) -> int:
    """Map ``(seed, offset)`` onto ``range(max_value)``.

    ``|seed * 9973 + offset * 7919| mod max_value`` using exact integer
    arithmetic, so any implementation yields the same index for the same
    inputs.
    """

    if max_value <= 0:
        raise ValueError("max_value must be positive")
    return abs(seed * SEED_MULTIPLIER + offset * OFFSET_MULTIPLIER) % max_value


@dataclass(frozen=True)
class SelectionState:
    """Categories picked so far plus the per-axis country flag."""

    picks: Tuple[Category, ...] = ()
    used_ids: FrozenSet[str] = frozenset()
    axis_has_country: Tuple[bool, bool] = (False, False)

    def accepts(self, category: Category, axis: int) -> bool:
        if category.id in self.used_ids:
            return False
        return not (category.is_country and self.axis_has_country[axis])

    def with_pick(self, category: Category, axis: int) -> "SelectionState":
        flags = list(self.axis_has_country)
        flags[axis] = flags[axis] or category.is_country
        return SelectionState(
            picks=self.picks + (category,),
            used_ids=self.used_ids | {category.id},
            axis_has_country=(flags[0], flags[1]),
        )


def _is_default_safe(category: Category) -> bool:
    if category.type in (ERA, RANKING):
        return True
    if category.type == COUNTRY:
        return category.value in POPULAR_COUNTRIES
    if category.type == TOURNAMENT:
        return category.value in GRAND_SLAMS
    return False


def partition_catalog(
    catalog: Sequence[Category],
    metadata: Optional[Iterable[CategoryMetadata]] = None,
) -> Tuple[List[Category], List[Category]]:
    """Split the catalog into (safe, risky) pools, keeping catalog order.

    With precomputed metadata, categories flagged safe join the safe pool and
    categories with no compatible partner are left out of both pools.
    """

    lookup = {item.category_id: item for item in metadata or ()}
    safe: List[Category] = []
    risky: List[Category] = []
    for category in catalog:
        meta = lookup.get(category.id)
        if meta is not None and not meta.is_active:
            continue
        if _is_default_safe(category) or (meta is not None and meta.is_safe):
            safe.append(category)
        else:
            risky.append(category)
    return safe, risky


def draw_slot(
    pool: Sequence[Category],
    state: SelectionState,
    *,
    axis: int,
    seed: int,
    offset_base: int,
    attempts: int,
    fallback: Sequence[Category],
) -> SelectionState:
    """Pick one category for ``axis`` and return the advanced state."""

    for attempt in range(min(attempts, SLOT_OFFSET_STRIDE)):
        if not pool:
            break
        candidate = pool[seeded_index(seed, len(pool), offset_base + attempt)]
        if state.accepts(candidate, axis):
            return state.with_pick(candidate, axis)

    for candidate in fallback:
        if state.accepts(candidate, axis):
            logger.debug("Seed %s offset %s fell back to catalog order", seed, offset_base)
            return state.with_pick(candidate, axis)

    for candidate in fallback:
        if candidate.id not in state.used_ids:
            logger.warning(
                "Seed %s placed a second country on axis %s; no other category left", seed, axis
            )
            return state.with_pick(candidate, axis)

    raise CatalogInsufficientError(len(state.used_ids))


def select(
    catalog: Sequence[Category],
    seed: int,
    *,
    metadata: Optional[Iterable[CategoryMetadata]] = None,
    settings: Optional[GridSettings] = None,
) -> List[Category]:
    """Return six categories (three rows, then three columns) for ``seed``.

    Pure function of ``(catalog, seed, metadata)``.
    """

    require_playable(catalog)
    settings = settings or GridSettings()
    safe, risky = partition_catalog(catalog, metadata)
    open_pool = safe + risky

    state = SelectionState()
    for axis in (ROW_AXIS, COLUMN_AXIS):
        for slot in range(AXIS_SLOTS):
            state = draw_slot(
                safe if slot < AXIS_SLOTS - 1 else open_pool,
                state,
                axis=axis,
                seed=seed,
                offset_base=AXIS_OFFSET_BASE[axis] + slot * SLOT_OFFSET_STRIDE,
                attempts=settings.selector_draw_attempts,
                fallback=catalog,
            )
    return list(state.picks)
