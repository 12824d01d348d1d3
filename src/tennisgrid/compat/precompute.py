"""Offline N x N category compatibility matrix and per-category metrics."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Sequence

from tennisgrid.catalog import build_catalog, matches
from tennisgrid.config import GridSettings
from tennisgrid.errors import DataAccessError
from tennisgrid.models import Category, CategoryMetadata, CompatibilityRecord
from tennisgrid.repository import PlayerRepository

if TYPE_CHECKING:
    from tennisgrid.persistence import CompatibilityStore


logger = logging.getLogger(__name__)

MAX_SAMPLE_PLAYERS = 5
SAFE_COMPATIBILITY_RATIO = 0.3
_PROGRESS_EVERY = 100


@dataclass(frozen=True)
class PrecomputeResult:
    records: List[CompatibilityRecord]
    metadata: List[CategoryMetadata]
    pairs_checked: int
    valid_pairs: int
    completed: bool = True


@dataclass(frozen=True)
class RebuildSummary:
    pairs_checked: int
    valid_pairs: int
    category_metadata: List[CategoryMetadata] = field(default_factory=list)
    completed: bool = True

    @property
    def compatibility_rate(self) -> float:
        return self.valid_pairs / self.pairs_checked if self.pairs_checked else 0.0


def quality_score(compatible_count: int, catalog_size: int, avg_pair_players: float) -> int:
    """0-100 score: half breadth of compatible partners, half depth of answers."""

    if catalog_size <= 0:
        return 0
    raw = 50 * compatible_count / catalog_size + 50 * min(avg_pair_players / 10, 1.0)
    # Half-up rounding.
    score = math.floor(raw + 0.5)
    return max(0, min(100, score))


def _category_metadata(
    category: Category,
    compatible_count: int,
    total_players: int,
    catalog_size: int,
) -> CategoryMetadata:
    avg = total_players / compatible_count if compatible_count else 0.0
    return CategoryMetadata(
        category_id=category.id,
        category_type=category.type,
        category_label=category.label,
        compatible_count=compatible_count,
        total_player_count=total_players,
        avg_pair_player_count=avg,
        quality_score=quality_score(compatible_count, catalog_size, avg),
        is_safe=compatible_count >= catalog_size * SAFE_COMPATIBILITY_RATIO,
        is_active=compatible_count > 0,
    )


def precompute(
    catalog: Sequence[Category],
    repository: PlayerRepository,
    *,
    settings: Optional[GridSettings] = None,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> PrecomputeResult:
    """Check every ordered pair of distinct categories against the player sample.

    The sample is read once; each category's matching players are resolved
    once and pairs are answered by intersecting those sets, which gives the
    same verdicts as probing each pair separately. ``should_cancel`` is polled
    before every pair; on cancellation only fully processed categories are
    returned and ``completed`` is False.
    """

    settings = settings or GridSettings()
    try:
        players = list(repository.sample_players(settings.sample_size))
    except DataAccessError:
        raise
    except Exception as exc:
        raise DataAccessError(f"Failed to sample players for precomputation: {exc}") from exc

    size = len(catalog)
    total_pairs = size * (size - 1)
    logger.info(
        "Precomputing compatibility for %s categories (%s pairs, %s sampled players)",
        size,
        total_pairs,
        len(players),
    )

    members: Dict[str, List[int]] = {
        category.id: [idx for idx, player in enumerate(players) if matches(player, category)]
        for category in catalog
    }

    records: List[CompatibilityRecord] = []
    metadata: List[CategoryMetadata] = []
    pairs_checked = 0
    valid_pairs = 0

    for first in catalog:
        row_records: List[CompatibilityRecord] = []
        first_members = set(members[first.id])
        compatible = 0
        total_players = 0

        for second in catalog:
            if second.id == first.id:
                continue
            if should_cancel is not None and should_cancel():
                logger.warning(
                    "Precomputation cancelled after %s/%s pairs; keeping %s finished categories",
                    pairs_checked,
                    total_pairs,
                    len(metadata),
                )
                return PrecomputeResult(
                    records=records,
                    metadata=metadata,
                    pairs_checked=pairs_checked,
                    valid_pairs=valid_pairs,
                    completed=False,
                )

            shared = [idx for idx in members[second.id] if idx in first_members]
            pairs_checked += 1
            if shared:
                valid_pairs += 1
                compatible += 1
                total_players += len(shared)
            row_records.append(
                CompatibilityRecord(
                    category_a=first.id,
                    category_b=second.id,
                    is_compatible=bool(shared),
                    player_count=len(shared),
                    sample_players=[players[idx].name for idx in shared[:MAX_SAMPLE_PLAYERS]],
                )
            )
            if pairs_checked % _PROGRESS_EVERY == 0:
                logger.info("Progress: %s/%s pairs, %s valid", pairs_checked, total_pairs, valid_pairs)

        records.extend(row_records)
        meta = _category_metadata(first, compatible, total_players, size)
        metadata.append(meta)
        logger.debug(
            "%s: %s compatible partners, quality %s", first.label, compatible, meta.quality_score
        )

    logger.info(
        "Precomputation complete: %s/%s valid pairs (%.2f%%)",
        valid_pairs,
        pairs_checked,
        (valid_pairs / pairs_checked * 100) if pairs_checked else 0.0,
    )
    return PrecomputeResult(
        records=records,
        metadata=metadata,
        pairs_checked=pairs_checked,
        valid_pairs=valid_pairs,
    )


def rebuild_compatibility_matrix(
    repository: PlayerRepository,
    store: "CompatibilityStore",
    *,
    catalog: Optional[Sequence[Category]] = None,
    settings: Optional[GridSettings] = None,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> RebuildSummary:
    """Rebuild the persisted matrix from scratch.

    A cancelled run leaves the previously stored matrix untouched.
    """

    settings = settings or GridSettings()
    if catalog is None:
        catalog = build_catalog(repository, settings)
    result = precompute(catalog, repository, settings=settings, should_cancel=should_cancel)
    if result.completed:
        store.replace_matrix(result.records, result.metadata)
    else:
        logger.warning("Skipping persistence of incomplete compatibility matrix")
    return RebuildSummary(
        pairs_checked=result.pairs_checked,
        valid_pairs=result.valid_pairs,
        category_metadata=result.metadata,
        completed=result.completed,
    )
