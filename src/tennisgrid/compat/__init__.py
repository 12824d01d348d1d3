"""Offline category-pair compatibility precomputation."""

from .precompute import (
    PrecomputeResult,
    RebuildSummary,
    precompute,
    quality_score,
    rebuild_compatibility_matrix,
)

__all__ = [
    "PrecomputeResult",
    "RebuildSummary",
    "precompute",
    "quality_score",
    "rebuild_compatibility_matrix",
]
