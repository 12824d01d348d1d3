"""Canonical models shared across catalog, generator and compatibility layers."""

from .category import (
    ACHIEVEMENT,
    CATEGORY_TYPES,
    COUNTRY,
    ERA,
    RANKING,
    STYLE,
    TOURNAMENT,
    Category,
    EraRange,
)
from .player import Achievement, Player, RankingSnapshot, Tournament
from .quiz import CategoryMetadata, CompatibilityRecord, DailyQuiz

__all__ = [
    "ACHIEVEMENT",
    "CATEGORY_TYPES",
    "COUNTRY",
    "ERA",
    "RANKING",
    "STYLE",
    "TOURNAMENT",
    "Achievement",
    "Category",
    "CategoryMetadata",
    "CompatibilityRecord",
    "DailyQuiz",
    "EraRange",
    "Player",
    "RankingSnapshot",
    "Tournament",
]
