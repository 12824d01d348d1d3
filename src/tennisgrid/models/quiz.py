"""Puzzle and compatibility-cache models."""

from __future__ import annotations

from typing import List, Tuple

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

from .category import Category


class DailyQuiz(BaseModel):
    """3x3 grid definition: three row and three column categories."""

    rows: Tuple[Category, Category, Category]
    columns: Tuple[Category, Category, Category]

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_unique_ids(self) -> "DailyQuiz":
        ids = [category.id for category in self.categories]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate category ids in quiz: {ids}")
        return self

    @classmethod
    def from_selection(cls, categories: List[Category]) -> "DailyQuiz":
        if len(categories) != 6:
            raise ValueError(f"Expected 6 categories, got {len(categories)}")
        return cls(rows=tuple(categories[:3]), columns=tuple(categories[3:]))

    @property
    def categories(self) -> Tuple[Category, ...]:
        return tuple(self.rows) + tuple(self.columns)

    def cells(self) -> List[Tuple[Category, Category]]:
        return [(row, column) for row in self.rows for column in self.columns]

    def axis_country_counts(self) -> Tuple[int, int]:
        return (
            sum(1 for category in self.rows if category.is_country),
            sum(1 for category in self.columns if category.is_country),
        )


class CompatibilityRecord(BaseModel):
    category_a: str
    category_b: str
    is_compatible: bool
    player_count: int = Field(..., ge=0)
    sample_players: List[str] = Field(default_factory=list, max_length=5)

    model_config = ConfigDict(frozen=True)


class CategoryMetadata(BaseModel):
    """Per-category aggregates derived from the compatibility matrix."""

    category_id: str
    category_type: str
    category_label: str = ""
    compatible_count: int = Field(..., ge=0)
    total_player_count: int = Field(..., ge=0)
    avg_pair_player_count: float = Field(..., ge=0.0)
    quality_score: int = Field(..., ge=0, le=100)
    is_safe: bool
    is_active: bool

    model_config = ConfigDict(frozen=True)
