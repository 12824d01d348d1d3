"""Category descriptors used as puzzle row and column headers."""

from __future__ import annotations

from typing import Tuple, Union

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


COUNTRY = "country"
TOURNAMENT = "tournament"
ERA = "era"
STYLE = "style"
RANKING = "ranking"
ACHIEVEMENT = "achievement"

CATEGORY_TYPES: Tuple[str, ...] = (COUNTRY, TOURNAMENT, ERA, STYLE, RANKING, ACHIEVEMENT)


class EraRange(BaseModel):
    """Explicit inclusive year range for era categories."""

    start: int
    end: int

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_order(self) -> "EraRange":
        if self.end < self.start:
            raise ValueError(f"era range end {self.end} precedes start {self.start}")
        return self


class Category(BaseModel):
    """Typed predicate over players, e.g. "won Wimbledon" or "from Spain".

    ``type`` is kept as a plain string so categories loaded from external
    sources with types this package does not know still round-trip; the
    matcher treats those as never matching.
    """

    type: str = Field(..., min_length=1)
    id: str = Field(..., min_length=1)
    label: str
    description: str = ""
    value: Union[EraRange, str]

    model_config = ConfigDict(frozen=True)

    @property
    def is_country(self) -> bool:
        return self.type == COUNTRY
