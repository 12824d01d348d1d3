"""Read-only player records supplied by the player repository."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class Achievement(BaseModel):
    """Tournament result or tagged milestone attached to a player."""

    tournament: Optional[str] = None
    year: Optional[int] = None
    result: Optional[str] = None
    achievement_type: Optional[str] = None
    tournament_level: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class RankingSnapshot(BaseModel):
    singles_ranking: Optional[int] = Field(default=None, ge=1)
    ranking_date: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class Player(BaseModel):
    """Player record with achievements and ranking history preloaded."""

    player_id: str = Field(..., min_length=1)
    name: str
    nationality: Optional[str] = None
    turned_pro: Optional[int] = None
    retired: Optional[int] = None
    plays_hand: Optional[Literal["left", "right"]] = None
    achievements: List[Achievement] = Field(default_factory=list)
    rankings: List[RankingSnapshot] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class Tournament(BaseModel):
    short_name: str = Field(..., min_length=1)
    name: Optional[str] = None
    level: Optional[str] = None

    model_config = ConfigDict(frozen=True)
