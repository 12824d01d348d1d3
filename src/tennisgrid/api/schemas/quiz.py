from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from tennisgrid.models import Category


class QuizResponse(BaseModel):
    rows: List[Category]
    columns: List[Category]


class DailyQuizResponse(BaseModel):
    date: str
    quiz: QuizResponse
    seed: int
    attempts: int
    solvable: bool
    warning: str | None = None


class CellRequest(BaseModel):
    row_category: Category
    col_category: Category


class CellExplanationResponse(BaseModel):
    row_id: str
    column_id: str
    count: int
    sample_solutions: List[str]
    source: str


class GuessRequest(CellRequest):
    player_name: str = Field(..., min_length=1)


class PlayerSummaryResponse(BaseModel):
    player_id: str
    name: str
    nationality: str | None = None


class GuessValidationResponse(BaseModel):
    valid: bool
    row_match: bool
    col_match: bool
    player: PlayerSummaryResponse | None = None
    error: str | None = None
