"""Pydantic models for API I/O."""

from .compat import MetadataResponse, RebuildResponse
from .quiz import (
    CellExplanationResponse,
    CellRequest,
    DailyQuizResponse,
    GuessRequest,
    GuessValidationResponse,
    PlayerSummaryResponse,
    QuizResponse,
)

__all__ = [
    "CellExplanationResponse",
    "CellRequest",
    "DailyQuizResponse",
    "GuessRequest",
    "GuessValidationResponse",
    "MetadataResponse",
    "PlayerSummaryResponse",
    "QuizResponse",
    "RebuildResponse",
]
