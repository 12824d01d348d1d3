"""Thin REST surface over the puzzle service."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from fastapi import FastAPI, HTTPException, Query

from tennisgrid.api.schemas import (
    CellExplanationResponse,
    CellRequest,
    DailyQuizResponse,
    GuessRequest,
    GuessValidationResponse,
    MetadataResponse,
    PlayerSummaryResponse,
    QuizResponse,
    RebuildResponse,
)
from tennisgrid.config import GridSettings, get_settings
from tennisgrid.errors import CatalogInsufficientError, DataAccessError, GridError
from tennisgrid.models import Player
from tennisgrid.persistence import CompatibilityStore
from tennisgrid.puzzles import DailyPuzzle, PuzzleService
from tennisgrid.repository import PlayerRepository, load_snapshot


logger = logging.getLogger(__name__)


def _player_summary(player: Player) -> PlayerSummaryResponse:
    return PlayerSummaryResponse(
        player_id=player.player_id,
        name=player.name,
        nationality=player.nationality,
    )


def _puzzle_to_response(puzzle: DailyPuzzle) -> DailyQuizResponse:
    return DailyQuizResponse(
        date=puzzle.date.isoformat(),
        quiz=QuizResponse(rows=list(puzzle.quiz.rows), columns=list(puzzle.quiz.columns)),
        seed=puzzle.seed,
        attempts=puzzle.attempts,
        solvable=puzzle.solvable,
        warning=puzzle.warning,
    )


def _parse_day(raw: Optional[str]) -> Optional[date]:
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid date {raw!r}; expected YYYY-MM-DD") from exc


def create_app(
    repository: Optional[PlayerRepository] = None,
    *,
    settings: Optional[GridSettings] = None,
    store: Optional[CompatibilityStore] = None,
) -> FastAPI:
    settings = settings or get_settings()
    if repository is None:
        if settings.snapshot_path is None:
            raise RuntimeError("Set TENNISGRID_SNAPSHOT or pass a repository to create_app()")
        repository = load_snapshot(settings.snapshot_path)
    store = store or CompatibilityStore(settings.db_path)

    app = FastAPI(title="tennisgrid")
    service = PuzzleService(repository, settings=settings, store=store)
    app.state.puzzle_service = service

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/daily-quiz", response_model=DailyQuizResponse)
    def daily_quiz(
        day: Optional[str] = Query(None, alias="date"),
        test_token: Optional[str] = Query(None, alias="t"),
    ) -> DailyQuizResponse:
        parsed_day = _parse_day(day)
        try:
            puzzle = service.generate_daily_puzzle(parsed_day, test_token)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except CatalogInsufficientError as exc:
            logger.error("Daily quiz generation impossible: %s", exc)
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        except GridError as exc:
            logger.error("Daily quiz generation failed: %s", exc)
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        return _puzzle_to_response(puzzle)

    @app.post("/explain-cell", response_model=CellExplanationResponse)
    def explain(request: CellRequest) -> CellExplanationResponse:
        try:
            explanation = service.explain_cell(request.row_category, request.col_category)
        except DataAccessError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        return CellExplanationResponse(
            row_id=explanation.row_id,
            column_id=explanation.column_id,
            count=explanation.count,
            sample_solutions=explanation.sample_solutions,
            source=explanation.source,
        )

    @app.post("/validate-guess", response_model=GuessValidationResponse)
    def validate_guess(request: GuessRequest) -> GuessValidationResponse:
        try:
            outcome = service.validate_guess(
                request.player_name, request.row_category, request.col_category
            )
        except DataAccessError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        return GuessValidationResponse(
            valid=outcome.valid,
            row_match=outcome.row_match,
            col_match=outcome.column_match,
            player=_player_summary(outcome.player) if outcome.player else None,
            error=outcome.error,
        )

    @app.get("/players/search", response_model=list[PlayerSummaryResponse])
    def search_players(q: str = Query(""), limit: int = Query(10, ge=1, le=50)) -> list[PlayerSummaryResponse]:
        try:
            players = service.search_players(q, limit)
        except DataAccessError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        return [_player_summary(player) for player in players]

    @app.post("/compatibility/rebuild", response_model=RebuildResponse)
    def rebuild() -> RebuildResponse:
        try:
            summary = service.rebuild_compatibility_matrix()
        except GridError as exc:
            logger.error("Compatibility rebuild failed: %s", exc)
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        return RebuildResponse(
            pairs_checked=summary.pairs_checked,
            valid_pairs=summary.valid_pairs,
            completed=summary.completed,
            category_metadata=summary.category_metadata,
        )

    @app.get("/compatibility/metadata", response_model=MetadataResponse)
    def metadata() -> MetadataResponse:
        stats = store.summary()
        return MetadataResponse(
            categories=stats.categories,
            pairs=stats.pairs,
            valid_pairs=stats.valid_pairs,
            built_at=stats.built_at.isoformat() if stats.built_at else None,
            category_metadata=store.load_metadata(),
        )

    return app
