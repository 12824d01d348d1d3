"""Seeded selection, solvability validation and the generation retry loop."""

from .selector import SelectionState, partition_catalog, seeded_index, select
from .service import SEED_STEP, GenerationResult, attempt_seed, generate, seed_for_date
from .validator import (
    CellExplanation,
    CellVerdict,
    QuizCheck,
    cell_has_solution,
    check_quiz,
    explain_cell,
    is_solvable,
)

__all__ = [
    "SEED_STEP",
    "CellExplanation",
    "CellVerdict",
    "GenerationResult",
    "QuizCheck",
    "SelectionState",
    "attempt_seed",
    "cell_has_solution",
    "check_quiz",
    "explain_cell",
    "generate",
    "is_solvable",
    "partition_catalog",
    "seed_for_date",
    "seeded_index",
    "select",
]
