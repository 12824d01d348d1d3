import threading
import time
from datetime import date

import pytest

from tennisgrid.catalog import build_catalog
from tennisgrid.errors import CatalogInsufficientError
from tennisgrid.generator import SEED_STEP, attempt_seed, generate, is_solvable, seed_for_date
from tests.sample_data import (
    CountingRepository,
    FailingRepository,
    MalformedRepository,
    grid_players,
    grid_repository,
    major_tournaments,
)


def test_seed_for_date():
    assert seed_for_date(date(2025, 1, 1)) == 20250101
    assert seed_for_date(date(2025, 1, 1), test_token=1234567) == 20251335
    assert seed_for_date(date(2025, 1, 1), test_token="1234567") == 20251335
    assert seed_for_date(date(2025, 1, 1), test_token="") == 20250101


def test_attempt_seed_steps_by_prime():
    assert attempt_seed(20250101, 0) == 20250101
    assert attempt_seed(20250101, 3) == 20250101 + 3 * SEED_STEP


def test_generate_retries_until_solvable():
    repo = grid_repository()
    catalog = build_catalog(repo)

    result = generate(catalog, 20250101, repo)

    assert result.solvable
    assert result.warning is None
    assert result.attempts == 2
    assert result.seed == 20250101 + SEED_STEP
    assert [c.id for c in result.quiz.rows] == ["country_ESP", "era_2000s", "era_2020s"]
    assert [c.id for c in result.quiz.columns] == ["era_2010s", "tournament_wimbledon", "style_right"]
    assert is_solvable(result.quiz, repo)


def test_generate_is_deterministic():
    repo = grid_repository()
    catalog = build_catalog(repo)

    first = generate(catalog, 20250607, repo)
    second = generate(catalog, 20250607, repo)

    assert first.quiz == second.quiz
    assert first.seed == second.seed


def test_generate_rejects_undersized_catalog():
    repo = grid_repository()
    catalog = build_catalog(repo)[:5]

    with pytest.raises(CatalogInsufficientError):
        generate(catalog, 20250101, repo)


def test_generate_stops_after_max_attempts():
    catalog = build_catalog(grid_repository())
    empty = CountingRepository([], major_tournaments())

    result = generate(catalog, 20250101, empty, max_attempts=3)

    assert result.attempts == 3
    assert not result.solvable
    assert "3 attempts" in result.warning
    assert result.unsolved_cells
    assert empty.sample_calls <= 27


def test_generate_rejects_invalid_attempt_limit():
    repo = grid_repository()

    with pytest.raises(ValueError):
        generate(build_catalog(repo), 1, repo, max_attempts=0)


def test_generate_honours_cancel_event():
    catalog = build_catalog(grid_repository())
    cancel = threading.Event()
    cancel.set()

    result = generate(catalog, 20250101, CountingRepository([]), cancel_event=cancel)

    assert result.attempts == 1
    assert not result.solvable
    assert "cancelled" in result.warning


def test_generate_honours_deadline():
    catalog = build_catalog(grid_repository())

    result = generate(catalog, 20250101, CountingRepository([]), deadline=time.monotonic() - 1)

    assert result.attempts == 1
    assert "deadline" in result.warning


def test_generate_fails_open_when_repository_is_down():
    catalog = build_catalog(grid_repository())

    result = generate(catalog, 20250101, FailingRepository())

    assert result.solvable
    assert result.attempts == 1
    assert all(cell.probe_failed for cell in result.cells)


@pytest.mark.parametrize("base_seed", [20240229, 20250101, 20251231, 20300615])
def test_generated_grids_keep_one_country_per_axis(base_seed):
    repo = grid_repository()

    result = generate(build_catalog(repo), base_seed, repo)
    rows, columns = result.quiz.axis_country_counts()

    assert rows <= 1
    assert columns <= 1
    assert len({c.id for c in result.quiz.categories}) == 6


def test_generate_fails_open_on_malformed_samples():
    repo = MalformedRepository(grid_players(), major_tournaments())

    result = generate(build_catalog(repo), 20250101, repo)

    assert result.solvable
    assert result.attempts == 1
    assert all(cell.source == "fail_open" for cell in result.cells)
