import pytest

from tennisgrid.catalog import build_catalog
from tennisgrid.config import GridSettings
from tennisgrid.errors import DataAccessError
from tennisgrid.generator import cell_has_solution, check_quiz, explain_cell, is_solvable
from tennisgrid.models import CompatibilityRecord, DailyQuiz
from tests.sample_data import (
    FailingRepository,
    MalformedRepository,
    grid_players,
    grid_repository,
    major_tournaments,
)


@pytest.fixture
def categories():
    return {category.id: category for category in build_catalog(grid_repository())}


def _quiz(categories, *ids):
    return DailyQuiz.from_selection([categories[category_id] for category_id in ids])


def test_cell_with_answers_is_solvable(categories):
    repo = grid_repository()

    assert cell_has_solution(categories["country_USA"], categories["tournament_wimbledon"], repo)
    assert cell_has_solution(categories["era_1990s"], categories["style_left"], repo)


def test_cell_without_answers_is_not_solvable(categories):
    repo = grid_repository()

    assert not cell_has_solution(categories["country_USA"], categories["country_ESP"], repo)
    assert not cell_has_solution(categories["style_left"], categories["style_right"], repo)


def test_solvable_verdict_agrees_with_explanation(categories):
    repo = grid_repository()
    row, column = categories["country_ESP"], categories["ranking_world_no1"]

    explanation = explain_cell(row, column, repo)

    assert cell_has_solution(row, column, repo) is (explanation.count > 0)
    assert explanation.count == 9


def test_sample_size_limits_probe(categories):
    repo = grid_repository()

    # Only the first USA players are sampled.
    assert not cell_has_solution(categories["country_ESP"], categories["era_2020s"], repo, sample_size=5)


def test_repository_failure_fails_open(categories):
    repo = FailingRepository()

    assert cell_has_solution(categories["country_USA"], categories["country_ESP"], repo) is True
    assert repo.calls == 1


def test_matrix_answer_skips_repository(categories):
    repo = FailingRepository()
    row, column = categories["country_USA"], categories["tournament_wimbledon"]
    matrix = {
        (row.id, column.id): CompatibilityRecord(
            category_a=row.id, category_b=column.id, is_compatible=False, player_count=0
        )
    }

    assert cell_has_solution(row, column, repo, compatibility=matrix) is False
    assert repo.calls == 0


def test_check_quiz_reports_unsolved_cells(categories):
    quiz = _quiz(
        categories,
        "country_USA", "era_2000s", "style_left",
        "country_ESP", "tournament_us_open", "style_right",
    )

    check = check_quiz(quiz, grid_repository())

    assert len(check.cells) == 9
    assert not check.solvable
    assert {(cell.row_id, cell.column_id) for cell in check.unsolved} == {
        ("country_USA", "country_ESP"),
        ("style_left", "style_right"),
    }
    assert check.failed_probes == 0


def test_is_solvable_matches_check(categories):
    quiz = _quiz(
        categories,
        "country_ESP", "era_2000s", "era_2020s",
        "era_2010s", "tournament_wimbledon", "style_right",
    )

    assert is_solvable(quiz, grid_repository())
    assert is_solvable(quiz, grid_repository(), settings=GridSettings(validator_workers=1))


def test_check_quiz_counts_failed_probes(categories):
    quiz = _quiz(
        categories,
        "country_USA", "era_2000s", "style_left",
        "country_ESP", "tournament_us_open", "style_right",
    )

    check = check_quiz(quiz, FailingRepository())

    assert check.solvable
    assert check.failed_probes == 9
    assert all(cell.source == "fail_open" for cell in check.cells)


def test_probe_error_threshold_raises(categories):
    quiz = _quiz(
        categories,
        "country_USA", "era_2000s", "style_left",
        "country_ESP", "tournament_us_open", "style_right",
    )

    with pytest.raises(DataAccessError):
        check_quiz(quiz, FailingRepository(), settings=GridSettings(max_probe_errors=2))


def test_explain_cell_caps_sample_names(categories):
    explanation = explain_cell(categories["country_USA"], categories["era_2010s"], grid_repository())

    assert explanation.count == 12
    assert len(explanation.sample_solutions) == 5
    assert explanation.sample_solutions[0] == "Player usa0"


def test_explain_cell_propagates_repository_errors(categories):
    with pytest.raises(DataAccessError):
        explain_cell(categories["country_USA"], categories["era_2010s"], FailingRepository())


def test_malformed_sample_fails_open(categories):
    quiz = _quiz(
        categories,
        "country_USA", "era_2000s", "style_left",
        "country_ESP", "tournament_us_open", "style_right",
    )

    check = check_quiz(quiz, MalformedRepository(grid_players(), major_tournaments()))

    assert check.solvable
    assert check.failed_probes == 9


def test_cursor_failing_partway_fails_open(categories):
    repo = MalformedRepository(grid_players(), major_tournaments(), break_after=2)

    # usa0 and usa1 are read before the cursor breaks; neither is Spanish.
    assert cell_has_solution(categories["country_ESP"], categories["style_left"], repo) is True


def test_explain_cell_reports_malformed_sample(categories):
    repo = MalformedRepository(grid_players(), major_tournaments())

    with pytest.raises(DataAccessError):
        explain_cell(categories["country_USA"], categories["era_2010s"], repo)
