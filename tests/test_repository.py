import json

import pytest

from tennisgrid.errors import DataAccessError
from tennisgrid.repository import InMemoryPlayerRepository, PlayerRepository, load_snapshot
from tests.sample_data import FailingRepository, varied_players


def test_in_memory_repository_satisfies_protocol():
    assert isinstance(InMemoryPlayerRepository([]), PlayerRepository)
    assert isinstance(FailingRepository(), PlayerRepository)


def test_sample_is_stable_prefix():
    repo = InMemoryPlayerRepository(varied_players())

    assert [p.player_id for p in repo.sample_players(2)] == ["nadal", "ferrer"]
    assert repo.sample_players(0) == []
    assert len(repo.sample_players(100)) == 5


def test_find_players_is_case_insensitive_and_sorted():
    repo = InMemoryPlayerRepository(varied_players())

    assert [p.name for p in repo.find_players("ER", 10)] == ["David Ferrer"]
    assert [p.player_id for p in repo.find_players("a", 2)] == ["ferrer", "sampras"]
    assert repo.find_players("   ", 10) == []


def test_load_snapshot(tmp_path):
    path = tmp_path / "players.json"
    path.write_text(
        json.dumps(
            {
                "players": [p.model_dump(mode="json") for p in varied_players()],
                "tournaments": [{"short_name": "Wimbledon", "level": "grand_slam"}],
            }
        ),
        encoding="utf-8",
    )

    repo = load_snapshot(path)

    assert len(repo) == 5
    assert repo.tournaments()[0].short_name == "Wimbledon"
    assert sorted(set(repo.achievement_types())) == ["grand_slam_winner", "olympic_gold"]


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        "[1, 2]",
        json.dumps({"players": [{"player_id": "", "name": "Nameless"}]}),
    ],
)
def test_load_snapshot_rejects_malformed_files(tmp_path, content):
    path = tmp_path / "players.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(DataAccessError):
        load_snapshot(path)


def test_load_snapshot_missing_file(tmp_path):
    with pytest.raises(DataAccessError):
        load_snapshot(tmp_path / "missing.json")
