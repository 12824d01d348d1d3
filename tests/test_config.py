from pathlib import Path

from tennisgrid.config import GridSettings, country_name, get_settings


def test_defaults():
    settings = GridSettings()

    assert settings.min_country_players == 3
    assert settings.max_attempts == 20
    assert settings.selector_draw_attempts == 50
    assert settings.max_probe_errors is None


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("TENNISGRID_MIN_COUNTRY_PLAYERS", "5")
    monkeypatch.setenv("TENNISGRID_MAX_ATTEMPTS", "7")
    monkeypatch.setenv("TENNISGRID_MAX_PROBE_ERRORS", "2")
    monkeypatch.setenv("TENNISGRID_DB_PATH", str(tmp_path / "grid.sqlite"))
    monkeypatch.setenv("TENNISGRID_SNAPSHOT", str(tmp_path / "players.json"))

    settings = get_settings()

    assert settings.min_country_players == 5
    assert settings.max_attempts == 7
    assert settings.max_probe_errors == 2
    assert settings.db_path == tmp_path / "grid.sqlite"
    assert settings.snapshot_path == tmp_path / "players.json"


def test_invalid_env_values_fall_back(monkeypatch):
    monkeypatch.setenv("TENNISGRID_SAMPLE_SIZE", "many")
    monkeypatch.setenv("TENNISGRID_MAX_ATTEMPTS", "0")
    monkeypatch.setenv("TENNISGRID_MAX_PROBE_ERRORS", "x")
    monkeypatch.delenv("TENNISGRID_DB_PATH", raising=False)

    settings = GridSettings.from_env()

    assert settings.sample_size == 500
    assert settings.max_attempts == 1
    assert settings.max_probe_errors is None
    assert settings.db_path == Path("tennisgrid.sqlite")


def test_country_name_falls_back_to_code():
    assert country_name("ESP") == "Spain"
    assert country_name("XYZ") == "XYZ"
