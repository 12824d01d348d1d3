"""Tunable limits for catalog building, selection and validation."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Mapping, Optional


logger = logging.getLogger(__name__)

_ENV_PREFIX = "TENNISGRID_"

COUNTRY_NAMES: Mapping[str, str] = {
    "USA": "USA",
    "ESP": "Spain",
    "SRB": "Serbia",
    "SUI": "Switzerland",
    "GBR": "Great Britain",
    "FRA": "France",
    "GER": "Germany",
    "ITA": "Italy",
    "AUS": "Australia",
    "RUS": "Russia",
    "ARG": "Argentina",
    "POL": "Poland",
    "CZE": "Czech Republic",
    "BEL": "Belgium",
    "GRE": "Greece",
    "NOR": "Norway",
    "CAN": "Canada",
    "JPN": "Japan",
    "CHN": "China",
    "BRA": "Brazil",
    "CHI": "Chile",
    "COL": "Colombia",
    "CRO": "Croatia",
    "DEN": "Denmark",
    "NED": "Netherlands",
}

POPULAR_COUNTRIES: FrozenSet[str] = frozenset(
    {"USA", "ESP", "FRA", "GBR", "AUS", "SUI", "SRB", "GER", "ITA", "RUS", "ARG"}
)

GRAND_SLAMS: FrozenSet[str] = frozenset(
    {"Australian Open", "French Open", "Wimbledon", "US Open"}
)


def country_name(code: str) -> str:
    """Return a display name for a country code, falling back to the code."""

    return COUNTRY_NAMES.get(code, code)


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def _env_optional_int(name: str, *, min_value: int = 0) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return max(min_value, int(raw))
    except ValueError:
        logger.warning("Invalid int for %s: %s; leaving unset", name, raw)
        return None


@dataclass(frozen=True)
class GridSettings:
    min_country_players: int = 3
    max_atp500: int = 10
    max_achievement_categories: int = 20
    sample_size: int = 500
    max_attempts: int = 20
    selector_draw_attempts: int = 50
    validator_workers: int = 9
    max_probe_errors: Optional[int] = None
    db_path: Path = field(default_factory=lambda: Path("tennisgrid.sqlite"))
    snapshot_path: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "GridSettings":
        """Build settings from ``TENNISGRID_*`` environment variables."""

        defaults = cls()
        db_raw = os.getenv(f"{_ENV_PREFIX}DB_PATH")
        snapshot_raw = os.getenv(f"{_ENV_PREFIX}SNAPSHOT")
        return cls(
            min_country_players=_env_int(
                f"{_ENV_PREFIX}MIN_COUNTRY_PLAYERS", defaults.min_country_players, min_value=1
            ),
            max_atp500=_env_int(f"{_ENV_PREFIX}MAX_ATP500", defaults.max_atp500, min_value=0),
            max_achievement_categories=_env_int(
                f"{_ENV_PREFIX}MAX_ACHIEVEMENTS", defaults.max_achievement_categories, min_value=0
            ),
            sample_size=_env_int(f"{_ENV_PREFIX}SAMPLE_SIZE", defaults.sample_size, min_value=1),
            max_attempts=_env_int(f"{_ENV_PREFIX}MAX_ATTEMPTS", defaults.max_attempts, min_value=1),
            selector_draw_attempts=_env_int(
                f"{_ENV_PREFIX}DRAW_ATTEMPTS", defaults.selector_draw_attempts, min_value=1
            ),
            validator_workers=_env_int(
                f"{_ENV_PREFIX}VALIDATOR_WORKERS", defaults.validator_workers, min_value=1
            ),
            max_probe_errors=_env_optional_int(f"{_ENV_PREFIX}MAX_PROBE_ERRORS"),
            db_path=Path(db_raw) if db_raw else defaults.db_path,
            snapshot_path=Path(snapshot_raw) if snapshot_raw else None,
        )


def get_settings() -> GridSettings:
    """Return settings resolved from the current environment."""

    return GridSettings.from_env()
