"""Configuration helpers for catalog and generation tuning."""

from .settings import (
    COUNTRY_NAMES,
    GRAND_SLAMS,
    POPULAR_COUNTRIES,
    GridSettings,
    country_name,
    get_settings,
)

__all__ = [
    "COUNTRY_NAMES",
    "GRAND_SLAMS",
    "POPULAR_COUNTRIES",
    "GridSettings",
    "country_name",
    "get_settings",
]
