"""Category matching and catalog construction."""

from .builder import build_catalog, require_playable
from .matcher import career_span, matches, matches_cell

__all__ = ["build_catalog", "career_span", "matches", "matches_cell", "require_playable"]
