"""Exception types raised by the puzzle generation core."""

from __future__ import annotations


class GridError(Exception):
    """Base class for tennisgrid failures."""


class DataAccessError(GridError):
    """Raised when the player repository cannot be read."""


class CatalogBuildError(GridError):
    """Raised when the category catalog is internally inconsistent."""


class CatalogInsufficientError(GridError):
    """Raised when too few categories exist to fill a 3x3 grid."""

    def __init__(self, available: int, required: int = 6):
        super().__init__(
            f"Catalog has {available} usable categories; at least {required} are required"
        )
        self.available = available
        self.required = required
