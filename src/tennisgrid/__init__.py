"""Daily tennis category-grid puzzle generation."""

__version__ = "0.1.0"
