"""Player repository contract and the in-memory snapshot implementation."""

from .base import PlayerRepository
from .memory import InMemoryPlayerRepository, load_snapshot

__all__ = ["PlayerRepository", "InMemoryPlayerRepository", "load_snapshot"]
