"""Service layer for duel operations."""

from .duels import DuelResult, DuelService

__all__ = [
    "DuelService",
    "DuelResult",
]
