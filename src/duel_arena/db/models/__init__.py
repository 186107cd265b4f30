"""Database models."""

from .base import Base, TimestampMixin
from .duels import COOLDOWN_COLUMNS, HP_COLUMNS, STAT_COLUMNS, Duel, DuelAction
from .enums import DuelActionType, DuelSide, DuelStatus

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Enums
    "DuelActionType",
    "DuelSide",
    "DuelStatus",
    # Duels
    "Duel",
    "DuelAction",
    "COOLDOWN_COLUMNS",
    "HP_COLUMNS",
    "STAT_COLUMNS",
]
