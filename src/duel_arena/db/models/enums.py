"""Enums for duel models."""

from enum import Enum


class DuelStatus(str, Enum):
    """Lifecycle status of a duel. Finished and Draw are terminal."""

    ACTIVE = "Active"  # Accepting actions
    FINISHED = "Finished"  # One side's HP reached 0, winner recorded
    DRAW = "Draw"  # Expired before anyone won


class DuelActionType(str, Enum):
    """Kind of action a character can take in a duel."""

    ATTACK = "attack"  # strength + agility to the enemy
    CAST = "cast"  # 2 x intelligence to the enemy
    HEAL = "heal"  # faith back to self


class DuelSide(str, Enum):
    """Which of the two participants a field or action belongs to."""

    CHALLENGER = "challenger"
    OPPONENT = "opponent"

    @property
    def enemy(self) -> "DuelSide":
        """The other side."""
        return DuelSide.OPPONENT if self is DuelSide.CHALLENGER else DuelSide.CHALLENGER
