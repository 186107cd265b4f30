"""Duel engine module - stat aggregation, duel rules and action resolution."""

from .duel import DuelEngine
from .rules import (
    apply_hp_change,
    calculate_amount,
    cooldown_seconds,
    is_cooldown_active,
    is_duel_expired,
    is_winning_hit,
)
from .stats import CombatStats, aggregate, display_name
from .types import ActionOutcome, ActiveOutcome, Caller, FinishedOutcome

__all__ = [
    "DuelEngine",
    "CombatStats",
    "aggregate",
    "display_name",
    "cooldown_seconds",
    "calculate_amount",
    "apply_hp_change",
    "is_cooldown_active",
    "is_duel_expired",
    "is_winning_hit",
    "Caller",
    "ActionOutcome",
    "ActiveOutcome",
    "FinishedOutcome",
]
