"""Pure duel rules: cooldowns, amounts, HP changes, expiry and wins."""

from datetime import datetime, timedelta, timezone

from ..db.models.enums import DuelActionType
from .stats import CombatStats

# Minimum seconds between two uses of the same action kind by the same side
COOLDOWN_SECONDS = {
    DuelActionType.ATTACK: 1,
    DuelActionType.CAST: 2,
    DuelActionType.HEAL: 2,
}


def utc_now() -> datetime:
    """Current wall-clock time, timezone-aware."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on the way back)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def cooldown_seconds(action: DuelActionType) -> int:
    """Cooldown required between two uses of this action kind."""
    return COOLDOWN_SECONDS[action]


def calculate_amount(action: DuelActionType, stats: CombatStats) -> int:
    """Damage or healing produced by the action for these stats."""
    match action:
        case DuelActionType.ATTACK:
            return stats.strength + stats.agility
        case DuelActionType.CAST:
            return 2 * stats.intelligence
        case DuelActionType.HEAL:
            return stats.faith
        case _:
            raise ValueError(f"Unhandled duel action: {action}")


def apply_hp_change(
    action: DuelActionType,
    self_hp: int,
    enemy_hp: int,
    amount: int,
) -> tuple[int, int]:
    """Compute (self_hp, enemy_hp) after the action.

    Heal raises the actor's HP with no cap. Attack and cast lower the enemy's
    HP, floored at 0.
    """
    if action == DuelActionType.HEAL:
        return self_hp + amount, enemy_hp
    return self_hp, max(0, enemy_hp - amount)


def is_cooldown_active(last_used_at: datetime | None, now: datetime, cooldown: int) -> bool:
    """True if less than `cooldown` seconds passed since the last use."""
    if last_used_at is None:
        return False
    return (now - as_utc(last_used_at)).total_seconds() < cooldown


def is_duel_expired(started_at: datetime, now: datetime, timeout: timedelta) -> bool:
    """True once strictly more than `timeout` has passed since the start."""
    return now - as_utc(started_at) > timeout


def is_winning_hit(action: DuelActionType, enemy_hp_after: int) -> bool:
    """A non-heal action that leaves the enemy at exactly 0 HP wins."""
    return action != DuelActionType.HEAL and enemy_hp_after == 0
