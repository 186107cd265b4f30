"""Tests for the pure duel rules."""

from datetime import datetime, timedelta, timezone

import pytest

from duel_arena.db.models.enums import DuelActionType
from duel_arena.engine.rules import (
    apply_hp_change,
    as_utc,
    calculate_amount,
    cooldown_seconds,
    is_cooldown_active,
    is_duel_expired,
    is_winning_hit,
)
from duel_arena.engine.stats import CombatStats

NOW = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
STATS = CombatStats(strength=5, agility=3, intelligence=4, faith=6)


class TestCooldowns:
    """Tests for per-action cooldowns."""

    @pytest.mark.parametrize(
        ("action", "expected"),
        [(DuelActionType.ATTACK, 1), (DuelActionType.CAST, 2), (DuelActionType.HEAL, 2)],
    )
    def test_cooldown_per_action(self, action, expected):
        assert cooldown_seconds(action) == expected

    def test_never_used_is_not_on_cooldown(self):
        assert not is_cooldown_active(None, NOW, 2)

    def test_inside_window_is_on_cooldown(self):
        assert is_cooldown_active(NOW - timedelta(seconds=1.5), NOW, 2)

    def test_exact_boundary_is_free(self):
        assert not is_cooldown_active(NOW - timedelta(seconds=2), NOW, 2)

    def test_naive_timestamps_are_treated_as_utc(self):
        naive = (NOW - timedelta(milliseconds=500)).replace(tzinfo=None)
        assert is_cooldown_active(naive, NOW, 1)
        assert as_utc(naive).tzinfo is timezone.utc


class TestAmounts:
    """Tests for action amounts."""

    def test_attack_is_strength_plus_agility(self):
        assert calculate_amount(DuelActionType.ATTACK, STATS) == 8

    def test_cast_is_double_intelligence(self):
        assert calculate_amount(DuelActionType.CAST, STATS) == 8

    def test_heal_is_faith(self):
        assert calculate_amount(DuelActionType.HEAL, STATS) == 6


class TestHpChange:
    """Tests for HP arithmetic."""

    def test_attack_lowers_enemy(self):
        assert apply_hp_change(DuelActionType.ATTACK, 30, 30, 10) == (30, 20)

    def test_damage_is_floored_at_zero(self):
        assert apply_hp_change(DuelActionType.CAST, 30, 4, 10) == (30, 0)

    def test_heal_is_uncapped(self):
        assert apply_hp_change(DuelActionType.HEAL, 30, 30, 50) == (80, 30)


class TestExpiryAndWins:
    """Tests for expiry and win detection."""

    def test_not_expired_at_exact_timeout(self):
        assert not is_duel_expired(NOW - timedelta(minutes=5), NOW, timedelta(minutes=5))

    def test_expired_after_timeout(self):
        assert is_duel_expired(NOW - timedelta(minutes=10), NOW, timedelta(minutes=5))

    def test_lethal_attack_wins(self):
        assert is_winning_hit(DuelActionType.ATTACK, 0)
        assert is_winning_hit(DuelActionType.CAST, 0)

    def test_heal_never_wins(self):
        assert not is_winning_hit(DuelActionType.HEAL, 0)

    def test_surviving_enemy_is_not_a_win(self):
        assert not is_winning_hit(DuelActionType.ATTACK, 1)
