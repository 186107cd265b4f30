"""Tests for stat aggregation and item display names."""

from duel_arena.engine.stats import CombatStats, aggregate, display_name


class TestAggregate:
    """Tests for aggregate."""

    def test_sums_every_bonus(self):
        base = CombatStats(strength=1, agility=2, intelligence=3, faith=4)
        bonuses = [CombatStats(strength=1), CombatStats(agility=1)]

        assert aggregate(base, bonuses) == CombatStats(strength=2, agility=3, intelligence=3, faith=4)

    def test_no_bonuses_returns_base(self):
        base = CombatStats(strength=7, agility=1, intelligence=0, faith=2)
        assert aggregate(base, []) == base

    def test_accepts_generator(self):
        base = CombatStats()
        total = aggregate(base, (CombatStats(faith=n) for n in range(4)))
        assert total.faith == 6

    def test_from_mapping_defaults_missing_to_zero(self):
        stats = CombatStats.from_mapping({"strength": 3, "faith": 1})
        assert stats.to_dict() == {"strength": 3, "agility": 0, "intelligence": 0, "faith": 1}


class TestDisplayName:
    """Tests for display_name tie-break policy."""

    def test_single_highest_stat_gets_suffix(self):
        assert display_name("Sword", CombatStats(strength=3)) == "Sword of Strength"

    def test_each_stat_suffix(self):
        assert display_name("Boots", CombatStats(agility=2)) == "Boots of Agility"
        assert display_name("Tome", CombatStats(intelligence=5, faith=1)) == "Tome of Intelligence"
        assert display_name("Amulet", CombatStats(strength=1, faith=4)) == "Amulet of Faith"

    def test_tie_is_balance(self):
        assert display_name("Ring", CombatStats(strength=1, agility=1)) == "Ring of Balance"

    def test_all_equal_positive_is_balance(self):
        assert display_name("Crown", CombatStats(2, 2, 2, 2)) == "Crown of Balance"

    def test_no_bonus_keeps_name(self):
        assert display_name("Stick", CombatStats(0, 0, 0, 0)) == "Stick"

    def test_negative_bonuses_keep_name(self):
        assert display_name("Cursed Rag", CombatStats(strength=-1, agility=-3)) == "Cursed Rag"
