"""Stat aggregation - combines base attributes with item bonuses."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields

STAT_NAMES = ("strength", "agility", "intelligence", "faith")

DISPLAY_SUFFIXES = {
    "strength": "of Strength",
    "agility": "of Agility",
    "intelligence": "of Intelligence",
    "faith": "of Faith",
}
BALANCE_SUFFIX = "of Balance"


@dataclass(frozen=True)
class CombatStats:
    """The four combat attributes of a character or an item bonus."""

    strength: int = 0
    agility: int = 0
    intelligence: int = 0
    faith: int = 0

    @classmethod
    def from_mapping(cls, values: Mapping[str, int]) -> "CombatStats":
        """Build from a mapping keyed by stat name. Missing stats count as 0."""
        return cls(**{name: int(values.get(name, 0)) for name in STAT_NAMES})

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary for serialization."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def __add__(self, other: "CombatStats") -> "CombatStats":
        if not isinstance(other, CombatStats):
            return NotImplemented
        return CombatStats(
            strength=self.strength + other.strength,
            agility=self.agility + other.agility,
            intelligence=self.intelligence + other.intelligence,
            faith=self.faith + other.faith,
        )


def aggregate(base: CombatStats, bonuses: Iterable[CombatStats]) -> CombatStats:
    """Field-wise sum of base stats and every bonus.

    Args:
        base: Character's base attributes
        bonuses: Bonuses of equipped items (may be empty)

    Returns:
        Combat-ready totals
    """
    total = base
    for bonus in bonuses:
        total = total + bonus
    return total


def display_name(base_name: str, bonus: CombatStats) -> str:
    """Derive a flavor name for an item from its dominant bonus.

    A single highest bonus adds its stat suffix ("Sword of Strength"), a tie
    for the highest adds "of Balance", and no positive bonus keeps the name.
    """
    values = bonus.to_dict()
    highest = max(values.values())
    if highest <= 0:
        return base_name

    top = [name for name in STAT_NAMES if values[name] == highest]
    if len(top) != 1:
        return f"{base_name} {BALANCE_SUFFIX}"

    return f"{base_name} {DISPLAY_SUFFIXES[top[0]]}"
