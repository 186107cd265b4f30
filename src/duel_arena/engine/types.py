"""Type definitions for the duel engine."""

import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..db.models.enums import DuelActionType, DuelStatus

if TYPE_CHECKING:
    from ..gateway.schemas import LootResult


@dataclass(frozen=True)
class Caller:
    """Authenticated identity of whoever submitted the request."""

    user_id: str
    role: str = "User"


@dataclass
class ActiveOutcome:
    """An action was applied and the duel goes on."""

    duel_id: uuid.UUID
    action: DuelActionType
    amount: int
    challenger_hp: int
    opponent_hp: int
    status: DuelStatus = DuelStatus.ACTIVE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "status": self.status.value,
            "action": self.action.value,
            "amount": self.amount,
            "duelId": str(self.duel_id),
            "challengerHp": self.challenger_hp,
            "opponentHp": self.opponent_hp,
        }


@dataclass
class FinishedOutcome:
    """An action killed the enemy.

    The win is committed before loot is requested. When the loot call fails
    `loot` is None and `loot_error` holds the failure code.
    """

    duel_id: uuid.UUID
    action: DuelActionType
    amount: int
    winner_character_id: str
    loser_character_id: str
    loot: "LootResult | None" = None
    loot_error: str | None = None
    status: DuelStatus = DuelStatus.FINISHED

    @property
    def loot_confirmed(self) -> bool:
        return self.loot_error is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {
            "status": self.status.value,
            "duelId": str(self.duel_id),
            "winnerCharacterId": self.winner_character_id,
            "loot": self.loot.model_dump(by_alias=True) if self.loot is not None else None,
            "lootConfirmed": self.loot_confirmed,
        }
        if self.loot_error is not None:
            result["lootError"] = self.loot_error
        return result


ActionOutcome = ActiveOutcome | FinishedOutcome
