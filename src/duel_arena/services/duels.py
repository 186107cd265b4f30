"""Duel service - request-level entry points returning typed results."""

import logging
import uuid
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..db.models.enums import DuelActionType
from ..engine.duel import DuelEngine
from ..engine.types import ActionOutcome, Caller, FinishedOutcome
from ..errors import DuelError
from ..gateway.client import CharacterGateway

logger = logging.getLogger(__name__)


@dataclass
class DuelResult:
    """Result of a duel operation."""

    success: bool
    message: str
    duel_id: uuid.UUID | None = None
    outcome: ActionOutcome | None = None
    error: str | None = None
    status: int = 200
    details: dict[str, Any] | None = None

    @classmethod
    def failure(cls, error: DuelError, duel_id: uuid.UUID | None = None) -> "DuelResult":
        return cls(
            success=False,
            message=error.message,
            duel_id=duel_id,
            error=error.code,
            status=error.status,
            details=error.to_dict(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Response body for the caller."""
        if self.outcome is not None:
            return self.outcome.to_dict()
        if not self.success:
            return self.details or {"error": self.error, "message": self.message}
        return {"duelId": str(self.duel_id) if self.duel_id else None, "message": self.message}


class DuelService:
    """Service for duel operations."""

    def __init__(
        self,
        session: AsyncSession,
        gateway: CharacterGateway,
        settings: Settings | None = None,
        engine: DuelEngine | None = None,
    ) -> None:
        self.session = session
        if engine is None:
            settings = settings or get_settings()
            engine = DuelEngine(
                session,
                gateway,
                duel_timeout=timedelta(seconds=settings.duel_timeout_seconds),
                elevated_role=settings.elevated_role,
            )
        self.engine = engine

    async def create_challenge(
        self,
        caller: Caller,
        challenger_character_id: str,
        opponent_character_id: str,
    ) -> DuelResult:
        """Create a new duel challenge.

        Args:
            caller: Authenticated user issuing the challenge
            challenger_character_id: Caller's character
            opponent_character_id: Character being challenged

        Returns:
            DuelResult with the created duel id
        """
        try:
            duel = await self.engine.challenge(caller, challenger_character_id, opponent_character_id)
        except DuelError as e:
            logger.info("Challenge %s -> %s rejected: %s", challenger_character_id, opponent_character_id, e.code)
            return DuelResult.failure(e)

        return DuelResult(success=True, message="Duel created", duel_id=duel.id, status=201)

    async def submit_action(
        self,
        duel_id: uuid.UUID,
        action: DuelActionType,
        actor_character_id: str,
        caller: Caller,
    ) -> DuelResult:
        """Submit an attack, cast or heal.

        Returns:
            DuelResult carrying an Active or Finished outcome, or the failure code
        """
        try:
            outcome = await self.engine.apply_action(duel_id, action, actor_character_id, caller)
        except DuelError as e:
            logger.debug("Action %s in duel %s rejected: %s", action.value, duel_id, e.code)
            return DuelResult.failure(e, duel_id=duel_id)

        if isinstance(outcome, FinishedOutcome):
            message = "Duel won" if outcome.loot_confirmed else "Duel won, loot transfer not confirmed"
        else:
            message = "Action applied"

        return DuelResult(success=True, message=message, duel_id=duel_id, outcome=outcome)

    async def get_duel_state(self, duel_id: uuid.UUID) -> dict | None:
        """Get current duel state for display."""
        return await self.engine.get_duel_state(duel_id)
