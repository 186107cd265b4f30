"""Duel engine - creates duels and resolves actions against them."""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from sqlalchemy.ext.asyncio import AsyncSession

from ..db.models.duels import Duel
from ..db.models.enums import DuelActionType, DuelSide, DuelStatus
from ..db.store import DuelStore, DuelTransition
from ..errors import (
    ConflictError,
    CooldownError,
    DuelError,
    DuelTimeoutError,
    ForbiddenError,
    InvalidChallengeError,
    NotFoundError,
)
from .rules import (
    apply_hp_change,
    as_utc,
    calculate_amount,
    cooldown_seconds,
    is_cooldown_active,
    is_duel_expired,
    is_winning_hit,
    utc_now,
)
from .stats import CombatStats, aggregate
from .types import ActionOutcome, ActiveOutcome, Caller, FinishedOutcome

if TYPE_CHECKING:
    from ..gateway.client import CharacterGateway

logger = logging.getLogger(__name__)

DEFAULT_DUEL_TIMEOUT = timedelta(minutes=5)


def _isoformat(value: datetime | None) -> str | None:
    return as_utc(value).isoformat() if value is not None else None


class DuelEngine:
    """Main duel engine - state machine for a duel from challenge to end.

    Active -> Finished when a non-heal action brings the enemy to 0 HP.
    Active -> Draw when an action arrives after the duel timed out.
    There is no background sweep: expiry is detected on the next action.
    """

    def __init__(
        self,
        session: AsyncSession,
        gateway: "CharacterGateway",
        duel_timeout: timedelta = DEFAULT_DUEL_TIMEOUT,
        elevated_role: str = "GameMaster",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = DuelStore(session)
        self.gateway = gateway
        self.duel_timeout = duel_timeout
        self.elevated_role = elevated_role
        self.clock = clock

    async def challenge(
        self,
        caller: Caller,
        challenger_character_id: str,
        opponent_character_id: str,
    ) -> Duel:
        """Create a new Active duel from both characters' current snapshots.

        Args:
            caller: Who is issuing the challenge; must own the challenger
            challenger_character_id: Character issuing the challenge
            opponent_character_id: Character being challenged

        Returns:
            The created Duel

        Raises:
            InvalidChallengeError: challenger and opponent are the same character
            ForbiddenError: caller does not own the challenger
            NotFoundError, UpstreamError: snapshot could not be fetched
            StorageError: duel could not be written
        """
        if challenger_character_id == opponent_character_id:
            raise InvalidChallengeError("A character cannot challenge itself", code="SELF_CHALLENGE")

        challenger = await self.gateway.snapshot(challenger_character_id)
        opponent = await self.gateway.snapshot(opponent_character_id)

        if challenger.owner_user_id != caller.user_id:
            raise ForbiddenError("You do not own the challenging character")

        # Snapshot stats already include equipment, freeze them as-is
        challenger_stats = aggregate(challenger.calculated_stats.to_combat_stats(), [])
        opponent_stats = aggregate(opponent.calculated_stats.to_combat_stats(), [])

        duel = await self.store.create(
            challenger_character_id=challenger_character_id,
            opponent_character_id=opponent_character_id,
            challenger_user_id=caller.user_id,
            challenger_stats=challenger_stats,
            opponent_stats=opponent_stats,
            challenger_hp=challenger.health,
            opponent_hp=opponent.health,
            started_at=self.clock(),
        )
        logger.info(
            "Duel %s created: %s vs %s (hp %d/%d)",
            duel.id,
            challenger_character_id,
            opponent_character_id,
            duel.challenger_hp,
            duel.opponent_hp,
        )
        return duel

    async def apply_action(
        self,
        duel_id: uuid.UUID,
        action: DuelActionType,
        actor_character_id: str,
        caller: Caller,
    ) -> ActionOutcome:
        """Resolve one action against a duel.

        Args:
            duel_id: Duel to act in
            action: ATTACK, CAST or HEAL
            actor_character_id: Character performing the action
            caller: Authenticated identity behind the request

        Returns:
            ActiveOutcome, or FinishedOutcome when the action won the duel

        Raises:
            NotFoundError: duel does not exist
            ForbiddenError: actor is not a participant or caller may not act for it
            ConflictError: duel is not Active (DuelTimeoutError if it just expired)
            CooldownError: action kind is still on cooldown for this side
        """
        duel = await self.store.get_by_id(duel_id)
        if duel is None:
            raise NotFoundError(f"Duel {duel_id} not found")

        side = await self._authorize(duel, actor_character_id, caller)

        if duel.status != DuelStatus.ACTIVE:
            raise ConflictError("Duel is no longer active")

        now = self.clock()
        if is_duel_expired(duel.started_at, now, self.duel_timeout):
            if not await self.store.finish(duel_id, None, now):
                await self._raise_closed(duel_id)
            logger.info("Duel %s expired, closed as draw", duel_id)
            raise DuelTimeoutError("Duel has expired and can no longer accept actions")

        cooldown = cooldown_seconds(action)
        if is_cooldown_active(duel.last_used(side, action), now, cooldown):
            logger.debug("Duel %s: %s %s on cooldown", duel_id, side.value, action.value)
            raise CooldownError(f"{action.value.capitalize()} is on cooldown")

        stats = CombatStats.from_mapping(duel.stat_values(side))
        amount = calculate_amount(action, stats)
        self_hp, enemy_hp = apply_hp_change(action, duel.hp_for(side), duel.hp_for(side.enemy), amount)
        won = is_winning_hit(action, enemy_hp)
        loser_character_id = duel.character_for(side.enemy)

        transition = DuelTransition(
            duel_id=duel_id,
            side=side,
            action=action,
            cooldown_seconds=cooldown,
            new_self_hp=self_hp,
            new_enemy_hp=enemy_hp,
            actor_character_id=actor_character_id,
            amount=amount,
            winner_character_id=actor_character_id if won else None,
        )
        applied = await self.store.apply_transition(transition, now)
        if not applied:
            logger.info("Duel %s: concurrent %s %s lost the cooldown race", duel_id, side.value, action.value)
            raise CooldownError(f"{action.value.capitalize()} is on cooldown")

        if won:
            return await self._finish_with_loot(duel_id, action, amount, actor_character_id, loser_character_id)

        if side == DuelSide.CHALLENGER:
            challenger_hp, opponent_hp = self_hp, enemy_hp
        else:
            challenger_hp, opponent_hp = enemy_hp, self_hp

        return ActiveOutcome(
            duel_id=duel_id,
            action=action,
            amount=amount,
            challenger_hp=challenger_hp,
            opponent_hp=opponent_hp,
        )

    async def get_duel_state(self, duel_id: uuid.UUID) -> dict[str, Any] | None:
        """Get the current state of a duel.

        Args:
            duel_id: ID of the duel

        Returns:
            Dict with duel state, or None if not found
        """
        duel = await self.store.get_by_id(duel_id)
        if duel is None:
            return None

        now = self.clock()
        return {
            "duel_id": str(duel.id),
            "status": duel.status.value,
            "started_at": _isoformat(duel.started_at),
            "ended_at": _isoformat(duel.ended_at),
            "expired": duel.is_active and is_duel_expired(duel.started_at, now, self.duel_timeout),
            "winner_character_id": duel.winner_character_id,
            "sides": {
                side.value: {
                    "character_id": duel.character_for(side),
                    "hp": duel.hp_for(side),
                    "stats": duel.stat_values(side),
                    "cooldowns": {
                        action.value: _isoformat(duel.last_used(side, action)) for action in DuelActionType
                    },
                }
                for side in DuelSide
            },
        }

    async def _authorize(self, duel: Duel, actor_character_id: str, caller: Caller) -> DuelSide:
        """Check the caller may act for the actor and return the actor's side.

        The challenger's owner is pinned on the duel. The opponent's owner is
        looked up again on every action; the elevated role may act for it.
        """
        side = duel.side_of(actor_character_id)
        if side is None:
            raise ForbiddenError("Character is not a participant in this duel", code="NOT_A_PARTICIPANT")

        if side == DuelSide.CHALLENGER:
            if duel.challenger_user_id != caller.user_id:
                raise ForbiddenError("You do not control this character")
            return side

        snapshot = await self.gateway.snapshot(actor_character_id)
        if snapshot.owner_user_id != caller.user_id and caller.role != self.elevated_role:
            raise ForbiddenError("You do not control this character")
        return side

    async def _raise_closed(self, duel_id: uuid.UUID) -> None:
        """Report a duel some other request closed first."""
        duel = await self.store.get_by_id(duel_id)
        if duel is not None and duel.status == DuelStatus.DRAW:
            raise DuelTimeoutError("Duel has expired and can no longer accept actions")
        raise ConflictError("Duel is no longer active")

    async def _finish_with_loot(
        self,
        duel_id: uuid.UUID,
        action: DuelActionType,
        amount: int,
        winner_character_id: str,
        loser_character_id: str,
    ) -> FinishedOutcome:
        """Report a committed win and request the loot transfer.

        The win stands whatever the character service answers.
        """
        logger.info("Duel %s won by %s", duel_id, winner_character_id)
        outcome = FinishedOutcome(
            duel_id=duel_id,
            action=action,
            amount=amount,
            winner_character_id=winner_character_id,
            loser_character_id=loser_character_id,
        )

        try:
            outcome.loot = await self.gateway.resolve_duel_loot(duel_id, winner_character_id, loser_character_id)
        except DuelError as e:
            logger.warning("Duel %s: loot transfer not confirmed: %s", duel_id, e.message)
            outcome.loot_error = e.code

        return outcome
