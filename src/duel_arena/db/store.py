"""Duel record store - durable duel state and the atomic action transition."""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import StorageError
from .models.duels import COOLDOWN_COLUMNS, HP_COLUMNS, STAT_COLUMNS, Duel, DuelAction
from .models.enums import DuelActionType, DuelSide, DuelStatus

if TYPE_CHECKING:
    from ..engine.stats import CombatStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DuelTransition:
    """Parameters of one conditional HP/cooldown update.

    Columns are addressed only through (side, action) members of the closed
    enums, so nothing outside those sets can reach the UPDATE statement.
    """

    duel_id: uuid.UUID
    side: DuelSide
    action: DuelActionType
    cooldown_seconds: int
    new_self_hp: int
    new_enemy_hp: int
    actor_character_id: str
    amount: int
    # Set when the update kills the enemy; the duel is finished in the same unit
    winner_character_id: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.side, DuelSide):
            raise ValueError(f"Invalid duel side: {self.side!r}")
        if not isinstance(self.action, DuelActionType):
            raise ValueError(f"Invalid duel action: {self.action!r}")
        if (self.side, self.action) not in COOLDOWN_COLUMNS:
            raise ValueError(f"No cooldown column for {self.side.value}/{self.action.value}")
        if self.cooldown_seconds < 0:
            raise ValueError("cooldown_seconds must be non-negative")
        if self.new_self_hp < 0 or self.new_enemy_hp < 0:
            raise ValueError("HP cannot be negative")

    @property
    def enemy_side(self) -> DuelSide:
        return self.side.enemy


class DuelStore:
    """Create, read and conditionally update duel records."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(
        self,
        challenger_character_id: str,
        opponent_character_id: str,
        challenger_user_id: str,
        challenger_stats: "CombatStats",
        opponent_stats: "CombatStats",
        challenger_hp: int,
        opponent_hp: int,
        started_at: datetime,
    ) -> Duel:
        """Insert a new Active duel with frozen stats.

        Raises:
            StorageError: if the insert fails
        """
        duel = Duel(
            challenger_character_id=challenger_character_id,
            opponent_character_id=opponent_character_id,
            challenger_user_id=challenger_user_id,
            challenger_hp=challenger_hp,
            opponent_hp=opponent_hp,
            status=DuelStatus.ACTIVE,
            started_at=started_at,
        )
        for side, stats in ((DuelSide.CHALLENGER, challenger_stats), (DuelSide.OPPONENT, opponent_stats)):
            for name, column in STAT_COLUMNS[side].items():
                setattr(duel, column.key, getattr(stats, name))

        self.session.add(duel)
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StorageError(f"Could not create duel: {e}") from e

        return duel

    async def get_by_id(self, duel_id: uuid.UUID) -> Duel | None:
        """Load a duel, always refreshing it from the database."""
        stmt = (
            select(Duel)
            .where(Duel.id == duel_id)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not load duel {duel_id}: {e}") from e
        return result.scalar_one_or_none()

    async def apply_transition(self, transition: DuelTransition, now: datetime) -> bool:
        """Apply an action as one check-and-set against the database.

        The UPDATE only matches while the duel is Active and the side's
        cooldown column is null or at least `cooldown_seconds` old. HP, the
        cooldown timestamp and the audit record are committed together; if
        the UPDATE matches nothing, nothing is written.

        Returns:
            True if applied, False if the duel was no longer Active or the
            cooldown was taken by a concurrent request
        """
        cooldown_column = COOLDOWN_COLUMNS[transition.side, transition.action]
        self_hp_column = HP_COLUMNS[transition.side]
        enemy_hp_column = HP_COLUMNS[transition.enemy_side]
        cutoff = now - timedelta(seconds=transition.cooldown_seconds)

        stmt = (
            update(Duel)
            .where(
                Duel.id == transition.duel_id,
                Duel.status == DuelStatus.ACTIVE,
                or_(cooldown_column.is_(None), cooldown_column <= cutoff),
            )
            .values(
                {
                    self_hp_column: transition.new_self_hp,
                    enemy_hp_column: transition.new_enemy_hp,
                    cooldown_column: now,
                }
            )
            .execution_options(synchronize_session=False)
        )

        try:
            result = await self.session.execute(stmt)
            if result.rowcount != 1:
                # Nothing was written; end the transaction without expiring loaded rows
                await self.session.commit()
                return False

            self.session.add(
                DuelAction(
                    duel_id=transition.duel_id,
                    actor_character_id=transition.actor_character_id,
                    action_type=transition.action,
                    amount=transition.amount,
                    created_at=now,
                )
            )
            if transition.winner_character_id is not None:
                await self._close(transition.duel_id, transition.winner_character_id, now)

            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StorageError(f"Could not apply action to duel {transition.duel_id}: {e}") from e

        logger.debug(
            "Duel %s: %s %s for %d (hp %d/%d)",
            transition.duel_id,
            transition.side.value,
            transition.action.value,
            transition.amount,
            transition.new_self_hp,
            transition.new_enemy_hp,
        )
        return True

    async def finish(self, duel_id: uuid.UUID, winner_character_id: str | None, now: datetime) -> bool:
        """Move an Active duel to Finished (with winner) or Draw (without).

        Terminal duels are left untouched.

        Returns:
            True if this call ended the duel
        """
        try:
            closed = await self._close(duel_id, winner_character_id, now)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StorageError(f"Could not finish duel {duel_id}: {e}") from e
        return closed

    async def list_actions(self, duel_id: uuid.UUID) -> list[DuelAction]:
        """Audit trail of a duel in the order actions were applied."""
        stmt = select(DuelAction).where(DuelAction.duel_id == duel_id).order_by(DuelAction.id)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not load actions for duel {duel_id}: {e}") from e
        return list(result.scalars().all())

    async def _close(self, duel_id: uuid.UUID, winner_character_id: str | None, now: datetime) -> bool:
        """Guarded status update, executed inside the caller's transaction."""
        status = DuelStatus.FINISHED if winner_character_id is not None else DuelStatus.DRAW
        stmt = (
            update(Duel)
            .where(Duel.id == duel_id, Duel.status == DuelStatus.ACTIVE)
            .values(status=status, ended_at=now, winner_character_id=winner_character_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
