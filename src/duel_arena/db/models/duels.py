"""Duel system models."""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import InstrumentedAttribute, Mapped, mapped_column, relationship

from .base import Base, TimestampMixin
from .enums import DuelActionType, DuelSide, DuelStatus


class Duel(Base, TimestampMixin):
    """A duel between two characters.

    Holds both sides' frozen combat stats (copied from the character service
    when the duel is created), their current HP, one last-used timestamp per
    side and action kind, and the lifecycle status. Rows are never deleted.
    """

    __tablename__ = "duels"
    __table_args__ = (
        CheckConstraint("challenger_hp >= 0 AND opponent_hp >= 0", name="ck_duels_hp_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    challenger_character_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    opponent_character_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    # Owner of the challenger, pinned at creation
    challenger_user_id: Mapped[str] = mapped_column(String(64), nullable=False)

    # Frozen stats
    challenger_strength: Mapped[int] = mapped_column(Integer, nullable=False)
    challenger_agility: Mapped[int] = mapped_column(Integer, nullable=False)
    challenger_intelligence: Mapped[int] = mapped_column(Integer, nullable=False)
    challenger_faith: Mapped[int] = mapped_column(Integer, nullable=False)
    opponent_strength: Mapped[int] = mapped_column(Integer, nullable=False)
    opponent_agility: Mapped[int] = mapped_column(Integer, nullable=False)
    opponent_intelligence: Mapped[int] = mapped_column(Integer, nullable=False)
    opponent_faith: Mapped[int] = mapped_column(Integer, nullable=False)

    # Current HP (never below 0, no upper cap)
    challenger_hp: Mapped[int] = mapped_column(Integer, nullable=False)
    opponent_hp: Mapped[int] = mapped_column(Integer, nullable=False)

    # Cooldowns - null means the action was never used
    challenger_last_attack: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    challenger_last_cast: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    challenger_last_heal: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    opponent_last_attack: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    opponent_last_cast: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    opponent_last_heal: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Lifecycle
    status: Mapped[DuelStatus] = mapped_column(
        SQLEnum(DuelStatus, name="duel_status"), nullable=False, default=DuelStatus.ACTIVE
    )
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    winner_character_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # Relationships
    actions: Mapped[list["DuelAction"]] = relationship(
        "DuelAction", back_populates="duel", order_by="DuelAction.id"
    )

    def character_for(self, side: DuelSide) -> str:
        """Character id on the given side."""
        return getattr(self, CHARACTER_COLUMNS[side].key)

    def side_of(self, character_id: str) -> DuelSide | None:
        """Side the character fights on, or None if it is not a participant."""
        if character_id == self.challenger_character_id:
            return DuelSide.CHALLENGER
        if character_id == self.opponent_character_id:
            return DuelSide.OPPONENT
        return None

    def hp_for(self, side: DuelSide) -> int:
        """Current HP of the given side."""
        return getattr(self, HP_COLUMNS[side].key)

    def last_used(self, side: DuelSide, action: DuelActionType) -> datetime | None:
        """When the side last used this action kind."""
        return getattr(self, COOLDOWN_COLUMNS[side, action].key)

    def stat_values(self, side: DuelSide) -> dict[str, int]:
        """Frozen stats of the given side keyed by stat name."""
        return {name: getattr(self, column.key) for name, column in STAT_COLUMNS[side].items()}

    @property
    def is_active(self) -> bool:
        return self.status == DuelStatus.ACTIVE

    def __repr__(self) -> str:
        return (
            f"<Duel(id={self.id}, status={self.status}, "
            f"hp={self.challenger_hp}/{self.opponent_hp})>"
        )


class DuelAction(Base):
    """Audit record of one applied action. Append-only."""

    __tablename__ = "duel_actions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    duel_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("duels.id"), nullable=False, index=True
    )
    actor_character_id: Mapped[str] = mapped_column(String(64), nullable=False)
    action_type: Mapped[DuelActionType] = mapped_column(
        SQLEnum(DuelActionType, name="duel_action_type"), nullable=False
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Relationships
    duel: Mapped["Duel"] = relationship("Duel", back_populates="actions")

    def __repr__(self) -> str:
        return f"<DuelAction(duel={self.duel_id}, actor={self.actor_character_id}, type={self.action_type})>"


# Closed column sets addressed by side and action kind. Storage code looks
# columns up here and never builds names from strings.
CHARACTER_COLUMNS: dict[DuelSide, InstrumentedAttribute] = {
    DuelSide.CHALLENGER: Duel.challenger_character_id,
    DuelSide.OPPONENT: Duel.opponent_character_id,
}

HP_COLUMNS: dict[DuelSide, InstrumentedAttribute] = {
    DuelSide.CHALLENGER: Duel.challenger_hp,
    DuelSide.OPPONENT: Duel.opponent_hp,
}

COOLDOWN_COLUMNS: dict[tuple[DuelSide, DuelActionType], InstrumentedAttribute] = {
    (DuelSide.CHALLENGER, DuelActionType.ATTACK): Duel.challenger_last_attack,
    (DuelSide.CHALLENGER, DuelActionType.CAST): Duel.challenger_last_cast,
    (DuelSide.CHALLENGER, DuelActionType.HEAL): Duel.challenger_last_heal,
    (DuelSide.OPPONENT, DuelActionType.ATTACK): Duel.opponent_last_attack,
    (DuelSide.OPPONENT, DuelActionType.CAST): Duel.opponent_last_cast,
    (DuelSide.OPPONENT, DuelActionType.HEAL): Duel.opponent_last_heal,
}

STAT_COLUMNS: dict[DuelSide, dict[str, InstrumentedAttribute]] = {
    DuelSide.CHALLENGER: {
        "strength": Duel.challenger_strength,
        "agility": Duel.challenger_agility,
        "intelligence": Duel.challenger_intelligence,
        "faith": Duel.challenger_faith,
    },
    DuelSide.OPPONENT: {
        "strength": Duel.opponent_strength,
        "agility": Duel.opponent_agility,
        "intelligence": Duel.opponent_intelligence,
        "faith": Duel.opponent_faith,
    },
}
