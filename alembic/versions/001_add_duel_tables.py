"""Add duel tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

Adds the duels table (frozen stats, HP, per-action cooldowns, lifecycle)
and the append-only duel_actions audit table.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

SIDES = ("challenger", "opponent")
STATS = ("strength", "agility", "intelligence", "faith")
ACTIONS = ("attack", "cast", "heal")


def upgrade() -> None:
    # ============================================
    # Create enums (SQLAlchemy stores member names)
    # ============================================
    duel_status_enum = sa.Enum("ACTIVE", "FINISHED", "DRAW", name="duel_status")
    duel_status_enum.create(op.get_bind(), checkfirst=True)

    duel_action_type_enum = sa.Enum("ATTACK", "CAST", "HEAL", name="duel_action_type")
    duel_action_type_enum.create(op.get_bind(), checkfirst=True)

    # ============================================
    # Create duels table
    # ============================================
    op.create_table(
        "duels",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("challenger_character_id", sa.String(64), nullable=False, index=True),
        sa.Column("opponent_character_id", sa.String(64), nullable=False, index=True),
        sa.Column("challenger_user_id", sa.String(64), nullable=False),
        *[
            sa.Column(f"{side}_{stat}", sa.Integer(), nullable=False)
            for side in SIDES
            for stat in STATS
        ],
        sa.Column("challenger_hp", sa.Integer(), nullable=False),
        sa.Column("opponent_hp", sa.Integer(), nullable=False),
        *[
            sa.Column(f"{side}_last_{action}", sa.DateTime(timezone=True), nullable=True)
            for side in SIDES
            for action in ACTIONS
        ],
        sa.Column(
            "status",
            duel_status_enum,
            nullable=False,
            server_default="ACTIVE",
        ),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("winner_character_id", sa.String(64), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("challenger_hp >= 0 AND opponent_hp >= 0", name="ck_duels_hp_non_negative"),
    )

    # ============================================
    # Create duel_actions table
    # ============================================
    op.create_table(
        "duel_actions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("duel_id", sa.Uuid(), sa.ForeignKey("duels.id"), nullable=False, index=True),
        sa.Column("actor_character_id", sa.String(64), nullable=False),
        sa.Column(
            "action_type",
            duel_action_type_enum,
            nullable=False,
        ),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("duel_actions")
    op.drop_table("duels")
    sa.Enum(name="duel_action_type").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="duel_status").drop(op.get_bind(), checkfirst=True)
