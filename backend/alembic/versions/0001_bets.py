"""bet pairs schema

Revision ID: 0001_bets
Revises:
Create Date: 2026-10-19 10:00:00

"""

from typing import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001_bets"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "bets",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("betting_house", sa.Text(), nullable=False),
        sa.Column("sport", sa.Text(), nullable=True),
        sa.Column("league", sa.Text(), nullable=True),
        sa.Column("team_a", sa.Text(), nullable=False),
        sa.Column("team_b", sa.Text(), nullable=False),
        sa.Column("bet_type", sa.Text(), nullable=False),
        sa.Column("selected_side", sa.String(length=1), nullable=False),
        sa.Column("odds", sa.Numeric(10, 3), nullable=False),
        sa.Column("stake", sa.Numeric(12, 2), nullable=False),
        sa.Column("payout", sa.Numeric(12, 2), nullable=False),
        sa.Column("game_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="pending"),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("pair_id", sa.String(length=36), nullable=False),
        sa.Column("bet_position", sa.String(length=1), nullable=False),
        sa.Column("total_pair_stake", sa.Numeric(12, 2), nullable=False),
        sa.Column("profit_percentage", sa.Numeric(8, 2), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("pair_id", "bet_position", name="uq_bets_pair_position"),
    )
    op.create_index("ix_bets_pair_id", "bets", ["pair_id"])
    op.create_index("ix_bets_status", "bets", ["status"])


def downgrade() -> None:
    op.drop_index("ix_bets_status", table_name="bets")
    op.drop_index("ix_bets_pair_id", table_name="bets")
    op.drop_table("bets")
