from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Index, Integer, Numeric, String, Text, UniqueConstraint, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from arbtracker.domain.enums import BetStatus


class Base(DeclarativeBase):
    pass


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Bet(Base):
    __tablename__ = "bets"
    __table_args__ = (
        UniqueConstraint("pair_id", "bet_position", name="uq_bets_pair_position"),
        Index("ix_bets_pair_id", "pair_id"),
        Index("ix_bets_status", "status"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    betting_house: Mapped[str] = mapped_column(Text, nullable=False)
    sport: Mapped[str | None] = mapped_column(Text, nullable=True)
    league: Mapped[str | None] = mapped_column(Text, nullable=True)
    team_a: Mapped[str] = mapped_column(Text, nullable=False)
    team_b: Mapped[str] = mapped_column(Text, nullable=False)
    bet_type: Mapped[str] = mapped_column(Text, nullable=False)
    selected_side: Mapped[str] = mapped_column(String(1), nullable=False)
    odds: Mapped[Decimal] = mapped_column(Numeric(10, 3), nullable=False)
    stake: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payout: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    game_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=BetStatus.PENDING.value)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    pair_id: Mapped[str] = mapped_column(String(36), nullable=False)
    bet_position: Mapped[str] = mapped_column(String(1), nullable=False)
    total_pair_stake: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    profit_percentage: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Python-side default keeps sub-second ordering on backends whose now() is coarse.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    @property
    def profit(self) -> Decimal:
        return self.payout - self.stake
