from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from arbtracker.domain.types import LegInput
from arbtracker.models import Bet


class LegPayload(BaseModel):
    """Untrusted leg fields; the pair validator decides what is acceptable."""

    betting_house: str = ""
    sport: str | None = None
    league: str | None = None
    team_a: str = ""
    team_b: str = ""
    bet_type: str = ""
    selected_side: str = ""
    odds: str = ""
    stake: str = ""
    payout: str = ""

    @field_validator("odds", "stake", "payout", mode="before")
    @classmethod
    def _amount_as_text(cls, value: object) -> object:
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            return str(value)
        return value

    def to_leg(self) -> LegInput:
        return LegInput(
            betting_house=self.betting_house,
            team_a=self.team_a,
            team_b=self.team_b,
            bet_type=self.bet_type,
            selected_side=self.selected_side,
            odds=self.odds,
            stake=self.stake,
            payout=self.payout,
            sport=self.sport,
            league=self.league,
        )


class CreatePairRequest(BaseModel):
    bet_a: LegPayload
    bet_b: LegPayload
    game_date: datetime


class StatusUpdateRequest(BaseModel):
    status: str = Field(..., description="pending, won, lost or returned")


def format_money(value: Decimal | None) -> str | None:
    return f"{value:.2f}" if value is not None else None


def serialize_bet(bet: Bet) -> dict[str, object]:
    return {
        "id": bet.id,
        "betting_house": bet.betting_house,
        "sport": bet.sport,
        "league": bet.league,
        "team_a": bet.team_a,
        "team_b": bet.team_b,
        "bet_type": bet.bet_type,
        "selected_side": bet.selected_side,
        "odds": f"{bet.odds:.3f}",
        "stake": format_money(bet.stake),
        "payout": format_money(bet.payout),
        "profit": format_money(bet.profit),
        "game_date": bet.game_date.isoformat(),
        "status": bet.status,
        "is_verified": bet.is_verified,
        "pair_id": bet.pair_id,
        "bet_position": bet.bet_position,
        "total_pair_stake": format_money(bet.total_pair_stake),
        "profit_percentage": format_money(bet.profit_percentage),
        "created_at": bet.created_at.isoformat() if bet.created_at is not None else None,
    }
