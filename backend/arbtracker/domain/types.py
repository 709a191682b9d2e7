from dataclasses import dataclass
from decimal import Decimal

from arbtracker.domain.enums import BetStatus, ViolationCode


@dataclass(frozen=True, slots=True)
class LegInput:
    """One leg as submitted by a client or produced by the extractor.

    Amounts stay as raw strings until validated; nothing here is trusted.
    """

    betting_house: str
    team_a: str
    team_b: str
    bet_type: str
    selected_side: str
    odds: str
    stake: str
    payout: str
    sport: str | None = None
    league: str | None = None
    pair_id: str | None = None
    bet_position: str | None = None


@dataclass(frozen=True, slots=True)
class PairMetrics:
    total_stake: Decimal
    profit_percentage_a: Decimal
    profit_percentage_b: Decimal


@dataclass(frozen=True, slots=True)
class Violation:
    field: str
    code: ViolationCode
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"field": self.field, "code": self.code.value, "message": self.message}


@dataclass(frozen=True, slots=True)
class PairTransition:
    target_next: BetStatus
    sibling_next: BetStatus | None

    @property
    def cascades(self) -> bool:
        return self.sibling_next is not None
