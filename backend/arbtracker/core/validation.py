from __future__ import annotations

from arbtracker.core.metrics import MAX_MONEY, MAX_PERCENTAGE, parse_money, parse_odds
from arbtracker.domain.enums import Side, ViolationCode
from arbtracker.domain.types import LegInput, PairMetrics, Violation

REQUIRED_TEXT_FIELDS = ("betting_house", "bet_type", "team_a", "team_b")
AMOUNT_PARSERS = {"odds": parse_odds, "stake": parse_money, "payout": parse_money}
SIDES = frozenset(side.value for side in Side)


def normalize_team(name: str | None) -> str:
    return " ".join((name or "").split()).casefold()


def _event_key(leg: LegInput) -> frozenset[str]:
    return frozenset({normalize_team(leg.team_a), normalize_team(leg.team_b)})


def _check_leg(label: str, leg: LegInput) -> list[Violation]:
    violations: list[Violation] = []
    for field in REQUIRED_TEXT_FIELDS:
        if not (getattr(leg, field) or "").strip():
            violations.append(
                Violation(f"{label}.{field}", ViolationCode.REQUIRED, f"{field} is required")
            )
    for field, parse in AMOUNT_PARSERS.items():
        try:
            parse(getattr(leg, field), field)
        except ValueError as exc:
            violations.append(Violation(f"{label}.{field}", ViolationCode.INVALID_AMOUNT, str(exc)))
    if (leg.selected_side or "").strip().upper() not in SIDES:
        violations.append(
            Violation(
                f"{label}.selected_side",
                ViolationCode.INVALID_SIDE,
                f"selected_side must be one of {sorted(SIDES)}",
            )
        )
    return violations


def validate_pair(leg_a: LegInput, leg_b: LegInput, *, check_pairing: bool = False) -> list[Violation]:
    """Return every consistency violation between two legs; an empty list means valid."""
    violations = _check_leg("bet_a", leg_a) + _check_leg("bet_b", leg_b)

    if _event_key(leg_a) != _event_key(leg_b):
        violations.append(
            Violation(
                "teams",
                ViolationCode.EVENT_MISMATCH,
                "both legs must reference the same two teams",
            )
        )

    side_a = (leg_a.selected_side or "").strip().upper()
    side_b = (leg_b.selected_side or "").strip().upper()
    if side_a == side_b:
        violations.append(
            Violation(
                "selected_side",
                ViolationCode.SIDE_CONFLICT,
                f"both legs select side '{side_a}'; a pair needs opposite sides",
            )
        )

    if check_pairing:
        if leg_a.pair_id is None or leg_a.pair_id != leg_b.pair_id:
            violations.append(
                Violation("pair_id", ViolationCode.PAIR_MISMATCH, "legs must share one pair_id")
            )
        if leg_a.bet_position == leg_b.bet_position:
            violations.append(
                Violation(
                    "bet_position",
                    ViolationCode.POSITION_CONFLICT,
                    "legs must occupy distinct positions A and B",
                )
            )
    return violations


def check_pair_metrics(metrics: PairMetrics) -> list[Violation]:
    """Violations for derived values that fall outside what a bet row can store."""
    violations: list[Violation] = []
    if metrics.total_stake > MAX_MONEY:
        violations.append(
            Violation(
                "total_stake",
                ViolationCode.INVALID_AMOUNT,
                f"total stake must not exceed {MAX_MONEY}",
            )
        )
    for label, percentage in (("bet_a", metrics.profit_percentage_a), ("bet_b", metrics.profit_percentage_b)):
        if percentage > MAX_PERCENTAGE:
            violations.append(
                Violation(
                    f"{label}.payout",
                    ViolationCode.INVALID_AMOUNT,
                    f"profit percentage must not exceed {MAX_PERCENTAGE}",
                )
            )
    return violations
