from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from arbtracker.domain.types import PairMetrics

CENTS = Decimal("0.01")
HUNDRED = Decimal("100")
ZERO = Decimal("0")
ODDS_STEP = Decimal("0.001")

# Largest values the bets table columns can hold.
MAX_MONEY = Decimal("9999999999.99")
MAX_ODDS = Decimal("9999999.999")
MAX_PERCENTAGE = Decimal("999999.99")

Amount = Decimal | int | float | str


def normalize_amount(raw: str) -> str:
    """Rewrite "1.243,67", "1,243.67" and "1243,67" as "1243.67".

    With both separators present the rightmost one is the decimal point. A
    lone comma is a decimal point unless it repeats.
    """
    raw = raw.strip()
    if "," in raw and "." in raw:
        if raw.rfind(",") > raw.rfind("."):
            return raw.replace(".", "").replace(",", ".")
        return raw.replace(",", "")
    if raw.count(",") == 1:
        return raw.replace(",", ".")
    return raw.replace(",", "")


def _to_decimal(value: Amount, name: str) -> Decimal:
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise ValueError(f"{name} must be a number")
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif isinstance(value, str):
        raw = normalize_amount(value)
        try:
            result = Decimal(raw)
        except InvalidOperation as exc:
            raise ValueError(f"{name} must be a number, got {value!r}") from exc
    else:
        raise ValueError(f"{name} must be a number")
    if not result.is_finite():
        raise ValueError(f"{name} must be finite")
    return result


def _non_negative(value: Amount, name: str) -> Decimal:
    result = _to_decimal(value, name)
    if result < ZERO:
        raise ValueError(f"{name} must be non-negative")
    return result


def to_money(value: Amount) -> Decimal:
    return _to_decimal(value, "amount").quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_positive_decimal(raw: Amount | None, name: str) -> Decimal:
    if raw is None:
        raise ValueError(f"{name} is required")
    result = _to_decimal(raw, name)
    if result <= ZERO:
        raise ValueError(f"{name} must be greater than zero")
    return result


def _bounded(raw: Amount | None, name: str, step: Decimal, maximum: Decimal) -> Decimal:
    if raw is None:
        raise ValueError(f"{name} is required")
    value = _to_decimal(raw, name)
    # Compare before rounding: quantizing a huge value overflows the context.
    if value > maximum:
        raise ValueError(f"{name} must not exceed {maximum}")
    result = value.quantize(step, rounding=ROUND_HALF_UP)
    if result < step:
        raise ValueError(f"{name} must be at least {step}")
    if result > maximum:
        raise ValueError(f"{name} must not exceed {maximum}")
    return result


def parse_money(raw: Amount | None, name: str) -> Decimal:
    """Parse a stake or payout and round it to cents.

    Bounds apply to the rounded value, which is the value that gets stored.
    """
    return _bounded(raw, name, CENTS, MAX_MONEY)


def parse_odds(raw: Amount | None, name: str = "odds") -> Decimal:
    return _bounded(raw, name, ODDS_STEP, MAX_ODDS)


def profit_percentage(payout: Amount, total_stake: Amount) -> Decimal:
    payout = _non_negative(payout, "payout")
    total_stake = _non_negative(total_stake, "total_stake")
    if total_stake == ZERO:
        return ZERO.quantize(CENTS)
    ratio = (payout - total_stake) / total_stake * HUNDRED
    return ratio.quantize(CENTS, rounding=ROUND_HALF_UP)


def compute_pair_metrics(
    stake_a: Amount,
    stake_b: Amount,
    payout_a: Amount,
    payout_b: Amount,
) -> PairMetrics:
    """Total stake of a pair and the return on that total for each leg winning.

    A zero total yields 0% for both legs instead of dividing by zero.
    """
    total = _non_negative(stake_a, "stake_a") + _non_negative(stake_b, "stake_b")
    payout_a = _non_negative(payout_a, "payout_a")
    payout_b = _non_negative(payout_b, "payout_b")
    return PairMetrics(
        total_stake=total.quantize(CENTS, rounding=ROUND_HALF_UP),
        profit_percentage_a=profit_percentage(payout_a, total),
        profit_percentage_b=profit_percentage(payout_b, total),
    )


def guaranteed_profit(total_stake: Amount, payout_a: Amount, payout_b: Amount) -> Decimal:
    """Worst-case profit of the pair: the smaller payout minus everything staked."""
    total_stake = _non_negative(total_stake, "total_stake")
    worst = min(_non_negative(payout_a, "payout_a"), _non_negative(payout_b, "payout_b"))
    return (worst - total_stake).quantize(CENTS, rounding=ROUND_HALF_UP)


def arbitrage_margin(odds_a: Amount, odds_b: Amount) -> Decimal:
    """Sum of implied probabilities; below 1 the two prices form a true arbitrage."""
    odds_a = parse_positive_decimal(odds_a, "odds_a")
    odds_b = parse_positive_decimal(odds_b, "odds_b")
    return (1 / odds_a) + (1 / odds_b)
