from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from arbtracker.core.metrics import compute_pair_metrics, guaranteed_profit, parse_money, parse_odds
from arbtracker.core.settlement import coerce_status, plan_transition
from arbtracker.core.validation import check_pair_metrics, validate_pair
from arbtracker.domain.enums import BetPosition, BetStatus
from arbtracker.domain.types import LegInput
from arbtracker.errors import BetNotFoundError, PairNotFoundError, PairValidationError, StaleStatusError
from arbtracker.models import Bet
from arbtracker.services import bets as store

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def leg_from_bet(bet: Bet) -> LegInput:
    return LegInput(
        betting_house=bet.betting_house,
        team_a=bet.team_a,
        team_b=bet.team_b,
        bet_type=bet.bet_type,
        selected_side=bet.selected_side,
        odds=str(bet.odds),
        stake=str(bet.stake),
        payout=str(bet.payout),
        sport=bet.sport,
        league=bet.league,
        pair_id=bet.pair_id,
        bet_position=bet.bet_position,
    )


def _leg_values(
    leg: LegInput,
    *,
    pair_id: str,
    position: BetPosition,
    game_date: datetime,
    stake: Decimal,
    payout: Decimal,
    total_stake: Decimal,
    percentage: Decimal,
) -> dict[str, object]:
    return {
        "betting_house": leg.betting_house.strip(),
        "sport": leg.sport.strip() if leg.sport else None,
        "league": leg.league.strip() if leg.league else None,
        "team_a": leg.team_a.strip(),
        "team_b": leg.team_b.strip(),
        "bet_type": leg.bet_type.strip(),
        "selected_side": leg.selected_side.strip().upper(),
        "odds": parse_odds(leg.odds),
        "stake": stake,
        "payout": payout,
        "game_date": game_date,
        "status": BetStatus.PENDING.value,
        "is_verified": True,
        "pair_id": pair_id,
        "bet_position": position.value,
        "total_pair_stake": total_stake,
        "profit_percentage": percentage,
    }


def create_pair(session: Session, leg_a: LegInput, leg_b: LegInput, game_date: datetime) -> tuple[str, list[Bet]]:
    """Validate two raw legs, derive pair metrics and persist both legs under one pair id.

    Stakes and payouts are rounded to cents once; the metrics are computed
    from those rounded amounts and the same amounts are stored.
    """
    pair_id = str(uuid.uuid4())
    leg_a = replace(leg_a, pair_id=pair_id, bet_position=BetPosition.A.value)
    leg_b = replace(leg_b, pair_id=pair_id, bet_position=BetPosition.B.value)

    violations = validate_pair(leg_a, leg_b, check_pairing=True)
    if violations:
        raise PairValidationError(violations)

    stake_a, stake_b = parse_money(leg_a.stake, "stake"), parse_money(leg_b.stake, "stake")
    payout_a, payout_b = parse_money(leg_a.payout, "payout"), parse_money(leg_b.payout, "payout")
    metrics = compute_pair_metrics(stake_a, stake_b, payout_a, payout_b)
    violations = check_pair_metrics(metrics)
    if violations:
        raise PairValidationError(violations)
    game_date = _as_utc(game_date)

    try:
        bet_a = store.create_bet(
            session,
            _leg_values(
                leg_a,
                pair_id=pair_id,
                position=BetPosition.A,
                game_date=game_date,
                stake=stake_a,
                payout=payout_a,
                total_stake=metrics.total_stake,
                percentage=metrics.profit_percentage_a,
            ),
        )
        bet_b = store.create_bet(
            session,
            _leg_values(
                leg_b,
                pair_id=pair_id,
                position=BetPosition.B,
                game_date=game_date,
                stake=stake_b,
                payout=payout_b,
                total_stake=metrics.total_stake,
                percentage=metrics.profit_percentage_b,
            ),
        )
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        raise

    logger.info(
        "Created pair %s: total stake %s, profit %s%% / %s%%",
        pair_id,
        metrics.total_stake,
        metrics.profit_percentage_a,
        metrics.profit_percentage_b,
    )
    return pair_id, [bet_a, bet_b]


def get_pair(session: Session, pair_id: str) -> dict[str, object]:
    legs = sorted(store.get_bets_by_pair_id(session, pair_id), key=lambda bet: bet.bet_position)
    if not legs:
        raise PairNotFoundError(pair_id)

    violations = []
    metrics = None
    profit = None
    if len(legs) == 2:
        bet_a, bet_b = legs
        violations = validate_pair(leg_from_bet(bet_a), leg_from_bet(bet_b), check_pairing=True)
        # Display-only recompute; stored values are what was derived at creation.
        metrics = compute_pair_metrics(bet_a.stake, bet_b.stake, bet_a.payout, bet_b.payout)
        profit = guaranteed_profit(metrics.total_stake, bet_a.payout, bet_b.payout)
    else:
        logger.warning("Pair %s has %d legs", pair_id, len(legs))

    return {
        "pair_id": pair_id,
        "bets": legs,
        "metrics": metrics,
        "guaranteed_profit": profit,
        "violations": violations,
    }


def _apply_cascade(session: Session, sibling_id: str, status: BetStatus) -> bool:
    try:
        with session.begin_nested():
            store.update_status(session, sibling_id, status, expected_prior_status=BetStatus.PENDING)
    except StaleStatusError:
        logger.info("Sibling %s was resolved concurrently; cascade skipped", sibling_id)
        return False
    except SQLAlchemyError:
        # The primary write stands; the sibling stays as it was.
        logger.exception("Cascade to sibling %s failed", sibling_id)
        return False
    return True


def settle_bet(session: Session, bet_id: str, status: str | BetStatus) -> Bet:
    """Set a bet's status and cascade a win onto its pending sibling.

    The pair's rows are locked for the duration and every write is guarded on
    the status that was read, so two concurrent wins on one pair cannot both
    stand: the loser sees either the lock or a stale guard.
    """
    new_status = coerce_status(status)

    target = store.get_bet(session, bet_id)
    if target is None:
        raise BetNotFoundError(bet_id)

    legs = store.get_bets_by_pair_id(session, target.pair_id, for_update=True)
    target = next(bet for bet in legs if bet.id == bet_id)
    sibling = next((bet for bet in legs if bet.id != bet_id), None)

    prior = BetStatus(target.status)
    try:
        transition = plan_transition(
            BetStatus(sibling.status) if sibling is not None else None,
            new_status,
        )
        updated = store.update_status(session, bet_id, transition.target_next, expected_prior_status=prior)
    except Exception:
        session.rollback()
        raise
    assert updated is not None

    if transition.cascades and sibling is not None:
        assert transition.sibling_next is not None
        if _apply_cascade(session, sibling.id, transition.sibling_next):
            logger.info("Pair %s: %s won, sibling %s set to lost", target.pair_id, bet_id, sibling.id)

    try:
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        raise

    logger.info("Bet %s settled %s -> %s", bet_id, prior.value, new_status.value)
    session.refresh(updated)
    return updated
