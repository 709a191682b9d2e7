from __future__ import annotations

from typing import Any

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session

from arbtracker.domain.enums import BetStatus
from arbtracker.errors import StaleStatusError
from arbtracker.models import Bet

SORT_ORDERS = {
    "created": (Bet.created_at.asc(), Bet.bet_position.asc()),
    "date": (Bet.game_date.desc(), Bet.created_at.asc(), Bet.bet_position.asc()),
    "stake": (Bet.stake.desc(), Bet.created_at.asc()),
    "odds": (Bet.odds.desc(), Bet.created_at.asc()),
}


def list_bets(
    session: Session,
    status: BetStatus | None = None,
    search: str | None = None,
    sort: str = "created",
) -> list[Bet]:
    if sort not in SORT_ORDERS:
        raise ValueError(f"sort must be one of: {', '.join(SORT_ORDERS)}")

    stmt = select(Bet)
    if status is not None:
        stmt = stmt.where(Bet.status == status.value)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(or_(Bet.betting_house.ilike(pattern), Bet.bet_type.ilike(pattern)))
    return list(session.execute(stmt.order_by(*SORT_ORDERS[sort])).scalars().all())


def get_bet(session: Session, bet_id: str) -> Bet | None:
    return session.get(Bet, bet_id)


def create_bet(session: Session, values: dict[str, Any]) -> Bet:
    bet = Bet(**values)
    session.add(bet)
    session.flush()
    return bet


def get_bets_by_pair_id(session: Session, pair_id: str, *, for_update: bool = False) -> list[Bet]:
    stmt = select(Bet).where(Bet.pair_id == pair_id).order_by(Bet.id.asc())
    if for_update:
        # Row locks in id order so two settlements on one pair cannot deadlock each other.
        stmt = stmt.with_for_update()
    return list(
        session.execute(stmt.execution_options(populate_existing=True)).scalars().all()
    )


def update_status(
    session: Session,
    bet_id: str,
    status: BetStatus,
    expected_prior_status: BetStatus | None = None,
) -> Bet | None:
    """Write ``status`` to one bet, optionally only if it still has ``expected_prior_status``.

    Returns None for an unknown id and raises StaleStatusError when the guard
    did not match. Does not commit.
    """
    stmt = (
        update(Bet)
        .where(Bet.id == bet_id)
        .values(status=status.value, version=Bet.version + 1)
        .execution_options(synchronize_session=False)
    )
    if expected_prior_status is not None:
        stmt = stmt.where(Bet.status == expected_prior_status.value)

    result = session.execute(stmt)
    if result.rowcount == 0:
        if session.get(Bet, bet_id, populate_existing=True) is None:
            return None
        assert expected_prior_status is not None
        raise StaleStatusError(bet_id, expected_prior_status.value)
    return session.get(Bet, bet_id, populate_existing=True)
