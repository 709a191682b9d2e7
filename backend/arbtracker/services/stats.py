from __future__ import annotations

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from arbtracker.core.metrics import CENTS, HUNDRED, ZERO, to_money
from arbtracker.domain.enums import BetStatus
from arbtracker.models import Bet


def summarize_bets(session: Session) -> dict[str, object]:
    rows = session.execute(
        select(
            Bet.status,
            func.count(Bet.id),
            func.coalesce(func.sum(Bet.stake), 0),
            func.coalesce(func.sum(Bet.payout), 0),
        ).group_by(Bet.status)
    ).all()

    counts = {status.value: 0 for status in BetStatus}
    staked = {status.value: ZERO for status in BetStatus}
    paid = {status.value: ZERO for status in BetStatus}
    for status, count, stake_sum, payout_sum in rows:
        counts[status] = int(count)
        staked[status] = to_money(Decimal(str(stake_sum)))
        paid[status] = to_money(Decimal(str(payout_sum)))

    total_profit = paid[BetStatus.WON] - staked[BetStatus.WON]
    total_loss = staked[BetStatus.LOST]
    decided = counts[BetStatus.WON] + counts[BetStatus.LOST]
    win_rate = (
        (Decimal(counts[BetStatus.WON]) / Decimal(decided) * HUNDRED).quantize(CENTS)
        if decided
        else ZERO.quantize(CENTS)
    )
    pair_count = session.execute(select(func.count(func.distinct(Bet.pair_id)))).scalar_one()

    return {
        "total_bets": sum(counts.values()),
        "total_pairs": int(pair_count),
        "pending_bets": counts[BetStatus.PENDING],
        "won_bets": counts[BetStatus.WON],
        "lost_bets": counts[BetStatus.LOST],
        "returned_bets": counts[BetStatus.RETURNED],
        "total_staked": to_money(sum(staked.values(), ZERO)),
        "total_profit": to_money(total_profit),
        "total_loss": to_money(total_loss),
        "net_profit": to_money(total_profit - total_loss),
        "win_rate": win_rate,
    }
