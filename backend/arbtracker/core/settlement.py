from __future__ import annotations

from arbtracker.domain.enums import TERMINAL_STATUSES, BetStatus
from arbtracker.domain.types import PairTransition
from arbtracker.errors import InvalidStatusError, SettlementConflictError


def coerce_status(value: str | BetStatus) -> BetStatus:
    try:
        return BetStatus(str(value).strip().lower())
    except ValueError as exc:
        allowed = ", ".join(status.value for status in BetStatus)
        raise InvalidStatusError(f"status must be one of: {allowed}") from exc


def resolve_transition(
    sibling_status: BetStatus | None,
    new_status: BetStatus,
) -> PairTransition:
    """Next status for a leg being settled and, if it cascades, for its sibling.

    The settled leg always takes ``new_status``, whatever it held before. Only a
    win cascades, and only onto a sibling that is still pending.
    """
    if new_status not in TERMINAL_STATUSES:
        raise InvalidStatusError(f"cannot settle a bet as '{new_status.value}'")

    if new_status is BetStatus.WON and sibling_status is BetStatus.WON:
        raise SettlementConflictError("the other leg of this pair is already marked won")

    sibling_next: BetStatus | None = None
    if new_status is BetStatus.WON and sibling_status is BetStatus.PENDING:
        sibling_next = BetStatus.LOST
    return PairTransition(target_next=new_status, sibling_next=sibling_next)


def plan_transition(
    sibling_status: BetStatus | None,
    new_status: BetStatus,
) -> PairTransition:
    # Re-opening a leg is allowed from the status route and never cascades.
    if new_status is BetStatus.PENDING:
        return PairTransition(target_next=BetStatus.PENDING, sibling_next=None)
    return resolve_transition(sibling_status, new_status)
