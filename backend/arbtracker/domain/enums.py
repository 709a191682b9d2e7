from enum import StrEnum


class BetStatus(StrEnum):
    PENDING = "pending"
    WON = "won"
    LOST = "lost"
    RETURNED = "returned"


# Statuses a settlement request may move a leg into.
TERMINAL_STATUSES = frozenset({BetStatus.WON, BetStatus.LOST, BetStatus.RETURNED})


class Side(StrEnum):
    A = "A"
    B = "B"


class BetPosition(StrEnum):
    A = "A"
    B = "B"


class ViolationCode(StrEnum):
    REQUIRED = "required"
    INVALID_AMOUNT = "invalid_amount"
    INVALID_SIDE = "invalid_side"
    EVENT_MISMATCH = "event_mismatch"
    SIDE_CONFLICT = "side_conflict"
    PAIR_MISMATCH = "pair_mismatch"
    POSITION_CONFLICT = "position_conflict"
