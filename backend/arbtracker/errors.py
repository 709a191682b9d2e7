from __future__ import annotations

from arbtracker.domain.types import Violation


class ArbTrackerError(Exception):
    """Base class for errors the API layer turns into JSON responses."""


class PairValidationError(ArbTrackerError):
    def __init__(self, violations: list[Violation]) -> None:
        self.violations = violations
        super().__init__(f"bet pair failed validation with {len(violations)} violation(s)")


class BetNotFoundError(ArbTrackerError):
    def __init__(self, bet_id: str) -> None:
        self.bet_id = bet_id
        super().__init__(f"bet '{bet_id}' not found")


class PairNotFoundError(ArbTrackerError):
    def __init__(self, pair_id: str) -> None:
        self.pair_id = pair_id
        super().__init__(f"pair '{pair_id}' not found")


class InvalidStatusError(ArbTrackerError):
    pass


class SettlementConflictError(ArbTrackerError):
    """A leg cannot be marked won while its sibling is already won."""


class StaleStatusError(ArbTrackerError):
    """A conditional status write found the row in an unexpected state."""

    def __init__(self, bet_id: str, expected: str) -> None:
        self.bet_id = bet_id
        self.expected = expected
        super().__init__(f"bet '{bet_id}' changed concurrently; expected status '{expected}'")


class ExtractionError(ArbTrackerError):
    pass
