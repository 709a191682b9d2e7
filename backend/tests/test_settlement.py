import pytest

from arbtracker.core.settlement import coerce_status, plan_transition, resolve_transition
from arbtracker.domain.enums import BetStatus
from arbtracker.errors import InvalidStatusError, SettlementConflictError


def test_win_cascades_loss_onto_pending_sibling() -> None:
    transition = resolve_transition(BetStatus.PENDING, BetStatus.WON)

    assert transition.target_next == BetStatus.WON
    assert transition.sibling_next == BetStatus.LOST
    assert transition.cascades is True


def test_win_leaves_resolved_sibling_alone() -> None:
    for sibling in [BetStatus.RETURNED, BetStatus.LOST]:
        transition = resolve_transition(sibling, BetStatus.WON)
        assert transition.target_next == BetStatus.WON
        assert transition.sibling_next is None


def test_loss_and_return_never_cascade() -> None:
    for new_status in [BetStatus.LOST, BetStatus.RETURNED]:
        for sibling in BetStatus:
            transition = resolve_transition(sibling, new_status)
            assert transition.target_next == new_status
            assert transition.cascades is False


def test_resolution_overwrites_previous_outcome() -> None:
    transition = resolve_transition(BetStatus.LOST, BetStatus.RETURNED)
    assert transition.target_next == BetStatus.RETURNED
    assert transition.sibling_next is None


def test_win_over_winning_sibling_is_a_conflict() -> None:
    with pytest.raises(SettlementConflictError):
        resolve_transition(BetStatus.WON, BetStatus.WON)


def test_leg_without_sibling_settles_alone() -> None:
    transition = resolve_transition(None, BetStatus.WON)
    assert transition.target_next == BetStatus.WON
    assert transition.sibling_next is None


def test_pending_is_not_a_settlement_but_can_reopen() -> None:
    with pytest.raises(InvalidStatusError):
        resolve_transition(BetStatus.LOST, BetStatus.PENDING)

    transition = plan_transition(BetStatus.LOST, BetStatus.PENDING)
    assert transition.target_next == BetStatus.PENDING
    assert transition.sibling_next is None


def test_coerce_status() -> None:
    assert coerce_status("WON") is BetStatus.WON
    assert coerce_status(" returned ") is BetStatus.RETURNED
    with pytest.raises(InvalidStatusError):
        coerce_status("void")
