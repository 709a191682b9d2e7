from dataclasses import replace
from decimal import Decimal

from arbtracker.core.validation import check_pair_metrics, normalize_team, validate_pair
from arbtracker.domain.enums import ViolationCode
from arbtracker.domain.types import LegInput, PairMetrics


def _leg(**overrides: str) -> LegInput:
    values = {
        "betting_house": "Betfast",
        "team_a": "Giulio Zeppieri",
        "team_b": "Learner Tien",
        "bet_type": "Acima 8.5 1º set",
        "selected_side": "A",
        "odds": "1.270",
        "stake": "979.47",
        "payout": "1243.67",
    }
    values.update(overrides)
    return LegInput(**values)


def _codes(violations) -> list[ViolationCode]:
    return [violation.code for violation in violations]


def test_valid_pair_has_no_violations() -> None:
    leg_a = _leg()
    leg_b = _leg(betting_house="Pinnacle", bet_type="Abaixo 8.5 1º set", selected_side="B", odds="5.270", stake="236.04")

    assert validate_pair(leg_a, leg_b) == []


def test_team_names_compare_after_trim_casefold_and_in_any_order() -> None:
    leg_a = _leg()
    leg_b = _leg(team_a="  learner   TIEN ", team_b="GIULIO zeppieri", selected_side="B")

    assert normalize_team("  Learner   TIEN ") == "learner tien"
    assert validate_pair(leg_a, leg_b) == []


def test_same_selected_side_is_a_side_conflict() -> None:
    violations = validate_pair(_leg(selected_side="A"), _leg(selected_side="a"))

    assert _codes(violations) == [ViolationCode.SIDE_CONFLICT]
    assert violations[0].field == "selected_side"


def test_every_violation_is_reported() -> None:
    leg_a = _leg(betting_house=" ", odds="abc", stake="0")
    leg_b = _leg(bet_type="", payout="-5", team_a="Someone Else", selected_side="A")

    violations = validate_pair(leg_a, leg_b)
    fields = {violation.field for violation in violations}

    assert fields == {
        "bet_a.betting_house",
        "bet_a.odds",
        "bet_a.stake",
        "bet_b.bet_type",
        "bet_b.payout",
        "teams",
        "selected_side",
    }
    assert _codes(violations).count(ViolationCode.INVALID_AMOUNT) == 3
    assert ViolationCode.EVENT_MISMATCH in _codes(violations)


def test_unknown_side_value_is_reported() -> None:
    violations = validate_pair(_leg(selected_side="X"), _leg(selected_side="B"))

    assert _codes(violations) == [ViolationCode.INVALID_SIDE]
    assert violations[0].field == "bet_a.selected_side"


def test_pairing_checks_only_when_requested() -> None:
    leg_a = replace(_leg(), pair_id="p1", bet_position="A")
    leg_b = replace(_leg(selected_side="B"), pair_id="p2", bet_position="A")

    assert validate_pair(leg_a, leg_b) == []
    assert _codes(validate_pair(leg_a, leg_b, check_pairing=True)) == [
        ViolationCode.PAIR_MISMATCH,
        ViolationCode.POSITION_CONFLICT,
    ]

    fixed_b = replace(leg_b, pair_id="p1", bet_position="B")
    assert validate_pair(leg_a, fixed_b, check_pairing=True) == []


def test_validation_does_not_mutate_inputs() -> None:
    leg_a = _leg(betting_house="")
    leg_b = _leg(selected_side="B")
    before = (leg_a, leg_b)

    validate_pair(leg_a, leg_b)

    assert (leg_a, leg_b) == before


def test_violation_as_dict() -> None:
    violation = validate_pair(_leg(), _leg())[0]
    assert violation.as_dict() == {
        "field": "selected_side",
        "code": "side_conflict",
        "message": "both legs select side 'A'; a pair needs opposite sides",
    }


def test_amounts_are_checked_as_they_would_be_stored() -> None:
    leg_a = _leg(stake="0.004", odds="0.0001")
    leg_b = _leg(selected_side="B", payout="10000000000", stake="1.243,67")

    violations = validate_pair(leg_a, leg_b)

    assert [(violation.field, violation.code) for violation in violations] == [
        ("bet_a.odds", ViolationCode.INVALID_AMOUNT),
        ("bet_a.stake", ViolationCode.INVALID_AMOUNT),
        ("bet_b.payout", ViolationCode.INVALID_AMOUNT),
    ]


def test_check_pair_metrics_flags_values_too_large_to_store() -> None:
    ok = PairMetrics(Decimal("275.00"), Decimal("50.00"), Decimal("45.45"))
    assert check_pair_metrics(ok) == []

    too_large = PairMetrics(Decimal("19999999999.98"), Decimal("2062400.00"), Decimal("-100.00"))
    violations = check_pair_metrics(too_large)
    assert [violation.field for violation in violations] == ["total_stake", "bet_a.payout"]
    assert {violation.code for violation in violations} == {ViolationCode.INVALID_AMOUNT}
