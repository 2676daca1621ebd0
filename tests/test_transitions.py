from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from brenner_engine.lifecycle import (
    VALID_ASSUMPTION_TRANSITIONS,
    AssumptionTransition,
    AssumptionTrigger,
    get_assumption_target_state,
    get_valid_assumption_triggers,
    is_terminal_assumption_state,
    is_valid_assumption_transition,
    validate_assumption_transition_requirements,
)
from brenner_engine.schemas import AssumptionStatus

LEGAL = [
    ("unchecked", "challenge", "challenged"),
    ("unchecked", "verify", "verified"),
    ("unchecked", "falsify", "falsified"),
    ("challenged", "verify", "verified"),
    ("challenged", "falsify", "falsified"),
    ("verified", "challenge", "challenged"),
]


def test_table_has_a_row_for_every_status() -> None:
    assert set(VALID_ASSUMPTION_TRANSITIONS) == set(AssumptionStatus)
    assert dict(VALID_ASSUMPTION_TRANSITIONS[AssumptionStatus.FALSIFIED]) == {}


def test_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        VALID_ASSUMPTION_TRANSITIONS[AssumptionStatus.VERIFIED][AssumptionTrigger.FALSIFY] = (  # type: ignore[index]
            AssumptionStatus.FALSIFIED
        )


@pytest.mark.parametrize(("state", "trigger", "target"), LEGAL)
def test_legal_transitions(state: str, trigger: str, target: str) -> None:
    assert is_valid_assumption_transition(state, trigger)
    assert get_assumption_target_state(state, trigger) == AssumptionStatus(target)


def test_table_contains_exactly_the_legal_pairs() -> None:
    pairs = {
        (state.value, trigger.value, target.value)
        for state, row in VALID_ASSUMPTION_TRANSITIONS.items()
        for trigger, target in row.items()
    }
    assert pairs == set(LEGAL)


@pytest.mark.parametrize(
    ("state", "trigger"),
    [("challenged", "challenge"), ("verified", "verify"), ("verified", "falsify"), ("falsified", "challenge")],
)
def test_illegal_transitions_have_no_target(state: str, trigger: str) -> None:
    assert not is_valid_assumption_transition(state, trigger)
    assert get_assumption_target_state(state, trigger) is None


def test_valid_triggers_per_state() -> None:
    assert get_valid_assumption_triggers("unchecked") == [
        AssumptionTrigger.CHALLENGE,
        AssumptionTrigger.VERIFY,
        AssumptionTrigger.FALSIFY,
    ]
    assert get_valid_assumption_triggers("challenged") == [AssumptionTrigger.VERIFY, AssumptionTrigger.FALSIFY]
    assert get_valid_assumption_triggers("verified") == [AssumptionTrigger.CHALLENGE]
    assert get_valid_assumption_triggers("falsified") == []


def test_only_falsified_is_terminal() -> None:
    assert is_terminal_assumption_state("falsified") is True
    for state in ("unchecked", "challenged", "verified"):
        assert is_terminal_assumption_state(state) is False


def test_unknown_trigger_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        get_assumption_target_state("unchecked", "kill")


@pytest.mark.parametrize("trigger", ["verify", "falsify"])
def test_requirements_warn_without_evidence_but_stay_valid(trigger: str) -> None:
    check = validate_assumption_transition_requirements(trigger)

    assert check.valid is True
    assert check.warning is not None
    assert "evidence reference" in check.warning


@pytest.mark.parametrize("trigger", ["challenge", "verify", "falsify"])
def test_requirements_are_quiet_with_evidence(trigger: str) -> None:
    check = validate_assumption_transition_requirements(trigger, evidence_ref="T-RS1-001")
    assert check.valid is True
    assert check.warning is None


def test_challenge_needs_no_evidence() -> None:
    assert validate_assumption_transition_requirements("challenge").warning is None


def test_transition_record_accepts_wire_shape() -> None:
    record = AssumptionTransition.model_validate(
        {
            "id": "123e4567-e89b-12d3-a456-426614174000",
            "assumptionId": "A-TEST-001",
            "fromState": "unchecked",
            "toState": "challenged",
            "trigger": "challenge",
            "triggeredBy": "BlueLake",
            "reason": "Evidence suggests this needs review",
            "timestamp": "2025-12-30T20:00:00Z",
            "sessionId": "TEST",
        }
    )

    assert record.trigger == AssumptionTrigger.CHALLENGE
    assert record.evidence_ref is None
    assert record.to_wire()["assumptionId"] == "A-TEST-001"
    assert "evidenceRef" not in record.to_wire()


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("id", "not-a-uuid"),
        ("timestamp", "yesterday"),
        ("timestamp", "2025-12-30T20:00:00"),
        ("fromState", "dead"),
        ("trigger", "kill"),
    ],
)
def test_transition_record_rejects_malformed_fields(field: str, value: str) -> None:
    data = {
        "id": "123e4567-e89b-12d3-a456-426614174000",
        "assumptionId": "A-TEST-001",
        "fromState": "unchecked",
        "toState": "verified",
        "trigger": "verify",
        "timestamp": "2025-12-30T20:00:00Z",
    }
    data[field] = value

    with pytest.raises(ValidationError):
        AssumptionTransition.model_validate(data)


def test_transition_record_requires_an_id() -> None:
    with pytest.raises(ValidationError):
        AssumptionTransition(
            assumption_id="A-TEST-001",
            from_state="unchecked",
            to_state="challenged",
            trigger="challenge",
            timestamp=datetime(2025, 12, 30, 20, 0, tzinfo=timezone.utc),
        )
