import json
from datetime import timedelta
from uuid import uuid4

import pytest

from brenner_engine.lifecycle import (
    AssumptionTransition,
    AssumptionTransitionHistoryStore,
    HistoryImportError,
)

from conftest import START

_STATES = {
    "challenge": ("unchecked", "challenged"),
    "verify": ("challenged", "verified"),
    "falsify": ("challenged", "falsified"),
}


def make_transition(
    assumption_id: str,
    trigger: str,
    seconds: int,
    evidence_ref: str | None = None,
) -> AssumptionTransition:
    from_state, to_state = _STATES[trigger]
    return AssumptionTransition(
        id=uuid4(),
        assumption_id=assumption_id,
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
        evidence_ref=evidence_ref,
        timestamp=START + timedelta(seconds=seconds),
    )


@pytest.fixture
def store() -> AssumptionTransitionHistoryStore:
    s = AssumptionTransitionHistoryStore()
    s.add(make_transition("A1", "challenge", 10))
    s.add(make_transition("A2", "challenge", 5, evidence_ref="T-RS1-001"))
    s.add(make_transition("A1", "verify", 30, evidence_ref="T-RS1-001"))
    s.add(make_transition("A2", "falsify", 20, evidence_ref="T-RS1-002"))
    return s


def test_history_in_append_order(store: AssumptionTransitionHistoryStore) -> None:
    assert [t.trigger.value for t in store.get_history("A1")] == ["challenge", "verify"]
    assert [t.trigger.value for t in store.get_history("A2")] == ["challenge", "falsify"]


def test_unknown_assumption_has_empty_history(store: AssumptionTransitionHistoryStore) -> None:
    assert store.get_history("A99") == []
    assert store.get_latest_transition("A99") is None
    assert "A99" not in store


def test_get_history_returns_a_copy(store: AssumptionTransitionHistoryStore) -> None:
    store.get_history("A1").clear()
    assert len(store.get_history("A1")) == 2


def test_latest_transition_is_last_appended_not_latest_timestamp() -> None:
    s = AssumptionTransitionHistoryStore()
    late = make_transition("A1", "challenge", 100)
    early = make_transition("A1", "verify", 1)
    s.add(late)
    s.add(early)

    assert s.get_latest_transition("A1") == early


def test_add_does_not_deduplicate() -> None:
    s = AssumptionTransitionHistoryStore()
    t = make_transition("A1", "challenge", 0)
    s.add(t)
    s.add(t)

    assert len(s.get_history("A1")) == 2
    assert len(s) == 2


def test_falsified_assumptions(store: AssumptionTransitionHistoryStore) -> None:
    assert store.get_falsified_assumptions() == ["A2"]


def test_transitions_by_evidence_in_key_then_append_order(store: AssumptionTransitionHistoryStore) -> None:
    matches = store.get_transitions_by_evidence("T-RS1-001")

    assert [(t.assumption_id, t.trigger.value) for t in matches] == [("A1", "verify"), ("A2", "challenge")]
    assert store.get_transitions_by_evidence("nothing") == []


def test_all_transitions_are_chronological(store: AssumptionTransitionHistoryStore) -> None:
    timestamps = [t.timestamp for t in store.get_all_transitions()]

    assert timestamps == sorted(timestamps)
    assert len(timestamps) == 4


def test_all_transitions_ties_keep_insertion_order() -> None:
    s = AssumptionTransitionHistoryStore()
    first = make_transition("A2", "challenge", 7)
    second = make_transition("A1", "challenge", 7)
    third = make_transition("A2", "verify", 7)
    s.add(first)
    s.add(second)
    s.add(third)

    # Flattened key order is A2, A2, A1; a stable sort keeps it.
    assert s.get_all_transitions() == [first, third, second]


def test_clear(store: AssumptionTransitionHistoryStore) -> None:
    store.clear()

    assert len(store) == 0
    assert store.get_all_transitions() == []
    assert store.assumption_ids() == []


def test_export_is_json_compatible(store: AssumptionTransitionHistoryStore) -> None:
    exported = store.export()

    assert set(exported) == {"A1", "A2"}
    record = exported["A1"][0]
    assert record["assumptionId"] == "A1"
    assert record["fromState"] == "unchecked"
    assert isinstance(record["id"], str)
    assert record["timestamp"].startswith("2025-12-30T20:00:10")
    json.dumps(exported)


def test_export_clear_import_round_trip(store: AssumptionTransitionHistoryStore) -> None:
    before = {aid: store.get_history(aid) for aid in store.assumption_ids()}

    exported = store.export()
    store.clear()
    store.import_history(exported)

    for aid, history in before.items():
        assert store.get_history(aid) == history


def test_json_round_trip(store: AssumptionTransitionHistoryStore) -> None:
    restored = AssumptionTransitionHistoryStore.from_json(store.to_json())

    assert restored.get_all_transitions() == store.get_all_transitions()


def test_import_replaces_existing_contents(store: AssumptionTransitionHistoryStore) -> None:
    store.import_history({"A5": [make_transition("A5", "challenge", 1)]})

    assert store.assumption_ids() == ["A5"]
    assert store.get_history("A1") == []


def test_import_accepts_snake_case_records() -> None:
    s = AssumptionTransitionHistoryStore()
    s.import_history(
        {
            "A1": [
                {
                    "id": "123e4567-e89b-12d3-a456-426614174000",
                    "assumption_id": "A1",
                    "from_state": "unchecked",
                    "to_state": "verified",
                    "trigger": "verify",
                    "timestamp": "2025-12-30T20:00:00Z",
                }
            ]
        }
    )

    assert s.get_latest_transition("A1") is not None


def test_malformed_record_aborts_whole_import(store: AssumptionTransitionHistoryStore) -> None:
    before = store.export()
    good = make_transition("A3", "challenge", 1).to_wire()
    bad = dict(good, id="not-a-uuid")

    with pytest.raises(HistoryImportError) as exc_info:
        store.import_history({"A3": [good], "A4": [good, bad]})

    assert exc_info.value.assumption_id == "A4"
    assert exc_info.value.index == 1
    assert "A4[1]" in str(exc_info.value)
    assert store.export() == before


@pytest.mark.parametrize(
    ("field", "value"),
    [("timestamp", "not a date"), ("trigger", "kill"), ("toState", "zombie")],
)
def test_any_malformed_field_is_rejected(field: str, value: str) -> None:
    record = make_transition("A1", "challenge", 1).to_wire()
    record[field] = value

    with pytest.raises(HistoryImportError):
        AssumptionTransitionHistoryStore().import_history({"A1": [record]})


def test_import_rejects_non_mapping() -> None:
    with pytest.raises(TypeError):
        AssumptionTransitionHistoryStore().import_history([])  # type: ignore[arg-type]


def test_stores_are_isolated() -> None:
    a = AssumptionTransitionHistoryStore()
    b = AssumptionTransitionHistoryStore()
    a.add(make_transition("A1", "challenge", 0))

    assert len(a) == 1
    assert len(b) == 0


def test_record_without_id_is_rejected() -> None:
    record = make_transition("A1", "challenge", 1).to_wire()
    del record["id"]

    with pytest.raises(HistoryImportError) as exc_info:
        AssumptionTransitionHistoryStore().import_history({"A1": [record]})

    assert exc_info.value.index == 0


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("timestamp", 1767124800),
        ("timestamp", "1767124800"),
        ("timestamp", "2025-12-30"),
        ("timestamp", "2025-12-30T20:00:00"),
        ("id", "123e4567e89b12d3a456426614174000"),
        ("id", "{123e4567-e89b-12d3-a456-426614174000}"),
        ("id", 42),
    ],
)
def test_non_canonical_wire_values_are_rejected(field: str, value: object) -> None:
    record = make_transition("A1", "challenge", 1).to_wire()
    record[field] = value

    with pytest.raises(HistoryImportError):
        AssumptionTransitionHistoryStore().import_history({"A1": [record]})


def test_canonical_wire_values_are_accepted() -> None:
    record = make_transition("A1", "challenge", 1).to_wire()
    record["id"] = "123E4567-E89B-12D3-A456-426614174000"
    record["timestamp"] = "2025-12-30T21:00:00.123+01:00"

    s = AssumptionTransitionHistoryStore()
    s.import_history({"A1": [record]})

    latest = s.get_latest_transition("A1")
    assert latest is not None
    assert latest.timestamp == START + timedelta(milliseconds=123)


@pytest.mark.parametrize("value", [5, None, "abc", {"id": "x"}])
def test_non_list_history_is_rejected(store: AssumptionTransitionHistoryStore, value: object) -> None:
    before = store.export()

    with pytest.raises(HistoryImportError) as exc_info:
        store.import_history({"A1": [], "A2": value})  # type: ignore[dict-item]

    assert exc_info.value.assumption_id == "A2"
    assert exc_info.value.index is None
    assert "expected a list of records" in str(exc_info.value)
    assert store.export() == before
