from datetime import datetime, timedelta, timezone

import pytest

from brenner_engine.config import get_settings
from brenner_engine.schemas import Assumption, AssumptionType, create_assumption

START = datetime(2025, 12, 30, 20, 0, tzinfo=timezone.utc)


class StepClock:
    """Deterministic clock that advances by a fixed step on every call."""

    def __init__(self, start: datetime = START, step: timedelta = timedelta(seconds=1)) -> None:
        self._current = start
        self._step = step
        self.calls = 0

    def __call__(self) -> datetime:
        value = self._current
        self._current += self._step
        self.calls += 1
        return value


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def assumption(clock: StepClock) -> Assumption:
    return create_assumption(
        id="A-TEST-001",
        statement="Test assumption for lifecycle validation tests.",
        type=AssumptionType.BACKGROUND,
        session_id="TEST",
        load={
            "affected_hypotheses": ["H-TEST-001", "H-TEST-002"],
            "affected_tests": ["T-TEST-001"],
            "description": "Test load description for validation",
        },
        clock=clock,
    )
