"""
Property-based tests using Hypothesis for the workforce analytics engine.

These tests verify invariants and bounds across the engine components:
reconstruction purity and monotonicity, zero-denominator guards, score
bounds and the critical-hotel override.
"""

from datetime import datetime, timedelta, timezone

import hypothesis.strategies as st
from hypothesis import given, settings

from workforce.engine.aggregator import compute_turnover
from workforce.engine.compliance import score_weeks
from workforce.engine.scoring import (
    CLAMPED_TOTAL,
    RISK_BELOW,
    combine,
    discipline_score,
    response_score,
    supervision_score,
    talent_score,
)
from workforce.engine.timeline import HistoryIndex, was_active_at
from workforce.engine.trends import monthly_talent_series
from workforce.models.enums import ComplianceStatus, HealthStatus, MemberStatus
from workforce.models.events import ComplianceRecord
from workforce.models.report import MemberHealth
from workforce.models.snapshot import AnalysisWindow
from tests.conftest import make_employee, make_event, make_snapshot

BASE = datetime(2025, 1, 1, tzinfo=timezone.utc)

offsets = st.integers(min_value=0, max_value=400)
subscores = st.floats(min_value=0.0, max_value=25.0, allow_nan=False, allow_infinity=False)


# =============================================================================
# Reconstruction
# =============================================================================


@given(
    event_days=st.lists(st.tuples(offsets, st.booleans()), max_size=8),
    target_day=offsets,
)
@settings(max_examples=100)
def test_prop_was_active_at_idempotent(event_days, target_day):
    """Identical arguments always give identical answers."""
    history = [
        make_event("emp-1", BASE + timedelta(days=day), new_state=state)
        for day, state in event_days
    ]
    target = BASE + timedelta(days=target_day)
    first = was_active_at("emp-1", target, history, BASE)
    assert was_active_at("emp-1", target, history, BASE) == first


@given(separation_day=st.integers(min_value=1, max_value=400), probe_day=offsets)
@settings(max_examples=100)
def test_prop_single_separation_monotone(separation_day, probe_day):
    """With one deactivation at t: active strictly before t, inactive from t on."""
    t = BASE + timedelta(days=separation_day)
    history = [make_event("emp-1", t, new_state=False)]
    probe = BASE + timedelta(days=probe_day)
    assert was_active_at("emp-1", probe, history, BASE) == (probe < t)


@given(
    event_days=st.lists(st.tuples(offsets, st.booleans()), max_size=8),
    target_day=offsets,
)
@settings(max_examples=100)
def test_prop_history_index_agrees_with_scan(event_days, target_day):
    history = [
        make_event("emp-1", BASE + timedelta(days=day), new_state=state)
        for day, state in event_days
    ]
    target = BASE + timedelta(days=target_day)
    index = HistoryIndex(history)
    assert index.was_active_at("emp-1", target, BASE) == was_active_at(
        "emp-1", target, history, BASE
    )


# =============================================================================
# Windows and turnover
# =============================================================================


@given(
    start_day=offsets,
    length_hours=st.integers(min_value=0, max_value=24 * 400),
)
@settings(max_examples=100)
def test_prop_previous_window_same_whole_days(start_day, length_hours):
    start = BASE + timedelta(days=start_day)
    window = AnalysisWindow(start=start, end=start + timedelta(hours=length_hours))
    previous = window.previous()
    assert previous.duration_days == window.duration_days
    assert previous.end < window.start


@given(
    window_start=offsets,
    window_days=st.integers(min_value=0, max_value=90),
)
@settings(max_examples=50)
def test_prop_turnover_zero_headcount_is_zero(window_start, window_days):
    start = BASE + timedelta(days=window_start)
    window = AnalysisWindow(start=start, end=start + timedelta(days=window_days))
    # Employee created after the window: never counted at either end
    late = make_employee(created_at=window.end + timedelta(days=1))
    result = compute_turnover([late], HistoryIndex([]), window)
    assert result.average_headcount == 0
    assert result.turnover_rate == 0.0


@given(
    size=st.integers(min_value=1, max_value=20),
    leave_days=st.lists(st.integers(min_value=0, max_value=60), max_size=20),
)
@settings(max_examples=50)
def test_prop_turnover_rate_non_negative(size, leave_days):
    employees = [make_employee(created_at=BASE) for _ in range(size)]
    history = [
        make_event(employees[i % size].id, BASE + timedelta(days=day), new_state=False)
        for i, day in enumerate(leave_days)
    ]
    window = AnalysisWindow(start=BASE + timedelta(days=10), end=BASE + timedelta(days=40))
    result = compute_turnover(employees, HistoryIndex(history), window)
    assert result.turnover_rate >= 0.0
    assert result.separations <= size


@given(
    size=st.integers(min_value=1, max_value=10),
    leave_days=st.lists(st.integers(min_value=0, max_value=89), max_size=30),
)
@settings(max_examples=50)
def test_prop_monthly_separations_bounded_by_staff(size, leave_days):
    employees = [make_employee(created_at=BASE) for _ in range(size)]
    history = [
        make_event(employees[i % size].id, BASE + timedelta(days=day), new_state=False)
        for i, day in enumerate(leave_days)
    ]
    snapshot = make_snapshot(employees=employees, status_history=history)
    series = monthly_talent_series(snapshot, BASE, BASE + timedelta(days=89))
    for point in series.points:
        assert point.separations_permanent + point.separations_temporary <= size


# =============================================================================
# Compliance
# =============================================================================


@given(
    statuses=st.lists(st.sampled_from(list(ComplianceStatus)), max_size=10),
)
@settings(max_examples=100)
def test_prop_compliance_score_none_or_bounded(statuses):
    history = [
        ComplianceRecord(entity_id="emp-1", week_of_year=week + 1, year=2025, status=status)
        for week, status in enumerate(statuses)
    ]
    score = score_weeks(history, (2025, 1) if history else None)
    has_scorable = any(s.is_scorable for s in statuses)
    if has_scorable:
        assert score is not None
        assert 0.0 <= score <= 100.0
    else:
        assert score is None


# =============================================================================
# Scoring
# =============================================================================


@given(
    temp_ratio=st.floats(min_value=0.0, max_value=1.0, allow_nan=False),
    resolution=st.floats(min_value=0.0, max_value=5.0, allow_nan=False),
    coverage=st.floats(min_value=0.0, max_value=1.0, allow_nan=False),
    compliance=st.one_of(st.none(), st.floats(min_value=0.0, max_value=100.0, allow_nan=False)),
)
@settings(max_examples=200)
def test_prop_subscores_within_cap(temp_ratio, resolution, coverage, compliance):
    for value in (
        talent_score(temp_ratio),
        response_score(resolution),
        supervision_score(coverage),
        discipline_score(compliance),
    ):
        assert 0.0 <= value <= 25.0


@given(talent=subscores, response=subscores, supervision=subscores, discipline=subscores)
@settings(max_examples=200)
def test_prop_critical_member_never_healthy(talent, response, supervision, discipline):
    """A critical hotel always keeps the account below healthy."""
    critical = MemberHealth(id="h", name="H", score=5, status=MemberStatus.CRITICAL)
    result = combine(talent, response, supervision, discipline, members=[critical])
    assert result.status != HealthStatus.HEALTHY
    assert result.value < RISK_BELOW


@given(talent=subscores, response=subscores, supervision=subscores, discipline=subscores)
@settings(max_examples=200)
def test_prop_total_bounded(talent, response, supervision, discipline):
    result = combine(talent, response, supervision, discipline)
    assert 0 <= result.value <= 100
    assert not result.clamped


def test_prop_clamp_example_raw_85():
    critical = MemberHealth(id="h", name="H", score=9, status=MemberStatus.CRITICAL)
    result = combine(25.0, 25.0, 20.0, 15.0, members=[critical])
    assert result.value == CLAMPED_TOTAL
    assert result.status == HealthStatus.RISK
