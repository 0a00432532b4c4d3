"""
Weekly Workrecord compliance scoring.

Each Workrecord employee receives one compliance outcome per week. An
employee's score is the mean of the per-week scores over scorable weeks:
tracked weeks at or after the employee's first stored record, excluding
``no_aplica`` and the synthetic ``no_data`` placeholder. Without scorable
weeks the score is None ("no signal yet"), which is distinct from 0.

Two week-score tables are in use and disagree on ``modificacion_menor``:
the adoption score (85) feeds the account health score and hotel
classification, the weekly tracker average (75) feeds the per-week tracker.
Both are kept until the intended value is confirmed with the payroll team.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from typing import Optional

import structlog

from workforce.models.entities import Employee
from workforce.models.enums import ComplianceStatus, EmployeeType, PayrollType
from workforce.models.events import ComplianceRecord
from workforce.models.metrics import ComplianceMetrics, EntityCompliance

logger = structlog.get_logger()


ADOPTION_WEEK_SCORES: dict[ComplianceStatus, int] = {
    ComplianceStatus.COMPLIED: 100,
    ComplianceStatus.MINOR_CHANGE: 85,
    ComplianceStatus.PARTIAL_BREACH: 25,
    ComplianceStatus.TOTAL_BREACH: 0,
}

TRACKER_WEEK_SCORES: dict[ComplianceStatus, int] = {
    ComplianceStatus.COMPLIED: 100,
    ComplianceStatus.MINOR_CHANGE: 75,
    ComplianceStatus.PARTIAL_BREACH: 25,
    ComplianceStatus.TOTAL_BREACH: 0,
}


def is_compliance_member(employee: Employee) -> bool:
    """Active, permanent Workrecord employees submit weekly records."""
    return (
        employee.is_active
        and employee.payroll_type == PayrollType.WORKRECORD
        and employee.employee_type == EmployeeType.PERMANENT
    )


def fill_weeks(
    entity_id: str,
    records: Iterable[ComplianceRecord],
    tracked_weeks: Sequence[tuple[int, int]],
) -> list[ComplianceRecord]:
    """
    One record per tracked week, synthesizing ``no_data`` for gaps.

    Args:
        entity_id: Employee the history belongs to
        records: Stored records of that employee
        tracked_weeks: (year, week) pairs to cover, oldest first

    Returns:
        Records aligned with tracked_weeks
    """
    by_week = {r.week_key: r for r in records}
    filled = []
    for year, week in tracked_weeks:
        existing = by_week.get((year, week))
        filled.append(
            existing
            or ComplianceRecord(
                entity_id=entity_id,
                week_of_year=week,
                year=year,
                status=ComplianceStatus.NO_DATA,
            )
        )
    return filled


def score_weeks(
    history: Iterable[ComplianceRecord],
    first_tracked_week: Optional[tuple[int, int]],
    week_scores: dict[ComplianceStatus, int] = ADOPTION_WEEK_SCORES,
) -> Optional[float]:
    """
    Mean per-week score over scorable weeks.

    Returns:
        Unrounded score in [0, 100], or None when nothing is scorable
    """
    if first_tracked_week is None:
        return None

    scorable = [
        r for r in history if r.week_key >= first_tracked_week and r.status.is_scorable
    ]
    if not scorable:
        return None

    total = sum(week_scores.get(r.status, 0) for r in scorable)
    return total / len(scorable)


def score_entity(
    employee: Employee,
    records: Sequence[ComplianceRecord],
    tracked_weeks: Sequence[tuple[int, int]],
    week_scores: dict[ComplianceStatus, int] = ADOPTION_WEEK_SCORES,
) -> EntityCompliance:
    """Build the filled history and score of one employee."""
    first = min((r.week_key for r in records), default=None)
    history = fill_weeks(employee.id, records, tracked_weeks)
    return EntityCompliance(
        entity_id=employee.id,
        hotel_id=employee.hotel_id,
        history=history,
        first_tracked_week=first,
        score=score_weeks(history, first, week_scores),
    )


def weekly_average(
    entities: Iterable[EntityCompliance],
    year: int,
    week: int,
    week_scores: dict[ComplianceStatus, int] = TRACKER_WEEK_SCORES,
) -> Optional[float]:
    """
    Average score of one week across employees, as shown by the weekly tracker.

    Every record for that week counts, with statuses outside the table
    (no_aplica, no_data) scoring 0. None when no employee has the week.
    """
    scores = [
        week_scores.get(r.status, 0)
        for entity in entities
        for r in entity.history
        if r.week_key == (year, week)
    ]
    if not scores:
        return None
    return sum(scores) / len(scores)


def compute_compliance(
    employees: Iterable[Employee],
    records: Iterable[ComplianceRecord],
    tracked_weeks: Sequence[tuple[int, int]],
) -> ComplianceMetrics:
    """
    Compliance metrics for the Workrecord cohort.

    Args:
        employees: All employees; the cohort filter is applied here
        records: All stored compliance records
        tracked_weeks: (year, week) pairs of the analysis window

    Returns:
        ComplianceMetrics with per-employee scores and per-hotel rollups
    """
    cohort = [e for e in employees if is_compliance_member(e)]
    cohort_ids = {e.id for e in cohort}

    records_by_entity: dict[str, list[ComplianceRecord]] = defaultdict(list)
    for record in records:
        if record.entity_id in cohort_ids:
            records_by_entity[record.entity_id].append(record)

    entities = [
        score_entity(emp, records_by_entity.get(emp.id, []), tracked_weeks)
        for emp in cohort
    ]

    scored = [e for e in entities if e.score is not None]
    average = sum(e.score for e in scored) / len(scored) if scored else None

    hotel_scores: dict[str, list[float]] = defaultdict(list)
    for entity in scored:
        hotel_scores[entity.hotel_id].append(entity.score)
    hotel_averages = {
        hotel_id: sum(values) / len(values) for hotel_id, values in hotel_scores.items()
    }
    lowest_hotel_id = (
        min(hotel_averages, key=hotel_averages.get) if hotel_averages else None
    )

    hotel_of = {e.id: e.hotel_id for e in cohort}
    non_compliance: dict[str, int] = defaultdict(int)
    for entity_id, entity_records in records_by_entity.items():
        for record in entity_records:
            if record.status != ComplianceStatus.COMPLIED:
                non_compliance[hotel_of[entity_id]] += 1
    non_compliance_ranked = dict(
        sorted(non_compliance.items(), key=lambda item: item[1], reverse=True)
    )

    logger.debug(
        "compliance_computed",
        cohort_size=len(cohort),
        scored=len(scored),
        average_score=average,
        tracked_weeks=len(tracked_weeks),
    )

    return ComplianceMetrics(
        tracked_weeks=list(tracked_weeks),
        entities=entities,
        average_score=average,
        scored_count=len(scored),
        hotel_averages=hotel_averages,
        lowest_hotel_id=lowest_hotel_id,
        non_compliance_by_hotel=non_compliance_ranked,
    )
