"""
Historical talent trends.

Monthly hire/separation series split by permanent vs. temporary staff, a
rolling monthly turnover trend, and the narrative insights drawn from them.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Optional

import structlog

from workforce.engine.aggregator import compute_turnover
from workforce.engine.timeline import HistoryIndex, add_months, month_starts
from workforce.models.base import ensure_utc
from workforce.models.entities import Employee
from workforce.models.enums import InsightType
from workforce.models.events import StatusChangeEvent
from workforce.models.report import Insight
from workforce.models.snapshot import AnalysisWindow, WorkforceSnapshot
from workforce.models.trends import MonthlyTalentPoint, MonthlyTurnoverPoint, TalentSeries

logger = structlog.get_logger()

CHURN_NEGATIVE_ABOVE = 10.0
CHURN_WARNING_ABOVE = 5.0


def _month_key(instant: datetime) -> str:
    return f"{instant.year:04d}-{instant.month:02d}"


def monthly_talent_series(
    snapshot: WorkforceSnapshot, start: datetime, end: datetime
) -> TalentSeries:
    """
    Hires and separations per calendar month intersecting [start, end].

    Hires are counted by ``created_at``. Separations count each employee with
    an active -> inactive event in the month once, however many such events
    it has. Each month is the half-open range [first day, next first day).

    Args:
        snapshot: Read-only input collections
        start: First instant of interest
        end: Last instant of interest

    Returns:
        TalentSeries with one point per month, oldest first
    """
    start, end = ensure_utc(start), ensure_utc(end)
    by_id = {e.id: e for e in snapshot.employees}
    separations = [e for e in snapshot.status_history if e.is_separation]

    points = []
    for month_start in month_starts(start, end):
        month_end = add_months(month_start, 1)

        def in_month(instant: datetime) -> bool:
            return month_start <= instant < month_end

        hired = [e for e in snapshot.employees if in_month(e.created_at)]
        left_ids = dict.fromkeys(
            event.entity_id
            for event in separations
            if event.entity_id in by_id and in_month(event.timestamp)
        )
        left = [by_id[entity_id] for entity_id in left_ids]

        points.append(
            MonthlyTalentPoint(
                month=_month_key(month_start),
                hires_permanent=sum(1 for e in hired if not e.is_temporary),
                hires_temporary=sum(1 for e in hired if e.is_temporary),
                separations_permanent=sum(1 for e in left if not e.is_temporary),
                separations_temporary=sum(1 for e in left if e.is_temporary),
            )
        )

    logger.debug("talent_series_computed", months=len(points))
    return TalentSeries(points=points)


def monthly_turnover(
    employees: Sequence[Employee],
    history: Sequence[StatusChangeEvent],
    as_of: datetime,
    months: int = 12,
) -> list[MonthlyTurnoverPoint]:
    """
    Turnover for each of the last ``months`` months, oldest first.

    Each month's window runs from its first day to the same day-of-month as
    ``as_of`` (clamped), so the current month is month-to-date.
    """
    as_of = ensure_utc(as_of)
    index = HistoryIndex(history)
    points = []
    for offset in range(months - 1, -1, -1):
        month_end = add_months(as_of, -offset)
        month_start = month_end.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        turnover = compute_turnover(
            employees, index, AnalysisWindow(start=month_start, end=month_end)
        )
        points.append(
            MonthlyTurnoverPoint(
                month=_month_key(month_start),
                separations=turnover.separations,
                average_headcount=turnover.average_headcount,
                turnover_rate=turnover.turnover_rate,
            )
        )
    return points


def permanent_churn_rate(series: TalentSeries, employees: Sequence[Employee]) -> float:
    """Permanent separations over the series as a percent of active permanent staff."""
    active_permanent = sum(1 for e in employees if e.is_active and not e.is_temporary)
    if active_permanent == 0:
        return 0.0
    return series.separations_permanent / active_permanent * 100


def _peak_separation_month(series: TalentSeries) -> Optional[MonthlyTalentPoint]:
    peak: Optional[MonthlyTalentPoint] = None
    for point in series.points:
        if peak is None or point.separations_permanent > peak.separations_permanent:
            peak = point
    if peak is None or peak.separations_permanent == 0:
        return None
    return peak


def historical_talent_insights(series: TalentSeries, permanent_turnover: float) -> list[Insight]:
    """
    Narrative insights for the historical talent pillar.

    Args:
        series: Monthly hire/separation series
        permanent_turnover: Permanent-staff churn rate in percent

    Returns:
        Insights in fixed order: net change, churn, peak month, temporary
        volume, temporary hiring share (only when anything was hired)
    """
    insights = []

    net_change = series.hires_permanent - series.separations_permanent
    insights.append(
        Insight(
            text=f"Permanent balance: the permanent team had a net change of {net_change} employees in the period.",
            type=InsightType.POSITIVE if net_change >= 0 else InsightType.NEGATIVE,
        )
    )

    if permanent_turnover > CHURN_NEGATIVE_ABOVE:
        churn_type = InsightType.NEGATIVE
    elif permanent_turnover > CHURN_WARNING_ABOVE:
        churn_type = InsightType.WARNING
    else:
        churn_type = InsightType.POSITIVE
    insights.append(
        Insight(
            text=f"Permanent turnover: {permanent_turnover:.1f}% of key staff left in the period.",
            type=churn_type,
        )
    )

    peak = _peak_separation_month(series)
    if peak is not None:
        insights.append(
            Insight(
                text=f"Peak separations: {peak.month} saw the most permanent departures ({peak.separations_permanent}).",
                type=InsightType.WARNING,
            )
        )
    else:
        insights.append(
            Insight(
                text="Peak separations: no permanent staff left in the period.",
                type=InsightType.POSITIVE,
            )
        )

    insights.append(
        Insight(
            text=(
                f"Temporary volume: {series.hires_temporary} temporary hires and "
                f"{series.separations_temporary} temporary separations were handled."
            ),
            type=InsightType.NEUTRAL,
        )
    )

    total_hires = series.hires_permanent + series.hires_temporary
    if total_hires > 0:
        share = series.hires_temporary / total_hires * 100
        insights.append(
            Insight(
                text=f"Hiring mix: {share:.0f}% of new hires were for temporary positions.",
                type=InsightType.NEUTRAL,
            )
        )

    return insights
