"""
Windowed Metric Aggregator.

Computes every derived metric for one analysis window from a snapshot:
headcount and turnover (via point-in-time reconstruction), staffing request
throughput and friction, supervision visit coverage, Workrecord compliance,
workforce composition and hiring intake.

Window comparisons are inclusive on both ends. The window end is the "as of"
instant for age-based metrics (critical requests, recent activity), so the
bundle depends only on the snapshot and the window.

Zero-denominator policy (never NaN, never raises):
- turnover_rate: 0 when average headcount is 0
- fulfillment_rate (raw ratio): 0 when nothing was created
- resolution_rate (resolution framing): 100 when nothing was created
- no_show / cancellation / overdue rates: 0 when nothing was created
- coverage_pct: 100 when the active hotel cohort is empty
- avg_time_to_fill_days, compliance scores: None without data
"""

from collections import Counter
from collections.abc import Sequence
from datetime import timedelta
from typing import Optional

import structlog

from workforce.engine.compliance import compute_compliance
from workforce.engine.timeline import (
    HistoryIndex,
    calendar_days_between,
    count_active_at,
    iso_weeks_between,
    utc_date,
)
from workforce.models.entities import (
    Application,
    AttendanceRecord,
    Employee,
    Hotel,
    StaffingRequest,
)
from workforce.models.enums import ApplicationStatus, RequestStatus
from workforce.models.metrics import (
    ApplicationMetrics,
    HotelVisitCount,
    MetricsBundle,
    RequestMetrics,
    TalentMetrics,
    TurnoverMetrics,
    VisitMetrics,
)
from workforce.models.snapshot import AnalysisWindow, WorkforceSnapshot

logger = structlog.get_logger()

# Roles every hotel staffs routinely; anything else is a specialized request
STANDARD_ROLES = frozenset({"Housekeeper", "Laundry Attendant", "Houseman", "Room Attendant"})

# Buckets for employees or visits whose hotel has no city, and employees without a role
UNKNOWN_CITY = "Unknown"
UNASSIGNED_ROLE = "Unassigned"

# Statuses that stop a request from counting as past its start date
_PAST_START_EXEMPT = frozenset(
    {
        RequestStatus.COMPLETED,
        RequestStatus.CANCELLED_BY_HOTEL,
        RequestStatus.CANDIDATE_NO_SHOW,
    }
)


def safe_pct(numerator: float, denominator: float, default: float = 0.0) -> float:
    """numerator / denominator * 100, or ``default`` when denominator is 0."""
    if denominator == 0:
        return default
    return numerator / denominator * 100


def active_hotel_ids(employees: Sequence[Employee], hotels: Sequence[Hotel]) -> list[str]:
    """Hotels with at least one currently active employee, in hotel order."""
    staffed = {e.hotel_id for e in employees if e.is_active}
    return [h.id for h in hotels if h.id in staffed]


def compute_turnover(
    employees: Sequence[Employee],
    index: HistoryIndex,
    window: AnalysisWindow,
) -> TurnoverMetrics:
    """
    Turnover of a cohort over the window.

    average_headcount = (active at start + active at end) / 2, each member
    reconstructed independently at both instants. separations counts
    distinct members with at least one active -> inactive event in the window.
    """
    headcount_start = count_active_at(employees, window.start, index)
    headcount_end = count_active_at(employees, window.end, index)
    average = (headcount_start + headcount_end) / 2

    separated_ids = [
        emp.id
        for emp in employees
        if index.separations_between(emp.id, window.start, window.end)
    ]
    separations = len(separated_ids)

    return TurnoverMetrics(
        headcount_start=headcount_start,
        headcount_end=headcount_end,
        average_headcount=average,
        separations=separations,
        turnover_rate=safe_pct(separations, average),
        separated_ids=separated_ids,
    )


def compute_request_metrics(
    requests: Sequence[StaffingRequest],
    window: AnalysisWindow,
    critical_age: timedelta = timedelta(hours=24),
    recent_days: int = 7,
) -> RequestMetrics:
    """
    Staffing request metrics for the window.

    Args:
        requests: All staffing requests, archived included
        window: Analysis window; its end is the as-of instant
        critical_age: Age after which an open request is critical
        recent_days: Lookback for the recent-activity count

    Returns:
        RequestMetrics
    """
    as_of = window.end
    created = [r for r in requests if window.contains(r.created_at)]
    created_count = len(created)

    def completed_in_window(r: StaffingRequest) -> bool:
        return r.completed_at is not None and window.contains(r.completed_at)

    # Raw ratio: created in window and fully completed in window
    completed = [
        r for r in created if r.status == RequestStatus.COMPLETED and completed_in_window(r)
    ]
    # Resolution framing: any full/partial completion that landed in the window
    resolved = [r for r in requests if r.status.is_completed and completed_in_window(r)]

    fill_days = [
        calendar_days_between(r.created_at, r.completed_at)
        for r in created
        if r.status.is_completed and r.completed_at is not None
    ]
    avg_time_to_fill: Optional[float] = (
        sum(fill_days) / len(fill_days) if fill_days else None
    )

    no_shows = [r for r in created if r.status == RequestStatus.CANDIDATE_NO_SHOW]
    cancelled = [r for r in created if r.status == RequestStatus.CANCELLED_BY_HOTEL]
    expired = [r for r in created if r.status == RequestStatus.EXPIRED]

    live = [r for r in requests if not r.is_archived]
    open_requests = [r for r in live if r.status.is_open]
    critical = [r for r in open_requests if as_of - r.created_at > critical_age]
    past_start = [
        r
        for r in live
        if r.status not in _PAST_START_EXEMPT
        and r.start_date is not None
        and r.start_date < utc_date(as_of)
    ]
    specialized = [r for r in open_requests if r.role not in STANDARD_ROLES]

    recent_cutoff = as_of - timedelta(days=recent_days)
    recent = [r for r in requests if recent_cutoff <= r.created_at <= as_of]

    open_by_hotel = Counter(r.hotel_id for r in open_requests)
    critical_by_hotel = Counter(r.hotel_id for r in critical)
    status_distribution = Counter(r.status.value for r in created)

    return RequestMetrics(
        created_count=created_count,
        created_ids=[r.id for r in created],
        completed_ids=[r.id for r in completed],
        fulfillment_rate=safe_pct(len(completed), created_count, default=0.0),
        resolved_ids=[r.id for r in resolved],
        resolution_rate=safe_pct(len(resolved), created_count, default=100.0),
        avg_time_to_fill_days=avg_time_to_fill,
        no_show_ids=[r.id for r in no_shows],
        no_show_rate=safe_pct(len(no_shows), created_count),
        cancelled_ids=[r.id for r in cancelled],
        cancellation_rate=safe_pct(len(cancelled), created_count),
        expired_ids=[r.id for r in expired],
        overdue_rate=safe_pct(len(expired), created_count),
        open_ids=[r.id for r in open_requests],
        critical_ids=[r.id for r in critical],
        past_start_ids=[r.id for r in past_start],
        specialized_open_ids=[r.id for r in specialized],
        recent_created_ids=[r.id for r in recent],
        open_by_hotel=dict(open_by_hotel.most_common()),
        critical_by_hotel=dict(critical_by_hotel),
        status_distribution=dict(status_distribution),
    )


def city_of(hotels: Sequence[Hotel]) -> dict[str, str]:
    """Hotel id -> city, with blank cities bucketed as UNKNOWN_CITY."""
    return {h.id: h.city or UNKNOWN_CITY for h in hotels}


def compute_visit_metrics(
    attendance: Sequence[AttendanceRecord],
    hotels: Sequence[Hotel],
    active_hotels: Sequence[str],
    window: AnalysisWindow,
) -> VisitMetrics:
    """
    Supervision coverage of the active hotel cohort.

    The cohort is filtered to active hotels before coverage is computed, so
    visits to hotels without active staff never raise coverage.
    The ranking spans the same cohort: unvisited active hotels appear with
    zero visits, hotels without active staff are left out, and ties keep
    snapshot order.
    """
    visits = [v for v in attendance if window.contains(v.timestamp)]
    visits_by_hotel = Counter(v.hotel_id for v in visits)

    active_set = set(active_hotels)
    visited = [h for h in active_hotels if visits_by_hotel.get(h, 0) > 0]
    unvisited = [h for h in active_hotels if visits_by_hotel.get(h, 0) == 0]

    by_day = Counter(utc_date(v.timestamp).isoformat() for v in visits)
    cities = city_of(hotels)
    by_city = Counter(cities.get(v.hotel_id, UNKNOWN_CITY) for v in visits)
    hotels_by_city = Counter(cities.get(h, UNKNOWN_CITY) for h in active_hotels)

    ranking = sorted(
        (
            HotelVisitCount(hotel_id=h.id, name=h.name, visits=visits_by_hotel.get(h.id, 0))
            for h in hotels
            if h.id in active_set
        ),
        key=lambda entry: entry.visits,
        reverse=True,
    )

    return VisitMetrics(
        visit_count=len(visits),
        active_hotel_ids=list(active_hotels),
        visited_hotel_ids=visited,
        unvisited_hotel_ids=unvisited,
        coverage_pct=safe_pct(len(visited), len(active_hotels), default=100.0),
        visits_by_hotel=dict(visits_by_hotel),
        visits_by_day=dict(sorted(by_day.items())),
        visits_by_city=dict(by_city.most_common()),
        hotels_by_city=dict(hotels_by_city.most_common()),
        ranking=ranking,
    )


def compute_talent_metrics(
    employees: Sequence[Employee],
    active_hotels: Sequence[str],
    window: AnalysisWindow,
    hotels: Sequence[Hotel] = (),
) -> TalentMetrics:
    """
    Current workforce composition plus hires inside the window.

    Active staff are broken down by their hotel's city and by role; the
    blacklist count covers every employee regardless of state.
    """
    active = [e for e in employees if e.is_active]
    cities = city_of(hotels)
    by_city = Counter(cities.get(e.hotel_id, UNKNOWN_CITY) for e in active)
    by_role = Counter(e.role or UNASSIGNED_ROLE for e in active)
    temporary = [e for e in active if e.is_temporary]
    ratio = len(temporary) / len(active) if active else 0.0

    return TalentMetrics(
        active_count=len(active),
        temporary_count=len(temporary),
        temporary_ratio=ratio,
        incomplete_documentation_ids=[e.id for e in active if not e.documentation_complete],
        active_hotel_ids=list(active_hotels),
        hired_ids=[e.id for e in employees if window.contains(e.created_at)],
        active_by_city=dict(by_city.most_common()),
        active_by_role=dict(by_role.most_common()),
        blacklisted_count=sum(1 for e in employees if e.is_blacklisted),
    )


def compute_application_metrics(
    applications: Sequence[Application],
    window: AnalysisWindow,
    recent_days: int = 7,
) -> ApplicationMetrics:
    """Hiring intake in the window and the recent-activity lookback."""
    created = [a for a in applications if window.contains(a.created_at)]
    recent_cutoff = window.end - timedelta(days=recent_days)
    recent = [a for a in applications if recent_cutoff <= a.created_at <= window.end]
    pending = [a for a in applications if a.status == ApplicationStatus.PENDING]

    return ApplicationMetrics(
        created_count=len(created),
        created_ids=[a.id for a in created],
        recent_ids=[a.id for a in recent],
        pending_ids=[a.id for a in pending],
        by_hotel=dict(Counter(a.hotel_id for a in created).most_common()),
        roles=[a.role for a in created],
    )


class WindowAggregator:
    """
    Builds a MetricsBundle for one analysis window.

    Stateless apart from its thresholds: calls share nothing, so bundles for
    different windows (or different snapshots) can be computed in parallel.

    Attributes:
        critical_request_hours: Age after which an open request is critical
        recent_activity_days: Lookback for recent-activity counts

    Example:
        >>> aggregator = WindowAggregator()
        >>> bundle = aggregator.aggregate(snapshot, AnalysisWindow.trailing(now, 30))
        >>> print(f"Turnover: {bundle.turnover.turnover_rate:.1f}%")
    """

    def __init__(self, critical_request_hours: int = 24, recent_activity_days: int = 7):
        self.critical_request_hours = critical_request_hours
        self.recent_activity_days = recent_activity_days
        self.logger = structlog.get_logger()

    def aggregate(self, snapshot: WorkforceSnapshot, window: AnalysisWindow) -> MetricsBundle:
        """
        Compute every metric for ``window`` from ``snapshot``.

        Args:
            snapshot: Read-only input collections
            window: Inclusive analysis window

        Returns:
            Immutable MetricsBundle
        """
        index = HistoryIndex(snapshot.status_history)
        active_hotels = active_hotel_ids(snapshot.employees, snapshot.hotels)

        bundle = MetricsBundle(
            window=window,
            talent=compute_talent_metrics(
                snapshot.employees, active_hotels, window, hotels=snapshot.hotels
            ),
            turnover=compute_turnover(snapshot.employees, index, window),
            requests=compute_request_metrics(
                snapshot.requests,
                window,
                critical_age=timedelta(hours=self.critical_request_hours),
                recent_days=self.recent_activity_days,
            ),
            visits=compute_visit_metrics(
                snapshot.attendance, snapshot.hotels, active_hotels, window
            ),
            compliance=compute_compliance(
                snapshot.employees,
                snapshot.compliance_records,
                iso_weeks_between(window.start, window.end),
            ),
            applications=compute_application_metrics(
                snapshot.applications, window, recent_days=self.recent_activity_days
            ),
        )

        self.logger.info(
            "metrics_aggregated",
            window_start=window.start.isoformat(),
            window_end=window.end.isoformat(),
            turnover_rate=round(bundle.turnover.turnover_rate, 2),
            requests_created=bundle.requests.created_count,
            coverage_pct=round(bundle.visits.coverage_pct, 1),
            compliance_avg=bundle.compliance.average_score,
        )

        return bundle
