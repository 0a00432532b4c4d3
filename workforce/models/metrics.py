"""
Metric bundle models produced by the windowed aggregator.

A MetricsBundle is built once per window per call and never mutated. Each
sub-record keeps the ids of the items behind its numbers for drill-down.
Metrics without a signal are explicit ``None``; collections are empty rather
than missing.
"""

from typing import Optional

from pydantic import Field

from .base import FrozenModel
from .events import ComplianceRecord
from .snapshot import AnalysisWindow


class TalentMetrics(FrozenModel):
    """Current workforce composition (as of the snapshot)."""

    active_count: int = Field(default=0, ge=0)
    temporary_count: int = Field(default=0, ge=0)
    temporary_ratio: float = Field(
        default=0.0, ge=0.0, le=1.0, description="Temporary share of active staff"
    )
    incomplete_documentation_ids: list[str] = Field(default_factory=list)
    active_hotel_ids: list[str] = Field(
        default_factory=list, description="Hotels with at least one active employee"
    )
    hired_ids: list[str] = Field(
        default_factory=list, description="Employees created inside the window"
    )
    active_by_city: dict[str, int] = Field(
        default_factory=dict, description="Active employees per hotel city, largest first"
    )
    active_by_role: dict[str, int] = Field(
        default_factory=dict, description="Active employees per role, largest first"
    )
    blacklisted_count: int = Field(default=0, ge=0, description="Blacklisted employees, any state")


class TurnoverMetrics(FrozenModel):
    """Headcount reconstruction and separations over the window."""

    headcount_start: int = Field(default=0, ge=0)
    headcount_end: int = Field(default=0, ge=0)
    average_headcount: float = Field(default=0.0, ge=0.0)
    separations: int = Field(default=0, ge=0)
    turnover_rate: float = Field(default=0.0, ge=0.0, description="Percent")
    separated_ids: list[str] = Field(default_factory=list)


class RequestMetrics(FrozenModel):
    """
    Staffing request throughput and friction.

    Two fulfillment conventions coexist on purpose:
    ``fulfillment_rate`` is the raw ratio (0 when nothing was created) and
    ``resolution_rate`` is the resolution framing (100 when nothing was
    created).
    """

    created_count: int = Field(default=0, ge=0)
    created_ids: list[str] = Field(default_factory=list)

    completed_ids: list[str] = Field(
        default_factory=list,
        description="Created in window, Completada, completed_at in window",
    )
    fulfillment_rate: float = Field(default=0.0, ge=0.0, description="Percent")

    resolved_ids: list[str] = Field(
        default_factory=list,
        description="Full or partial completion with completed_at in window",
    )
    resolution_rate: float = Field(default=100.0, ge=0.0, description="Percent")

    avg_time_to_fill_days: Optional[float] = Field(
        default=None, description="Mean calendar days from creation to completion"
    )

    no_show_ids: list[str] = Field(default_factory=list)
    no_show_rate: float = Field(default=0.0, ge=0.0)
    cancelled_ids: list[str] = Field(default_factory=list)
    cancellation_rate: float = Field(default=0.0, ge=0.0)
    expired_ids: list[str] = Field(default_factory=list)
    overdue_rate: float = Field(default=0.0, ge=0.0)

    open_ids: list[str] = Field(default_factory=list)
    critical_ids: list[str] = Field(
        default_factory=list, description="Open requests older than the critical age"
    )
    past_start_ids: list[str] = Field(
        default_factory=list,
        description="Unresolved requests whose start date has passed",
    )
    specialized_open_ids: list[str] = Field(default_factory=list)
    recent_created_ids: list[str] = Field(
        default_factory=list, description="Created in the recent-activity lookback"
    )
    open_by_hotel: dict[str, int] = Field(default_factory=dict)
    critical_by_hotel: dict[str, int] = Field(default_factory=dict)
    status_distribution: dict[str, int] = Field(default_factory=dict)


class HotelVisitCount(FrozenModel):
    hotel_id: str
    name: str
    visits: int = Field(ge=0)


class VisitMetrics(FrozenModel):
    """Supervision visit coverage of the active hotel cohort."""

    visit_count: int = Field(default=0, ge=0)
    active_hotel_ids: list[str] = Field(default_factory=list)
    visited_hotel_ids: list[str] = Field(default_factory=list)
    unvisited_hotel_ids: list[str] = Field(default_factory=list)
    coverage_pct: float = Field(default=100.0, ge=0.0, le=100.0)
    visits_by_hotel: dict[str, int] = Field(default_factory=dict)
    visits_by_day: dict[str, int] = Field(
        default_factory=dict, description="ISO date -> visits, ascending"
    )
    visits_by_city: dict[str, int] = Field(default_factory=dict)
    hotels_by_city: dict[str, int] = Field(
        default_factory=dict, description="Active hotel cohort per city"
    )
    ranking: list[HotelVisitCount] = Field(default_factory=list)


class EntityCompliance(FrozenModel):
    """
    Compliance history and score of one Workrecord employee.

    ``history`` holds one record per tracked week, with synthetic ``no_data``
    records for weeks nothing was stored for.
    """

    entity_id: str
    hotel_id: str
    history: list[ComplianceRecord] = Field(default_factory=list)
    first_tracked_week: Optional[tuple[int, int]] = Field(
        default=None, description="(year, week) of the first stored record"
    )
    score: Optional[float] = Field(
        default=None, ge=0.0, le=100.0, description="None without scorable weeks"
    )


class ComplianceMetrics(FrozenModel):
    """Workrecord discipline across the compliance cohort."""

    tracked_weeks: list[tuple[int, int]] = Field(default_factory=list)
    entities: list[EntityCompliance] = Field(default_factory=list)
    average_score: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    scored_count: int = Field(default=0, ge=0)
    hotel_averages: dict[str, float] = Field(default_factory=dict)
    lowest_hotel_id: Optional[str] = None
    non_compliance_by_hotel: dict[str, int] = Field(default_factory=dict)


class ApplicationMetrics(FrozenModel):
    """Hiring intake activity."""

    created_count: int = Field(default=0, ge=0)
    created_ids: list[str] = Field(default_factory=list)
    recent_ids: list[str] = Field(default_factory=list)
    pending_ids: list[str] = Field(default_factory=list)
    by_hotel: dict[str, int] = Field(default_factory=dict)
    roles: list[str] = Field(
        default_factory=list, description="Role of each application in the window"
    )


class MetricsBundle(FrozenModel):
    """All metrics for one analysis window."""

    window: AnalysisWindow
    talent: TalentMetrics = Field(default_factory=TalentMetrics)
    turnover: TurnoverMetrics = Field(default_factory=TurnoverMetrics)
    requests: RequestMetrics = Field(default_factory=RequestMetrics)
    visits: VisitMetrics = Field(default_factory=VisitMetrics)
    compliance: ComplianceMetrics = Field(default_factory=ComplianceMetrics)
    applications: ApplicationMetrics = Field(default_factory=ApplicationMetrics)
