"""
Presentation-facing models: scores, insights, hotel classifications,
report sections and period comparisons.

Everything here is generated fresh per call and never persisted.
"""

from typing import Optional, Union

from pydantic import Field

from .base import FrozenModel
from .enums import HealthStatus, InsightType, MemberStatus, MetricStatus
from .metrics import MetricsBundle
from .snapshot import AnalysisWindow


class Insight(FrozenModel):
    """A typed, human-readable finding."""

    text: str
    type: InsightType


class Score(FrozenModel):
    """
    Composite account health score.

    Attributes:
        value: Integer total 0-100
        status: healthy / risk / critical
        message: One-line explanation
        talent: Talent sub-score (0-25)
        response: Response sub-score (0-25)
        supervision: Supervision sub-score (0-25)
        discipline: Discipline sub-score (0-25)
        clamped: True when the critical-hotel override capped the total
    """

    value: int = Field(ge=0, le=100)
    status: HealthStatus
    message: str
    talent: float = Field(default=0.0, ge=0.0, le=25.0)
    response: float = Field(default=0.0, ge=0.0, le=25.0)
    supervision: float = Field(default=0.0, ge=0.0, le=25.0)
    discipline: float = Field(default=0.0, ge=0.0, le=25.0)
    clamped: bool = False


class MemberHealth(FrozenModel):
    """Issue-point classification of one hotel. Higher score is worse."""

    id: str
    name: str
    score: int = Field(ge=0)
    issues: list[str] = Field(default_factory=list)
    status: MemberStatus


class SectionMetric(FrozenModel):
    label: str
    value: Union[int, float, str]
    status: MetricStatus = MetricStatus.NEUTRAL


class ReportSection(FrozenModel):
    """One pillar of the corporate report."""

    title: str
    score: Optional[float] = None
    metrics: list[SectionMetric] = Field(default_factory=list)
    insights: list[Insight] = Field(default_factory=list)


class CorporateReport(FrozenModel):
    """Account health, per-pillar sections and per-hotel classification."""

    window: AnalysisWindow
    account_health: Score
    talent: ReportSection
    demand: ReportSection
    supply: ReportSection
    visits: ReportSection
    workrecord: ReportSection
    hotel_health: list[MemberHealth] = Field(default_factory=list)
    metrics: MetricsBundle


class MetricDelta(FrozenModel):
    """Change of one key metric between two windows."""

    metric: str
    current: Optional[float] = None
    previous: Optional[float] = None
    change: Optional[float] = None
    change_pct: Optional[float] = None
    improved: Optional[bool] = None


class PeriodComparison(FrozenModel):
    """Current window vs. the adjacent previous window of equal length."""

    current_window: AnalysisWindow
    previous_window: AnalysisWindow
    current: MetricsBundle
    previous: MetricsBundle
    deltas: list[MetricDelta] = Field(default_factory=list)
    summary: str = ""
