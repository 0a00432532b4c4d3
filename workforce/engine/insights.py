"""
Insight Rule Engine: hotel classification and report section insights.

Hotel classification accumulates issue points from independent, additive
rules and maps the total to healthy / warning / critical.

Section insights come from fixed, ordered rule lists. Every matching rule
fires (no early exit). The only priority insertion is the demand section's
resolution-rate insight, which always goes first.
"""

from collections import Counter
from collections.abc import Sequence
from typing import Optional

import structlog

from workforce.engine.scoring import round_half_up
from workforce.models.entities import Hotel
from workforce.models.enums import InsightType, MemberStatus, MetricStatus
from workforce.models.metrics import MetricsBundle
from workforce.models.report import Insight, MemberHealth, ReportSection, SectionMetric

logger = structlog.get_logger()

# Hotel issue points
CRITICAL_REQUEST_POINTS = 3
OPEN_REQUEST_POINTS = 1
MISSED_VISIT_POINTS = 2
LOW_COMPLIANCE_POINTS = 3
LOW_COMPLIANCE_BELOW = 60.0

MEMBER_CRITICAL_AT = 5
MEMBER_WARNING_AT = 2

OPTIMAL_MARKER = "Optimal operation"
MISSED_VISIT_ISSUE = "No visit in the analysis window"

# Section thresholds
TEMP_RATIO_WARNING = 0.3
TEMP_RATIO_METRIC_WARNING = 0.4
CANCELLATION_WARNING = 0.15
SPECIALIZED_SHARE = 0.3
HOTSPOT_MIN_OPEN = 2
RESOLUTION_POSITIVE = 80.0
RESOLUTION_WARNING = 50.0
OPEN_REQUESTS_WARNING = 5
FRICTION_WARNING = 5
UNVISITED_LIST_MAX = 5
ADOPTION_LOW = 70.0
ADOPTION_EXCELLENT = 90.0
COMPLIANCE_GOOD = 80.0
COMPLIANCE_WARNING = 60.0
DIVERSIFIED_ROLES = 3
CONCENTRATION_MIN = 3

UNKNOWN_HOTEL = "A hotel"


def _pct(value: float) -> str:
    return f"{round_half_up(value)}%"


def classify_member_score(score: int) -> MemberStatus:
    if score >= MEMBER_CRITICAL_AT:
        return MemberStatus.CRITICAL
    if score >= MEMBER_WARNING_AT:
        return MemberStatus.WARNING
    return MemberStatus.HEALTHY


class InsightEngine:
    """
    Turns a MetricsBundle into hotel classifications and section insights.

    Example:
        >>> engine = InsightEngine()
        >>> hotels = engine.classify_hotels(bundle, snapshot.hotels)
        >>> demand = engine.demand_section(bundle, snapshot.hotel_names())
    """

    def __init__(self):
        self.logger = structlog.get_logger()

    # =========================================================================
    # Hotel Classification
    # =========================================================================

    def classify_hotel(self, hotel: Hotel, bundle: MetricsBundle) -> MemberHealth:
        """
        Issue points for one hotel.

        Rules (additive):
        - +3 per open request older than the critical age
        - +1 per other open request (reported only without critical ones)
        - +2 when the hotel had no visit in the window
        - +3 when the hotel's average compliance is defined and below 60
        """
        score = 0
        issues: list[str] = []

        critical = bundle.requests.critical_by_hotel.get(hotel.id, 0)
        other_open = bundle.requests.open_by_hotel.get(hotel.id, 0) - critical

        if critical > 0:
            score += critical * CRITICAL_REQUEST_POINTS
            issues.append(f"{critical} critical requests")

        if other_open > 0:
            score += other_open * OPEN_REQUEST_POINTS
            if critical == 0:
                issues.append(f"{other_open} open vacancies")

        if bundle.visits.visits_by_hotel.get(hotel.id, 0) == 0:
            score += MISSED_VISIT_POINTS
            issues.append(MISSED_VISIT_ISSUE)

        compliance = bundle.compliance.hotel_averages.get(hotel.id)
        if compliance is not None and compliance < LOW_COMPLIANCE_BELOW:
            score += LOW_COMPLIANCE_POINTS
            issues.append(f"Low Workrecord discipline ({_pct(compliance)})")

        return MemberHealth(
            id=hotel.id,
            name=hotel.name,
            score=score,
            issues=issues or [OPTIMAL_MARKER],
            status=classify_member_score(score),
        )

    def classify_hotels(
        self, bundle: MetricsBundle, hotels: Sequence[Hotel]
    ) -> list[MemberHealth]:
        """
        Classify every hotel of the active cohort, worst first.

        Args:
            bundle: Metrics for the analysis window
            hotels: All hotels; only those with active staff are classified

        Returns:
            MemberHealth list sorted by score, highest first
        """
        active = set(bundle.visits.active_hotel_ids)
        results = [self.classify_hotel(h, bundle) for h in hotels if h.id in active]
        results.sort(key=lambda m: m.score, reverse=True)

        counts = Counter(m.status.value for m in results)
        self.logger.info(
            "hotels_classified",
            total=len(results),
            critical=counts.get(MemberStatus.CRITICAL.value, 0),
            warning=counts.get(MemberStatus.WARNING.value, 0),
        )
        return results

    # =========================================================================
    # Report Sections
    # =========================================================================

    def talent_section(self, bundle: MetricsBundle) -> ReportSection:
        talent = bundle.talent
        ratio = talent.temporary_ratio
        insights = []

        if ratio > TEMP_RATIO_WARNING:
            insights.append(
                Insight(
                    text=f"High reliance on temporary staff ({_pct(ratio * 100)} of the workforce).",
                    type=InsightType.WARNING,
                )
            )
        else:
            insights.append(
                Insight(
                    text=f"Healthy balance of permanent and temporary staff ({_pct((1 - ratio) * 100)} permanent).",
                    type=InsightType.POSITIVE,
                )
            )

        incomplete = len(talent.incomplete_documentation_ids)
        if incomplete > 0:
            insights.append(
                Insight(
                    text=f"Risk: {incomplete} active employees have incomplete documentation.",
                    type=InsightType.NEGATIVE,
                )
            )

        return ReportSection(
            title="Talent and Stability",
            metrics=[
                SectionMetric(label="Active Workforce", value=talent.active_count),
                SectionMetric(
                    label="Temporary",
                    value=_pct(ratio * 100),
                    status=MetricStatus.WARNING
                    if ratio > TEMP_RATIO_METRIC_WARNING
                    else MetricStatus.GOOD,
                ),
                SectionMetric(label="Active Hotels", value=len(talent.active_hotel_ids)),
            ],
            insights=insights,
        )

    def demand_section(
        self, bundle: MetricsBundle, hotel_names: dict[str, str]
    ) -> ReportSection:
        requests = bundle.requests
        insights = []

        critical = len(requests.critical_ids)
        if critical > 0:
            insights.append(
                Insight(
                    text=f"Urgent: {critical} open requests have gone more than 24h without closing.",
                    type=InsightType.NEGATIVE,
                )
            )

        cancelled = len(requests.cancelled_ids)
        if requests.created_count > 0 and cancelled > 0:
            cancel_rate = cancelled / requests.created_count
            if cancel_rate > CANCELLATION_WARNING:
                insights.append(
                    Insight(
                        text=f"Friction: high cancellation rate ({_pct(cancel_rate * 100)}). Validate real requirements with hotels.",
                        type=InsightType.WARNING,
                    )
                )

        no_shows = len(requests.no_show_ids)
        if no_shows > 0:
            insights.append(
                Insight(
                    text=f'Reliability: {no_shows} "Candidate No-Show" cases. Review the confirmation process.',
                    type=InsightType.NEGATIVE,
                )
            )

        expired = len(requests.expired_ids)
        if expired > 0:
            insights.append(
                Insight(
                    text=f"Lost: {expired} requests expired without being filled. Response capacity exceeded.",
                    type=InsightType.WARNING,
                )
            )

        hotspot = self._top_entry(requests.open_by_hotel)
        if hotspot is not None and hotspot[1] >= HOTSPOT_MIN_OPEN:
            name = hotel_names.get(hotspot[0], UNKNOWN_HOTEL)
            insights.append(
                Insight(
                    text=f'Focus: "{name}" concentrates the largest current need ({hotspot[1]} vacancies).',
                    type=InsightType.NEUTRAL,
                )
            )

        recent = len(requests.recent_created_ids)
        if recent >= 1:
            insights.append(
                Insight(
                    text=f"Activity: {recent} new requests in the last 7 days.",
                    type=InsightType.NEUTRAL,
                )
            )

        open_count = len(requests.open_ids)
        specialized = len(requests.specialized_open_ids)
        if open_count > 0 and specialized > 0:
            share = specialized / open_count
            if share > SPECIALIZED_SHARE:
                insights.append(
                    Insight(
                        text=f"Challenge: {_pct(share * 100)} of active vacancies are specialized roles.",
                        type=InsightType.NEUTRAL,
                    )
                )

        if requests.created_count > 0:
            rate = requests.resolution_rate
            if rate >= RESOLUTION_POSITIVE:
                rate_type = InsightType.POSITIVE
            elif rate < RESOLUTION_WARNING:
                rate_type = InsightType.WARNING
            else:
                rate_type = InsightType.NEUTRAL
            insights.insert(
                0,
                Insight(
                    text=(
                        f"Effectiveness: {_pct(rate)} of the needs raised in the period were resolved "
                        f"({len(requests.resolved_ids)}/{requests.created_count})."
                    ),
                    type=rate_type,
                ),
            )

        friction = cancelled + expired
        return ReportSection(
            title="Demand and Operational Friction",
            metrics=[
                SectionMetric(
                    label="Active Vacancies",
                    value=open_count,
                    status=MetricStatus.WARNING
                    if open_count > OPEN_REQUESTS_WARNING
                    else MetricStatus.GOOD,
                ),
                SectionMetric(
                    label="Critical (>24h)",
                    value=critical,
                    status=MetricStatus.CRITICAL if critical > 0 else MetricStatus.GOOD,
                ),
                SectionMetric(
                    label="Cancelled/Expired",
                    value=friction,
                    status=MetricStatus.WARNING
                    if friction > FRICTION_WARNING
                    else MetricStatus.NEUTRAL,
                ),
            ],
            insights=insights,
        )

    def supply_section(
        self, bundle: MetricsBundle, hotel_names: dict[str, str]
    ) -> ReportSection:
        apps = bundle.applications
        insights = []

        weekly = len(apps.recent_ids)
        if weekly > 0:
            insights.append(
                Insight(
                    text=f"Productivity: {weekly} new hires processed this week.",
                    type=InsightType.POSITIVE,
                )
            )
        else:
            insights.append(
                Insight(
                    text="No recent activity: no hires registered in the last 7 days.",
                    type=InsightType.NEUTRAL,
                )
            )

        top = self._top_entry(apps.by_hotel)
        if top is not None:
            name = hotel_names.get(top[0], UNKNOWN_HOTEL)
            insights.append(
                Insight(
                    text=f'Growth: "{name}" leads intake with {top[1]} hires in the period.',
                    type=InsightType.NEUTRAL,
                )
            )

        if apps.roles:
            distinct = set(apps.roles)
            if len(distinct) > DIVERSIFIED_ROLES:
                insights.append(
                    Insight(
                        text=f"Diversification: hiring for {len(distinct)} different roles in the period.",
                        type=InsightType.NEUTRAL,
                    )
                )
            elif len(apps.roles) >= CONCENTRATION_MIN and len(distinct) == 1:
                insights.append(
                    Insight(
                        text=f'Concentration: 100% of recent hires are for "{apps.roles[0]}".',
                        type=InsightType.NEUTRAL,
                    )
                )

        pending = len(apps.pending_ids)
        if pending > 0:
            insights.append(
                Insight(
                    text=f"Pending: {pending} intake records are incomplete (no employee created).",
                    type=InsightType.WARNING,
                )
            )

        return ReportSection(
            title="Supply (Hiring)",
            metrics=[
                SectionMetric(label="Hires (7 days)", value=weekly),
                SectionMetric(label="Hires (period)", value=apps.created_count, status=MetricStatus.GOOD),
                SectionMetric(
                    label="Pending Completion",
                    value=pending,
                    status=MetricStatus.WARNING if pending > 0 else MetricStatus.GOOD,
                ),
            ],
            insights=insights,
        )

    def visits_section(
        self, bundle: MetricsBundle, hotel_names: dict[str, str]
    ) -> ReportSection:
        visits = bundle.visits
        pending = visits.unvisited_hotel_ids
        insights = []

        if pending:
            if len(pending) <= UNVISITED_LIST_MAX:
                names = ", ".join(hotel_names.get(h, h) for h in pending)
                insights.append(
                    Insight(text=f"Pending visits: {names}.", type=InsightType.WARNING)
                )
            else:
                insights.append(
                    Insight(
                        text=f"Attention: {len(pending)} operating hotels have not been visited in the period.",
                        type=InsightType.WARNING,
                    )
                )
        else:
            insights.append(
                Insight(
                    text="Excellent: 100% coverage of operating hotels.",
                    type=InsightType.POSITIVE,
                )
            )

        return ReportSection(
            title="Supervision (Visits)",
            metrics=[
                SectionMetric(label="Visits Made", value=visits.visit_count),
                SectionMetric(
                    label="Hotels Pending",
                    value=len(pending),
                    status=MetricStatus.GOOD if not pending else MetricStatus.WARNING,
                ),
            ],
            insights=insights,
        )

    def workrecord_section(
        self, bundle: MetricsBundle, hotel_names: dict[str, str]
    ) -> ReportSection:
        compliance = bundle.compliance
        average = compliance.average_score
        insights = []

        if average is not None:
            if average < ADOPTION_LOW:
                insights.append(
                    Insight(
                        text=f"Overall adoption is low ({_pct(average)}). Needs reinforcement.",
                        type=InsightType.NEGATIVE,
                    )
                )
            elif average > ADOPTION_EXCELLENT:
                insights.append(
                    Insight(
                        text="Excellent digital discipline across Workrecord hotels.",
                        type=InsightType.POSITIVE,
                    )
                )

        lowest = compliance.lowest_hotel_id
        if lowest is not None:
            lowest_avg = compliance.hotel_averages[lowest]
            if lowest_avg < LOW_COMPLIANCE_BELOW:
                name = hotel_names.get(lowest, "Hotel")
                insights.append(
                    Insight(
                        text=f"{name} is the critical point with {_pct(lowest_avg)} compliance.",
                        type=InsightType.WARNING,
                    )
                )

        if average is None:
            average_metric = SectionMetric(label="Average Compliance", value="N/A")
        else:
            if average > COMPLIANCE_GOOD:
                status = MetricStatus.GOOD
            elif average > COMPLIANCE_WARNING:
                status = MetricStatus.WARNING
            else:
                status = MetricStatus.CRITICAL
            average_metric = SectionMetric(
                label="Average Compliance", value=_pct(average), status=status
            )

        return ReportSection(
            title="Workrecord Discipline",
            metrics=[
                average_metric,
                SectionMetric(label="Tracked Users", value=len(compliance.entities)),
            ],
            insights=insights,
        )

    # =========================================================================
    # Utility Methods
    # =========================================================================

    @staticmethod
    def _top_entry(counts: dict[str, int]) -> Optional[tuple[str, int]]:
        """Largest count; the first key seen wins ties."""
        top: Optional[tuple[str, int]] = None
        for key, value in counts.items():
            if top is None or value > top[1]:
                top = (key, value)
        return top
