"""
Corporate Report Builder.

One call produces the full corporate report for an account: the windowed
metrics, per-hotel classification, the account health score (with the
critical-hotel override) and the five report sections.
"""

from datetime import datetime, timezone
from typing import Optional

import structlog

from workforce.config import get_settings
from workforce.engine.aggregator import WindowAggregator
from workforce.engine.insights import InsightEngine
from workforce.engine.scoring import HealthScorer, SUBSCORE_CAP
from workforce.models.base import ensure_utc
from workforce.models.report import CorporateReport, ReportSection
from workforce.models.snapshot import AnalysisWindow, WorkforceSnapshot
from workforce.utils.logging import bind_report_context

logger = structlog.get_logger()


def _with_score(section: ReportSection, subscore: float) -> ReportSection:
    """Attach a pillar's sub-score, rescaled to 0-100."""
    return section.model_copy(update={"score": round(subscore / SUBSCORE_CAP * 100, 1)})


class CorporateReportBuilder:
    """
    Builds a CorporateReport from a snapshot.

    Thresholds default to the engine settings; pass explicit values to
    override them per builder.

    Example:
        >>> builder = CorporateReportBuilder()
        >>> report = builder.build(snapshot, as_of=now)
        >>> print(report.account_health.value, report.account_health.status.value)
    """

    def __init__(
        self,
        critical_request_hours: Optional[int] = None,
        recent_activity_days: Optional[int] = None,
    ):
        settings = get_settings()
        if critical_request_hours is None:
            critical_request_hours = settings.critical_request_hours
        if recent_activity_days is None:
            recent_activity_days = settings.recent_activity_days

        self.window_days = settings.analysis_window_days
        self.aggregator = WindowAggregator(
            critical_request_hours=critical_request_hours,
            recent_activity_days=recent_activity_days,
        )
        self.insights = InsightEngine()
        self.scorer = HealthScorer()
        self.logger = structlog.get_logger()

    def build(
        self,
        snapshot: WorkforceSnapshot,
        as_of: Optional[datetime] = None,
        window_days: Optional[int] = None,
    ) -> CorporateReport:
        """
        Build the report for the window ending at ``as_of``.

        Args:
            snapshot: Read-only input collections
            as_of: Window end and "now" for age-based rules (default: now, UTC)
            window_days: Window length (default: analysis_window_days setting)

        Returns:
            CorporateReport
        """
        as_of = ensure_utc(as_of) if as_of is not None else datetime.now(timezone.utc)
        if window_days is None:
            window_days = self.window_days
        window = AnalysisWindow.trailing(as_of, window_days)

        with bind_report_context(as_of=as_of.isoformat(), window_days=window.duration_days):
            bundle = self.aggregator.aggregate(snapshot, window)
            names = snapshot.hotel_names()

            hotel_health = self.insights.classify_hotels(bundle, snapshot.hotels)
            health = self.scorer.score(bundle, members=hotel_health)

            report = CorporateReport(
                window=window,
                account_health=health,
                talent=_with_score(self.insights.talent_section(bundle), health.talent),
                demand=_with_score(self.insights.demand_section(bundle, names), health.response),
                supply=self.insights.supply_section(bundle, names),
                visits=_with_score(self.insights.visits_section(bundle, names), health.supervision),
                workrecord=_with_score(
                    self.insights.workrecord_section(bundle, names), health.discipline
                ),
                hotel_health=hotel_health,
                metrics=bundle,
            )

            self.logger.info(
                "corporate_report_built",
                account_health=health.value,
                status=health.status.value,
                hotels=len(hotel_health),
            )

        return report
