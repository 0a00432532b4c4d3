"""
Period Comparison Engine: this window vs. the one before it.

The previous window has the same whole-day length and ends the day before
the current one starts. Both windows are aggregated independently from the
same snapshot, then a fixed list of key metrics is compared.
"""

from collections.abc import Callable
from typing import Optional

import structlog

from workforce.engine.aggregator import WindowAggregator
from workforce.models.metrics import MetricsBundle
from workforce.models.report import MetricDelta, PeriodComparison
from workforce.models.snapshot import AnalysisWindow, WorkforceSnapshot

logger = structlog.get_logger()

# (metric, extractor, higher_is_better)
KEY_METRICS: list[tuple[str, Callable[[MetricsBundle], Optional[float]], bool]] = [
    ("visits", lambda b: b.visits.visit_count, True),
    ("coverage_pct", lambda b: b.visits.coverage_pct, True),
    ("new_employees", lambda b: len(b.talent.hired_ids), True),
    ("separations", lambda b: b.turnover.separations, False),
    ("turnover_rate", lambda b: b.turnover.turnover_rate, False),
    ("requests_created", lambda b: b.requests.created_count, True),
    ("fulfillment_rate", lambda b: b.requests.fulfillment_rate, True),
    ("resolution_rate", lambda b: b.requests.resolution_rate, True),
    ("avg_time_to_fill_days", lambda b: b.requests.avg_time_to_fill_days, False),
    ("cancellation_rate", lambda b: b.requests.cancellation_rate, False),
    ("compliance_average", lambda b: b.compliance.average_score, True),
    ("applications", lambda b: b.applications.created_count, True),
]

# Metrics named in the summary line when they move
_SUMMARY_METRICS = ("turnover_rate", "resolution_rate", "visits")


def compare_metric(
    metric: str,
    current: Optional[float],
    previous: Optional[float],
    higher_is_better: bool,
) -> MetricDelta:
    """
    Delta of one metric.

    change_pct is None when either side is None or previous is 0. improved
    is None when nothing changed or the change is undefined.
    """
    if current is None or previous is None:
        return MetricDelta(metric=metric, current=current, previous=previous)

    change = current - previous
    change_pct = change / abs(previous) * 100 if previous != 0 else None
    improved: Optional[bool] = None
    if change != 0:
        improved = change > 0 if higher_is_better else change < 0

    return MetricDelta(
        metric=metric,
        current=current,
        previous=previous,
        change=change,
        change_pct=change_pct,
        improved=improved,
    )


def summarize(deltas: list[MetricDelta]) -> str:
    by_metric = {d.metric: d for d in deltas}
    parts = []

    for name in _SUMMARY_METRICS:
        delta = by_metric.get(name)
        if delta is None or delta.improved is None:
            continue
        label = name.replace("_", " ")
        verb = "improved" if delta.improved else "worsened"
        if delta.change_pct is not None:
            parts.append(f"{label.capitalize()} {verb} ({delta.change_pct:+.1f}%).")
        else:
            parts.append(f"{label.capitalize()} {verb}.")

    improved = sum(1 for d in deltas if d.improved is True)
    regressed = sum(1 for d in deltas if d.improved is False)
    if improved or regressed:
        parts.append(f"{improved} metric(s) improved, {regressed} regressed vs previous period.")
    else:
        parts.append("Metrics stable compared to previous period.")

    return " ".join(parts)


class PeriodComparator:
    """
    Compares key metrics of a window with its adjacent previous window.

    Example:
        >>> comparator = PeriodComparator()
        >>> result = comparator.compare(snapshot, AnalysisWindow.trailing(now, 30))
        >>> print(result.summary)
    """

    def __init__(self, aggregator: Optional[WindowAggregator] = None):
        self.aggregator = aggregator or WindowAggregator()
        self.logger = structlog.get_logger()

    def compare(self, snapshot: WorkforceSnapshot, window: AnalysisWindow) -> PeriodComparison:
        """
        Args:
            snapshot: Read-only input collections
            window: Current analysis window

        Returns:
            PeriodComparison with both bundles, per-metric deltas and a summary
        """
        previous_window = window.previous()
        current = self.aggregator.aggregate(snapshot, window)
        previous = self.aggregator.aggregate(snapshot, previous_window)

        deltas = [
            compare_metric(name, extract(current), extract(previous), higher_is_better)
            for name, extract, higher_is_better in KEY_METRICS
        ]
        summary = summarize(deltas)

        self.logger.info(
            "period_comparison_computed",
            current_start=window.start.isoformat(),
            previous_start=previous_window.start.isoformat(),
            improved=sum(1 for d in deltas if d.improved is True),
            regressed=sum(1 for d in deltas if d.improved is False),
        )

        return PeriodComparison(
            current_window=window,
            previous_window=previous_window,
            current=current,
            previous=previous,
            deltas=deltas,
            summary=summary,
        )
