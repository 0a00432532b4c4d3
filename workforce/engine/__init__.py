"""
Workforce analytics engine core components.

- Timeline: point-in-time reconstruction of the active flag
- Aggregation: per-window headcount, turnover, requests, visits, compliance
- Scoring: composite account health score with the critical-hotel override
- Insights: hotel classification and report section insights
- Period comparison: current window vs. the previous window of equal length
- Trends: monthly hire, separation and turnover series
- Report: end-to-end corporate report

Every component is synchronous and read-only over a WorkforceSnapshot.
"""

__version__ = "1.0.0"

__all__ = [
    "CorporateReportBuilder",
    "HealthScorer",
    "HistoryIndex",
    "InsightEngine",
    "PeriodComparator",
    "WindowAggregator",
]

from workforce.engine.aggregator import WindowAggregator
from workforce.engine.insights import InsightEngine
from workforce.engine.period_comparison import PeriodComparator
from workforce.engine.report import CorporateReportBuilder
from workforce.engine.scoring import HealthScorer
from workforce.engine.timeline import HistoryIndex
