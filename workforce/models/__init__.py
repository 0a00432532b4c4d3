"""
Pydantic v2 data models for the workforce analytics engine.

Model Organization:
    - enums: Status and type enumerations
    - entities: Employees, hotels, staffing requests, visits, applications
    - events: Status-change events and weekly compliance records
    - snapshot: Analysis window and the input snapshot
    - metrics: MetricsBundle and its per-domain sub-records
    - report: Scores, insights, hotel health, report sections, comparisons
    - trends: Monthly hire, separation and turnover series

All snapshot inputs and engine outputs are frozen.

Usage:
    >>> from workforce.models import AnalysisWindow, WorkforceSnapshot
    >>> window = AnalysisWindow.trailing(as_of=now, days=30)
"""

from .enums import (
    ApplicationStatus,
    ComplianceStatus,
    EmployeeType,
    HealthStatus,
    InsightType,
    MemberStatus,
    MetricStatus,
    PayrollType,
    RequestStatus,
)
from .entities import Application, AttendanceRecord, Employee, Hotel, StaffingRequest
from .events import ComplianceRecord, StatusChangeEvent
from .metrics import (
    ApplicationMetrics,
    ComplianceMetrics,
    EntityCompliance,
    HotelVisitCount,
    MetricsBundle,
    RequestMetrics,
    TalentMetrics,
    TurnoverMetrics,
    VisitMetrics,
)
from .report import (
    CorporateReport,
    Insight,
    MemberHealth,
    MetricDelta,
    PeriodComparison,
    ReportSection,
    Score,
    SectionMetric,
)
from .snapshot import AnalysisWindow, WorkforceSnapshot
from .trends import MonthlyTalentPoint, MonthlyTurnoverPoint, TalentSeries

__all__ = [
    # Enums
    "ApplicationStatus",
    "ComplianceStatus",
    "EmployeeType",
    "HealthStatus",
    "InsightType",
    "MemberStatus",
    "MetricStatus",
    "PayrollType",
    "RequestStatus",
    # Entities & events
    "Application",
    "AttendanceRecord",
    "Employee",
    "Hotel",
    "StaffingRequest",
    "ComplianceRecord",
    "StatusChangeEvent",
    # Inputs
    "AnalysisWindow",
    "WorkforceSnapshot",
    # Metrics
    "ApplicationMetrics",
    "ComplianceMetrics",
    "EntityCompliance",
    "HotelVisitCount",
    "MetricsBundle",
    "RequestMetrics",
    "TalentMetrics",
    "TurnoverMetrics",
    "VisitMetrics",
    # Report
    "CorporateReport",
    "Insight",
    "MemberHealth",
    "MetricDelta",
    "PeriodComparison",
    "ReportSection",
    "Score",
    "SectionMetric",
    # Trends
    "MonthlyTalentPoint",
    "MonthlyTurnoverPoint",
    "TalentSeries",
]
