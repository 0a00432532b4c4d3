"""
Enumeration types for the workforce analytics engine.

All enums inherit from str so they serialize as their raw values. Values
mirror what the staffing dashboard stores, which is why several of them are
Spanish.
"""

from enum import Enum


class EmployeeType(str, Enum):
    """Contract type of an employee."""

    PERMANENT = "permanente"
    TEMPORARY = "temporal"


class PayrollType(str, Enum):
    """
    Payroll channel of an employee.

    Only Workrecord employees submit weekly compliance records.
    """

    TIMESHEET = "timesheet"
    WORKRECORD = "Workrecord"


class RequestStatus(str, Enum):
    """
    Lifecycle status of a staffing request.

    Nominal flow:
        Pendiente -> {Enviada a Reclutamiento, Cancelada por Hotel}
        -> En Proceso -> {Completada, Completada Parcialmente,
        Candidato No Presentado, Vencida}

    The dashboard does not enforce this graph, so any status may follow any
    other. Classification helpers below never assume monotonic progression.
    """

    PENDING = "Pendiente"
    SENT_TO_RECRUITING = "Enviada a Reclutamiento"
    IN_PROGRESS = "En Proceso"
    COMPLETED = "Completada"
    PARTIALLY_COMPLETED = "Completada Parcialmente"
    CANCELLED_BY_HOTEL = "Cancelada por Hotel"
    CANDIDATE_NO_SHOW = "Candidato No Presentado"
    EXPIRED = "Vencida"

    @property
    def is_open(self) -> bool:
        """Request still needs staffing action."""
        return self in _OPEN_STATUSES

    @property
    def is_terminal(self) -> bool:
        """No further transition is expected."""
        return self in _TERMINAL_STATUSES

    @property
    def is_completed(self) -> bool:
        """Full or partial success; these carry a completed_at stamp."""
        return self in _COMPLETED_STATUSES


_OPEN_STATUSES = frozenset(
    {
        RequestStatus.PENDING,
        RequestStatus.SENT_TO_RECRUITING,
        RequestStatus.IN_PROGRESS,
    }
)

_COMPLETED_STATUSES = frozenset(
    {
        RequestStatus.COMPLETED,
        RequestStatus.PARTIALLY_COMPLETED,
    }
)

_TERMINAL_STATUSES = frozenset(
    {
        RequestStatus.COMPLETED,
        RequestStatus.PARTIALLY_COMPLETED,
        RequestStatus.CANCELLED_BY_HOTEL,
        RequestStatus.CANDIDATE_NO_SHOW,
        RequestStatus.EXPIRED,
    }
)


class ComplianceStatus(str, Enum):
    """
    Weekly Workrecord compliance outcome for one employee.

    NO_DATA is synthesized by the engine for tracked weeks without a stored
    record and is never persisted.
    """

    COMPLIED = "cumplio"
    MINOR_CHANGE = "modificacion_menor"
    PARTIAL_BREACH = "incumplimiento_parcial"
    TOTAL_BREACH = "incumplimiento_total"
    NOT_APPLICABLE = "no_aplica"
    NO_DATA = "no_data"

    @property
    def is_scorable(self) -> bool:
        """Whether a week with this status counts toward the score."""
        return self not in (ComplianceStatus.NOT_APPLICABLE, ComplianceStatus.NO_DATA)


class ApplicationStatus(str, Enum):
    """Hiring intake record status."""

    PENDING = "pendiente"
    COMPLETED = "completada"


class InsightType(str, Enum):
    """Tone of a generated insight."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    WARNING = "warning"
    NEUTRAL = "neutral"


class HealthStatus(str, Enum):
    """Account-level health classification."""

    HEALTHY = "healthy"
    RISK = "risk"
    CRITICAL = "critical"


class MemberStatus(str, Enum):
    """Per-hotel classification from accumulated issue points."""

    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


class MetricStatus(str, Enum):
    """Display status attached to a report section metric."""

    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"
    NEUTRAL = "neutral"
