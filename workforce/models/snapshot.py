"""
Inputs to one aggregation call: the analysis window and the data snapshot.

A snapshot is an already-fetched, immutable copy of every collection the
engine reads. It is passed explicitly into each call; the engine keeps no
module-level cache of rows.
"""

from datetime import datetime, timedelta

from pydantic import Field, model_validator

from .base import FrozenModel, UtcDatetime
from .entities import Application, AttendanceRecord, Employee, Hotel, StaffingRequest
from .events import ComplianceRecord, StatusChangeEvent


class AnalysisWindow(FrozenModel):
    """
    Time window ``[start, end]`` over which metrics are computed.

    Both ends are inclusive. ``end`` doubles as the "as of" instant for
    age-based metrics.
    """

    start: UtcDatetime = Field(description="Window start (inclusive)")
    end: UtcDatetime = Field(description="Window end (inclusive)")

    @model_validator(mode="after")
    def validate_order(self) -> "AnalysisWindow":
        if self.end < self.start:
            raise ValueError("window end must not be before window start")
        return self

    @classmethod
    def trailing(cls, as_of: datetime, days: int) -> "AnalysisWindow":
        """Window covering the ``days`` days up to ``as_of``."""
        return cls(start=as_of - timedelta(days=days), end=as_of)

    @property
    def duration_days(self) -> int:
        """Whole days elapsed between start and end."""
        return (self.end - self.start).days

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end

    def previous(self) -> "AnalysisWindow":
        """
        Adjacent window of identical length immediately before this one.

        Both ends shift back by ``duration_days + 1`` days.
        """
        shift = timedelta(days=self.duration_days + 1)
        return AnalysisWindow(start=self.start - shift, end=self.end - shift)


class WorkforceSnapshot(FrozenModel):
    """
    Read-only collections supplied by the persistence layer.

    Attributes:
        employees: Employee records
        hotels: Hotel records
        status_history: Employee active-flag transitions
        requests: Staffing requests, archived ones included
        attendance: Supervision visits
        compliance_records: Weekly Workrecord compliance outcomes
        applications: Hiring intake records
    """

    employees: tuple[Employee, ...] = Field(default=())
    hotels: tuple[Hotel, ...] = Field(default=())
    status_history: tuple[StatusChangeEvent, ...] = Field(default=())
    requests: tuple[StaffingRequest, ...] = Field(default=())
    attendance: tuple[AttendanceRecord, ...] = Field(default=())
    compliance_records: tuple[ComplianceRecord, ...] = Field(default=())
    applications: tuple[Application, ...] = Field(default=())

    def hotel_names(self) -> dict[str, str]:
        return {h.id: h.name for h in self.hotels}
