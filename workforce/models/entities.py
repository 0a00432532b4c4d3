"""
Entity records supplied by the persistence layer.

The engine only reads these. Each entity carries an explicit ``created_at``
instant; identifiers are opaque and are never parsed for timestamps.
"""

from datetime import date
from typing import Optional

from pydantic import Field

from .base import FrozenModel, UtcDatetime
from .enums import ApplicationStatus, EmployeeType, PayrollType, RequestStatus


class Employee(FrozenModel):
    """
    A staff member assigned to a hotel.

    Attributes:
        id: Opaque employee identifier
        name: Display name
        hotel_id: Hotel the employee works at
        is_active: Current activity flag (as of the snapshot)
        employee_type: Permanent or temporary contract
        payroll_type: Timesheet or Workrecord payroll
        role: Job title
        documentation_complete: Whether hiring paperwork is complete
        is_blacklisted: Whether the employee is blacklisted
        created_at: Instant the employee record was created
    """

    id: str = Field(description="Opaque employee identifier")
    name: str = Field(default="", description="Display name")
    hotel_id: str = Field(description="Hotel the employee works at")
    is_active: bool = Field(default=True, description="Current activity flag")
    employee_type: EmployeeType = Field(default=EmployeeType.PERMANENT)
    payroll_type: PayrollType = Field(default=PayrollType.TIMESHEET)
    role: str = Field(default="", description="Job title")
    documentation_complete: bool = Field(default=True)
    is_blacklisted: bool = Field(default=False)
    created_at: UtcDatetime = Field(description="Instant the record was created")

    @property
    def is_temporary(self) -> bool:
        return self.employee_type == EmployeeType.TEMPORARY


class Hotel(FrozenModel):
    """A client hotel (cohort member for coverage and health classification)."""

    id: str = Field(description="Opaque hotel identifier")
    name: str = Field(description="Display name")
    city: str = Field(default="", description="City")
    created_at: UtcDatetime = Field(description="Instant the record was created")


class StaffingRequest(FrozenModel):
    """
    A hotel's request for staff.

    ``completed_at`` is stamped by the dashboard when the request moves into
    Completada or Completada Parcialmente; the engine trusts it as given.
    """

    id: str = Field(description="Request identifier")
    hotel_id: str = Field(description="Requesting hotel")
    role: str = Field(default="", description="Requested role")
    request_type: EmployeeType = Field(default=EmployeeType.PERMANENT)
    num_of_people: int = Field(default=1, ge=0)
    status: RequestStatus = Field(default=RequestStatus.PENDING)
    created_at: UtcDatetime = Field(description="Instant the request was created")
    start_date: Optional[date] = Field(
        default=None, description="Date staffing is needed by"
    )
    completed_at: Optional[UtcDatetime] = Field(
        default=None, description="Instant of the transition into a completed status"
    )
    is_archived: bool = Field(
        default=False, description="Archived requests are hidden from the live board"
    )


class AttendanceRecord(FrozenModel):
    """A supervision visit logged at a hotel."""

    id: str = Field(description="Record identifier")
    employee_id: str = Field(default="", description="Employee that checked in")
    hotel_id: str = Field(description="Visited hotel")
    timestamp: UtcDatetime = Field(description="Check-in instant")


class Application(FrozenModel):
    """A hiring intake record (new hire being onboarded)."""

    id: str = Field(description="Application identifier")
    hotel_id: str = Field(description="Hotel the hire is for")
    role: str = Field(default="", description="Hired role")
    status: ApplicationStatus = Field(default=ApplicationStatus.PENDING)
    created_at: UtcDatetime = Field(description="Instant the application was created")
    completed_at: Optional[UtcDatetime] = Field(default=None)
