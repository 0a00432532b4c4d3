"""
Pytest configuration and shared fixtures for the workforce analytics test suite.

Data factories build valid frozen models with sensible defaults so each test
only spells out the fields it cares about. Factories are reused across unit,
property-based and golden tests.
"""

import os
from datetime import date, datetime, timedelta, timezone
from typing import Optional
from uuid import uuid4

import pytest

# Set testing environment BEFORE the settings cache is populated
os.environ["TESTING"] = "true"


from workforce.config import get_settings
from workforce.models.entities import (
    Application,
    AttendanceRecord,
    Employee,
    Hotel,
    StaffingRequest,
)
from workforce.models.enums import (
    ApplicationStatus,
    ComplianceStatus,
    EmployeeType,
    PayrollType,
    RequestStatus,
)
from workforce.models.events import ComplianceRecord, StatusChangeEvent
from workforce.models.snapshot import AnalysisWindow, WorkforceSnapshot

# Fixed reference instant: Wednesday 2025-04-30 12:00 UTC
AS_OF = datetime(2025, 4, 30, 12, 0, tzinfo=timezone.utc)
EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Pydantic model factories
# ---------------------------------------------------------------------------


def make_employee(
    hotel_id: str = "hotel-1",
    is_active: bool = True,
    employee_type: EmployeeType = EmployeeType.PERMANENT,
    payroll_type: PayrollType = PayrollType.TIMESHEET,
    created_at: datetime = EPOCH,
    **overrides,
) -> Employee:
    """Factory function for creating test Employee objects."""
    defaults = dict(
        id=f"emp-{uuid4().hex[:8]}",
        name="Test Employee",
        hotel_id=hotel_id,
        is_active=is_active,
        employee_type=employee_type,
        payroll_type=payroll_type,
        role="Housekeeper",
        created_at=created_at,
    )
    defaults.update(overrides)
    return Employee(**defaults)


def make_workrecord_employee(hotel_id: str = "hotel-1", **overrides) -> Employee:
    """Active permanent Workrecord employee (compliance cohort member)."""
    overrides.setdefault("payroll_type", PayrollType.WORKRECORD)
    overrides.setdefault("employee_type", EmployeeType.PERMANENT)
    return make_employee(hotel_id=hotel_id, **overrides)


def make_hotel(hotel_id: Optional[str] = None, name: Optional[str] = None, **overrides) -> Hotel:
    """Factory function for creating test Hotel objects."""
    hotel_id = hotel_id or f"hotel-{uuid4().hex[:8]}"
    defaults = dict(
        id=hotel_id,
        name=name or f"Hotel {hotel_id}",
        city="Miami",
        created_at=EPOCH,
    )
    defaults.update(overrides)
    return Hotel(**defaults)


def make_request(
    hotel_id: str = "hotel-1",
    status: RequestStatus = RequestStatus.PENDING,
    created_at: datetime = AS_OF - timedelta(days=3),
    completed_at: Optional[datetime] = None,
    role: str = "Housekeeper",
    **overrides,
) -> StaffingRequest:
    """Factory function for creating test StaffingRequest objects."""
    defaults = dict(
        id=f"req-{uuid4().hex[:8]}",
        hotel_id=hotel_id,
        role=role,
        request_type=EmployeeType.PERMANENT,
        num_of_people=1,
        status=status,
        created_at=created_at,
        completed_at=completed_at,
    )
    defaults.update(overrides)
    return StaffingRequest(**defaults)


def make_event(
    entity_id: str,
    timestamp: datetime,
    new_state: bool = False,
    previous_state: Optional[bool] = None,
    reason: Optional[str] = None,
) -> StatusChangeEvent:
    """Status-change event; previous_state defaults to the opposite of new_state."""
    return StatusChangeEvent(
        entity_id=entity_id,
        timestamp=timestamp,
        previous_state=(not new_state) if previous_state is None else previous_state,
        new_state=new_state,
        reason=reason,
    )


def make_visit(hotel_id: str = "hotel-1", timestamp: datetime = AS_OF - timedelta(days=2)) -> AttendanceRecord:
    return AttendanceRecord(
        id=f"visit-{uuid4().hex[:8]}",
        employee_id="supervisor-1",
        hotel_id=hotel_id,
        timestamp=timestamp,
    )


def make_compliance_record(
    entity_id: str,
    week: int,
    status: ComplianceStatus = ComplianceStatus.COMPLIED,
    year: int = 2025,
) -> ComplianceRecord:
    return ComplianceRecord(entity_id=entity_id, week_of_year=week, year=year, status=status)


def make_application(
    hotel_id: str = "hotel-1",
    role: str = "Housekeeper",
    status: ApplicationStatus = ApplicationStatus.COMPLETED,
    created_at: datetime = AS_OF - timedelta(days=2),
    **overrides,
) -> Application:
    defaults = dict(
        id=f"app-{uuid4().hex[:8]}",
        hotel_id=hotel_id,
        role=role,
        status=status,
        created_at=created_at,
    )
    defaults.update(overrides)
    return Application(**defaults)


def make_snapshot(**collections) -> WorkforceSnapshot:
    """Snapshot from keyword lists (employees=[...], hotels=[...], ...)."""
    return WorkforceSnapshot(**{key: tuple(value) for key, value in collections.items()})


def make_window(as_of: datetime = AS_OF, days: int = 30) -> AnalysisWindow:
    return AnalysisWindow.trailing(as_of, days)


def iso_week_start(year: int, week: int) -> datetime:
    """Monday 00:00 UTC of an ISO week."""
    monday = date.fromisocalendar(year, week, 1)
    return datetime(monday.year, monday.month, monday.day, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Each test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def as_of() -> datetime:
    return AS_OF


@pytest.fixture
def window() -> AnalysisWindow:
    return make_window()


@pytest.fixture
def hotels() -> list[Hotel]:
    return [
        make_hotel("hotel-1", "Ocean View"),
        make_hotel("hotel-2", "Bay Harbor"),
        make_hotel("hotel-3", "Palm Court"),
    ]


@pytest.fixture
def empty_snapshot() -> WorkforceSnapshot:
    return WorkforceSnapshot()
