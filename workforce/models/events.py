"""
Event log models.

Status-change events are append-only transitions of an entity's active flag.
Compliance records are one-per-week outcomes for Workrecord employees.
"""

from typing import Optional

from pydantic import Field

from .base import FrozenModel, UtcDatetime
from .enums import ComplianceStatus


class StatusChangeEvent(FrozenModel):
    """
    One observed transition of an entity's active flag.

    For a given entity, ``previous_state`` should equal the ``new_state`` of
    the preceding event. The engine does not check this.

    Attributes:
        entity_id: Entity the transition belongs to
        timestamp: When the transition happened
        previous_state: Active flag before the transition
        new_state: Active flag after the transition
        reason: Optional free-text reason (e.g. resignation)
    """

    entity_id: str = Field(description="Entity the transition belongs to")
    timestamp: UtcDatetime = Field(description="When the transition happened")
    previous_state: bool = Field(description="Active flag before the transition")
    new_state: bool = Field(description="Active flag after the transition")
    reason: Optional[str] = Field(default=None, description="Free-text reason")

    @property
    def is_separation(self) -> bool:
        """Active -> inactive transition."""
        return self.previous_state and not self.new_state


class ComplianceRecord(FrozenModel):
    """
    Weekly compliance outcome for one employee.

    At most one record exists per (entity_id, week_of_year, year).
    """

    entity_id: str = Field(description="Employee the record belongs to")
    week_of_year: int = Field(ge=1, le=53, description="ISO week number")
    year: int = Field(description="ISO year of the week")
    status: ComplianceStatus = Field(description="Weekly outcome")
    reason: Optional[str] = Field(default=None, description="Reviewer note")

    @property
    def week_key(self) -> tuple[int, int]:
        """Sortable (year, week) key."""
        return (self.year, self.week_of_year)
