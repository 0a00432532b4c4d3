"""
Point-in-Time State Reconstructor.

Answers "was this entity active at instant t?" from a sparse log of
active-flag transitions. When no transition at or before t exists, the entity
is assumed active from its creation instant onwards.

Each query is an independent scan of the entity's events; window start and
end are reconstructed separately, never by replaying a running state machine.
Use HistoryIndex when querying many entities so each query only scans that
entity's own events.

Tie-break: when several events share the latest qualifying timestamp, the one
that appears last in the input sequence wins.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from workforce.models.base import ensure_utc
from workforce.models.entities import Employee
from workforce.models.events import StatusChangeEvent


def _latest_event(
    events: Iterable[StatusChangeEvent], target: datetime
) -> Optional[StatusChangeEvent]:
    latest: Optional[StatusChangeEvent] = None
    for event in events:
        if event.timestamp > target:
            continue
        # >= keeps the later-listed event on timestamp ties
        if latest is None or event.timestamp >= latest.timestamp:
            latest = event
    return latest


def was_active_at(
    entity_id: str,
    target: datetime,
    history: Iterable[StatusChangeEvent],
    created_at: datetime,
) -> bool:
    """
    Reconstruct an entity's active flag at ``target``.

    Args:
        entity_id: Entity to reconstruct
        target: Instant of interest (naive instants are read as UTC)
        history: Status-change events (any entities, any order)
        created_at: Entity creation instant, used when no event precedes target

    Returns:
        new_state of the latest event at or before target, else
        ``created_at <= target``
    """
    target, created_at = ensure_utc(target), ensure_utc(created_at)
    latest = _latest_event((e for e in history if e.entity_id == entity_id), target)
    if latest is not None:
        return latest.new_state
    return created_at <= target


class HistoryIndex:
    """
    Status-change events grouped by entity id, input order preserved.

    Example:
        >>> index = HistoryIndex(snapshot.status_history)
        >>> index.was_active_at("emp-1", window.start, employee.created_at)
    """

    def __init__(self, history: Iterable[StatusChangeEvent]):
        self._by_entity: dict[str, list[StatusChangeEvent]] = defaultdict(list)
        for event in history:
            self._by_entity[event.entity_id].append(event)

    def events_for(self, entity_id: str) -> Sequence[StatusChangeEvent]:
        return self._by_entity.get(entity_id, ())

    def was_active_at(self, entity_id: str, target: datetime, created_at: datetime) -> bool:
        target, created_at = ensure_utc(target), ensure_utc(created_at)
        latest = _latest_event(self.events_for(entity_id), target)
        if latest is not None:
            return latest.new_state
        return created_at <= target

    def separations_between(
        self, entity_id: str, start: datetime, end: datetime
    ) -> list[StatusChangeEvent]:
        """Active -> inactive events with start <= timestamp <= end."""
        start, end = ensure_utc(start), ensure_utc(end)
        return [
            e
            for e in self.events_for(entity_id)
            if e.is_separation and start <= e.timestamp <= end
        ]


def count_active_at(
    employees: Iterable[Employee], target: datetime, index: HistoryIndex
) -> int:
    """Number of cohort members reconstructed as active at ``target``."""
    target = ensure_utc(target)
    return sum(1 for emp in employees if index.was_active_at(emp.id, target, emp.created_at))


def utc_date(instant: datetime) -> date:
    """Calendar date of an instant in UTC."""
    if instant.tzinfo is None:
        return instant.date()
    return instant.astimezone(timezone.utc).date()


def calendar_days_between(start: datetime, end: datetime) -> int:
    """
    Whole calendar days from start to end, compared on UTC dates only.

    A request created at 23:50 and completed at 00:10 the next day took one
    day; time of day and local offsets never shift the count.
    """
    return (utc_date(end) - utc_date(start)).days


def iso_weeks_between(start: datetime, end: datetime) -> list[tuple[int, int]]:
    """ISO (year, week) pairs intersecting [start, end], oldest first."""
    weeks: list[tuple[int, int]] = []
    day = utc_date(start)
    last = utc_date(end)
    # Step to the Monday of the first week, then walk week by week
    day = day - timedelta(days=day.weekday())
    while day <= last:
        iso = day.isocalendar()
        weeks.append((iso[0], iso[1]))
        day += timedelta(days=7)
    return weeks


def month_starts(start: datetime, end: datetime) -> list[datetime]:
    """First instant (UTC) of every calendar month intersecting [start, end]."""
    start, end = ensure_utc(start), ensure_utc(end)
    current = datetime(start.year, start.month, 1, tzinfo=timezone.utc)
    months = []
    while current <= end:
        months.append(current)
        current = add_months(current, 1)
    return months


def add_months(instant: datetime, months: int) -> datetime:
    """Shift by whole months, clamping the day to the target month's length."""
    month_index = instant.month - 1 + months
    year = instant.year + month_index // 12
    month = month_index % 12 + 1
    day = min(instant.day, _days_in_month(year, month))
    return instant.replace(year=year, month=month, day=day)


def _days_in_month(year: int, month: int) -> int:
    if month == 12:
        return 31
    return (date(year, month + 1, 1) - date(year, month, 1)).days
