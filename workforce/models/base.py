"""
Shared pydantic building blocks.

Every snapshot input and every engine output is immutable, and every instant
is a timezone-aware UTC datetime. Naive datetimes are read as UTC.
"""

from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]


class FrozenModel(BaseModel):
    """Immutable model base."""

    model_config = ConfigDict(frozen=True)
