"""
Month-by-month historical series.
"""

from pydantic import Field

from .base import FrozenModel


class MonthlyTalentPoint(FrozenModel):
    """Hires and separations in one calendar month, split by employee type."""

    month: str = Field(description="YYYY-MM")
    hires_permanent: int = Field(default=0, ge=0)
    hires_temporary: int = Field(default=0, ge=0)
    separations_permanent: int = Field(default=0, ge=0)
    separations_temporary: int = Field(default=0, ge=0)


class TalentSeries(FrozenModel):
    points: list[MonthlyTalentPoint] = Field(default_factory=list)

    @property
    def hires_permanent(self) -> int:
        return sum(p.hires_permanent for p in self.points)

    @property
    def hires_temporary(self) -> int:
        return sum(p.hires_temporary for p in self.points)

    @property
    def separations_permanent(self) -> int:
        return sum(p.separations_permanent for p in self.points)

    @property
    def separations_temporary(self) -> int:
        return sum(p.separations_temporary for p in self.points)


class MonthlyTurnoverPoint(FrozenModel):
    """Turnover of one month-to-date window."""

    month: str = Field(description="YYYY-MM")
    separations: int = Field(default=0, ge=0)
    average_headcount: float = Field(default=0.0, ge=0.0)
    turnover_rate: float = Field(default=0.0, ge=0.0, description="Percent")
