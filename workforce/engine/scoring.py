"""
Composite Scoring Engine: Account Health Score.

Combines four sub-scores, each capped at 25 points, into a 0-100 account
health score:

- Talent: penalizes reliance on temporary staff above a 30% share
- Response: share of staffing needs resolved in the window
- Supervision: share of active hotels visited in the window
- Discipline: average Workrecord compliance

Override: a hotel classified critical on its own caps the account at 79
("risk"). A numeric score never reads healthy while a critical hotel exists.
"""

import math
from collections.abc import Iterable
from typing import Optional

import structlog

from workforce.models.enums import HealthStatus, MemberStatus
from workforce.models.metrics import MetricsBundle
from workforce.models.report import MemberHealth, Score

logger = structlog.get_logger()

SUBSCORE_CAP = 25.0
TEMP_RATIO_THRESHOLD = 0.3
TEMP_RATIO_PENALTY = 50.0

CRITICAL_BELOW = 60
RISK_BELOW = 80
CLAMPED_TOTAL = 79

HEALTH_MESSAGES = {
    HealthStatus.HEALTHY: "The account operates to high efficiency standards.",
    HealthStatus.RISK: "Stable operation with latent risks in key areas.",
    HealthStatus.CRITICAL: "The account needs immediate intervention in several areas.",
}
CLAMPED_MESSAGE = (
    "Stable operation, but some hotels have critical issues that need "
    "immediate attention."
)


def talent_score(temporary_ratio: float) -> float:
    """25 up to a 30% temporary share, then -0.5 points per extra percent."""
    if temporary_ratio <= TEMP_RATIO_THRESHOLD:
        return SUBSCORE_CAP
    return max(0.0, SUBSCORE_CAP - (temporary_ratio - TEMP_RATIO_THRESHOLD) * TEMP_RATIO_PENALTY)


def response_score(resolution_rate: float) -> float:
    """
    Args:
        resolution_rate: Resolved / created as a fraction (1.0 when nothing
            was created; may exceed 1.0)
    """
    return min(SUBSCORE_CAP, resolution_rate * SUBSCORE_CAP)


def supervision_score(coverage: float) -> float:
    """
    Args:
        coverage: Visited share of active hotels as a fraction
    """
    return coverage * SUBSCORE_CAP


def discipline_score(average_compliance: Optional[float]) -> float:
    """
    Args:
        average_compliance: 0-100 average, or None (scored as 0)
    """
    if average_compliance is None:
        return 0.0
    return (average_compliance / 100) * SUBSCORE_CAP


def round_half_up(value: float) -> int:
    """Round .5 upwards, matching the dashboard's rounding of totals."""
    return int(math.floor(value + 0.5))


def classify_total(total: int) -> HealthStatus:
    if total < CRITICAL_BELOW:
        return HealthStatus.CRITICAL
    if total < RISK_BELOW:
        return HealthStatus.RISK
    return HealthStatus.HEALTHY


def combine(
    talent: float,
    response: float,
    supervision: float,
    discipline: float,
    members: Iterable[MemberHealth] = (),
) -> Score:
    """
    Sum sub-scores, classify, and apply the critical-hotel override.

    Args:
        talent, response, supervision, discipline: Sub-scores (0-25 each)
        members: Per-hotel classifications checked by the override

    Returns:
        Score
    """
    total = round_half_up(talent + response + supervision + discipline)
    status = classify_total(total)
    message = HEALTH_MESSAGES[status]
    clamped = False

    has_critical_member = any(m.status == MemberStatus.CRITICAL for m in members)
    if has_critical_member and total >= RISK_BELOW:
        logger.info("account_health_clamped", raw_total=total, clamped_total=CLAMPED_TOTAL)
        total = CLAMPED_TOTAL
        status = HealthStatus.RISK
        message = CLAMPED_MESSAGE
        clamped = True

    return Score(
        value=total,
        status=status,
        message=message,
        talent=talent,
        response=response,
        supervision=supervision,
        discipline=discipline,
        clamped=clamped,
    )


class HealthScorer:
    """
    Computes the account health Score from a MetricsBundle.

    Example:
        >>> scorer = HealthScorer()
        >>> score = scorer.score(bundle, members=hotel_health)
        >>> print(f"{score.value}/100 ({score.status.value})")
    """

    def __init__(self):
        self.logger = structlog.get_logger()

    def score(self, bundle: MetricsBundle, members: Iterable[MemberHealth] = ()) -> Score:
        """
        Args:
            bundle: Metrics for the analysis window
            members: Hotel classifications for the override rule

        Returns:
            Score with sub-score breakdown
        """
        result = combine(
            talent=talent_score(bundle.talent.temporary_ratio),
            response=response_score(bundle.requests.resolution_rate / 100),
            supervision=supervision_score(bundle.visits.coverage_pct / 100),
            discipline=discipline_score(bundle.compliance.average_score),
            members=members,
        )

        self.logger.info(
            "account_health_computed",
            score=result.value,
            status=result.status.value,
            talent=round(result.talent, 2),
            response=round(result.response, 2),
            supervision=round(result.supervision, 2),
            discipline=round(result.discipline, 2),
            clamped=result.clamped,
        )

        return result
