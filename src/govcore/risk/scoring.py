"""Deterministic risk scoring rules.

Validates likelihood x impact ratings on a 1-5 scale, the ordering between
inherent, residual and target scores, and the consistency of review dates.
Also derives risk levels, treatment effectiveness and review cadence.

Every function here is pure: results depend only on the arguments (``today``
included), so the same input always yields the same result.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any

from govcore.core.types import (
    Effectiveness,
    ItemKind,
    ReviewFrequency,
    ReviewState,
    RiskLevel,
)
from govcore.risk.models import (
    DateInput,
    ReviewFrequencySuggestion,
    ReviewStatus,
    RiskLevelInfo,
    RiskReduction,
    ScoreInput,
    ValidationResult,
)

if TYPE_CHECKING:
    from govcore.workflow.models import GovernanceItem

SCALE_MIN = 1
SCALE_MAX = 5

RESIDUAL_EXCEEDS_INHERENT = "Residual risk score cannot exceed inherent risk score"
RESIDUAL_EQUALS_INHERENT = (
    "Residual risk score equals inherent risk score - risk treatment appears ineffective"
)
TARGET_EXCEEDS_RESIDUAL = "Target risk score cannot exceed residual risk score"
INHERENT_ASSESSMENT_REQUIRED = "Inherent risk assessment is required"
RESIDUAL_ASSESSMENT_REQUIRED = "Residual risk assessment is required"

# Inclusive lower bounds, highest band first
_LEVEL_BANDS: tuple[tuple[int, RiskLevel, str], ...] = (
    (16, RiskLevel.VERY_HIGH, "Very high risk - immediate action required"),
    (12, RiskLevel.HIGH, "High risk - priority action required"),
    (8, RiskLevel.MEDIUM, "Medium risk - planned action required"),
    (4, RiskLevel.LOW_MEDIUM, "Low-medium risk - monitoring required"),
)
_LOWEST_LEVEL = (RiskLevel.LOW, "Low risk - routine monitoring")

_EFFECTIVENESS_BANDS: tuple[tuple[int, Effectiveness], ...] = (
    (75, Effectiveness.EXCELLENT),
    (50, Effectiveness.GOOD),
    (25, Effectiveness.MODERATE),
)

_FREQUENCY_BANDS: tuple[tuple[int, ReviewFrequency, int, str], ...] = (
    (16, ReviewFrequency.MONTHLY, 1, "Very high risk - monthly review recommended"),
    (12, ReviewFrequency.QUARTERLY, 3, "High risk - quarterly review recommended"),
    (8, ReviewFrequency.SEMI_ANNUAL, 6, "Medium risk - semi-annual review recommended"),
)
_LOWEST_FREQUENCY = (ReviewFrequency.ANNUAL, 12, "Low risk - annual review is sufficient")


class ScoreOutOfRangeError(ValueError):
    """A likelihood or impact rating fell outside the 1-5 scale."""


def _in_scale(value: Any) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and SCALE_MIN <= value <= SCALE_MAX
    )


def _range_message(label: str) -> str:
    return f"{label} must be between {SCALE_MIN} and {SCALE_MAX}"


# ---------------------------------------------------------------------------
# Scores and classification
# ---------------------------------------------------------------------------


def calculate_score(likelihood: int, impact: int) -> int:
    """Return likelihood x impact (1-25).

    Raises:
        ScoreOutOfRangeError: If either rating is not an integer in [1, 5].
    """
    if not (_in_scale(likelihood) and _in_scale(impact)):
        raise ScoreOutOfRangeError(
            f"Likelihood and impact must be between {SCALE_MIN} and {SCALE_MAX} "
            f"(got likelihood={likelihood!r}, impact={impact!r})."
        )
    return likelihood * impact


def classify_level(score: int) -> RiskLevelInfo:
    for lower, level, description in _LEVEL_BANDS:
        if score >= lower:
            return RiskLevelInfo(level=level, description=description)
    level, description = _LOWEST_LEVEL
    return RiskLevelInfo(level=level, description=description)


def calculate_reduction(inherent_score: int, residual_score: int) -> RiskReduction:
    """Measure how much treatment reduced a risk.

    The percentage is rounded half up; an inherent score of 0 yields 0%.
    """
    points = inherent_score - residual_score
    if inherent_score > 0:
        # round(100 * points / inherent), half up, in exact integer arithmetic
        percentage = (200 * points + inherent_score) // (2 * inherent_score)
    else:
        percentage = 0

    effectiveness = Effectiveness.NONE
    for lower, tier in _EFFECTIVENESS_BANDS:
        if percentage >= lower:
            effectiveness = tier
            break
    else:
        if percentage > 0:
            effectiveness = Effectiveness.LOW

    return RiskReduction(points=points, percentage=percentage, effectiveness=effectiveness)


def suggest_review_frequency(score: int) -> ReviewFrequencySuggestion:
    """Recommend a review cadence for a score. Advisory only."""
    for lower, frequency, months, rationale in _FREQUENCY_BANDS:
        if score >= lower:
            return ReviewFrequencySuggestion(
                frequency=frequency, period_months=months, rationale=rationale
            )
    frequency, months, rationale = _LOWEST_FREQUENCY
    return ReviewFrequencySuggestion(
        frequency=frequency, period_months=months, rationale=rationale
    )


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_score(score: ScoreInput) -> ValidationResult:
    """Validate ratings and the inherent >= residual >= target ordering."""
    errors: list[str] = []
    warnings: list[str] = []

    for label, value in (
        ("Inherent likelihood", score.inherent_likelihood),
        ("Inherent impact", score.inherent_impact),
        ("Residual likelihood", score.residual_likelihood),
        ("Residual impact", score.residual_impact),
    ):
        if not _in_scale(value):
            errors.append(_range_message(label))

    if score.residual_score > score.inherent_score:
        errors.append(RESIDUAL_EXCEEDS_INHERENT)
    elif score.residual_score == score.inherent_score:
        warnings.append(RESIDUAL_EQUALS_INHERENT)

    if score.target_likelihood is not None:
        if not _in_scale(score.target_likelihood):
            errors.append(_range_message("Target likelihood"))
        if score.target_likelihood > score.residual_likelihood:
            warnings.append(
                "Target likelihood is higher than the current residual likelihood"
                " - is the target realistic?"
            )

    if score.target_impact is not None:
        if not _in_scale(score.target_impact):
            errors.append(_range_message("Target impact"))
        if score.target_impact > score.residual_impact:
            warnings.append(
                "Target impact is higher than the current residual impact"
                " - is the target realistic?"
            )

    target_score = score.target_score
    if target_score is not None and target_score > score.residual_score:
        errors.append(TARGET_EXCEEDS_RESIDUAL)

    return ValidationResult.from_messages(errors, warnings)


def validate_dates(dates: DateInput, today: date | None = None) -> ValidationResult:
    """Validate identification and review dates against each other and ``today``."""
    today = today or date.today()
    errors: list[str] = []
    warnings: list[str] = []

    identified = dates.identified_date
    last_review = dates.last_review_date
    next_review = dates.next_review_date

    if identified is not None and identified > today:
        errors.append("Risk identification date cannot be in the future")

    if last_review is not None:
        if last_review > today:
            errors.append("Last review date cannot be in the future")
        if identified is not None and last_review < identified:
            errors.append("Last review date cannot be before the risk identification date")

    if next_review is not None:
        if next_review <= today:
            warnings.append("Next review date has passed - the risk needs to be updated")
        if last_review is not None and next_review <= last_review:
            errors.append("Next review date must be after the last review date")

    if dates.target_date is not None and dates.target_date <= today:
        warnings.append("Target date has passed - targets should be revised")

    return ValidationResult.from_messages(errors, warnings)


def validate(
    score: ScoreInput,
    dates: DateInput | None = None,
    today: date | None = None,
) -> ValidationResult:
    """Combined score and date validation for live form feedback."""
    result = validate_score(score)
    if dates is not None:
        result = result.merge(validate_dates(dates, today=today))
    return result


# ---------------------------------------------------------------------------
# Review scheduling
# ---------------------------------------------------------------------------


def is_overdue(next_review_date: date | None, today: date | None = None) -> bool:
    if next_review_date is None:
        return False
    return next_review_date < (today or date.today())


def review_status(
    next_review_date: date | None,
    today: date | None = None,
    due_soon_days: int = 7,
) -> ReviewStatus:
    if next_review_date is None:
        return ReviewStatus(
            state=ReviewState.NOT_SCHEDULED,
            message="No review date scheduled",
        )

    days = (next_review_date - (today or date.today())).days
    if days < 0:
        return ReviewStatus(
            state=ReviewState.OVERDUE,
            days_until_review=days,
            message=f"Review is {abs(days)} days overdue",
        )
    if days <= due_soon_days:
        return ReviewStatus(
            state=ReviewState.DUE_SOON,
            days_until_review=days,
            message=f"Review due within {days} days",
        )
    return ReviewStatus(
        state=ReviewState.CURRENT,
        days_until_review=days,
        message=f"Review scheduled in {days} days",
    )


# ---------------------------------------------------------------------------
# Governance item helpers
# ---------------------------------------------------------------------------


def missing_assessments(item: GovernanceItem) -> list[str]:
    """Errors for inherent/residual ratings that have not been filled in."""
    errors: list[str] = []
    if item.inherent_likelihood is None or item.inherent_impact is None:
        errors.append(INHERENT_ASSESSMENT_REQUIRED)
    if item.residual_likelihood is None or item.residual_impact is None:
        errors.append(RESIDUAL_ASSESSMENT_REQUIRED)
    return errors


def item_score_input(item: GovernanceItem) -> ScoreInput | None:
    """Build a ScoreInput from an item, or None if an assessment is missing."""
    if missing_assessments(item):
        return None
    return ScoreInput(
        inherent_likelihood=item.inherent_likelihood,
        inherent_impact=item.inherent_impact,
        residual_likelihood=item.residual_likelihood,
        residual_impact=item.residual_impact,
        target_likelihood=item.target_likelihood,
        target_impact=item.target_impact,
    )


def item_date_input(item: GovernanceItem) -> DateInput:
    return DateInput(
        identified_date=item.identified_date,
        last_review_date=item.last_review_date,
        next_review_date=item.next_review_date,
        target_date=item.target_date,
    )


def check_completeness(item: GovernanceItem) -> ValidationResult:
    """Advisory readiness check run before an item is put up for approval.

    Flags missing identifying fields and, for risks, missing assessments or
    response strategy on top of the regular score validation.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not item.title.strip():
        errors.append("Title is required")
    if not item.description.strip():
        warnings.append("Adding a description is recommended")
    if not item.owner_department:
        errors.append("An owner department must be selected")

    if item.kind is ItemKind.RISK:
        errors.extend(missing_assessments(item))
        if item.risk_response is None:
            errors.append("A risk response strategy must be selected")
        score = item_score_input(item)
        if score is not None:
            scored = validate_score(score)
            errors.extend(scored.errors)
            warnings.extend(scored.warnings)

    return ValidationResult.from_messages(errors, warnings)
