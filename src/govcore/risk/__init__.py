"""Risk scoring module for govcore.

Pure validation and classification of likelihood x impact risk scores.
"""

from govcore.risk.models import DateInput, ScoreInput, ValidationResult
from govcore.risk.scoring import (
    ScoreOutOfRangeError,
    calculate_reduction,
    calculate_score,
    check_completeness,
    classify_level,
    is_overdue,
    review_status,
    suggest_review_frequency,
    validate,
    validate_dates,
    validate_score,
)

__all__ = [
    "DateInput",
    "ScoreInput",
    "ScoreOutOfRangeError",
    "ValidationResult",
    "calculate_reduction",
    "calculate_score",
    "check_completeness",
    "classify_level",
    "is_overdue",
    "review_status",
    "suggest_review_frequency",
    "validate",
    "validate_dates",
    "validate_score",
]
