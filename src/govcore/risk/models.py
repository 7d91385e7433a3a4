"""Data models for risk scoring and review scheduling."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from govcore.core.types import Effectiveness, ReviewFrequency, ReviewState, RiskLevel


class ScoreInput(BaseModel):
    """Likelihood/impact ratings to validate.

    Values are unbounded; range checks are reported by ``validate_score``.
    """

    inherent_likelihood: int
    inherent_impact: int
    residual_likelihood: int
    residual_impact: int
    target_likelihood: int | None = None
    target_impact: int | None = None

    @property
    def inherent_score(self) -> int:
        return self.inherent_likelihood * self.inherent_impact

    @property
    def residual_score(self) -> int:
        return self.residual_likelihood * self.residual_impact

    @property
    def target_score(self) -> int | None:
        if self.target_likelihood is None or self.target_impact is None:
            return None
        return self.target_likelihood * self.target_impact


class DateInput(BaseModel):
    """Risk lifecycle dates to validate. ISO strings are accepted."""

    identified_date: date | None = None
    last_review_date: date | None = None
    next_review_date: date | None = None
    target_date: date | None = None


class ValidationResult(BaseModel):
    """Outcome of a validation pass.

    Errors block submission; warnings are surfaced to the user only.
    """

    model_config = {"frozen": True}

    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def from_messages(cls, errors: list[str], warnings: list[str]) -> ValidationResult:
        return cls(is_valid=not errors, errors=list(errors), warnings=list(warnings))

    def merge(self, other: ValidationResult) -> ValidationResult:
        return ValidationResult.from_messages(
            self.errors + other.errors,
            self.warnings + other.warnings,
        )


class RiskLevelInfo(BaseModel):
    model_config = {"frozen": True}

    level: RiskLevel
    description: str


class RiskReduction(BaseModel):
    """How far treatment has brought a risk down from its inherent score."""

    model_config = {"frozen": True}

    points: int
    percentage: int
    effectiveness: Effectiveness


class ReviewFrequencySuggestion(BaseModel):
    model_config = {"frozen": True}

    frequency: ReviewFrequency
    period_months: int
    rationale: str


class ReviewStatus(BaseModel):
    model_config = {"frozen": True}

    state: ReviewState
    days_until_review: int | None = None
    message: str
