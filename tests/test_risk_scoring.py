"""Tests for risk scoring validation and classification."""

from __future__ import annotations

from datetime import date

import pytest

from govcore.core.types import (
    Effectiveness,
    ItemKind,
    ReviewFrequency,
    ReviewState,
    RiskLevel,
)
from govcore.risk.models import DateInput, ScoreInput
from govcore.risk.scoring import (
    RESIDUAL_ASSESSMENT_REQUIRED,
    RESIDUAL_EQUALS_INHERENT,
    RESIDUAL_EXCEEDS_INHERENT,
    TARGET_EXCEEDS_RESIDUAL,
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

TODAY = date(2025, 3, 14)


def _score(**overrides) -> ScoreInput:
    defaults = {
        "inherent_likelihood": 4,
        "inherent_impact": 4,
        "residual_likelihood": 2,
        "residual_impact": 3,
    }
    defaults.update(overrides)
    return ScoreInput(**defaults)


# ---------------------------------------------------------------------------
# calculate_score / classify_level
# ---------------------------------------------------------------------------


class TestCalculateScore:
    def test_product_over_whole_scale(self):
        for likelihood in range(1, 6):
            for impact in range(1, 6):
                assert calculate_score(likelihood, impact) == likelihood * impact

    @pytest.mark.parametrize(
        "likelihood, impact",
        [(0, 3), (6, 3), (3, 0), (3, 6), (-1, -1), (2.5, 2), (True, 3)],
    )
    def test_out_of_range_raises(self, likelihood, impact):
        with pytest.raises(ScoreOutOfRangeError):
            calculate_score(likelihood, impact)

    def test_out_of_range_is_a_value_error(self):
        with pytest.raises(ValueError, match="between 1 and 5"):
            calculate_score(7, 1)


class TestClassifyLevel:
    @pytest.mark.parametrize(
        "score, level",
        [
            (1, RiskLevel.LOW),
            (3, RiskLevel.LOW),
            (4, RiskLevel.LOW_MEDIUM),
            (7, RiskLevel.LOW_MEDIUM),
            (8, RiskLevel.MEDIUM),
            (11, RiskLevel.MEDIUM),
            (12, RiskLevel.HIGH),
            (15, RiskLevel.HIGH),
            (16, RiskLevel.VERY_HIGH),
            (25, RiskLevel.VERY_HIGH),
        ],
    )
    def test_boundaries(self, score, level):
        assert classify_level(score).level == level

    def test_description_present(self):
        info = classify_level(20)
        assert "immediate action" in info.description


# ---------------------------------------------------------------------------
# validate_score
# ---------------------------------------------------------------------------


class TestValidateScore:
    def test_valid_scores(self):
        result = validate_score(_score())
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    def test_field_out_of_range(self):
        result = validate_score(_score(inherent_likelihood=6, inherent_impact=5))
        assert not result.is_valid
        assert "Inherent likelihood must be between 1 and 5" in result.errors

    def test_each_field_reports_its_own_range_error(self):
        result = validate_score(
            _score(
                inherent_likelihood=0,
                inherent_impact=9,
                residual_likelihood=0,
                residual_impact=0,
            )
        )
        assert result.errors[:4] == [
            "Inherent likelihood must be between 1 and 5",
            "Inherent impact must be between 1 and 5",
            "Residual likelihood must be between 1 and 5",
            "Residual impact must be between 1 and 5",
        ]

    def test_residual_exceeding_inherent_is_an_error(self):
        result = validate_score(
            _score(
                inherent_likelihood=2,
                inherent_impact=2,
                residual_likelihood=5,
                residual_impact=5,
            )
        )
        assert not result.is_valid
        assert result.errors == [RESIDUAL_EXCEEDS_INHERENT]

    def test_residual_equal_to_inherent_is_a_warning(self):
        result = validate_score(
            _score(
                inherent_likelihood=3,
                inherent_impact=4,
                residual_likelihood=4,
                residual_impact=3,
            )
        )
        assert result.is_valid
        assert result.warnings == [RESIDUAL_EQUALS_INHERENT]

    def test_target_score_exceeding_residual_is_an_error(self):
        result = validate_score(_score(target_likelihood=3, target_impact=3))
        assert not result.is_valid
        assert result.errors == [TARGET_EXCEEDS_RESIDUAL]
        assert len(result.warnings) == 1
        assert "Target likelihood" in result.warnings[0]

    def test_target_component_above_residual_only_warns(self):
        result = validate_score(
            _score(residual_likelihood=2, residual_impact=4, target_likelihood=3, target_impact=2)
        )
        assert result.is_valid
        assert len(result.warnings) == 1
        assert "Target likelihood is higher" in result.warnings[0]

    def test_target_impact_above_residual_warns(self):
        result = validate_score(
            _score(residual_likelihood=3, residual_impact=2, target_likelihood=1, target_impact=3)
        )
        assert result.is_valid
        assert any("Target impact is higher" in w for w in result.warnings)

    def test_single_target_component_skips_score_check(self):
        result = validate_score(_score(target_likelihood=1))
        assert result.is_valid
        assert result.errors == []

    def test_target_out_of_range(self):
        result = validate_score(_score(target_likelihood=0, target_impact=2))
        assert not result.is_valid
        assert "Target likelihood must be between 1 and 5" in result.errors

    def test_deterministic(self):
        score = _score(
            inherent_likelihood=2,
            inherent_impact=2,
            residual_likelihood=5,
            residual_impact=5,
            target_likelihood=5,
        )
        assert validate_score(score) == validate_score(score)


# ---------------------------------------------------------------------------
# validate_dates
# ---------------------------------------------------------------------------


class TestValidateDates:
    def test_consistent_dates(self):
        dates = DateInput(
            identified_date=date(2025, 1, 10),
            last_review_date=date(2025, 2, 1),
            next_review_date=date(2025, 6, 1),
            target_date=date(2025, 12, 31),
        )
        result = validate_dates(dates, today=TODAY)
        assert result.is_valid
        assert result.warnings == []

    def test_no_dates_is_valid(self):
        result = validate_dates(DateInput(), today=TODAY)
        assert result.is_valid
        assert result.errors == []

    def test_identified_in_future(self):
        result = validate_dates(DateInput(identified_date=date(2025, 3, 15)), today=TODAY)
        assert result.errors == ["Risk identification date cannot be in the future"]

    def test_identified_today_is_allowed(self):
        result = validate_dates(DateInput(identified_date=TODAY), today=TODAY)
        assert result.is_valid

    def test_last_review_in_future(self):
        result = validate_dates(DateInput(last_review_date=date(2025, 4, 1)), today=TODAY)
        assert "Last review date cannot be in the future" in result.errors

    def test_last_review_before_identification(self):
        dates = DateInput(identified_date=date(2025, 2, 1), last_review_date=date(2025, 1, 15))
        result = validate_dates(dates, today=TODAY)
        assert result.errors == [
            "Last review date cannot be before the risk identification date"
        ]

    def test_next_review_not_after_last_review(self):
        dates = DateInput(last_review_date=date(2025, 3, 1), next_review_date=date(2025, 3, 1))
        result = validate_dates(dates, today=TODAY)
        assert "Next review date must be after the last review date" in result.errors

    def test_past_next_review_only_warns(self):
        dates = DateInput(last_review_date=date(2025, 1, 1), next_review_date=date(2025, 3, 10))
        result = validate_dates(dates, today=TODAY)
        assert result.is_valid
        assert result.warnings == ["Next review date has passed - the risk needs to be updated"]

    def test_next_review_today_warns(self):
        result = validate_dates(DateInput(next_review_date=TODAY), today=TODAY)
        assert result.is_valid
        assert len(result.warnings) == 1

    def test_past_target_date_warns(self):
        result = validate_dates(DateInput(target_date=date(2024, 12, 31)), today=TODAY)
        assert result.is_valid
        assert result.warnings == ["Target date has passed - targets should be revised"]

    def test_iso_strings_accepted(self):
        dates = DateInput(identified_date="2025-01-01", last_review_date="2025-02-01")
        assert validate_dates(dates, today=TODAY).is_valid


class TestValidate:
    def test_merges_score_and_dates(self):
        score = _score(residual_likelihood=5, residual_impact=5)
        dates = DateInput(target_date=date(2025, 1, 1))
        result = validate(score, dates, today=TODAY)
        assert not result.is_valid
        assert RESIDUAL_EXCEEDS_INHERENT in result.errors
        assert "Target date has passed - targets should be revised" in result.warnings

    def test_without_dates(self):
        assert validate(_score()) == validate_score(_score())


# ---------------------------------------------------------------------------
# calculate_reduction / suggest_review_frequency
# ---------------------------------------------------------------------------


class TestCalculateReduction:
    @pytest.mark.parametrize(
        "inherent, residual, percentage, effectiveness",
        [
            (25, 4, 84, Effectiveness.EXCELLENT),
            (20, 5, 75, Effectiveness.EXCELLENT),
            (16, 8, 50, Effectiveness.GOOD),
            (12, 9, 25, Effectiveness.MODERATE),
            (20, 18, 10, Effectiveness.LOW),
            (10, 10, 0, Effectiveness.NONE),
            (4, 5, -25, Effectiveness.NONE),
        ],
    )
    def test_tiers(self, inherent, residual, percentage, effectiveness):
        reduction = calculate_reduction(inherent, residual)
        assert reduction.points == inherent - residual
        assert reduction.percentage == percentage
        assert reduction.effectiveness == effectiveness

    def test_rounds_half_up(self):
        assert calculate_reduction(8, 7).percentage == 13

    def test_rounds_to_nearest(self):
        assert calculate_reduction(3, 2).percentage == 33
        assert calculate_reduction(3, 1).percentage == 67

    def test_zero_inherent_does_not_divide(self):
        reduction = calculate_reduction(0, 0)
        assert reduction.percentage == 0
        assert reduction.effectiveness == Effectiveness.NONE


class TestSuggestReviewFrequency:
    @pytest.mark.parametrize(
        "score, frequency, months",
        [
            (25, ReviewFrequency.MONTHLY, 1),
            (16, ReviewFrequency.MONTHLY, 1),
            (15, ReviewFrequency.QUARTERLY, 3),
            (12, ReviewFrequency.QUARTERLY, 3),
            (11, ReviewFrequency.SEMI_ANNUAL, 6),
            (8, ReviewFrequency.SEMI_ANNUAL, 6),
            (7, ReviewFrequency.ANNUAL, 12),
            (1, ReviewFrequency.ANNUAL, 12),
        ],
    )
    def test_bands(self, score, frequency, months):
        suggestion = suggest_review_frequency(score)
        assert suggestion.frequency == frequency
        assert suggestion.period_months == months
        assert suggestion.rationale


# ---------------------------------------------------------------------------
# Review scheduling
# ---------------------------------------------------------------------------


class TestReviewStatus:
    def test_not_scheduled(self):
        status = review_status(None, today=TODAY)
        assert status.state == ReviewState.NOT_SCHEDULED
        assert status.days_until_review is None

    def test_overdue(self):
        status = review_status(date(2025, 3, 10), today=TODAY)
        assert status.state == ReviewState.OVERDUE
        assert status.days_until_review == -4
        assert status.message == "Review is 4 days overdue"

    @pytest.mark.parametrize("next_review, days", [(date(2025, 3, 14), 0), (date(2025, 3, 21), 7)])
    def test_due_soon(self, next_review, days):
        status = review_status(next_review, today=TODAY)
        assert status.state == ReviewState.DUE_SOON
        assert status.days_until_review == days

    def test_current(self):
        status = review_status(date(2025, 3, 22), today=TODAY)
        assert status.state == ReviewState.CURRENT
        assert status.days_until_review == 8

    def test_custom_window(self):
        status = review_status(date(2025, 3, 22), today=TODAY, due_soon_days=14)
        assert status.state == ReviewState.DUE_SOON

    def test_is_overdue(self):
        assert is_overdue(date(2025, 3, 13), today=TODAY) is True
        assert is_overdue(TODAY, today=TODAY) is False
        assert is_overdue(None, today=TODAY) is False


# ---------------------------------------------------------------------------
# check_completeness
# ---------------------------------------------------------------------------


class TestCheckCompleteness:
    def test_complete_risk(self, make_item):
        result = check_completeness(make_item())
        assert result.is_valid
        assert result.warnings == []

    def test_missing_title_and_response(self, make_item):
        result = check_completeness(make_item(title="  ", risk_response=None))
        assert "Title is required" in result.errors
        assert "A risk response strategy must be selected" in result.errors

    def test_missing_description_warns(self, make_item):
        result = check_completeness(make_item(description=""))
        assert result.is_valid
        assert result.warnings == ["Adding a description is recommended"]

    def test_missing_residual_assessment(self, make_item):
        result = check_completeness(make_item(residual_impact=None))
        assert result.errors == [RESIDUAL_ASSESSMENT_REQUIRED]

    def test_missing_owner_department(self, make_item):
        result = check_completeness(make_item(owner_department=None))
        assert "An owner department must be selected" in result.errors

    def test_includes_score_errors(self, make_item):
        result = check_completeness(
            make_item(inherent_likelihood=1, inherent_impact=1, residual_likelihood=3)
        )
        assert RESIDUAL_EXCEEDS_INHERENT in result.errors

    def test_control_action_needs_no_scores(self, make_item):
        item = make_item(
            kind=ItemKind.CONTROL_ACTION,
            inherent_likelihood=None,
            inherent_impact=None,
            residual_likelihood=None,
            residual_impact=None,
            risk_response=None,
        )
        assert check_completeness(item).is_valid
