"""Tests for request validation."""

import pytest

from adaptive_budget.models import BudgetMode
from adaptive_budget.validation import BudgetRequestError, RequestValidator


@pytest.fixture
def validator() -> RequestValidator:
    return RequestValidator()


def _issue_types(result) -> list[str]:
    return [issue.issue_type for issue in result.issues]


class TestBudgetRequest:
    """Tests for adaptive budget request validation."""

    def test_valid_request(self, validator, now):
        """Test that a well-formed request has no issues."""
        result = validator.validate_budget_request("user-1", "2024-06", "growth", now)
        assert result.is_valid
        assert result.issues == []

    def test_month_and_mode_optional(self, validator, now):
        """Test that omitted month and mode are accepted."""
        assert validator.validate_budget_request("user-1", None, None, now).is_valid

    def test_mode_enum_accepted(self, validator, now):
        """Test that a BudgetMode value is accepted as an override."""
        result = validator.validate_budget_request("user-1", None, BudgetMode.SURVIVAL, now)
        assert result.is_valid

    @pytest.mark.parametrize("user_id", ["", "   ", None, 42])
    def test_missing_user(self, validator, now, user_id):
        """Test that the user id is required."""
        result = validator.validate_budget_request(user_id, "2024-06", None, now)
        assert result.has_errors
        assert result.issues[0].field == "user_id"
        assert result.issues[0].issue_type == "missing"

    @pytest.mark.parametrize("month", ["2024-6", "June 2024", "202406", "2024/06", 202406])
    def test_bad_month_format(self, validator, now, month):
        """Test that months must look like YYYY-MM."""
        result = validator.validate_budget_request("user-1", month, None, now)
        assert _issue_types(result) == ["invalid_format"]

    @pytest.mark.parametrize("month", ["2024-13", "2024-00", "0000-05"])
    def test_month_out_of_range(self, validator, now, month):
        """Test that the month number must be a real calendar month."""
        result = validator.validate_budget_request("user-1", month, None, now)
        assert _issue_types(result) == ["out_of_range"]
        assert result.has_errors

    @pytest.mark.parametrize("mode", ["turbo", "", 5])
    def test_unknown_mode(self, validator, now, mode):
        """Test that only the three modes are accepted."""
        result = validator.validate_budget_request("user-1", "2024-06", mode, now)
        assert _issue_types(result) == ["invalid_value"]
        assert result.issues[0].field == "mode"

    def test_mode_case_insensitive(self, validator, now):
        """Test that mode names are matched case-insensitively."""
        assert validator.validate_budget_request("user-1", None, " Normal ", now).is_valid

    def test_far_future_month_warns(self, validator, now):
        """Test that a month over a year ahead is a warning, not an error."""
        result = validator.validate_budget_request("user-1", "2025-07", None, now)
        assert result.is_valid
        assert _issue_types(result) == ["future_month"]
        assert result.issues[0].severity == "warning"

    def test_twelve_months_ahead_is_fine(self, validator, now):
        """Test the edge of the warning window."""
        result = validator.validate_budget_request("user-1", "2025-06", None, now)
        assert result.issues == []

    def test_all_schema_issues_reported(self, validator, now):
        """Test that every schema issue is collected, not just the first."""
        result = validator.validate_budget_request("", "bad", "turbo", now)
        assert result.error_count == 3

    def test_semantic_skipped_after_schema_failure(self, validator, now):
        """Test that range checks only run on well-formed input."""
        result = validator.validate_budget_request("", "2024-13", None, now)
        assert _issue_types(result) == ["missing"]


class TestBufferUpdate:
    """Tests for buffer update validation."""

    @pytest.mark.parametrize("amount", [0, 0.0, 2500, 9500.5])
    def test_valid_amounts(self, validator, now, amount):
        """Test that zero and positive numbers are accepted."""
        assert validator.validate_buffer_update("user-1", amount, now).is_valid

    @pytest.mark.parametrize("amount, issue_type", [
        (-1, "out_of_range"),
        (-0.01, "out_of_range"),
        ("100", "invalid_type"),
        (None, "invalid_type"),
        (True, "invalid_type"),
        (float("nan"), "invalid_value"),
        (float("inf"), "invalid_value"),
    ])
    def test_invalid_amounts(self, validator, now, amount, issue_type):
        """Test that bad amounts are rejected with a precise issue type."""
        result = validator.validate_buffer_update("user-1", amount, now)
        assert _issue_types(result) == [issue_type]

    def test_user_required(self, validator, now):
        """Test that the user id is checked for buffer updates too."""
        result = validator.validate_buffer_update("", 100.0, now)
        assert _issue_types(result) == ["missing"]


class TestBudgetRequestError:
    """Tests for the rejection exception."""

    def test_carries_result(self, validator, now):
        """Test that the error keeps every issue and is a ValueError."""
        result = validator.validate_budget_request("", "2024-13x", None, now)
        error = BudgetRequestError(result)
        assert isinstance(error, ValueError)
        assert error.result is result
        assert str(error).startswith("Invalid request: ")
        assert "User id is required" in str(error)


class TestUserFriendlySummary:
    """Tests for the plain-text summary."""

    def test_all_passed(self, validator, now):
        """Test the summary of a clean request."""
        result = validator.validate_budget_request("user-1", "2024-06", None, now)
        assert validator.get_user_friendly_summary(result) == "All checks passed."

    def test_errors_and_fixes_listed(self, validator, now):
        """Test that errors come with their suggested fixes."""
        result = validator.validate_budget_request("user-1", "2024-13", None, now)
        summary = validator.get_user_friendly_summary(result)
        assert summary.startswith("The request could not be processed:")
        assert "01-12" in summary
        assert "Check the month part" in summary

    def test_warnings_listed(self, validator, now):
        """Test that warnings appear under their own heading."""
        result = validator.validate_budget_request("user-1", "2030-01", None, now)
        summary = validator.get_user_friendly_summary(result)
        assert summary.startswith("Please note:")
        assert "more than a year ahead" in summary


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
