"""
Two-Stage Request Validation

DESIGN DECISION: Requests are validated before any store is touched, in
two distinct stages:

STAGE 1 - SCHEMA VALIDATION:
- Required field presence
- Type and format checks (YYYY-MM, known mode names)

STAGE 2 - SEMANTIC VALIDATION:
- Month number in 01-12
- Non-negative buffer amounts
- Suspicious but legal inputs (far-future months) as warnings

Stage 2 only runs when stage 1 passes.

IMPORTANT: Validation NEVER silently fixes issues. A malformed request is
a caller error and is rejected; it is never turned into a fallback plan.
"""

import math
from datetime import datetime
from typing import Any, Optional

from adaptive_budget.engine.modes import coerce_mode
from adaptive_budget.engine.periods import MONTH_PATTERN, shift_month
from adaptive_budget.models.budget import (
    BudgetMode,
    ValidationIssue,
    ValidationResult,
)


# Months further ahead than this get a warning; nothing has been spent yet.
MAX_FUTURE_MONTHS = 12


class BudgetRequestError(ValueError):
    """
    A request failed validation.

    Carries the full ValidationResult so callers can show every issue,
    not just the first one.
    """

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(
            issue.message for issue in result.issues if issue.severity == "error"
        )
        super().__init__(f"Invalid request: {messages}")


class RequestValidator:
    """
    Validates budget and buffer requests through a two-stage pipeline.

    Stateless. The request clock is passed in and only feeds the
    far-future month warning.
    """

    def _validate_user_id(self, user_id: Any) -> list[ValidationIssue]:
        if not isinstance(user_id, str) or not user_id.strip():
            return [ValidationIssue(
                field="user_id",
                issue_type="missing",
                message="User id is required",
                severity="error",
                suggested_fix="Pass the id of the signed-in user",
            )]
        return []

    def _validate_schema(
        self,
        user_id: Any,
        month: Any,
        mode_override: Any,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = self._validate_user_id(user_id)

        if month is not None and (
            not isinstance(month, str) or not MONTH_PATTERN.match(month)
        ):
            issues.append(ValidationIssue(
                field="month",
                issue_type="invalid_format",
                message=f"Month must be in YYYY-MM format, got {month!r}",
                severity="error",
                suggested_fix="Use a month like 2024-06, or omit it for the current month",
            ))

        if mode_override is not None:
            try:
                if not isinstance(mode_override, (str, BudgetMode)):
                    raise ValueError(mode_override)
                coerce_mode(mode_override)
            except ValueError:
                issues.append(ValidationIssue(
                    field="mode",
                    issue_type="invalid_value",
                    message=f"Unknown budget mode {mode_override!r}",
                    severity="error",
                    suggested_fix="Use one of: survival, normal, growth",
                ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def _validate_semantic(
        self,
        month: Optional[str],
        now: datetime,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: Semantic validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []
        if month is None:
            return True, issues

        year, month_num = (int(part) for part in month.split("-"))
        if year < 1 or not 1 <= month_num <= 12:
            issues.append(ValidationIssue(
                field="month",
                issue_type="out_of_range",
                message=f"Month must be a real calendar month (01-12), got {month}",
                severity="error",
                suggested_fix="Check the month part of the YYYY-MM value",
            ))
            return False, issues

        if (year, month_num) > shift_month(now.year, now.month, MAX_FUTURE_MONTHS):
            issues.append(ValidationIssue(
                field="month",
                issue_type="future_month",
                message=f"Month {month} is more than a year ahead",
                severity="warning",
                suggested_fix="The plan will be built from today's history",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def validate_budget_request(
        self,
        user_id: Any,
        month: Any,
        mode_override: Any,
        now: datetime,
    ) -> ValidationResult:
        """
        Validate an adaptive budget request.

        Args:
            user_id: Requesting user
            month: YYYY-MM, or None for the current month
            mode_override: A mode name, a BudgetMode, or None
            now: The request clock

        Returns:
            ValidationResult with all issues found
        """
        all_issues = []

        schema_valid, schema_issues = self._validate_schema(user_id, month, mode_override)
        all_issues.extend(schema_issues)

        if schema_valid:
            _, semantic_issues = self._validate_semantic(month, now)
            all_issues.extend(semantic_issues)

        return ValidationResult(validated_at=now, issues=all_issues)

    def validate_buffer_update(
        self,
        user_id: Any,
        amount: Any,
        now: datetime,
    ) -> ValidationResult:
        """Validate a request to set the emergency buffer balance."""
        issues = self._validate_user_id(user_id)

        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_type",
                message="Buffer amount must be a number",
                severity="error",
            ))
        elif not math.isfinite(amount):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Buffer amount must be a finite number",
                severity="error",
            ))
        elif amount < 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="out_of_range",
                message="Buffer amount cannot be negative",
                severity="error",
                suggested_fix="Enter 0 if the buffer is empty",
            ))

        return ValidationResult(validated_at=now, issues=issues)

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Plain-text summary of the issues, for showing to users."""
        if result.is_valid and not result.issues:
            return "All checks passed."

        lines = []
        errors = [issue for issue in result.issues if issue.severity == "error"]
        warnings = [issue for issue in result.issues if issue.severity == "warning"]

        if errors:
            lines.append("The request could not be processed:")
            for issue in errors:
                lines.append(f"   • {issue.message}")
                if issue.suggested_fix:
                    lines.append(f"     {issue.suggested_fix}")

        if warnings:
            if lines:
                lines.append("")
            lines.append("Please note:")
            for issue in warnings:
                lines.append(f"   • {issue.message}")

        return "\n".join(lines)
