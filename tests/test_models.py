"""
Tests for Adaptive Budget models

Test strategy:
1. Unit tests for individual components (models, engine, validators)
2. Integration tests for flows (with in-memory stores)
3. No real API calls in tests
"""

import pytest
from datetime import datetime, timezone
from uuid import uuid4

from pydantic import ValidationError

from adaptive_budget.models import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    BudgetAlert,
    BudgetCategoryId,
    BudgetMode,
    BudgetPlan,
    AlertSeverity,
    AlertType,
    CategoryAllocation,
    ExhaustionHorizon,
    HorizonKind,
    Transaction,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)


def _plan(**overrides) -> BudgetPlan:
    fields = dict(
        user_id="user-1",
        month="2024-06",
        mode=BudgetMode.NORMAL,
        total_planned=10000.0,
        total_income_expected=12000.0,
        buffer_target=9500.0,
        buffer_current=1000.0,
        confidence_score=0.5,
        income_volatility=0.3,
    )
    fields.update(overrides)
    return BudgetPlan(**fields)


class TestTransactionModel:
    """Tests for the Transaction model."""

    def test_explicit_type_wins_over_sign(self):
        """Test that a debit flag makes a positive amount an expense."""
        tx = Transaction(
            id="t1", user_id="u", timestamp_millis=0,
            amount=500.0, type=TransactionType.DEBIT,
        )
        assert tx.is_debit
        assert not tx.is_credit
        assert tx.signed_amount == -500.0

    def test_sign_decides_without_type(self):
        """Test that the sign decides direction when no flag is given."""
        credit = Transaction(id="t1", user_id="u", timestamp_millis=0, amount=250.0)
        debit = Transaction(id="t2", user_id="u", timestamp_millis=0, amount=-250.0)
        assert credit.is_credit and not credit.is_debit
        assert debit.is_debit and not debit.is_credit
        assert debit.magnitude == 250.0

    def test_zero_amount_is_neither(self):
        """Test that an unflagged zero amount moves no money."""
        tx = Transaction(id="t1", user_id="u", timestamp_millis=0, amount=0.0)
        assert not tx.is_credit
        assert not tx.is_debit
        assert tx.signed_amount == 0.0

    def test_occurred_at_is_utc(self):
        """Test that timestamps convert to aware UTC datetimes."""
        tx = Transaction(id="t1", user_id="u", timestamp_millis=1718452800000, amount=1.0)
        assert tx.occurred_at == datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)

    def test_transaction_is_frozen(self):
        """Test that transactions cannot be modified."""
        tx = Transaction(id="t1", user_id="u", timestamp_millis=0, amount=1.0)
        with pytest.raises(ValidationError):
            tx.amount = 2.0

    def test_transaction_rejects_negative_timestamp(self):
        """Test that timestamps before the epoch are rejected."""
        with pytest.raises(ValidationError):
            Transaction(id="t1", user_id="u", timestamp_millis=-1, amount=1.0)

    @pytest.mark.parametrize("amount", [float("nan"), float("inf"), float("-inf")])
    def test_transaction_rejects_non_finite_amount(self, amount):
        """Test that NaN and infinite amounts are rejected."""
        with pytest.raises(ValidationError):
            Transaction(
                id="t1", user_id="u", timestamp_millis=0,
                amount=amount, type=TransactionType.CREDIT,
            )


class TestExhaustionHorizon:
    """Tests for the bounded/unbounded horizon value."""

    def test_unbounded_has_no_days(self):
        """Test the never-runs-out variant."""
        horizon = ExhaustionHorizon.unbounded()
        assert horizon.is_unbounded
        assert horizon.days is None
        assert not horizon.is_below(1000)

    def test_bounded_rounds_to_two_decimals(self):
        """Test that bounded horizons are rounded."""
        horizon = ExhaustionHorizon.of(200 / 380)
        assert horizon.kind == HorizonKind.BOUNDED
        assert horizon.days == 0.53
        assert horizon.is_below(2)

    def test_bounded_requires_days(self):
        """Test that a bounded horizon without days is rejected."""
        with pytest.raises(ValidationError):
            ExhaustionHorizon(kind=HorizonKind.BOUNDED)

    def test_unbounded_rejects_days(self):
        """Test that an unbounded horizon cannot carry days."""
        with pytest.raises(ValidationError):
            ExhaustionHorizon(kind=HorizonKind.UNBOUNDED, days=3.0)

    def test_horizon_serializes_to_json(self):
        """Test that the unbounded variant survives JSON."""
        dumped = ExhaustionHorizon.unbounded().model_dump_json()
        assert "unbounded" in dumped


class TestBudgetModels:
    """Tests for plan and alert models."""

    def test_category_labels(self):
        """Test the display labels of each category."""
        assert BudgetCategoryId.FUEL_WORK.value == "fuelWork"
        assert BudgetCategoryId.FUEL_WORK.label == "Fuel & Work"
        assert BudgetCategoryId.ESSENTIALS.is_spending
        assert not BudgetCategoryId.GROWTH.is_spending

    def test_category_allocation_rejects_negative_remaining(self):
        """Test that remaining can never be negative."""
        with pytest.raises(ValidationError):
            CategoryAllocation(
                id=BudgetCategoryId.ESSENTIALS,
                label="Essentials",
                monthly_limit=100.0,
                remaining=-1.0,
                daily_recommended=1.0,
            )

    def test_category_allocation_defaults_to_unbounded(self):
        """Test the default horizon of a fresh allocation."""
        allocation = CategoryAllocation(
            id=BudgetCategoryId.ESSENTIALS,
            label="Essentials",
            monthly_limit=100.0,
            remaining=100.0,
            daily_recommended=100 / 30,
        )
        assert allocation.days_until_exhausted.is_unbounded

    def test_plan_rejects_zero_confidence(self):
        """Test that a plan is never 0% reliable."""
        with pytest.raises(ValidationError):
            _plan(confidence_score=0.0)

    def test_plan_rejects_confidence_above_one(self):
        """Test the upper confidence bound."""
        with pytest.raises(ValidationError):
            _plan(confidence_score=1.01)

    def test_plan_rejects_bad_month(self):
        """Test the YYYY-MM pattern on plans."""
        with pytest.raises(ValidationError):
            _plan(month="June 2024")

    def test_plan_buffer_ratio(self):
        """Test the buffer ratio helper."""
        assert _plan(buffer_current=4750.0).buffer_ratio == pytest.approx(0.5)
        assert _plan(buffer_target=0.0).buffer_ratio is None

    def test_plan_category_lookup(self):
        """Test finding a category allocation by id."""
        essentials = CategoryAllocation(
            id=BudgetCategoryId.ESSENTIALS,
            label="Essentials",
            monthly_limit=100.0,
            remaining=100.0,
            daily_recommended=1.0,
        )
        plan = _plan(categories=[essentials])
        assert plan.category(BudgetCategoryId.ESSENTIALS) == essentials
        assert plan.category(BudgetCategoryId.GROWTH) is None

    def test_alert_creation(self):
        """Test BudgetAlert model creation."""
        alert = BudgetAlert(
            id="buffer_low_1",
            type=AlertType.BUFFER_LOW,
            severity=AlertSeverity.WARNING,
            message="Your emergency buffer is low (21% of target)",
        )
        assert alert.category_id is None
        assert alert.suggested_action is None


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.BUDGET_REQUESTED,
            description="Adaptive budget requested for 2024-06",
        )
        assert event.event_id is not None
        assert event.timestamp is not None
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        correlation_id = uuid4()
        event = AuditEvent(
            event_type=AuditEventType.BUDGET_COMPUTED,
            user_id="user-1",
            correlation_id=correlation_id,
            description="Budget computed",
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "budget_computed"
        assert log_dict["user_id"] == "user-1"
        assert log_dict["correlation_id"] == str(correlation_id)

    def test_audit_event_to_sheets_row(self):
        """Test conversion to spreadsheet row."""
        event = AuditEvent(
            event_type=AuditEventType.BUFFER_UPDATED,
            description="Buffer updated",
            details={"amount": 100.0},
        )
        row = event.to_sheets_row()
        assert len(row) == 9
        assert row[2] == "buffer_updated"
        assert row[4] == ""
        assert '"amount"' in row[7]

    def test_builder_budget_requested(self):
        """Test the budget requested builder."""
        correlation_id = uuid4()
        event = AuditEventBuilder.budget_requested(
            user_id="user-1",
            month="2024-06",
            mode_override=None,
            correlation_id=correlation_id,
        )
        assert event.event_type == AuditEventType.BUDGET_REQUESTED
        assert event.details["mode_override"] == "auto"
        assert event.correlation_id == correlation_id

    def test_builder_fallback_used_is_warning(self):
        """Test that fallback responses are flagged as warnings."""
        event = AuditEventBuilder.fallback_used(
            user_id="user-1",
            month="2024-06",
            reason="no_data",
            correlation_id=uuid4(),
        )
        assert event.severity == AuditSeverity.WARNING
        assert event.details["reason"] == "no_data"

    def test_builder_upstream_unavailable(self):
        """Test the upstream unavailable builder."""
        event = AuditEventBuilder.upstream_unavailable(
            service="transaction_source",
            error_message="timeout",
            correlation_id=uuid4(),
        )
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "timeout"
        assert event.details["service"] == "transaction_source"


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(issues=[
            ValidationIssue(
                field="month",
                issue_type="invalid_format",
                message="Bad month",
                severity="error",
            ),
        ])
        assert result.has_errors
        assert result.error_count == 1
        assert not result.is_valid

    def test_validation_result_warnings_only(self):
        """Test result with only warnings."""
        result = ValidationResult(issues=[
            ValidationIssue(
                field="month",
                issue_type="future_month",
                message="Far ahead",
                severity="warning",
            ),
        ])
        assert not result.has_errors
        assert result.is_valid

    def test_validation_issue_rejects_unknown_severity(self):
        """Test that severity is limited to error, warning or info."""
        with pytest.raises(ValidationError):
            ValidationIssue(
                field="month",
                issue_type="x",
                message="x",
                severity="fatal",
            )


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
