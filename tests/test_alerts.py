"""Tests for the alert generator."""

import pytest

from adaptive_budget.engine.alerts import (
    buffer_low_alert,
    category_at_risk_alert,
    degraded_data_alert,
    mode_suggestion_alert,
    spend_velocity_alert,
)
from adaptive_budget.engine.periods import MonthPeriod
from adaptive_budget.engine.velocity import measure_category
from adaptive_budget.models import (
    AlertSeverity,
    AlertType,
    BudgetCategoryId,
    BudgetMode,
    CategoryAllocation,
    ExhaustionHorizon,
)


def _june(elapsed_days: int) -> MonthPeriod:
    return MonthPeriod(
        year=2024,
        month=6,
        days_in_month=30,
        elapsed_days=elapsed_days,
        is_current_month=True,
    )


class TestCategoryAtRisk:
    """Tests for CATEGORY_AT_RISK."""

    def test_half_day_left_is_critical(self, now):
        """Test a category with about half a day left."""
        period = _june(10)
        category = measure_category(BudgetCategoryId.ESSENTIALS, 4000.0, 3800.0, period)
        alert = category_at_risk_alert(category, period, now)
        assert alert is not None
        assert alert.type == AlertType.CATEGORY_AT_RISK
        assert alert.severity == AlertSeverity.CRITICAL
        assert alert.category_id == BudgetCategoryId.ESSENTIALS
        assert alert.id.startswith("category_essentials_")

    def test_few_days_left_is_warning(self, now):
        """Test a category with between two and five days left."""
        period = _june(10)
        category = measure_category(BudgetCategoryId.ESSENTIALS, 4000.0, 3000.0, period)
        alert = category_at_risk_alert(category, period, now)
        assert alert.severity == AlertSeverity.WARNING

    def test_end_of_month_is_quiet(self, now):
        """Test that nothing fires with five or fewer days left in the month."""
        period = _june(26)
        category = measure_category(BudgetCategoryId.ESSENTIALS, 4000.0, 3990.0, period)
        assert category_at_risk_alert(category, period, now) is None

    def test_unbounded_is_quiet(self, now):
        """Test that an unspent category never fires."""
        period = _june(10)
        category = measure_category(BudgetCategoryId.ESSENTIALS, 4000.0, 0.0, period)
        assert category_at_risk_alert(category, period, now) is None

    def test_growth_bucket_excluded(self, now):
        """Test that the savings bucket is never at risk."""
        growth = CategoryAllocation(
            id=BudgetCategoryId.GROWTH,
            label="Growth & Savings",
            monthly_limit=100.0,
            remaining=10.0,
            daily_recommended=1.0,
            burn_rate=50.0,
            days_until_exhausted=ExhaustionHorizon.of(0.2),
        )
        assert category_at_risk_alert(growth, _june(10), now) is None
        assert spend_velocity_alert(growth, now) is None


class TestSpendVelocity:
    """Tests for SPEND_VELOCITY_HIGH."""

    @pytest.mark.parametrize("spent, expected", [
        (1400.0, None),
        (1600.0, AlertSeverity.INFO),
        (2500.0, AlertSeverity.WARNING),
    ])
    def test_thresholds(self, now, spent, expected):
        """Test the 1.5x and 2x pace thresholds."""
        category = measure_category(BudgetCategoryId.FUEL_WORK, 3000.0, spent, _june(10))
        alert = spend_velocity_alert(category, now)
        if expected is None:
            assert alert is None
        else:
            assert alert.type == AlertType.SPEND_VELOCITY_HIGH
            assert alert.severity == expected

    def test_spend_without_budget(self, now):
        """Test spending in a category with a zero limit."""
        category = measure_category(BudgetCategoryId.SUBSCRIPTIONS, 0.0, 100.0, _june(10))
        alert = spend_velocity_alert(category, now)
        assert alert.severity == AlertSeverity.WARNING
        assert "no budget" in alert.message


class TestBufferLow:
    """Tests for BUFFER_LOW."""

    def test_critical_below_tenth(self, now):
        """Test a nearly empty buffer."""
        alert = buffer_low_alert(500.0, 9500.0, now)
        assert alert.severity == AlertSeverity.CRITICAL
        assert "Survival" in alert.suggested_action

    def test_warning_below_thirty_percent(self, now):
        """Test a low buffer."""
        assert buffer_low_alert(2000.0, 9500.0, now).severity == AlertSeverity.WARNING

    def test_healthy_buffer_is_quiet(self, now):
        """Test that a healthy buffer raises nothing."""
        assert buffer_low_alert(3000.0, 9500.0, now) is None

    def test_zero_target_is_quiet(self, now):
        """Test that a zero target never divides by zero."""
        assert buffer_low_alert(0.0, 0.0, now) is None


class TestModeSuggestion:
    """Tests for MODE_SUGGESTION."""

    def test_suggests_survival_on_weak_week(self, now):
        """Test a week below 70% of expected weekly income."""
        alert = mode_suggestion_alert(BudgetMode.NORMAL, 3000.0, 20000.0, 9500.0, 9500.0, now)
        assert alert.type == AlertType.MODE_SUGGESTION
        assert alert.severity == AlertSeverity.WARNING
        assert alert.id.startswith("mode_survival_")

    def test_no_survival_suggestion_when_already_survival(self, now):
        """Test that the current mode is not suggested again."""
        assert mode_suggestion_alert(
            BudgetMode.SURVIVAL, 3000.0, 20000.0, 9500.0, 9500.0, now
        ) is None

    def test_suggests_growth_on_strong_week(self, now):
        """Test a strong week with a healthy buffer."""
        alert = mode_suggestion_alert(BudgetMode.NORMAL, 7000.0, 20000.0, 8000.0, 9500.0, now)
        assert alert.severity == AlertSeverity.INFO
        assert alert.id.startswith("mode_growth_")

    def test_no_growth_with_thin_buffer(self, now):
        """Test that growth needs 80% of the buffer target."""
        assert mode_suggestion_alert(
            BudgetMode.NORMAL, 7000.0, 20000.0, 5000.0, 9500.0, now
        ) is None


class TestDegradedData:
    """Tests for the fallback advisory."""

    def test_degraded_alert_shape(self, now):
        """Test the single informational alert of a fallback plan."""
        alert = degraded_data_alert("No transaction history found yet.", now)
        assert alert.type == AlertType.BUFFER_LOW
        assert alert.severity == AlertSeverity.INFO
        assert alert.id == f"degraded_data_{int(now.timestamp() * 1000)}"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
