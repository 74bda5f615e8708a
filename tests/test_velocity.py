"""Tests for the spend velocity monitor."""

import pytest

from adaptive_budget.engine.allocation import CategoryMapper, allocate
from adaptive_budget.engine.periods import MonthPeriod
from adaptive_budget.engine.velocity import (
    exhaustion_horizon,
    measure_category,
    measure_velocity,
)
from adaptive_budget.models import BudgetCategoryId, BudgetMode


def _june(elapsed_days: int) -> MonthPeriod:
    return MonthPeriod(
        year=2024,
        month=6,
        days_in_month=30,
        elapsed_days=elapsed_days,
        is_current_month=True,
    )


class TestMeasureCategory:
    """Tests for one category's velocity snapshot."""

    def test_nearly_spent_category(self):
        """Test 3800 of 4000 spent by day 10."""
        category = measure_category(BudgetCategoryId.ESSENTIALS, 4000.0, 3800.0, _june(10))
        assert category.burn_rate == pytest.approx(380.0)
        assert category.remaining == pytest.approx(200.0)
        assert category.days_until_exhausted.days == 0.53
        assert category.daily_recommended == pytest.approx(4000.0 / 30)

    def test_no_spend_is_unbounded(self):
        """Test the exhaustion sentinel when nothing is spent."""
        category = measure_category(BudgetCategoryId.ESSENTIALS, 4000.0, 0.0, _june(10))
        assert category.burn_rate == 0.0
        assert category.days_until_exhausted.is_unbounded
        assert exhaustion_horizon(100.0, 0.0).is_unbounded

    def test_overspend_clamps_remaining(self):
        """Test that remaining never goes negative."""
        category = measure_category(BudgetCategoryId.DISCRETIONARY, 1000.0, 1500.0, _june(10))
        assert category.remaining == 0.0
        assert category.days_until_exhausted.days == 0.0


class TestMeasureVelocity:
    """Tests for the full velocity pass."""

    def test_spend_grouped_by_mapped_category(self, now, make_tx):
        """Test that debits in the month are mapped and summed."""
        period = MonthPeriod.for_month("2024-06", now)
        allocation = allocate(BudgetMode.NORMAL, 30000.0, 0.0, 30000.0, 10000.0)
        txs = [
            make_tx(2, -500.0, "Groceries"),
            make_tx(3, -300.0, "uber"),
            make_tx(4, 1000.0, "groceries refund"),
            make_tx(20, -900.0, "groceries"),
        ]
        categories = {
            c.id: c for c in measure_velocity(allocation, txs, period, CategoryMapper())
        }
        assert categories[BudgetCategoryId.ESSENTIALS].spent_this_period == 500.0
        assert categories[BudgetCategoryId.FUEL_WORK].spent_this_period == 300.0
        assert categories[BudgetCategoryId.ESSENTIALS].burn_rate == pytest.approx(500.0 / 15)

    def test_growth_bucket_never_spent(self, now, make_tx):
        """Test that the savings bucket reports no burn."""
        period = MonthPeriod.for_month("2024-06", now)
        allocation = allocate(BudgetMode.GROWTH, 30000.0, 0.0, 30000.0, 10000.0)
        txs = [make_tx(1, -5000.0, "savings transfer")]
        categories = measure_velocity(allocation, txs, period, CategoryMapper())
        growth = categories[-1]
        assert growth.id == BudgetCategoryId.GROWTH
        assert growth.spent_this_period == 0.0
        assert growth.days_until_exhausted.is_unbounded

    def test_past_month_uses_full_length(self, now):
        """Test that a closed month is summarized over all its days."""
        period = MonthPeriod.for_month("2024-05", now)
        assert not period.is_current_month
        assert period.elapsed_days == 31
        category = measure_category(BudgetCategoryId.ESSENTIALS, 3100.0, 3100.0, period)
        assert category.burn_rate == pytest.approx(100.0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
