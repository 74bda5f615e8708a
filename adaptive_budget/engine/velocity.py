"""
Spend Velocity Monitor

For each category, measures what has been spent this month and projects
when the remaining amount runs out at the current pace.
"""

from collections.abc import Iterable

from adaptive_budget.engine.aggregator import in_period
from adaptive_budget.engine.allocation import Allocation, CategoryMapper
from adaptive_budget.engine.periods import MonthPeriod
from adaptive_budget.models.budget import (
    BudgetCategoryId,
    CategoryAllocation,
    ExhaustionHorizon,
)
from adaptive_budget.models.transaction import Transaction


def spend_by_category(
    transactions: Iterable[Transaction],
    period: MonthPeriod,
    mapper: CategoryMapper,
) -> dict[BudgetCategoryId, float]:
    """Debit magnitudes in the period, grouped by mapped budget category."""
    totals: dict[BudgetCategoryId, float] = {}
    for tx in in_period(transactions, period):
        if not tx.is_debit:
            continue
        category = mapper.map(tx.category)
        totals[category] = totals.get(category, 0.0) + tx.magnitude
    return totals


def exhaustion_horizon(remaining: float, burn_rate: float) -> ExhaustionHorizon:
    """remaining / burn_rate, or UNBOUNDED when nothing is being spent."""
    if burn_rate <= 0:
        return ExhaustionHorizon.unbounded()
    return ExhaustionHorizon.of(remaining / burn_rate)


def measure_category(
    category_id: BudgetCategoryId,
    monthly_limit: float,
    spent: float,
    period: MonthPeriod,
) -> CategoryAllocation:
    """Build the allocation snapshot for one category."""
    remaining = max(0.0, monthly_limit - spent)
    burn_rate = spent / period.elapsed_days
    return CategoryAllocation(
        id=category_id,
        label=category_id.label,
        monthly_limit=monthly_limit,
        spent_this_period=spent,
        remaining=remaining,
        daily_recommended=monthly_limit / period.days_in_month,
        burn_rate=burn_rate,
        days_until_exhausted=exhaustion_horizon(remaining, burn_rate),
    )


def measure_velocity(
    allocation: Allocation,
    transactions: Iterable[Transaction],
    period: MonthPeriod,
    mapper: CategoryMapper,
) -> list[CategoryAllocation]:
    """
    Velocity snapshot for every category in the allocation.

    The growth bucket is savings: nothing is ever spent from it, so it
    always reports zero burn and an unbounded horizon.
    """
    spent = spend_by_category(transactions, period, mapper)
    return [
        measure_category(
            category_id,
            limit,
            spent.get(category_id, 0.0) if category_id.is_spending else 0.0,
            period,
        )
        for category_id, limit in allocation.limits.items()
    ]
