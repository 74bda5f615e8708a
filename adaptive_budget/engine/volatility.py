"""
Income Volatility Estimator

Volatility is the coefficient of variation (population standard deviation
over mean) of monthly income across the trailing window.
"""

from collections.abc import Iterable
from datetime import datetime
from statistics import fmean, pstdev

from adaptive_budget.engine.aggregator import income_by_month
from adaptive_budget.models.transaction import Transaction


# Assumed when fewer than two months of income exist.
DEFAULT_VOLATILITY = 0.3

# Months exist but all of them sum to zero.
ZERO_MEAN_VOLATILITY = 0.5


def coefficient_of_variation(values: list[float]) -> float:
    """stdev / mean; ZERO_MEAN_VOLATILITY when the mean is not positive."""
    mean = fmean(values)
    if mean <= 0:
        return ZERO_MEAN_VOLATILITY
    return pstdev(values, mu=mean) / mean


def calculate_income_volatility(
    transactions: Iterable[Transaction],
    now: datetime,
    window_days: int = 90,
    default: float = DEFAULT_VOLATILITY,
) -> float:
    """
    Coefficient of variation of monthly income.

    Never negative. Unbounded above - callers clamp it where it matters.
    """
    monthly_incomes = list(income_by_month(transactions, now, window_days).values())
    if len(monthly_incomes) < 2:
        return default
    return coefficient_of_variation(monthly_incomes)
