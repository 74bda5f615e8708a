"""
Chart series derived from a plan.

These are projections of the same computation, not separate state.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta

from adaptive_budget.engine.aggregator import in_period
from adaptive_budget.engine.periods import MonthPeriod
from adaptive_budget.models.budget import (
    BufferHistoryPoint,
    CategoryAllocation,
    DailySpendPoint,
)
from adaptive_budget.models.transaction import Transaction


# The buffer history ramps from this fraction of the target.
BUFFER_HISTORY_START_RATIO = 0.5


def daily_spend_series(
    categories: Iterable[CategoryAllocation],
    transactions: Iterable[Transaction],
    period: MonthPeriod,
) -> list[DailySpendPoint]:
    """
    Actual vs ideal cumulative spend for every day of the month.

    Ideal pace is the sum of the spending categories' recommended daily
    amounts; the growth bucket is savings and is left out.
    """
    ideal_daily = sum(c.daily_recommended for c in categories if c.id.is_spending)

    actual_by_day = [0.0] * (period.days_in_month + 1)
    for tx in in_period(transactions, period):
        if tx.is_debit:
            actual_by_day[tx.occurred_at.day] += tx.magnitude

    series = []
    actual_cumulative = 0.0
    for day in range(1, period.days_in_month + 1):
        actual_cumulative += actual_by_day[day]
        series.append(DailySpendPoint(
            day=day,
            actual_daily=actual_by_day[day],
            actual_cumulative=actual_cumulative,
            ideal_cumulative=ideal_daily * day,
        ))
    return series


def buffer_history_series(
    buffer_current: float,
    buffer_target: float,
    now: datetime,
    days: int = 30,
) -> list[BufferHistoryPoint]:
    """
    Trailing buffer balance, oldest first, one point per day plus today.

    Balance changes are not tracked over time, so the series is a linear
    ramp from half the target up to today's balance.
    """
    start = buffer_target * BUFFER_HISTORY_START_RATIO
    step = (buffer_current - start) / days

    history = []
    for days_ago in range(days, -1, -1):
        elapsed = days - days_ago
        history.append(BufferHistoryPoint(
            as_of=(now - timedelta(days=days_ago)).date(),
            buffer_amount=float(round(max(0.0, start + step * elapsed))),
            buffer_target=buffer_target,
        ))
    return history
