"""
Transaction Aggregator

Reduces a raw transaction list into income and expense scalars over
trailing windows. Every function is pure: same transactions and same
clock give the same numbers.

Windows are measured in days back from `now`; a "month" is 30 days.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime

from adaptive_budget.engine.periods import MonthPeriod, month_key, window_start
from adaptive_budget.models.transaction import Transaction


DAYS_PER_MONTH = 30

# Used when there is no expense history at all, so nothing downstream
# ever divides by zero.
DEFAULT_MONTHLY_EXPENSES = 10000.0


def in_window(
    transactions: Iterable[Transaction],
    now: datetime,
    days: int,
) -> list[Transaction]:
    """Transactions with a timestamp inside the trailing window."""
    cutoff = window_start(now, days)
    return [tx for tx in transactions if cutoff <= tx.occurred_at <= now]


def in_period(
    transactions: Iterable[Transaction],
    period: MonthPeriod,
) -> list[Transaction]:
    """Transactions that fall inside a calendar month."""
    return [tx for tx in transactions if period.contains(tx.occurred_at)]


def total_credits(transactions: Iterable[Transaction]) -> float:
    return sum(tx.magnitude for tx in transactions if tx.is_credit)


def total_debits(transactions: Iterable[Transaction]) -> float:
    return sum(tx.magnitude for tx in transactions if tx.is_debit)


def estimate_monthly_income(
    transactions: Iterable[Transaction],
    now: datetime,
    months: int = 2,
) -> float:
    """
    Expected monthly income from the trailing `months` (of 30 days).

    Credits in the window are spread over the whole window and scaled
    to 30 days. No credits is a valid answer: 0.
    """
    days = months * DAYS_PER_MONTH
    credits = [tx for tx in in_window(transactions, now, days) if tx.is_credit]
    if not credits:
        return 0.0

    daily_average = total_credits(credits) / max(1, days)
    return float(round(daily_average * DAYS_PER_MONTH))


def calculate_average_monthly_expenses(
    transactions: Iterable[Transaction],
    now: datetime,
    days: int = 60,
    fallback: float = DEFAULT_MONTHLY_EXPENSES,
) -> float:
    """
    Average monthly expenses over the trailing `days`.

    Returns `fallback` when there are no debits in the window.
    """
    debits = [tx for tx in in_window(transactions, now, days) if tx.is_debit]
    if not debits:
        return float(fallback)

    daily_average = total_debits(debits) / max(1, days)
    return float(round(daily_average * DAYS_PER_MONTH))


def income_by_month(
    transactions: Iterable[Transaction],
    now: datetime,
    days: int = 90,
) -> dict[str, float]:
    """Credit totals keyed by YYYY-MM, over the trailing window."""
    buckets: dict[str, float] = defaultdict(float)
    for tx in in_window(transactions, now, days):
        if tx.is_credit:
            buckets[month_key(tx.occurred_at)] += tx.magnitude
    return dict(sorted(buckets.items()))


def recent_income(
    transactions: Iterable[Transaction],
    now: datetime,
    days: int = 7,
) -> float:
    """Total credits over the last `days` days."""
    return total_credits(in_window(transactions, now, days))


def days_with_transactions(
    transactions: Iterable[Transaction],
    now: datetime,
    days: int = 30,
) -> int:
    """Number of distinct calendar days in the window that have any transaction."""
    return len({tx.occurred_at.date() for tx in in_window(transactions, now, days)})
