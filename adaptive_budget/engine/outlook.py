"""
Planner Outlook

Forward-looking views built from the same transaction history as the
budget plan:

1. Cash burnout - how long the current balance lasts at the recent
   expense pace
2. Income risk - a per-month risk level for the next six months, driven
   by how volatile income has been over the last six
"""

import calendar
from collections.abc import Iterable
from datetime import datetime

from adaptive_budget.engine.aggregator import in_window, total_debits
from adaptive_budget.engine.periods import month_key, shift_month
from adaptive_budget.engine.volatility import coefficient_of_variation
from adaptive_budget.models.budget import (
    CashBurnout,
    IncomeRiskLevel,
    IncomeRiskMonth,
)
from adaptive_budget.models.transaction import Transaction


HIGH_RISK_VOLATILITY = 0.3
LOW_RISK_VOLATILITY = 0.15
MIN_MONTHS_FOR_LOW_RISK = 3

RISK_DESCRIPTIONS: dict[IncomeRiskLevel, str] = {
    IncomeRiskLevel.HIGH: (
        "High income volatility detected. Income may vary significantly this month."
    ),
    IncomeRiskLevel.MEDIUM: (
        "Moderate income volatility. Plan for some variation in earnings."
    ),
    IncomeRiskLevel.LOW: (
        "Stable income pattern. Expect consistent earnings this month."
    ),
}


def calculate_cash_burnout(
    transactions: Iterable[Transaction],
    now: datetime,
    horizon_days: int = 30,
    expense_window_days: int = 30,
) -> CashBurnout:
    """
    Project the net balance forward at the recent average daily expense.

    The balance is the net of every transaction supplied. Projected values
    are floored at zero; day 0 is today's actual balance.
    """
    transactions = list(transactions)
    current_balance = sum(tx.signed_amount for tx in transactions)
    daily_expense = (
        total_debits(in_window(transactions, now, expense_window_days))
        / expense_window_days
    )

    projected = [float(round(current_balance))]
    days_until_zero = 0 if current_balance <= 0 else None
    balance = current_balance
    for day in range(1, horizon_days + 1):
        balance -= daily_expense
        projected.append(float(round(max(0.0, balance))))
        if balance <= 0 and days_until_zero is None:
            days_until_zero = day

    return CashBurnout(
        current_balance=float(round(current_balance)),
        average_daily_expense=daily_expense,
        days_until_zero=days_until_zero,
        projected_balance=projected,
    )


def classify_income_risk(volatility: float, months_with_income: int) -> IncomeRiskLevel:
    if volatility > HIGH_RISK_VOLATILITY:
        return IncomeRiskLevel.HIGH
    if volatility < LOW_RISK_VOLATILITY and months_with_income >= MIN_MONTHS_FOR_LOW_RISK:
        return IncomeRiskLevel.LOW
    return IncomeRiskLevel.MEDIUM


def income_risk_outlook(
    transactions: Iterable[Transaction],
    now: datetime,
    months_ahead: int = 6,
    history_months: int = 6,
) -> list[IncomeRiskMonth]:
    """Risk level for each of the next `months_ahead` months."""
    history_keys = {
        "%04d-%02d" % shift_month(now.year, now.month, -offset)
        for offset in range(history_months)
    }
    income: dict[str, float] = {key: 0.0 for key in history_keys}
    for tx in transactions:
        key = month_key(tx.occurred_at)
        if tx.is_credit and key in income:
            income[key] += tx.magnitude

    earning_months = [value for value in income.values() if value > 0]
    volatility = (
        coefficient_of_variation(earning_months) if len(earning_months) > 1 else 0.0
    )
    level = classify_income_risk(volatility, len(earning_months))

    outlook = []
    for offset in range(1, months_ahead + 1):
        year, month = shift_month(now.year, now.month, offset)
        outlook.append(IncomeRiskMonth(
            month=f"{year:04d}-{month:02d}",
            label=f"{calendar.month_name[month]} {year}",
            risk_level=level,
            description=RISK_DESCRIPTIONS[level],
            suggested_actions=[
                "Build emergency buffer before this month"
                if level == IncomeRiskLevel.HIGH
                else "Continue regular savings",
                "Diversify income sources if possible",
                "Review and reduce non-essential expenses",
            ],
        ))
    return outlook
