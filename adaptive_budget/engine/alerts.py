"""
Alert Generator

Threshold rules evaluated over a computed plan. Each rule is independent,
so several alerts can fire for one request.

CRITICAL: Alerts are only produced for the current calendar month. Past
months are closed summaries - there is nothing left to act on.

Alert ids combine type, category and a millisecond stamp. They only need
to be unique within one response; alerts are never stored or deduplicated
across requests.
"""

from datetime import datetime
from typing import Optional

from adaptive_budget.engine.periods import MonthPeriod
from adaptive_budget.models.budget import (
    AlertSeverity,
    AlertType,
    BudgetAlert,
    BudgetMode,
    BudgetPlan,
    CategoryAllocation,
)


# CATEGORY_AT_RISK
AT_RISK_DAYS = 5
CRITICAL_RISK_DAYS = 2
MIN_REMAINING_DAYS = 5

# SPEND_VELOCITY_HIGH, as multiples of the recommended daily pace
VELOCITY_INFO_RATIO = 1.5
VELOCITY_WARNING_RATIO = 2.0

# BUFFER_LOW, as fractions of the buffer target
BUFFER_LOW_RATIO = 0.3
BUFFER_CRITICAL_RATIO = 0.1

# MODE_SUGGESTION, against expected weekly income
WEEKS_PER_MONTH = 4
LOW_INCOME_RATIO = 0.7
HIGH_INCOME_RATIO = 1.2
GROWTH_BUFFER_RATIO = 0.8


def _stamp(now: datetime) -> int:
    return int(now.timestamp() * 1000)


def _days_phrase(days: float) -> str:
    if days < 1:
        return "less than a day"
    rounded = round(days)
    return f"{rounded} day" if rounded == 1 else f"{rounded} days"


def category_at_risk_alert(
    category: CategoryAllocation,
    period: MonthPeriod,
    now: datetime,
) -> Optional[BudgetAlert]:
    """Category will run dry well before the month ends."""
    if not category.id.is_spending:
        return None

    horizon = category.days_until_exhausted
    remaining_days = period.remaining_days
    if not (
        horizon.is_below(AT_RISK_DAYS)
        and horizon.is_below(remaining_days)
        and remaining_days > MIN_REMAINING_DAYS
    ):
        return None

    return BudgetAlert(
        id=f"category_{category.id.value}_{_stamp(now)}",
        type=AlertType.CATEGORY_AT_RISK,
        severity=(
            AlertSeverity.CRITICAL
            if horizon.days < CRITICAL_RISK_DAYS
            else AlertSeverity.WARNING
        ),
        message=f"{category.label} budget will run out in {_days_phrase(horizon.days)}",
        suggested_action=(
            f"Reduce spending in {category.label} or reallocate from another category"
        ),
        category_id=category.id,
    )


def spend_velocity_alert(
    category: CategoryAllocation,
    now: datetime,
) -> Optional[BudgetAlert]:
    """Category is being spent faster than its even daily pace."""
    if not category.id.is_spending:
        return None
    if category.burn_rate <= VELOCITY_INFO_RATIO * category.daily_recommended:
        return None

    if category.daily_recommended > 0:
        pace = round(category.burn_rate / category.daily_recommended * 100)
        message = f"{category.label} spending is {pace}% of the recommended daily pace"
    else:
        message = f"{category.label} has spending but no budget allocated this month"

    return BudgetAlert(
        id=f"velocity_{category.id.value}_{_stamp(now)}",
        type=AlertType.SPEND_VELOCITY_HIGH,
        severity=(
            AlertSeverity.WARNING
            if category.burn_rate > VELOCITY_WARNING_RATIO * category.daily_recommended
            else AlertSeverity.INFO
        ),
        message=message,
        category_id=category.id,
    )


def buffer_low_alert(
    buffer_current: float,
    buffer_target: float,
    now: datetime,
) -> Optional[BudgetAlert]:
    """Emergency buffer is well below target."""
    if not buffer_current < BUFFER_LOW_RATIO * buffer_target:
        return None

    percent = round(buffer_current / buffer_target * 100)
    return BudgetAlert(
        id=f"buffer_low_{_stamp(now)}",
        type=AlertType.BUFFER_LOW,
        severity=(
            AlertSeverity.CRITICAL
            if buffer_current < BUFFER_CRITICAL_RATIO * buffer_target
            else AlertSeverity.WARNING
        ),
        message=f"Your emergency buffer is low ({percent}% of target)",
        suggested_action="Consider switching to Survival Mode to rebuild your buffer faster",
    )


def mode_suggestion_alert(
    mode: BudgetMode,
    recent_income: float,
    expected_income: float,
    buffer_current: float,
    buffer_target: float,
    now: datetime,
) -> Optional[BudgetAlert]:
    """Suggest survival or growth from the last week's income."""
    expected_weekly = expected_income / WEEKS_PER_MONTH

    if recent_income < LOW_INCOME_RATIO * expected_weekly and mode != BudgetMode.SURVIVAL:
        return BudgetAlert(
            id=f"mode_survival_{_stamp(now)}",
            type=AlertType.MODE_SUGGESTION,
            severity=AlertSeverity.WARNING,
            message="Recent income is below average. Consider switching to Survival Mode",
            suggested_action="Switch to Survival Mode",
        )

    if (
        recent_income > HIGH_INCOME_RATIO * expected_weekly
        and buffer_current >= GROWTH_BUFFER_RATIO * buffer_target
        and mode != BudgetMode.GROWTH
    ):
        return BudgetAlert(
            id=f"mode_growth_{_stamp(now)}",
            type=AlertType.MODE_SUGGESTION,
            severity=AlertSeverity.INFO,
            message="Income is strong and buffer is healthy. You can switch to Growth Mode",
            suggested_action="Switch to Growth Mode",
        )

    return None


def compute_alerts(
    plan: BudgetPlan,
    period: MonthPeriod,
    recent_income: float,
    now: datetime,
) -> list[BudgetAlert]:
    """Evaluate every rule against a plan."""
    if not period.is_current_month:
        return []

    alerts: list[BudgetAlert] = []
    for category in plan.categories:
        for alert in (
            category_at_risk_alert(category, period, now),
            spend_velocity_alert(category, now),
        ):
            if alert is not None:
                alerts.append(alert)

    for alert in (
        buffer_low_alert(plan.buffer_current, plan.buffer_target, now),
        mode_suggestion_alert(
            plan.mode,
            recent_income,
            plan.total_income_expected,
            plan.buffer_current,
            plan.buffer_target,
            now,
        ),
    ):
        if alert is not None:
            alerts.append(alert)

    return alerts


def degraded_data_alert(message: str, now: datetime) -> BudgetAlert:
    """The single advisory alert attached to a fallback plan."""
    return BudgetAlert(
        id=f"degraded_data_{_stamp(now)}",
        type=AlertType.BUFFER_LOW,
        severity=AlertSeverity.INFO,
        message=message,
        suggested_action="Add or sync your transactions to get a personalized budget",
    )
