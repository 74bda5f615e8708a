"""
Plan Assembler

Runs the engine pipeline for one request:

    transactions -> aggregator -> {volatility, buffer} -> mode
                 -> allocation -> velocity -> {alerts, confidence} -> plan

DESIGN DECISION: The assembler is pure. Transactions, the buffer balance
and the clock are all handed in; fetching them is the orchestrator's job.
That keeps the whole pipeline testable without a live store.

No data is not an error. An empty history produces a fully-populated
fallback plan with zeroed amounts, floor confidence and one advisory alert.
"""

from collections.abc import Sequence
from datetime import datetime
from enum import Enum
from typing import Optional

from adaptive_budget.config.settings import BudgetSettings
from adaptive_budget.engine.aggregator import (
    calculate_average_monthly_expenses,
    days_with_transactions,
    estimate_monthly_income,
    in_period,
    recent_income,
)
from adaptive_budget.engine.alerts import compute_alerts, degraded_data_alert
from adaptive_budget.engine.allocation import CategoryMapper, allocate
from adaptive_budget.engine.buffer import calculate_buffer_target, normalize_buffer
from adaptive_budget.engine.charts import buffer_history_series, daily_spend_series
from adaptive_budget.engine.confidence import (
    compute_confidence_score,
    fallback_confidence_score,
)
from adaptive_budget.engine.modes import select_mode
from adaptive_budget.engine.periods import MonthPeriod
from adaptive_budget.engine.velocity import measure_velocity
from adaptive_budget.engine.volatility import calculate_income_volatility
from adaptive_budget.models.budget import (
    AdaptiveBudgetResult,
    BudgetMode,
    BudgetPlan,
)
from adaptive_budget.models.transaction import Transaction


class FallbackReason(str, Enum):
    """Why a request got the fallback plan instead of a computed one."""
    NO_DATA = "no_data"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    COMPUTATION_FAILED = "computation_failed"


FALLBACK_MESSAGES: dict[FallbackReason, str] = {
    FallbackReason.NO_DATA: (
        "No transaction history found yet. Showing a starter budget "
        "until you add transactions."
    ),
    FallbackReason.UPSTREAM_UNAVAILABLE: (
        "Unable to reach your transaction history. Showing a fallback budget."
    ),
    FallbackReason.COMPUTATION_FAILED: (
        "Unable to generate your budget right now. Showing a fallback budget."
    ),
}


def assemble_budget_plan(
    user_id: str,
    month: str,
    transactions: Sequence[Transaction],
    buffer_current: Optional[float],
    now: datetime,
    mode_override: Optional[BudgetMode] = None,
    settings: Optional[BudgetSettings] = None,
    mapper: Optional[CategoryMapper] = None,
) -> AdaptiveBudgetResult:
    """
    Build the plan and alerts for one user and month.

    Args:
        user_id: Owner of the plan
        month: Plan month as YYYY-MM (already validated)
        transactions: Snapshot from the transaction source
        buffer_current: Balance from the profile store; None means none saved
        now: The clock for this request
        mode_override: Caller-selected mode; wins over the automatic choice
        settings: Engine windows and defaults
        mapper: Category keyword mapper (built from settings if omitted)
    """
    settings = settings or BudgetSettings()
    if not transactions:
        return build_fallback_result(
            user_id, month, now, FallbackReason.NO_DATA, mode_override, settings
        )

    mapper = mapper or CategoryMapper(settings.category_keywords)
    period = MonthPeriod.for_month(month, now)

    expected_income = estimate_monthly_income(
        transactions, now, settings.income_window_months
    )
    average_expenses = calculate_average_monthly_expenses(
        transactions, now, settings.expense_window_days, settings.expense_fallback
    )
    volatility = calculate_income_volatility(
        transactions, now, settings.volatility_window_days, settings.default_volatility
    )

    buffer_target = calculate_buffer_target(average_expenses, volatility)
    buffer_current = normalize_buffer(buffer_current)

    mode = select_mode(
        buffer_current,
        buffer_target,
        expected_income,
        average_expenses,
        override=mode_override,
    )

    allocation = allocate(
        mode,
        total_available=expected_income,
        buffer_target=buffer_target,
        expected_income=expected_income,
        average_expenses=average_expenses,
    )
    month_transactions = in_period(transactions, period)
    categories = measure_velocity(allocation, month_transactions, period, mapper)

    confidence = compute_confidence_score(
        volatility,
        days_with_transactions(transactions, now, settings.coverage_window_days),
        buffer_current,
        buffer_target,
        settings.coverage_window_days,
    )

    plan = BudgetPlan(
        user_id=user_id,
        month=period.key,
        mode=mode,
        total_planned=allocation.total_planned,
        total_income_expected=expected_income,
        buffer_target=buffer_target,
        buffer_current=buffer_current,
        buffer_reserve=allocation.buffer_reserve,
        categories=categories,
        confidence_score=confidence,
        income_volatility=volatility,
        recalculated_at=now,
        daily_spend_data=daily_spend_series(categories, month_transactions, period),
        buffer_history=buffer_history_series(
            buffer_current, buffer_target, now, settings.buffer_history_days
        ),
    )

    alerts = compute_alerts(
        plan,
        period,
        recent_income(transactions, now, settings.recent_income_days),
        now,
    )
    return AdaptiveBudgetResult(budget_plan=plan, alerts=alerts)


def build_fallback_result(
    user_id: str,
    month: str,
    now: datetime,
    reason: FallbackReason,
    mode_override: Optional[BudgetMode] = None,
    settings: Optional[BudgetSettings] = None,
) -> AdaptiveBudgetResult:
    """
    Fully-populated plan with zeroed amounts and floor confidence.

    Every category is present with a zero limit so callers never have to
    special-case the shape. An explicit mode override is still honored.
    """
    settings = settings or BudgetSettings()
    period = MonthPeriod.for_month(month, now)
    mode = mode_override or BudgetMode.NORMAL

    allocation = allocate(
        mode,
        total_available=0.0,
        buffer_target=0.0,
        expected_income=0.0,
        average_expenses=0.0,
    )
    categories = measure_velocity(allocation, [], period, CategoryMapper())

    plan = BudgetPlan(
        user_id=user_id,
        month=period.key,
        mode=mode,
        total_planned=0.0,
        total_income_expected=0.0,
        buffer_target=0.0,
        buffer_current=0.0,
        buffer_reserve=0.0,
        categories=categories,
        confidence_score=fallback_confidence_score(),
        income_volatility=settings.default_volatility,
        recalculated_at=now,
        is_fallback=True,
        daily_spend_data=daily_spend_series(categories, [], period),
        buffer_history=buffer_history_series(0.0, 0.0, now, settings.buffer_history_days),
    )
    return AdaptiveBudgetResult(
        budget_plan=plan,
        alerts=[degraded_data_alert(FALLBACK_MESSAGES[reason], now)],
    )
