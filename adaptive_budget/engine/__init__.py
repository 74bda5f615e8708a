"""
Budget Engine Package

The pure computation core. Nothing in here performs I/O or reads the
clock; every input arrives as an argument.
"""

from adaptive_budget.engine.aggregator import (
    calculate_average_monthly_expenses,
    days_with_transactions,
    estimate_monthly_income,
    income_by_month,
    recent_income,
)
from adaptive_budget.engine.alerts import compute_alerts, degraded_data_alert
from adaptive_budget.engine.allocation import (
    ALLOCATION_TABLE,
    Allocation,
    CategoryMapper,
    allocate,
    compute_buffer_reserve,
)
from adaptive_budget.engine.assembler import (
    FALLBACK_MESSAGES,
    FallbackReason,
    assemble_budget_plan,
    build_fallback_result,
)
from adaptive_budget.engine.buffer import buffer_multiplier, calculate_buffer_target
from adaptive_budget.engine.charts import buffer_history_series, daily_spend_series
from adaptive_budget.engine.confidence import (
    compute_confidence_score,
    fallback_confidence_score,
)
from adaptive_budget.engine.modes import coerce_mode, select_mode
from adaptive_budget.engine.outlook import calculate_cash_burnout, income_risk_outlook
from adaptive_budget.engine.periods import MonthPeriod, month_key, parse_month, utc_now
from adaptive_budget.engine.velocity import exhaustion_horizon, measure_velocity
from adaptive_budget.engine.volatility import calculate_income_volatility

__all__ = [
    # Aggregator
    "calculate_average_monthly_expenses",
    "days_with_transactions",
    "estimate_monthly_income",
    "income_by_month",
    "recent_income",
    # Volatility and buffer
    "calculate_income_volatility",
    "buffer_multiplier",
    "calculate_buffer_target",
    # Mode
    "coerce_mode",
    "select_mode",
    # Allocation and velocity
    "ALLOCATION_TABLE",
    "Allocation",
    "CategoryMapper",
    "allocate",
    "compute_buffer_reserve",
    "exhaustion_horizon",
    "measure_velocity",
    # Alerts and confidence
    "compute_alerts",
    "degraded_data_alert",
    "compute_confidence_score",
    "fallback_confidence_score",
    # Charts and outlook
    "buffer_history_series",
    "daily_spend_series",
    "calculate_cash_burnout",
    "income_risk_outlook",
    # Periods
    "MonthPeriod",
    "month_key",
    "parse_month",
    "utc_now",
    # Assembly
    "FALLBACK_MESSAGES",
    "FallbackReason",
    "assemble_budget_plan",
    "build_fallback_result",
]
