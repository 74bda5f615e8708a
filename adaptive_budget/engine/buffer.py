"""
Emergency Buffer Planner

The buffer target is a multiple of average monthly expenses. The multiple
grows with income volatility and is clamped so extreme volatility cannot
produce a degenerate target:

    k = clamp(0.5 + volatility * 1.5, 0.5, 1.5)
    target = round(average_monthly_expenses * k)
"""

from typing import Optional


MIN_BUFFER_MULTIPLIER = 0.5
MAX_BUFFER_MULTIPLIER = 1.5
VOLATILITY_WEIGHT = 1.5


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def buffer_multiplier(volatility: float) -> float:
    """Months of expenses to hold as buffer for a given volatility."""
    return clamp(
        MIN_BUFFER_MULTIPLIER + volatility * VOLATILITY_WEIGHT,
        MIN_BUFFER_MULTIPLIER,
        MAX_BUFFER_MULTIPLIER,
    )


def calculate_buffer_target(average_monthly_expenses: float, volatility: float) -> float:
    """Target emergency buffer. Non-decreasing in volatility."""
    return float(round(average_monthly_expenses * buffer_multiplier(volatility)))


def normalize_buffer(amount: Optional[float]) -> float:
    """
    Turn whatever the profile store returned into a usable balance.

    Missing means "nothing saved yet", not an error. Negative balances
    are treated as an empty buffer.
    """
    if amount is None:
        return 0.0
    return max(0.0, float(amount))

