"""
Mode Selector

A pure function of current inputs - there is no mode history. An explicit
override from the caller always wins.
"""

from typing import Optional, Union

from adaptive_budget.models.budget import BudgetMode


SURVIVAL_BUFFER_RATIO = 0.25
GROWTH_INCOME_RATIO = 1.2


def coerce_mode(value: Union[BudgetMode, str, None]) -> Optional[BudgetMode]:
    """
    Accept a BudgetMode, its string value, or None.

    Raises:
        ValueError: If the string is not one of the three modes
    """
    if value is None or isinstance(value, BudgetMode):
        return value
    return BudgetMode(value.strip().lower())


def select_mode(
    buffer_current: float,
    buffer_target: float,
    expected_income: float,
    average_expenses: float,
    override: Optional[BudgetMode] = None,
) -> BudgetMode:
    """
    Pick the budgeting mode.

    1. An explicit override wins unconditionally
    2. Buffer below a quarter of target -> survival
    3. Buffer above target and income comfortably above expenses -> growth
    4. Otherwise normal
    """
    if override is not None:
        return override

    if buffer_current < SURVIVAL_BUFFER_RATIO * buffer_target:
        return BudgetMode.SURVIVAL

    if (
        buffer_current > buffer_target
        and expected_income > GROWTH_INCOME_RATIO * average_expenses
    ):
        return BudgetMode.GROWTH

    return BudgetMode.NORMAL
