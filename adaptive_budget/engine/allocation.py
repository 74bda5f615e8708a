"""
Category Allocator

Splits spendable income across the fixed category set using a per-mode
percentage table. The survival and normal tables sum to 1.0. The growth
table sums to 0.90: the remaining tenth of spendable income is left
unallocated as savings, and growth mode appends a savings bucket on top.

    reserve   = min(0.1 * buffer_target, 0.1 * total_available)
    spendable = total_available - reserve
    limit[c]  = round(spendable * table[mode][c])

DESIGN DECISION: Free-text transaction categories are mapped to budget
categories through an explicit keyword table (data, not branching code).
The table is ordered; the first category with a matching keyword wins and
anything unmatched falls back to discretionary.
"""

from collections.abc import Mapping, Sequence
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from adaptive_budget.config.settings import DEFAULT_CATEGORY_KEYWORDS
from adaptive_budget.models.budget import (
    SPENDING_CATEGORIES,
    BudgetCategoryId,
    BudgetMode,
)


ALLOCATION_TABLE: dict[BudgetMode, dict[BudgetCategoryId, float]] = {
    BudgetMode.SURVIVAL: {
        BudgetCategoryId.ESSENTIALS: 0.50,
        BudgetCategoryId.FUEL_WORK: 0.25,
        BudgetCategoryId.SUBSCRIPTIONS: 0.05,
        BudgetCategoryId.DISCRETIONARY: 0.20,
    },
    BudgetMode.NORMAL: {
        BudgetCategoryId.ESSENTIALS: 0.40,
        BudgetCategoryId.FUEL_WORK: 0.25,
        BudgetCategoryId.SUBSCRIPTIONS: 0.10,
        BudgetCategoryId.DISCRETIONARY: 0.25,
    },
    BudgetMode.GROWTH: {
        BudgetCategoryId.ESSENTIALS: 0.35,
        BudgetCategoryId.FUEL_WORK: 0.20,
        BudgetCategoryId.SUBSCRIPTIONS: 0.10,
        BudgetCategoryId.DISCRETIONARY: 0.25,
    },
}

RESERVE_FRACTION = 0.1
GROWTH_SAVINGS_FRACTION = 0.3


class CategoryMapper:
    """
    Maps free-text transaction categories onto budget categories.

    Matching is a case-insensitive substring test against each keyword,
    in table order.
    """

    def __init__(
        self,
        keywords: Optional[Mapping[BudgetCategoryId, Sequence[str]]] = None,
        default: BudgetCategoryId = BudgetCategoryId.DISCRETIONARY,
    ):
        keywords = DEFAULT_CATEGORY_KEYWORDS if keywords is None else keywords
        for category in keywords:
            if not category.is_spending:
                raise ValueError(f"Cannot map transactions to the {category.value} bucket")
        self._table: tuple[tuple[str, BudgetCategoryId], ...] = tuple(
            (keyword.strip().lower(), category)
            for category, category_keywords in keywords.items()
            for keyword in category_keywords
            if keyword.strip()
        )
        self._default = default

    @property
    def table(self) -> tuple[tuple[str, BudgetCategoryId], ...]:
        """(keyword, category) pairs in match order."""
        return self._table

    def map(self, transaction_category: Optional[str]) -> BudgetCategoryId:
        if not transaction_category:
            return self._default

        lowered = transaction_category.lower()
        for keyword, category in self._table:
            if keyword in lowered:
                return category
        return self._default


class Allocation(BaseModel):
    """Monthly limits for one mode, before any spending is measured."""
    model_config = ConfigDict(frozen=True)

    mode: BudgetMode
    total_available: float = Field(ge=0)
    buffer_reserve: float = Field(ge=0)
    spendable: float = Field(ge=0)
    limits: dict[BudgetCategoryId, float] = Field(default_factory=dict)

    @property
    def total_planned(self) -> float:
        """Sum of every limit, growth bucket included, reserve excluded."""
        return float(sum(self.limits.values()))


def compute_buffer_reserve(total_available: float, buffer_target: float) -> float:
    """Income held back for the buffer; never more than 10% of either figure."""
    return min(RESERVE_FRACTION * buffer_target, RESERVE_FRACTION * total_available)


def compute_growth_amount(expected_income: float, average_expenses: float) -> float:
    """Savings bucket for growth mode; zero when income does not cover expenses."""
    return float(max(0, round((expected_income - average_expenses) * GROWTH_SAVINGS_FRACTION)))


def allocate(
    mode: BudgetMode,
    total_available: float,
    buffer_target: float,
    expected_income: float,
    average_expenses: float,
) -> Allocation:
    """Build the monthly limits for every category active in `mode`."""
    total_available = max(0.0, total_available)
    reserve = max(0.0, compute_buffer_reserve(total_available, buffer_target))
    spendable = total_available - reserve

    table = ALLOCATION_TABLE[mode]
    limits = {
        category: float(round(spendable * table[category]))
        for category in SPENDING_CATEGORIES
    }
    if mode == BudgetMode.GROWTH:
        limits[BudgetCategoryId.GROWTH] = compute_growth_amount(
            expected_income, average_expenses
        )

    return Allocation(
        mode=mode,
        total_available=total_available,
        buffer_reserve=reserve,
        spendable=spendable,
        limits=limits,
    )
