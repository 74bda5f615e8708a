"""
Budget Plan Models for Adaptive Budget

These models define the strict schemas for everything the engine produces.
They are designed to:
1. Be immutable - a plan is recomputed, never patched
2. Stay well-defined across serialization boundaries
3. Carry their own invariants (non-negative limits, bounded confidence)

DESIGN DECISION: Every model here is frozen. Plans are created and thrown
away inside a single request; nothing downstream is allowed to edit one.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class BudgetMode(str, Enum):
    """
    Budgeting posture.

    The mode only changes the allocation table. Switching modes never
    migrates stored state because the plan is rebuilt from scratch.
    """
    SURVIVAL = "survival"
    NORMAL = "normal"
    GROWTH = "growth"


class BudgetCategoryId(str, Enum):
    """
    Budget buckets.

    The first four are spending ceilings. GROWTH is a savings bucket that
    only exists in growth mode.
    """
    ESSENTIALS = "essentials"
    FUEL_WORK = "fuelWork"
    SUBSCRIPTIONS = "subscriptions"
    DISCRETIONARY = "discretionary"
    GROWTH = "growth"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]

    @property
    def is_spending(self) -> bool:
        return self is not BudgetCategoryId.GROWTH


CATEGORY_LABELS: dict[BudgetCategoryId, str] = {
    BudgetCategoryId.ESSENTIALS: "Essentials",
    BudgetCategoryId.FUEL_WORK: "Fuel & Work",
    BudgetCategoryId.SUBSCRIPTIONS: "Subscriptions",
    BudgetCategoryId.DISCRETIONARY: "Discretionary",
    BudgetCategoryId.GROWTH: "Growth & Savings",
}

SPENDING_CATEGORIES: tuple[BudgetCategoryId, ...] = (
    BudgetCategoryId.ESSENTIALS,
    BudgetCategoryId.FUEL_WORK,
    BudgetCategoryId.SUBSCRIPTIONS,
    BudgetCategoryId.DISCRETIONARY,
)


class AlertType(str, Enum):
    """Kinds of alert the engine can raise."""
    SPEND_VELOCITY_HIGH = "SPEND_VELOCITY_HIGH"
    BUFFER_LOW = "BUFFER_LOW"
    MODE_SUGGESTION = "MODE_SUGGESTION"
    CATEGORY_AT_RISK = "CATEGORY_AT_RISK"


class AlertSeverity(str, Enum):
    """Alert severity, lowest to highest."""
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class HorizonKind(str, Enum):
    BOUNDED = "bounded"
    UNBOUNDED = "unbounded"


class IncomeRiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# =============================================================================
# CATEGORY MODELS
# =============================================================================

class ExhaustionHorizon(BaseModel):
    """
    Days until a category's remaining amount runs out at the current burn rate.

    DESIGN DECISION: "Never runs out" is an explicit UNBOUNDED variant, not
    float('inf'). Infinity does not survive JSON, and comparisons against it
    are easy to get subtly wrong.
    """
    model_config = ConfigDict(frozen=True)

    kind: HorizonKind = Field(
        ...,
        description="Whether the horizon is a finite number of days"
    )
    days: Optional[float] = Field(
        default=None,
        ge=0,
        description="Days until exhausted; only set when bounded"
    )

    @model_validator(mode='after')
    def validate_days(self) -> 'ExhaustionHorizon':
        if self.kind == HorizonKind.BOUNDED and self.days is None:
            raise ValueError("A bounded horizon needs a number of days")
        if self.kind == HorizonKind.UNBOUNDED and self.days is not None:
            raise ValueError("An unbounded horizon cannot carry a number of days")
        return self

    @classmethod
    def unbounded(cls) -> 'ExhaustionHorizon':
        return cls(kind=HorizonKind.UNBOUNDED)

    @classmethod
    def of(cls, days: float) -> 'ExhaustionHorizon':
        return cls(kind=HorizonKind.BOUNDED, days=round(days, 2))

    @property
    def is_unbounded(self) -> bool:
        return self.kind == HorizonKind.UNBOUNDED

    def is_below(self, threshold: float) -> bool:
        """True only for a bounded horizon strictly below threshold."""
        return not self.is_unbounded and self.days < threshold


class CategoryAllocation(BaseModel):
    """
    One category's budget and how fast it is being consumed.

    remaining = max(0, monthly_limit - spent_this_period)
    daily_recommended = monthly_limit / days_in_month
    burn_rate = spent_this_period / elapsed_days
    """
    model_config = ConfigDict(frozen=True)

    id: BudgetCategoryId
    label: str = Field(
        ...,
        min_length=1,
        max_length=50
    )
    monthly_limit: float = Field(
        ...,
        ge=0,
        description="Planned ceiling (or savings target for growth) for the month"
    )
    spent_this_period: float = Field(
        default=0.0,
        ge=0,
        description="Sum of matched debits in the month"
    )
    remaining: float = Field(
        ...,
        ge=0,
        description="What is left of the monthly limit, never negative"
    )
    daily_recommended: float = Field(
        ...,
        ge=0,
        description="Even daily pace that would use the limit exactly"
    )
    burn_rate: float = Field(
        default=0.0,
        ge=0,
        description="Actual average daily spend so far"
    )
    days_until_exhausted: ExhaustionHorizon = Field(
        default_factory=ExhaustionHorizon.unbounded,
        description="Projected days until remaining reaches zero"
    )


# =============================================================================
# CHART SERIES
# =============================================================================

class DailySpendPoint(BaseModel):
    """One day of the spend velocity chart."""
    model_config = ConfigDict(frozen=True)

    day: int = Field(ge=1, le=31)
    actual_daily: float = Field(ge=0)
    actual_cumulative: float = Field(ge=0)
    ideal_cumulative: float = Field(ge=0)


class BufferHistoryPoint(BaseModel):
    """One day of the buffer chart."""
    model_config = ConfigDict(frozen=True)

    as_of: date
    buffer_amount: float = Field(ge=0)
    buffer_target: float = Field(ge=0)


# =============================================================================
# PLAN AND ALERTS
# =============================================================================

class BudgetPlan(BaseModel):
    """
    A complete plan for one user, month and mode.

    CRITICAL: Recomputed on every request and never persisted by the engine.
    """
    model_config = ConfigDict(frozen=True)

    user_id: str = Field(
        ...,
        min_length=1
    )
    month: str = Field(
        ...,
        pattern=r"^\d{4}-\d{2}$",
        description="Plan month as YYYY-MM"
    )
    mode: BudgetMode
    total_planned: float = Field(
        ...,
        ge=0,
        description="Sum of every category's monthly limit (growth bucket included)"
    )
    total_income_expected: float = Field(
        ...,
        ge=0,
        description="Expected monthly income"
    )
    buffer_target: float = Field(ge=0)
    buffer_current: float = Field(ge=0)
    buffer_reserve: float = Field(
        default=0.0,
        ge=0,
        description="Income held back for the buffer before allocation"
    )
    categories: list[CategoryAllocation] = Field(default_factory=list)
    confidence_score: float = Field(
        ...,
        gt=0.0,
        le=1.0,
        description="Plan reliability; never exactly zero"
    )
    income_volatility: float = Field(
        ...,
        ge=0.0,
        description="Coefficient of variation of monthly income"
    )
    recalculated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    is_fallback: bool = Field(
        default=False,
        description="True when the plan was built without usable transaction data"
    )

    # Charting projections of the same computation
    daily_spend_data: list[DailySpendPoint] = Field(default_factory=list)
    buffer_history: list[BufferHistoryPoint] = Field(default_factory=list)

    def category(self, category_id: BudgetCategoryId) -> Optional[CategoryAllocation]:
        """Find a category allocation by id."""
        for allocation in self.categories:
            if allocation.id == category_id:
                return allocation
        return None

    @property
    def buffer_ratio(self) -> Optional[float]:
        """Current buffer as a fraction of target, None if there is no target."""
        if self.buffer_target <= 0:
            return None
        return self.buffer_current / self.buffer_target


class BudgetAlert(BaseModel):
    """An actionable alert. Generated fresh on each request, never stored."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Unique within one response"
    )
    type: AlertType
    severity: AlertSeverity
    message: str = Field(
        ...,
        min_length=1,
        max_length=500
    )
    suggested_action: Optional[str] = Field(
        default=None,
        max_length=500
    )
    category_id: Optional[BudgetCategoryId] = Field(
        default=None,
        description="Category the alert is about, if any"
    )


class AdaptiveBudgetResult(BaseModel):
    """Response of the adaptive budget request."""
    model_config = ConfigDict(frozen=True)

    budget_plan: BudgetPlan
    alerts: list[BudgetAlert] = Field(default_factory=list)


# =============================================================================
# PLANNER OUTLOOK
# =============================================================================

class CashBurnout(BaseModel):
    """How long the current balance lasts at the recent expense pace."""
    model_config = ConfigDict(frozen=True)

    current_balance: float
    average_daily_expense: float = Field(ge=0)
    days_until_zero: Optional[int] = Field(
        default=None,
        ge=0,
        description="First projected day the balance is exhausted, None if it lasts"
    )
    projected_balance: list[float] = Field(
        default_factory=list,
        description="Day 0 (today) followed by one projected balance per day"
    )


class IncomeRiskMonth(BaseModel):
    """Income risk for one upcoming month."""
    model_config = ConfigDict(frozen=True)

    month: str = Field(
        ...,
        pattern=r"^\d{4}-\d{2}$"
    )
    label: str
    risk_level: IncomeRiskLevel
    description: str
    suggested_actions: list[str] = Field(default_factory=list)


class PlannerOutlook(BaseModel):
    """Forward-looking view built from the same transaction history."""
    model_config = ConfigDict(frozen=True)

    user_id: str
    generated_at: datetime
    cash_burnout: CashBurnout
    income_risks: list[IncomeRiskMonth] = Field(default_factory=list)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found in a request."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'out_of_range')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """Result of validating a request before any computation starts."""

    validated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def is_valid(self) -> bool:
        return not self.has_errors
