"""
Data Models Package

This package contains all Pydantic models used in the Adaptive Budget system.
All data flowing in and out of the engine must conform to these schemas.
"""

from adaptive_budget.models.budget import (
    CATEGORY_LABELS,
    SPENDING_CATEGORIES,
    AdaptiveBudgetResult,
    AlertSeverity,
    AlertType,
    BudgetAlert,
    BudgetCategoryId,
    BudgetMode,
    BudgetPlan,
    BufferHistoryPoint,
    CashBurnout,
    CategoryAllocation,
    DailySpendPoint,
    ExhaustionHorizon,
    HorizonKind,
    IncomeRiskLevel,
    IncomeRiskMonth,
    PlannerOutlook,
    ValidationIssue,
    ValidationResult,
)
from adaptive_budget.models.transaction import Transaction, TransactionType
from adaptive_budget.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Budget models
    "CATEGORY_LABELS",
    "SPENDING_CATEGORIES",
    "AdaptiveBudgetResult",
    "AlertSeverity",
    "AlertType",
    "BudgetAlert",
    "BudgetCategoryId",
    "BudgetMode",
    "BudgetPlan",
    "BufferHistoryPoint",
    "CashBurnout",
    "CategoryAllocation",
    "DailySpendPoint",
    "ExhaustionHorizon",
    "HorizonKind",
    "IncomeRiskLevel",
    "IncomeRiskMonth",
    "PlannerOutlook",
    "ValidationIssue",
    "ValidationResult",
    # Transaction models
    "Transaction",
    "TransactionType",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
