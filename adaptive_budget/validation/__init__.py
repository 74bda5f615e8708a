"""Validation package."""

from adaptive_budget.validation.validator import BudgetRequestError, RequestValidator

__all__ = ["BudgetRequestError", "RequestValidator"]
