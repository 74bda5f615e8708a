"""
Main Orchestrator for Adaptive Budget

This module ties together all the components and defines the
end-to-end flows for:
1. Adaptive budget (validate -> fetch -> assemble -> audit)
2. Buffer update (validate -> write -> audit)
3. Planner outlook (fetch -> project -> audit)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Caller errors are rejected before any store is touched
- Missing data and unreachable stores never fail a budget request;
  they produce the fallback plan
- Every step is audited

This is the "glue" that ensures the system keeps answering even when
an upstream store is misbehaving.
"""

import asyncio
from collections.abc import Callable
from datetime import datetime
from typing import Optional, Union
from uuid import UUID

import structlog

from adaptive_budget.audit import AuditLogger, create_correlation_id
from adaptive_budget.config import BudgetSettings, get_settings
from adaptive_budget.engine import (
    FallbackReason,
    assemble_budget_plan,
    build_fallback_result,
    calculate_cash_burnout,
    coerce_mode,
    income_risk_outlook,
    month_key,
    utc_now,
)
from adaptive_budget.models import (
    AdaptiveBudgetResult,
    BudgetMode,
    CashBurnout,
    PlannerOutlook,
    ValidationResult,
)
from adaptive_budget.services.storage import (
    BufferStoreInterface,
    GoogleSheetsAuditStorage,
    GoogleSheetsBufferStore,
    GoogleSheetsClient,
    GoogleSheetsTransactionSource,
    InMemoryBufferStore,
    InMemoryTransactionSource,
    TransactionSourceInterface,
)
from adaptive_budget.validation import BudgetRequestError, RequestValidator


logger = structlog.get_logger("adaptive_budget.orchestrator")


class AdaptiveBudgetFlow:
    """
    Orchestrates the adaptive budget request.

    Flow:
    1. Validate -> reject caller errors (BudgetRequestError)
    2. Fetch -> transactions and buffer balance, awaited together
    3. Assemble -> pure engine pipeline
    4. Audit -> computed or fallback, with the reason

    Only step 1 can raise. Everything after it ends in a plan.
    """

    def __init__(
        self,
        transaction_source: TransactionSourceInterface,
        buffer_store: BufferStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[BudgetSettings] = None,
        validator: Optional[RequestValidator] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._transaction_source = transaction_source
        self._buffer_store = buffer_store
        self._audit_logger = audit_logger
        self._settings = settings or get_settings().budget
        self._validator = validator or RequestValidator()
        self._clock = clock

    async def _reject(
        self,
        user_id: Optional[str],
        result: ValidationResult,
        correlation_id: UUID,
    ) -> None:
        if self._audit_logger:
            await self._audit_logger.log_request_rejected(
                user_id=user_id if isinstance(user_id, str) else None,
                issues=[
                    {"field": i.field, "type": i.issue_type, "message": i.message}
                    for i in result.issues
                    if i.severity == "error"
                ],
                correlation_id=correlation_id,
            )
        raise BudgetRequestError(result)

    async def _fallback(
        self,
        user_id: str,
        month: str,
        now: datetime,
        reason: FallbackReason,
        mode_override: Optional[BudgetMode],
        correlation_id: UUID,
    ) -> AdaptiveBudgetResult:
        result = build_fallback_result(
            user_id, month, now, reason, mode_override, self._settings
        )
        if self._audit_logger:
            await self._audit_logger.log_fallback_used(
                user_id=user_id,
                month=month,
                reason=reason.value,
                correlation_id=correlation_id,
            )
        return result

    async def compute_adaptive_budget(
        self,
        user_id: str,
        month: Optional[str] = None,
        mode_override: Union[BudgetMode, str, None] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AdaptiveBudgetResult:
        """
        Build the budget plan and alerts for one user and month.

        Args:
            user_id: Requesting user
            month: YYYY-MM; defaults to the current UTC month
            mode_override: "survival", "normal", "growth" or a BudgetMode

        Returns:
            The plan and its alerts. A fallback plan when there is no
            usable data or a store is unreachable.

        Raises:
            BudgetRequestError: If the request itself is malformed
        """
        correlation_id = correlation_id or create_correlation_id()
        now = self._clock()

        validation = self._validator.validate_budget_request(
            user_id, month, mode_override, now
        )
        if validation.has_errors:
            await self._reject(user_id, validation, correlation_id)

        month = month or month_key(now)
        mode = coerce_mode(mode_override)

        if self._audit_logger:
            await self._audit_logger.log_budget_requested(
                user_id=user_id,
                month=month,
                mode_override=mode.value if mode else None,
                correlation_id=correlation_id,
            )

        # Both reads are independent I/O; await them as one step.
        transactions, buffer_current = await asyncio.gather(
            self._transaction_source.get_transactions(
                user_id, self._settings.lookback_days
            ),
            self._buffer_store.get_current_buffer(user_id),
            return_exceptions=True,
        )
        for service, outcome in (
            ("transaction_source", transactions),
            ("buffer_store", buffer_current),
        ):
            if isinstance(outcome, Exception):
                if self._audit_logger:
                    await self._audit_logger.log_upstream_unavailable(
                        service=service,
                        error_message=str(outcome),
                        correlation_id=correlation_id,
                    )
                return await self._fallback(
                    user_id, month, now,
                    FallbackReason.UPSTREAM_UNAVAILABLE, mode, correlation_id,
                )

        try:
            result = assemble_budget_plan(
                user_id=user_id,
                month=month,
                transactions=transactions,
                buffer_current=buffer_current,
                now=now,
                mode_override=mode,
                settings=self._settings,
            )
        except Exception as e:
            logger.exception("budget_computation_failed", user_id=user_id, month=month)
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"user_id": user_id, "month": month},
                    correlation_id=correlation_id,
                )
            return await self._fallback(
                user_id, month, now,
                FallbackReason.COMPUTATION_FAILED, mode, correlation_id,
            )

        plan = result.budget_plan
        if self._audit_logger:
            if plan.is_fallback:
                await self._audit_logger.log_fallback_used(
                    user_id=user_id,
                    month=month,
                    reason=FallbackReason.NO_DATA.value,
                    correlation_id=correlation_id,
                )
            else:
                await self._audit_logger.log_budget_computed(
                    user_id=user_id,
                    month=month,
                    mode=plan.mode.value,
                    confidence=plan.confidence_score,
                    alert_count=len(result.alerts),
                    correlation_id=correlation_id,
                )

        return result

    async def update_buffer(
        self,
        user_id: str,
        amount: float,
        correlation_id: Optional[UUID] = None,
    ) -> float:
        """
        Save the user's current emergency buffer balance.

        Returns:
            The saved amount

        Raises:
            BudgetRequestError: If the user id or amount is invalid
            StorageError: If the buffer store rejects the write
        """
        correlation_id = correlation_id or create_correlation_id()
        now = self._clock()

        validation = self._validator.validate_buffer_update(user_id, amount, now)
        if validation.has_errors:
            await self._reject(user_id, validation, correlation_id)

        amount = float(amount)
        try:
            await self._buffer_store.set_current_buffer(user_id, amount)
        except Exception as e:
            if self._audit_logger:
                await self._audit_logger.log_upstream_unavailable(
                    service="buffer_store",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_buffer_updated(
                user_id=user_id,
                amount=amount,
                correlation_id=correlation_id,
            )
        return amount

    async def get_planner_outlook(
        self,
        user_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> PlannerOutlook:
        """
        Cash burnout projection and six-month income risk.

        An unreachable transaction source gives an empty outlook rather
        than an error.

        Raises:
            BudgetRequestError: If the user id is missing
        """
        correlation_id = correlation_id or create_correlation_id()
        now = self._clock()

        validation = self._validator.validate_budget_request(user_id, None, None, now)
        if validation.has_errors:
            await self._reject(user_id, validation, correlation_id)

        try:
            transactions = await self._transaction_source.get_transactions(
                user_id, self._settings.outlook_lookback_days
            )
        except Exception as e:
            if self._audit_logger:
                await self._audit_logger.log_upstream_unavailable(
                    service="transaction_source",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            return PlannerOutlook(
                user_id=user_id,
                generated_at=now,
                cash_burnout=CashBurnout(current_balance=0.0, average_daily_expense=0.0),
            )

        outlook = PlannerOutlook(
            user_id=user_id,
            generated_at=now,
            cash_burnout=calculate_cash_burnout(transactions, now),
            income_risks=income_risk_outlook(transactions, now),
        )

        if self._audit_logger:
            await self._audit_logger.log_outlook_computed(
                user_id=user_id,
                days_until_zero=outlook.cash_burnout.days_until_zero,
                correlation_id=correlation_id,
            )
        return outlook


def create_app_components(
    use_storage: bool = True,
) -> tuple[AdaptiveBudgetFlow, Optional[GoogleSheetsClient]]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to initialize Google Sheets storage.
                    Set to False to run against empty in-memory stores.

    Returns:
        (adaptive_budget_flow, sheets_client)
    """
    settings = get_settings()
    sheets_client = None
    transaction_source: TransactionSourceInterface
    buffer_store: BufferStoreInterface

    if use_storage:
        try:
            sheets_client = GoogleSheetsClient()
            transaction_source = GoogleSheetsTransactionSource(sheets_client)
            buffer_store = GoogleSheetsBufferStore(sheets_client)
            audit_logger = (
                AuditLogger(GoogleSheetsAuditStorage(sheets_client))
                if settings.app.persist_audit_events
                else AuditLogger()
            )
        except Exception as e:
            # Storage not configured - continue without it
            logger.warning("storage_not_configured", error=str(e))
            use_storage = False
            sheets_client = None

    if not use_storage:
        transaction_source = InMemoryTransactionSource()
        buffer_store = InMemoryBufferStore()
        audit_logger = AuditLogger()  # Local-only logging

    flow = AdaptiveBudgetFlow(
        transaction_source=transaction_source,
        buffer_store=buffer_store,
        audit_logger=audit_logger,
        settings=settings.budget,
    )
    return flow, sheets_client
