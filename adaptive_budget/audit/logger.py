"""
Audit Logger

DESIGN DECISION: Every budget request is logged from arrival to response.
This provides:
1. Traceability of which path (computed or fallback) a user got
2. Debugging capability when an upstream store misbehaves
3. A count of degraded responses over time

The audit logger:
- Is async to not block main flow
- Gracefully handles failures (doesn't crash a request if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from adaptive_budget.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from adaptive_budget.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

_SEVERITY_LEVELS = {
    AuditSeverity.DEBUG: logging.DEBUG,
    AuditSeverity.INFO: logging.INFO,
    AuditSeverity.WARNING: logging.WARNING,
    AuditSeverity.ERROR: logging.ERROR,
    AuditSeverity.CRITICAL: logging.CRITICAL,
}


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage, when one is configured (for persistence)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("adaptive_budget.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        self._logger.log(
            _SEVERITY_LEVELS[event.severity],
            "audit_event",
            **event.to_log_dict(),
        )

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_budget_requested(
        self,
        user_id: str,
        month: str,
        mode_override: Optional[str],
        correlation_id: UUID,
    ) -> None:
        """Log arrival of a budget request."""
        await self.log(AuditEventBuilder.budget_requested(
            user_id=user_id,
            month=month,
            mode_override=mode_override,
            correlation_id=correlation_id,
        ))

    async def log_request_rejected(
        self,
        user_id: Optional[str],
        issues: list[dict],
        correlation_id: UUID,
    ) -> None:
        """Log a request that failed validation."""
        await self.log(AuditEventBuilder.request_rejected(
            user_id=user_id,
            issues=issues,
            correlation_id=correlation_id,
        ))

    async def log_budget_computed(
        self,
        user_id: str,
        month: str,
        mode: str,
        confidence: float,
        alert_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log a successfully computed plan."""
        await self.log(AuditEventBuilder.budget_computed(
            user_id=user_id,
            month=month,
            mode=mode,
            confidence=confidence,
            alert_count=alert_count,
            correlation_id=correlation_id,
        ))

    async def log_fallback_used(
        self,
        user_id: str,
        month: str,
        reason: str,
        correlation_id: UUID,
    ) -> None:
        """Log that a degraded plan was returned."""
        await self.log(AuditEventBuilder.fallback_used(
            user_id=user_id,
            month=month,
            reason=reason,
            correlation_id=correlation_id,
        ))

    async def log_buffer_updated(
        self,
        user_id: str,
        amount: float,
        correlation_id: UUID,
    ) -> None:
        """Log a buffer balance change."""
        await self.log(AuditEventBuilder.buffer_updated(
            user_id=user_id,
            amount=amount,
            correlation_id=correlation_id,
        ))

    async def log_outlook_computed(
        self,
        user_id: str,
        days_until_zero: Optional[int],
        correlation_id: UUID,
    ) -> None:
        """Log a computed planner outlook."""
        await self.log(AuditEventBuilder.outlook_computed(
            user_id=user_id,
            days_until_zero=days_until_zero,
            correlation_id=correlation_id,
        ))

    async def log_upstream_unavailable(
        self,
        service: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log an unreachable transaction or profile store."""
        await self.log(AuditEventBuilder.upstream_unavailable(
            service=service,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        await self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of each request and pass it through every
    subsequent operation.
    """
    return uuid4()
