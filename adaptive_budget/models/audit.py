"""
Audit Models for Adaptive Budget

Every budget request leaves a trail. This provides:
1. Traceability of which data a plan was built from
2. Debugging information when an upstream store misbehaves
3. Visibility into how often users get degraded plans

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every step of the request lifecycle has its own event type.
    """
    # Budget requests
    BUDGET_REQUESTED = "budget_requested"
    BUDGET_REQUEST_REJECTED = "budget_request_rejected"
    BUDGET_COMPUTED = "budget_computed"
    BUDGET_FALLBACK_USED = "budget_fallback_used"

    # Buffer balance
    BUFFER_UPDATED = "buffer_updated"

    # Planner outlook
    OUTLOOK_COMPUTED = "outlook_computed"

    # System events
    SYSTEM_ERROR = "system_error"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - which user is this about?
    user_id: Optional[str] = Field(
        default=None,
        description="User the request was made for"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events in one request)"
    )

    # Event details
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    # Additional data (event-specific)
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "user_id": self.user_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }

    def to_sheets_row(self) -> list:
        """
        Convert to a row suitable for Google Sheets storage.

        Returns columns in order:
        [event_id, timestamp, event_type, severity, user_id,
         correlation_id, description, details_json, error_message]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.user_id or "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details) if self.details else "",
            self.error_message or "",
        ]


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.budget_requested(user_id, month, None, correlation_id)
        event = AuditEventBuilder.fallback_used(user_id, month, reason, correlation_id)
    """

    @staticmethod
    def budget_requested(
        user_id: str,
        month: str,
        mode_override: Optional[str],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_REQUESTED,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"Adaptive budget requested for {month}",
            details={
                "month": month,
                "mode_override": mode_override or "auto",
            },
        )

    @staticmethod
    def request_rejected(
        user_id: Optional[str],
        issues: list[dict],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_REQUEST_REJECTED,
            severity=AuditSeverity.WARNING,
            user_id=user_id or None,
            correlation_id=correlation_id,
            description=f"Request rejected with {len(issues)} issues",
            details={
                "issues": issues,
            },
        )

    @staticmethod
    def budget_computed(
        user_id: str,
        month: str,
        mode: str,
        confidence: float,
        alert_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_COMPUTED,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"Budget computed in {mode} mode with {confidence:.0%} confidence",
            details={
                "month": month,
                "mode": mode,
                "confidence_score": confidence,
                "alert_count": alert_count,
            },
        )

    @staticmethod
    def fallback_used(
        user_id: str,
        month: str,
        reason: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_FALLBACK_USED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"Fallback budget returned for {month}",
            details={
                "month": month,
                "reason": reason,
            },
        )

    @staticmethod
    def buffer_updated(
        user_id: str,
        amount: float,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUFFER_UPDATED,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"Emergency buffer set to ₹{amount:,.0f}",
            details={
                "amount": amount,
            },
        )

    @staticmethod
    def outlook_computed(
        user_id: str,
        days_until_zero: Optional[int],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OUTLOOK_COMPUTED,
            user_id=user_id,
            correlation_id=correlation_id,
            description="Planner outlook computed",
            details={
                "days_until_zero": days_until_zero,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

    @staticmethod
    def upstream_unavailable(
        service: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.UPSTREAM_UNAVAILABLE,
            severity=AuditSeverity.ERROR,
            description=f"Upstream unavailable: {service}",
            error_message=error_message,
            details={
                "service": service,
            },
            correlation_id=correlation_id,
        )
