"""
In-Memory Storage

Process-local implementations of the storage interfaces. Used by the
tests and for running the engine without a Google Sheets account.
Nothing here survives a restart.
"""

from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from adaptive_budget.models.audit import AuditEvent
from adaptive_budget.models.transaction import Transaction
from adaptive_budget.services.storage.interface import (
    AuditStorageInterface,
    BufferStoreInterface,
    TransactionSourceInterface,
)


class InMemoryTransactionSource(TransactionSourceInterface):
    """Transactions held in a list, filtered per call."""

    def __init__(
        self,
        transactions: Optional[Iterable[Transaction]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._transactions: list[Transaction] = list(transactions or [])
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def add(self, *transactions: Transaction) -> None:
        self._transactions.extend(transactions)

    async def get_transactions(
        self,
        user_id: str,
        lookback_days: int = 90,
    ) -> list[Transaction]:
        cutoff = self._clock() - timedelta(days=lookback_days)
        return sorted(
            (
                tx for tx in self._transactions
                if tx.user_id == user_id and tx.occurred_at >= cutoff
            ),
            key=lambda tx: tx.timestamp_millis,
        )


class InMemoryBufferStore(BufferStoreInterface):
    """Buffer balances keyed by user id."""

    def __init__(self, balances: Optional[dict[str, float]] = None):
        self._balances: dict[str, float] = dict(balances or {})

    async def get_current_buffer(self, user_id: str) -> float:
        return self._balances.get(user_id, 0.0)

    async def set_current_buffer(self, user_id: str, amount: float) -> bool:
        self._balances[user_id] = amount
        return True


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return sorted(
            (e for e in self._events if e.correlation_id == correlation_id),
            key=lambda e: e.timestamp,
        )

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return sorted(self._events, key=lambda e: e.timestamp, reverse=True)[:limit]
