"""
Abstract Storage Interface

DESIGN DECISION: The engine never talks to a store directly. It sees three
narrow interfaces, which allows us to:
1. Swap Google Sheets for a real database later
2. Use in-memory storage for testing
3. Keep budget logic decoupled from where transactions live

The interfaces are intentionally small - only the reads and writes a
budget request actually needs.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from adaptive_budget.models.audit import AuditEvent
from adaptive_budget.models.transaction import Transaction


class TransactionSourceInterface(ABC):
    """
    Read-only access to a user's transaction history.

    Implementations must return a consistent snapshot for one call; the
    engine treats the list as immutable input.
    """

    @abstractmethod
    async def get_transactions(
        self,
        user_id: str,
        lookback_days: int = 90,
    ) -> list[Transaction]:
        """
        Fetch the user's transactions from the last `lookback_days` days.

        Args:
            user_id: Owner of the transactions
            lookback_days: How far back to look

        Returns:
            Transactions, possibly empty (no history is not an error)

        Raises:
            StorageConnectionError: If the backend cannot be reached
        """
        pass


class BufferStoreInterface(ABC):
    """
    Per-user emergency buffer balance.

    The engine only reads this; the balance is written through the
    explicit update operation.
    """

    @abstractmethod
    async def get_current_buffer(self, user_id: str) -> float:
        """
        Get the user's saved buffer balance.

        Returns:
            The balance, or 0.0 if the user never saved one

        Raises:
            StorageConnectionError: If the backend cannot be reached
        """
        pass

    @abstractmethod
    async def set_current_buffer(self, user_id: str, amount: float) -> bool:
        """
        Save the user's buffer balance, replacing any previous value.

        Returns:
            True if saved successfully

        Raises:
            StorageError: If the save fails
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one budget request).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
