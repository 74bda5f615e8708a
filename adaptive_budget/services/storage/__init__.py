"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Google Sheets is the production backend; the in-memory stores back the
tests and local runs.
"""

from adaptive_budget.services.storage.interface import (
    AuditStorageInterface,
    BufferStoreInterface,
    StorageConnectionError,
    StorageError,
    TransactionSourceInterface,
)
from adaptive_budget.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryBufferStore,
    InMemoryTransactionSource,
)
from adaptive_budget.services.storage.google_sheets import (
    GoogleSheetsAuditStorage,
    GoogleSheetsBufferStore,
    GoogleSheetsClient,
    GoogleSheetsTransactionSource,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "BufferStoreInterface",
    "TransactionSourceInterface",
    # Exceptions
    "StorageConnectionError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryBufferStore",
    "InMemoryTransactionSource",
    # Google Sheets implementation
    "GoogleSheetsAuditStorage",
    "GoogleSheetsBufferStore",
    "GoogleSheetsClient",
    "GoogleSheetsTransactionSource",
]
