"""Services package."""

from adaptive_budget.services.storage import (
    AuditStorageInterface,
    BufferStoreInterface,
    GoogleSheetsAuditStorage,
    GoogleSheetsBufferStore,
    GoogleSheetsClient,
    GoogleSheetsTransactionSource,
    InMemoryAuditStorage,
    InMemoryBufferStore,
    InMemoryTransactionSource,
    StorageConnectionError,
    StorageError,
    TransactionSourceInterface,
)

__all__ = [
    # Storage services
    "AuditStorageInterface",
    "BufferStoreInterface",
    "TransactionSourceInterface",
    "GoogleSheetsAuditStorage",
    "GoogleSheetsBufferStore",
    "GoogleSheetsClient",
    "GoogleSheetsTransactionSource",
    "InMemoryAuditStorage",
    "InMemoryBufferStore",
    "InMemoryTransactionSource",
    "StorageConnectionError",
    "StorageError",
]
