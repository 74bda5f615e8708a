"""
Transaction Model

Transactions are external, read-only facts. The engine never mutates them,
so the model is frozen.

DESIGN DECISION: Direction is resolved in one place. Upstream stores are
inconsistent - some send signed amounts, some send a positive amount plus
a credit/debit flag. When the flag is present it wins; otherwise the sign
decides.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TransactionType(str, Enum):
    """Direction of money movement."""
    CREDIT = "credit"
    DEBIT = "debit"


class Transaction(BaseModel):
    """A single money movement for one user."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Transaction identifier in the source store"
    )
    user_id: str = Field(
        ...,
        min_length=1,
        description="Owner of the transaction"
    )
    timestamp_millis: int = Field(
        ...,
        ge=0,
        description="When the transaction happened (epoch milliseconds, UTC)"
    )
    amount: float = Field(
        ...,
        allow_inf_nan=False,
        description="Amount; may be signed when no type flag is given"
    )
    type: Optional[TransactionType] = Field(
        default=None,
        description="Explicit direction flag, if the source provides one"
    )
    category: Optional[str] = Field(
        default=None,
        max_length=200,
        description="Free-text category as recorded by the source"
    )
    merchant: Optional[str] = Field(
        default=None,
        max_length=200,
        description="Merchant or counterparty name"
    )

    @property
    def occurred_at(self) -> datetime:
        """Timestamp as an aware UTC datetime."""
        return datetime.fromtimestamp(self.timestamp_millis / 1000, tz=timezone.utc)

    @property
    def magnitude(self) -> float:
        return abs(self.amount)

    @property
    def is_credit(self) -> bool:
        if self.type is not None:
            return self.type == TransactionType.CREDIT
        return self.amount > 0

    @property
    def is_debit(self) -> bool:
        if self.type is not None:
            return self.type == TransactionType.DEBIT
        return self.amount < 0

    @property
    def signed_amount(self) -> float:
        """Positive for money in, negative for money out."""
        if self.is_credit:
            return self.magnitude
        if self.is_debit:
            return -self.magnitude
        return 0.0
