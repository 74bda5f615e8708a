"""
Shared fixtures.

Every test runs against the same fixed clock so windows and calendar
months are reproducible: 2024-06-15 12:00 UTC (June has 30 days).
"""

from datetime import datetime, timedelta, timezone
from itertools import count
from typing import Optional

import pytest

from adaptive_budget.models import Transaction, TransactionType


NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_tx():
    """Factory for transactions placed relative to the fixed clock."""
    ids = count(1)

    def _make(
        days_ago: float = 0,
        amount: float = -100.0,
        category: Optional[str] = None,
        user_id: str = "user-1",
        tx_type: Optional[TransactionType] = None,
        at: Optional[datetime] = None,
    ) -> Transaction:
        moment = at or NOW - timedelta(days=days_ago)
        return Transaction(
            id=f"tx-{next(ids)}",
            user_id=user_id,
            timestamp_millis=int(moment.timestamp() * 1000),
            amount=amount,
            type=tx_type,
            category=category,
        )

    return _make
