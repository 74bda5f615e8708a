"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is used as the initial storage backend because:
1. Gig workers can keep and correct their own ledger directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)
4. Easy to export/migrate later

TRADEOFFS:
- Not suitable for high-volume data (we're fine for one user's history)
- No server-side filtering (we filter in Python)
- Every read is a network call, so reads are retried

The implementation follows the abstract interfaces, so we can swap
to PostgreSQL/SQLite later without changing budget logic.
"""

import json
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

import gspread
import structlog
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from adaptive_budget.config import GoogleSheetsSettings, get_settings
from adaptive_budget.models.audit import AuditEvent, AuditEventType, AuditSeverity
from adaptive_budget.models.transaction import Transaction, TransactionType
from adaptive_budget.services.storage.interface import (
    AuditStorageInterface,
    BufferStoreInterface,
    StorageConnectionError,
    StorageError,
    TransactionSourceInterface,
)


logger = structlog.get_logger("adaptive_budget.storage")


# Column mappings for the Transactions sheet
TRANSACTION_COLUMNS = [
    "id",
    "user_id",
    "timestamp",
    "amount",
    "type",
    "category",
    "merchant",
]

# Column mappings for the Profiles sheet
PROFILE_COLUMNS = [
    "user_id",
    "buffer_amount",
    "updated_at",
]

# Column mappings for the Audit sheet
AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "user_id",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
]


def _cell(row: list, index: int, default: str = "") -> str:
    """Read a cell, tolerating short rows and blanks."""
    try:
        return row[index] if row[index] != "" else default
    except IndexError:
        return default


def parse_timestamp_millis(value: str) -> int:
    """
    Accept either epoch milliseconds or an ISO-8601 timestamp.

    Naive ISO timestamps are taken to be UTC.
    """
    value = value.strip()
    if value.lstrip("-").isdigit():
        return int(value)

    moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError as e:
                raise StorageConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                ) from e
            except Exception as e:
                raise StorageConnectionError(f"Failed to connect to Google Sheets: {e}") from e

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(self._settings.spreadsheet_id)
            except gspread.SpreadsheetNotFound as e:
                raise StorageConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                ) from e
        return self._spreadsheet

    def _get_or_create_sheet(
        self,
        title: str,
        columns: list[str],
        rows: int = 1000,
    ) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(title=title, rows=rows, cols=len(columns))
            sheet.append_row(columns)
        return sheet

    def get_transactions_sheet(self) -> gspread.Worksheet:
        """Get or create the Transactions worksheet."""
        return self._get_or_create_sheet(
            self._settings.transactions_sheet_name, TRANSACTION_COLUMNS, rows=5000
        )

    def get_profiles_sheet(self) -> gspread.Worksheet:
        """Get or create the Profiles worksheet."""
        return self._get_or_create_sheet(
            self._settings.profiles_sheet_name, PROFILE_COLUMNS
        )

    def get_audit_sheet(self) -> gspread.Worksheet:
        """Get or create the Audit worksheet."""
        return self._get_or_create_sheet(
            self._settings.audit_sheet_name, AUDIT_COLUMNS, rows=5000
        )


class GoogleSheetsTransactionSource(TransactionSourceInterface):
    """
    Transactions stored one per row.

    Rows that fail to parse are skipped and logged rather than failing
    the whole request; a single bad cell should not cost a user their plan.
    """

    def __init__(
        self,
        client: Optional[GoogleSheetsClient] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._client = client or GoogleSheetsClient()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _row_to_transaction(self, row: list) -> Transaction:
        """Convert a spreadsheet row to a Transaction."""
        tx_type = _cell(row, 4).lower()
        return Transaction(
            id=_cell(row, 0),
            user_id=_cell(row, 1),
            timestamp_millis=parse_timestamp_millis(_cell(row, 2)),
            amount=float(_cell(row, 3, "0").replace(",", "")),
            type=TransactionType(tx_type) if tx_type else None,
            category=_cell(row, 5) or None,
            merchant=_cell(row, 6) or None,
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def get_transactions(
        self,
        user_id: str,
        lookback_days: int = 90,
    ) -> list[Transaction]:
        """Fetch the user's transactions inside the lookback window."""
        try:
            sheet = self._client.get_transactions_sheet()
            all_rows = sheet.get_all_values()[1:]  # Skip header
        except StorageError:
            raise
        except Exception as e:
            raise StorageConnectionError(f"Failed to read transactions: {e}") from e

        cutoff_millis = int(
            (self._clock() - timedelta(days=lookback_days)).timestamp() * 1000
        )

        transactions = []
        for row_number, row in enumerate(all_rows, start=2):
            if not row or _cell(row, 1) != user_id:
                continue
            try:
                tx = self._row_to_transaction(row)
            except ValueError as e:
                logger.warning(
                    "transaction_row_skipped",
                    row_number=row_number,
                    error=str(e),
                )
                continue
            if tx.timestamp_millis >= cutoff_millis:
                transactions.append(tx)

        transactions.sort(key=lambda tx: tx.timestamp_millis)
        return transactions


class GoogleSheetsBufferStore(BufferStoreInterface):
    """
    Buffer balances, one row per user in the Profiles sheet.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def get_current_buffer(self, user_id: str) -> float:
        """Saved balance for the user, 0.0 if there is none."""
        try:
            sheet = self._client.get_profiles_sheet()
            all_rows = sheet.get_all_values()[1:]
        except StorageError:
            raise
        except Exception as e:
            raise StorageConnectionError(f"Failed to read buffer balance: {e}") from e

        for row in all_rows:
            if row and _cell(row, 0) == user_id:
                try:
                    return max(0.0, float(_cell(row, 1, "0").replace(",", "")))
                except ValueError:
                    logger.warning("buffer_row_malformed", user_id=user_id)
                    return 0.0
        return 0.0

    async def set_current_buffer(self, user_id: str, amount: float) -> bool:
        """Insert or replace the user's balance row."""
        try:
            sheet = self._client.get_profiles_sheet()
            all_rows = sheet.get_all_values()
            new_row = [user_id, amount, datetime.now(timezone.utc).isoformat()]

            # Row 1 is the header
            for idx, row in enumerate(all_rows[1:], start=2):
                if row and _cell(row, 0) == user_id:
                    sheet.update(range_name=f"A{idx}:C{idx}", values=[new_row])
                    return True

            sheet.append_row(new_row, value_input_option="RAW")
            return True
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save buffer balance: {e}") from e


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """
    Google Sheets implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _row_to_event(self, row: list) -> AuditEvent:
        """Convert a spreadsheet row to an AuditEvent."""
        return AuditEvent(
            event_id=UUID(_cell(row, 0)),
            timestamp=datetime.fromisoformat(_cell(row, 1)),
            event_type=AuditEventType(_cell(row, 2)),
            severity=AuditSeverity(_cell(row, 3)),
            user_id=_cell(row, 4) or None,
            correlation_id=UUID(_cell(row, 5)) if _cell(row, 5) else None,
            description=_cell(row, 6),
            details=json.loads(_cell(row, 7)) if _cell(row, 7) else {},
            error_message=_cell(row, 8) or None,
        )

    def _read_events(self) -> list[AuditEvent]:
        try:
            sheet = self._client.get_audit_sheet()
            all_rows = sheet.get_all_values()[1:]
        except Exception as e:
            raise StorageError(f"Failed to get audit events: {e}") from e

        events = []
        for row in all_rows:
            if not row or not row[0]:
                continue
            try:
                events.append(self._row_to_event(row))
            except ValueError:
                continue
        return events

    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event. Never raises; audit must not break a request."""
        try:
            sheet = self._client.get_audit_sheet()
            sheet.append_row(event.to_sheets_row(), value_input_option="RAW")
            return True
        except Exception as e:
            logger.warning(
                "audit_event_write_failed",
                event_id=str(event.event_id),
                error=str(e),
            )
            return False

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """Get events by correlation ID, oldest first."""
        events = [e for e in self._read_events() if e.correlation_id == correlation_id]
        events.sort(key=lambda e: e.timestamp)
        return events

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get recent events, newest first."""
        events = self._read_events()
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
