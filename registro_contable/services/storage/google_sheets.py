"""
Google Sheets Record Store

DESIGN DECISION: Google Sheets is the managed document store because:
1. The user can view their entries directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

Each user scope gets its own worksheet, one record per row. The
worksheet is created with a header row the first time it is used.

TRADEOFFS:
- No push notifications; the live subscription polls list_records
- No transactions; a delete looks up the row by id, then removes it
- Reads retry with backoff, writes never retry (a retried append
  could store the same record twice)
"""

import asyncio
from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import uuid4

import gspread
from google.oauth2.service_account import Credentials
from pydantic import ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from registro_contable.config import GoogleSheetsSettings, get_settings
from registro_contable.log import get_logger
from registro_contable.models.record import (
    Category,
    PaymentMethod,
    TransactionRecord,
)
from registro_contable.services.storage.interface import (
    RecordStoreInterface,
    StorageError,
    StoreConnectionError,
    collection_path,
)


logger = get_logger(__name__)


# Column mapping for the per-user records worksheet
RECORD_COLUMNS = [
    "id",
    "created_at",
    "category",
    "description",
    "amount",
    "counterparty_name",
    "entry_date",
    "payment_method",
]

# Worksheet titles are limited to 100 characters
MAX_WORKSHEET_TITLE = 100


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @property
    def settings(self) -> GoogleSheetsSettings:
        return self._settings

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
            except FileNotFoundError:
                raise StoreConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise StoreConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise StoreConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_records_sheet(self, title: str) -> gspread.Worksheet:
        """Get or create a records worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=1000,
                cols=len(RECORD_COLUMNS),
            )
            sheet.append_row(RECORD_COLUMNS)
        return sheet


class GoogleSheetsRecordStore(RecordStoreInterface):
    """
    Google Sheets implementation of the record store.

    Records of one user live in the worksheet
    <worksheet_prefix><user_id>.
    """

    def __init__(
        self,
        app_id: str,
        user_id: str,
        client: Optional[GoogleSheetsClient] = None,
    ):
        self._client = client or GoogleSheetsClient()
        self._path = collection_path(app_id, user_id)
        prefix = self._client.settings.worksheet_prefix
        self._worksheet_title = f"{prefix}{user_id}"[:MAX_WORKSHEET_TITLE]

    @property
    def collection_path(self) -> str:
        return self._path

    @property
    def worksheet_title(self) -> str:
        return self._worksheet_title

    def default_poll_interval(self) -> float:
        return self._client.settings.poll_interval_seconds

    def _sheet(self) -> gspread.Worksheet:
        return self._client.get_records_sheet(self._worksheet_title)

    def _record_to_row(self, record: TransactionRecord) -> list:
        """Convert a TransactionRecord to a spreadsheet row."""
        return [
            record.id or "",
            str(record.created_at),
            record.category.value,
            record.description,
            str(record.amount),
            record.counterparty_name,
            record.entry_date.isoformat(),
            record.payment_method.value,
        ]

    def _row_to_record(self, row: list) -> TransactionRecord:
        """Convert a spreadsheet row to a TransactionRecord."""
        # Handle missing columns gracefully
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default

        return TransactionRecord(
            id=safe_get(0),
            created_at=int(safe_get(1, "0")),
            category=Category(safe_get(2)),
            description=safe_get(3),
            amount=Decimal(safe_get(4)),
            counterparty_name=safe_get(5),
            entry_date=date.fromisoformat(safe_get(6)),
            payment_method=PaymentMethod(safe_get(7)),
        )

    def _append(self, record: TransactionRecord) -> None:
        self._sheet().append_row(
            self._record_to_row(record),
            value_input_option="RAW",
        )

    def _delete(self, record_id: str) -> bool:
        sheet = self._sheet()
        all_rows = sheet.get_all_values()

        for idx, row in enumerate(all_rows[1:], start=2):  # Row 1 is the header
            if row and row[0] == record_id:
                sheet.delete_rows(idx)
                return True

        return False

    @retry(
        retry=retry_if_exception_type(StoreConnectionError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _read_all(self) -> list[TransactionRecord]:
        try:
            all_rows = self._sheet().get_all_values()[1:]  # Skip header
        except StoreConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to list records: {e}")

        records = []
        for row in all_rows:
            if not row or not row[0]:  # Skip empty rows
                continue
            try:
                records.append(self._row_to_record(row))
            except (ValidationError, ValueError, ArithmeticError) as e:
                logger.warning(
                    "record_row_skipped",
                    collection=self._path,
                    record_id=row[0],
                    error=str(e),
                )
        return records

    async def create_record(self, record: TransactionRecord) -> str:
        """Append a record row with a fresh id."""
        if record.id is not None:
            raise StorageError(f"Record already has an id: {record.id}")
        record_id = uuid4().hex
        try:
            await asyncio.to_thread(self._append, record.with_id(record_id))
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save record: {e}")
        return record_id

    async def delete_record(self, record_id: str) -> bool:
        """Delete the row holding this record id."""
        try:
            return await asyncio.to_thread(self._delete, record_id)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete record: {e}")

    async def list_records(self) -> list[TransactionRecord]:
        """All parseable rows, in sheet order. Malformed rows are skipped."""
        return await asyncio.to_thread(self._read_all)
