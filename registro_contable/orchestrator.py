"""
Main Orchestrator for Registro Contable

This module ties together all the components and defines the
end-to-end flows for:
1. Entry form (edit fields -> validate -> create -> reset)
2. Ledger (live snapshot -> balance, list, CSV export, receipts)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing reaches the store unless the whole form is valid
- The local record set only ever comes from the subscription
- Failures end up in the one status message, never retried
"""

from datetime import date
from decimal import Decimal
from typing import Callable, Optional, Union

from registro_contable.export import (
    ExportFile,
    ReceiptError,
    build_csv_export,
    build_receipt,
)
from registro_contable.ledger import (
    EntryView,
    compute_balance,
    now_millis,
    present_entries,
    today_in,
)
from registro_contable.log import get_logger
from registro_contable.models import (
    Category,
    PaymentMethod,
    RecordFormBase,
    TransactionRecord,
    ValidationResult,
    form_for_category,
)
from registro_contable.services.storage import RecordSubscription, StorageError
from registro_contable.session import SessionContext, create_session
from registro_contable.status import (
    MSG_ADD_FAILED,
    MSG_ADDED,
    MSG_DELETE_FAILED,
    MSG_DELETED,
    MSG_EXPORTED,
    MSG_FILE_SELECTED,
    MSG_LOAD_FAILED,
    MSG_NO_FILE,
    MSG_NOT_READY,
    MSG_NOTHING_TO_EXPORT,
    MSG_RECEIPT_READY,
    StatusMessage,
)
from registro_contable.validation import RecordFormValidator


logger = get_logger(__name__)


class RecordFormController:
    """
    Holds the entry being typed and submits it.

    Flow:
    1. Pick a category -> fresh form of that shape with its defaults
    2. Edit fields
    3. Submit -> validate -> create in the store -> reset the form

    A failed validation or a store error leaves the form as it was so
    the user can fix it and try again.
    """

    def __init__(
        self,
        session: SessionContext,
        status: Optional[StatusMessage] = None,
        validator: Optional[RecordFormValidator] = None,
        clock: Optional[Callable[[], int]] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self._session = session
        self._status = status or StatusMessage()
        self._validator = validator or RecordFormValidator()
        self._clock = clock or now_millis
        self._today = today or (lambda: today_in(session.app_settings.tzinfo))
        self._form = form_for_category(Category.INCOME, self._today())
        self._last_validation: Optional[ValidationResult] = None

    @property
    def form(self) -> RecordFormBase:
        return self._form

    @property
    def category(self) -> Category:
        return self._form.category

    @property
    def status(self) -> StatusMessage:
        return self._status

    @property
    def last_validation(self) -> Optional[ValidationResult]:
        return self._last_validation

    # ------------------------------------------------------------------
    # Field editing
    # ------------------------------------------------------------------

    def set_category(self, category: Union[Category, str]) -> None:
        """Switch form shape. Only an actual change resets the fields."""
        category = Category(category)
        if category != self.category:
            self.reset(category)

    def reset(self, category: Optional[Union[Category, str]] = None) -> None:
        """Fresh form with the defaults of the given (or current) category."""
        category = Category(category) if category is not None else self.category
        self._form = form_for_category(category, self._today())
        self._last_validation = None

    def set_description(self, value: str) -> None:
        self._form.description = value

    def set_counterparty_name(self, value: str) -> None:
        self._form.counterparty_name = value

    def set_amount(self, value: str) -> None:
        self._form.amount = value

    def set_entry_date(self, value: Optional[Union[date, str]]) -> None:
        self._form.entry_date = value

    def set_payment_method(self, value: Union[PaymentMethod, str]) -> None:
        """Raises a ValueError for a method this category does not accept."""
        self._form.payment_method = PaymentMethod(value)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def validate(self) -> ValidationResult:
        self._last_validation = self._validator.validate(self._form)
        return self._last_validation

    async def submit(self) -> Optional[TransactionRecord]:
        """
        Validate and create the record.

        Returns:
            The stored record (with its id), or None if validation or
            the store failed. The status message says which.
        """
        result = self.validate()
        if not result.is_valid:
            logger.info(
                "submit_rejected",
                category=self.category.value,
                fields=result.fields,
            )
            self._status.error(self._validator.get_user_message(result))
            return None

        if not self._session.is_ready:
            self._status.error(MSG_NOT_READY)
            return None

        record = self._form.to_record(created_at=self._clock())
        store = self._session.store

        try:
            record_id = await store.create_record(record)
        except StorageError as e:
            logger.error(
                "record_create_failed",
                collection=store.collection_path,
                category=record.category.value,
                error=str(e),
            )
            self._status.error(MSG_ADD_FAILED)
            return None

        logger.info(
            "record_created",
            collection=store.collection_path,
            record_id=record_id,
            category=record.category.value,
            amount=str(record.amount),
        )
        self._status.success(MSG_ADDED)
        self.reset(record.category)
        return record.with_id(record_id)

    async def delete(self, record_id: str) -> bool:
        """Delete a stored record. No confirmation, no undo."""
        if not self._session.is_ready:
            self._status.error(MSG_NOT_READY)
            return False

        store = self._session.store

        try:
            removed = await store.delete_record(record_id)
        except StorageError as e:
            logger.error(
                "record_delete_failed",
                collection=store.collection_path,
                record_id=record_id,
                error=str(e),
            )
            self._status.error(MSG_DELETE_FAILED)
            return False

        if not removed:
            logger.warning(
                "record_delete_missing",
                collection=store.collection_path,
                record_id=record_id,
            )
            self._status.error(MSG_DELETE_FAILED)
            return False

        logger.info(
            "record_deleted",
            collection=store.collection_path,
            record_id=record_id,
        )
        self._status.success(MSG_DELETED)
        return True

    def preview_receipt(self) -> Optional[ExportFile]:
        """
        Receipt for the support entry being typed, without saving it.

        Raises:
            ReceiptError: If the form is not a support form
        """
        if self.category is not Category.SUPPORT:
            raise ReceiptError("Receipts are only available for support entries")

        result = self.validate()
        if not result.is_valid:
            self._status.error(self._validator.get_user_message(result))
            return None

        record = self._form.to_record(created_at=self._clock())
        receipt = build_receipt(record, self._session.app_settings.currency)
        self._status.success(MSG_RECEIPT_READY)
        return receipt

    def note_attachment(self, filename: Optional[str]) -> None:
        """
        Record the receipt file picked for an expense.

        Uploading is not implemented; only the file name is reported.
        """
        if not filename:
            self._status.show(MSG_NO_FILE)
            return
        logger.info("attachment_selected", filename=filename)
        self._status.show(MSG_FILE_SELECTED.format(filename=filename))


class LedgerFlow:
    """
    The live view of the user's records.

    Balance and list rows are derived from the latest snapshot every
    time they are read; nothing is cached between snapshots.
    """

    def __init__(
        self,
        session: SessionContext,
        status: Optional[StatusMessage] = None,
    ):
        self._session = session
        self._status = status or StatusMessage()

    @property
    def status(self) -> StatusMessage:
        return self._status

    def _on_error(self, error: Exception) -> None:
        self._status.error(MSG_LOAD_FAILED)

    def start(self) -> RecordSubscription:
        """Open (or reuse) the session's live subscription."""
        return self._session.subscribe(on_error=self._on_error)

    async def refresh(self) -> list[TransactionRecord]:
        """Pull one snapshot; keeps the last one if the store fails."""
        if not self._session.is_ready:
            self._status.error(MSG_NOT_READY)
            return self.records
        return await self.start().poll_once()

    @property
    def records(self) -> list[TransactionRecord]:
        """Latest snapshot, in store order."""
        subscription = self._session.subscription
        return subscription.snapshot if subscription is not None else []

    @property
    def balance(self) -> Decimal:
        return compute_balance(self.records)

    @property
    def entries(self) -> list[EntryView]:
        return present_entries(self.records)

    def export_csv(self) -> Optional[ExportFile]:
        """CSV of the current snapshot, or None when it is empty."""
        settings = self._session.app_settings
        export = build_csv_export(
            self.records,
            tz=settings.tzinfo,
            date_source=settings.csv_date_source,
        )
        if export is None:
            self._status.show(MSG_NOTHING_TO_EXPORT)
            return None

        logger.info("records_exported", record_count=len(self.records))
        self._status.success(MSG_EXPORTED)
        return export


def create_app_components(
    session: Optional[SessionContext] = None,
) -> tuple[SessionContext, RecordFormController, LedgerFlow]:
    """
    Factory function to create all application components.

    The form controller and the ledger share one status message.

    Raises:
        SessionInitError: If no session is given and one cannot be created
    """
    session = session or create_session()
    status = StatusMessage()
    controller = RecordFormController(session=session, status=status)
    ledger = LedgerFlow(session=session, status=status)
    return session, controller, ledger
