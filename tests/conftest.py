"""Shared fixtures: an in-memory store, a ready session, a controller with a fixed clock."""

import asyncio
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from registro_contable.config import AppSettings
from registro_contable.models import Category, PaymentMethod, TransactionRecord
from registro_contable.orchestrator import LedgerFlow, RecordFormController
from registro_contable.services.identity import Identity
from registro_contable.services.storage import InMemoryRecordStore, StorageError
from registro_contable.session import SessionContext
from registro_contable.status import StatusMessage


# 2024-01-15 12:00:00 UTC
FIXED_MILLIS = 1705320000000
FIXED_TODAY = date(2024, 1, 15)


def run(coro):
    """Drive a coroutine to completion from a sync test."""
    return asyncio.run(coro)


def millis(year: int, month: int, day: int, hour: int = 12) -> int:
    moment = datetime(year, month, day, hour, tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


def make_record(
    category: Category = Category.INCOME,
    amount: str = "100",
    description: str = "Cuotas",
    counterparty_name: str = "ACME",
    entry_date: date = date(2024, 1, 1),
    payment_method: PaymentMethod = PaymentMethod.CASH,
    created_at: int = FIXED_MILLIS,
    record_id: str = None,
) -> TransactionRecord:
    return TransactionRecord(
        id=record_id,
        description=description,
        amount=Decimal(amount),
        category=category,
        counterparty_name=counterparty_name,
        entry_date=entry_date,
        payment_method=payment_method,
        created_at=created_at,
    )


class RecordingStore(InMemoryRecordStore):
    """In-memory store that remembers every create call."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.created: list[TransactionRecord] = []

    async def create_record(self, record: TransactionRecord) -> str:
        self.created.append(record)
        return await super().create_record(record)


class FailingStore(InMemoryRecordStore):
    """Every operation fails the way an unreachable backend would."""

    async def create_record(self, record: TransactionRecord) -> str:
        raise StorageError("backend unavailable")

    async def delete_record(self, record_id: str) -> bool:
        raise StorageError("backend unavailable")

    async def list_records(self) -> list[TransactionRecord]:
        raise StorageError("backend unavailable")


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings(
        timezone="UTC",
        storage_backend="memory",
        currency="MXN",
        csv_date_source="created_at",
    )


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore(user_id="user-1", poll_interval=0)


@pytest.fixture
def session(store, app_settings) -> SessionContext:
    return SessionContext(
        identity=Identity(user_id="user-1"),
        store=store,
        app_settings=app_settings,
    )


@pytest.fixture
def status() -> StatusMessage:
    return StatusMessage()


@pytest.fixture
def controller(session, status) -> RecordFormController:
    return RecordFormController(
        session=session,
        status=status,
        clock=lambda: FIXED_MILLIS,
        today=lambda: FIXED_TODAY,
    )


@pytest.fixture
def ledger(session, status) -> LedgerFlow:
    return LedgerFlow(session=session, status=status)
