"""
In-Memory Record Store

Keeps one user's records in a dict, in insertion order. Used by the
test suite and for running the app without Google credentials
(STORAGE_BACKEND=memory). Nothing survives a restart.
"""

from typing import Optional
from uuid import uuid4

from registro_contable.models.record import TransactionRecord
from registro_contable.services.storage.interface import (
    RecordStoreInterface,
    StorageError,
    collection_path,
)


class InMemoryRecordStore(RecordStoreInterface):
    """Dict-backed record store scoped to one collection path."""

    def __init__(
        self,
        app_id: str = "default-app-id",
        user_id: str = "local",
        poll_interval: float = 1.0,
    ):
        self._path = collection_path(app_id, user_id)
        self._records: dict[str, TransactionRecord] = {}
        self._poll_interval = poll_interval

    @property
    def collection_path(self) -> str:
        return self._path

    def default_poll_interval(self) -> float:
        return self._poll_interval

    async def create_record(self, record: TransactionRecord) -> str:
        if record.id is not None:
            raise StorageError(f"Record already has an id: {record.id}")
        record_id = uuid4().hex
        self._records[record_id] = record.with_id(record_id)
        return record_id

    async def delete_record(self, record_id: str) -> bool:
        return self._records.pop(record_id, None) is not None

    async def list_records(self) -> list[TransactionRecord]:
        return list(self._records.values())

    def get(self, record_id: str) -> Optional[TransactionRecord]:
        return self._records.get(record_id)
