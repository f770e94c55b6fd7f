"""
Abstract Record Store Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap Google Sheets for another document store later
2. Use in-memory storage for testing
3. Keep the form and ledger logic decoupled from the backend

The interface is intentionally small: records are created, listed and
deleted. There is no update and no server-side ordering.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from registro_contable.models.record import TransactionRecord


def collection_path(app_id: str, user_id: str) -> str:
    """Per-user scope of the accounting entries."""
    return f"artifacts/{app_id}/users/{user_id}/accounting_entries"


class RecordStoreInterface(ABC):
    """
    Abstract interface for a per-user record collection.

    Any storage implementation (Google Sheets, in-memory, etc.)
    must implement these methods.
    """

    @property
    @abstractmethod
    def collection_path(self) -> str:
        """Path of the user's collection, for logging and scoping."""
        pass

    @abstractmethod
    async def create_record(self, record: TransactionRecord) -> str:
        """
        Store a new record.

        Args:
            record: The record to store; its id must be unset

        Returns:
            The id the store assigned

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def delete_record(self, record_id: str) -> bool:
        """
        Delete a record by id.

        Returns:
            True if a record was removed, False if none had that id

        Raises:
            StorageError: If the delete fails
        """
        pass

    @abstractmethod
    async def list_records(self) -> list[TransactionRecord]:
        """
        Full snapshot of the collection, in store order.

        Raises:
            StorageError: If the read fails
        """
        pass

    def default_poll_interval(self) -> float:
        """Seconds between snapshot polls of a live subscription."""
        return 5.0

    def subscribe(
        self,
        on_change: Optional[Callable[[list[TransactionRecord]], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        poll_interval: Optional[float] = None,
    ) -> "RecordSubscription":
        """
        Open a live subscription to this collection.

        The returned subscription yields full snapshots; call its
        cancel() to unsubscribe.
        """
        from registro_contable.services.storage.subscription import RecordSubscription

        return RecordSubscription(
            store=self,
            on_change=on_change,
            on_error=on_error,
            poll_interval=(
                poll_interval if poll_interval is not None
                else self.default_poll_interval()
            ),
        )


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StoreConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass


class SubscriptionClosedError(StorageError):
    """The subscription was cancelled and can no longer poll."""
    pass
