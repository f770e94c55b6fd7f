"""
Live Record Subscription

A subscription is a cancellable stream of full snapshots of one
user's collection. Every poll replaces the whole local record set;
nothing is patched in place, so a late snapshot simply wins.

A failed poll keeps the last known snapshot and reports the error
through on_error. The subscription stays alive and the next poll
tries again. Once cancelled it cannot be reused; subscribe again to
restart.
"""

import asyncio
from typing import TYPE_CHECKING, AsyncIterator, Callable, Optional

from registro_contable.log import get_logger
from registro_contable.models.record import TransactionRecord
from registro_contable.services.storage.interface import (
    StorageError,
    SubscriptionClosedError,
)

if TYPE_CHECKING:
    from registro_contable.services.storage.interface import RecordStoreInterface


logger = get_logger(__name__)


class RecordSubscription:
    """
    Snapshot stream over a record store.

    Usage:
        subscription = store.subscribe(on_error=report)
        async for snapshot in subscription:
            render(snapshot)

    or, from request/response code, one poll at a time:
        snapshot = await subscription.poll_once()
    """

    def __init__(
        self,
        store: "RecordStoreInterface",
        on_change: Optional[Callable[[list[TransactionRecord]], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        poll_interval: float = 5.0,
    ):
        self._store = store
        self._on_change = on_change
        self._on_error = on_error
        self._poll_interval = poll_interval
        self._snapshot: list[TransactionRecord] = []
        self._version = 0
        self._active = True
        self._last_error: Optional[Exception] = None

    @property
    def active(self) -> bool:
        return self._active

    @property
    def snapshot(self) -> list[TransactionRecord]:
        """Last known record set (empty before the first successful poll)."""
        return list(self._snapshot)

    @property
    def version(self) -> int:
        """Number of distinct snapshots delivered so far."""
        return self._version

    @property
    def last_error(self) -> Optional[Exception]:
        """Error of the most recent poll, None if it succeeded."""
        return self._last_error

    def cancel(self) -> None:
        """Unsubscribe. Safe to call twice."""
        if self._active:
            logger.info(
                "subscription_cancelled",
                collection=self._store.collection_path,
            )
        self._active = False

    async def poll_once(self) -> list[TransactionRecord]:
        """
        Fetch one snapshot.

        Returns the new snapshot, or the last known one if the store
        failed.
        """
        if not self._active:
            raise SubscriptionClosedError("Subscription was cancelled")

        try:
            records = await self._store.list_records()
        except StorageError as e:
            self._last_error = e
            logger.error(
                "subscription_poll_failed",
                collection=self._store.collection_path,
                error=str(e),
            )
            if self._on_error:
                self._on_error(e)
            return self.snapshot

        self._last_error = None
        if self._version == 0 or records != self._snapshot:
            self._snapshot = list(records)
            self._version += 1
            logger.debug(
                "subscription_snapshot",
                collection=self._store.collection_path,
                record_count=len(records),
                version=self._version,
            )
            if self._on_change:
                self._on_change(self.snapshot)

        return self.snapshot

    async def _stream(self) -> AsyncIterator[list[TransactionRecord]]:
        while self._active:
            version = self._version
            snapshot = await self.poll_once()
            if self._version != version:
                yield snapshot
            if not self._active:
                break
            await asyncio.sleep(self._poll_interval)

    def __aiter__(self) -> AsyncIterator[list[TransactionRecord]]:
        return self._stream()
