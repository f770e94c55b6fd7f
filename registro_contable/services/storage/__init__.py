"""
Storage Services Package

Provides the abstract record store interface and concrete implementations.
Currently implements Google Sheets as the backend, but designed to be swappable.
"""

from registro_contable.services.storage.interface import (
    RecordStoreInterface,
    StorageError,
    StoreConnectionError,
    SubscriptionClosedError,
    collection_path,
)
from registro_contable.services.storage.subscription import RecordSubscription
from registro_contable.services.storage.memory import InMemoryRecordStore
from registro_contable.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsRecordStore,
)

__all__ = [
    # Interfaces
    "RecordStoreInterface",
    "RecordSubscription",
    "collection_path",
    # Exceptions
    "StorageError",
    "StoreConnectionError",
    "SubscriptionClosedError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsRecordStore",
    "InMemoryRecordStore",
]
