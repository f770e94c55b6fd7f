"""Services package."""

from registro_contable.services.identity import (
    AnonymousIdentityProvider,
    FallbackIdentityProvider,
    Identity,
    IdentityError,
    IdentityProvider,
    StaticIdentityProvider,
    identity_provider_from_settings,
)
from registro_contable.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsRecordStore,
    InMemoryRecordStore,
    RecordStoreInterface,
    RecordSubscription,
    StorageError,
    StoreConnectionError,
    SubscriptionClosedError,
)

__all__ = [
    # Identity
    "AnonymousIdentityProvider",
    "FallbackIdentityProvider",
    "Identity",
    "IdentityError",
    "IdentityProvider",
    "StaticIdentityProvider",
    "identity_provider_from_settings",
    # Storage
    "GoogleSheetsClient",
    "GoogleSheetsRecordStore",
    "InMemoryRecordStore",
    "RecordStoreInterface",
    "RecordSubscription",
    "StorageError",
    "StoreConnectionError",
    "SubscriptionClosedError",
]
