"""
Session Context

Everything a session needs to reach the record store: who the user
is, which store holds their records, and the one live subscription.
It is built once at startup by create_session() and handed to the
components that need it. Nothing here is global.
"""

from typing import Callable, Optional

from registro_contable.config import AppSettings, Settings, get_settings
from registro_contable.log import configure_logging, get_logger
from registro_contable.models.record import TransactionRecord
from registro_contable.services.identity import (
    Identity,
    IdentityProvider,
    identity_provider_from_settings,
)
from registro_contable.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsRecordStore,
    InMemoryRecordStore,
    RecordStoreInterface,
    RecordSubscription,
)


logger = get_logger(__name__)


class SessionInitError(Exception):
    """Identity or storage could not be established. Fatal to the session."""
    pass


class SessionNotReadyError(Exception):
    """The session has no identity or store, or was closed."""
    pass


class SessionContext:
    """
    Identity + store handle + the session's live subscription.

    There is at most one active subscription per session.
    """

    def __init__(
        self,
        identity: Optional[Identity],
        store: Optional[RecordStoreInterface],
        app_settings: Optional[AppSettings] = None,
    ):
        self._identity = identity
        self._store = store
        self._app_settings = app_settings or AppSettings()
        self._subscription: Optional[RecordSubscription] = None
        self._closed = False

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def user_id(self) -> Optional[str]:
        return self._identity.user_id if self._identity else None

    @property
    def store(self) -> RecordStoreInterface:
        if self._store is None:
            raise SessionNotReadyError("No record store for this session")
        return self._store

    @property
    def app_settings(self) -> AppSettings:
        return self._app_settings

    @property
    def is_ready(self) -> bool:
        return (
            not self._closed
            and self._identity is not None
            and self._store is not None
        )

    @property
    def subscription(self) -> Optional[RecordSubscription]:
        return self._subscription

    def subscribe(
        self,
        on_change: Optional[Callable[[list[TransactionRecord]], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> RecordSubscription:
        """
        The session's live subscription, opened on first call.

        Later calls return the same subscription while it is active.
        """
        if not self.is_ready:
            raise SessionNotReadyError("Session is not ready to subscribe")
        if self._subscription is None or not self._subscription.active:
            self._subscription = self.store.subscribe(
                on_change=on_change,
                on_error=on_error,
            )
            logger.info(
                "subscription_opened",
                collection=self.store.collection_path,
            )
        return self._subscription

    def resubscribe(
        self,
        on_change: Optional[Callable[[list[TransactionRecord]], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> RecordSubscription:
        """Cancel the current subscription and open a fresh one."""
        if self._subscription is not None:
            self._subscription.cancel()
        self._subscription = None
        return self.subscribe(on_change=on_change, on_error=on_error)

    def close(self) -> None:
        """End the session and its subscription."""
        if self._subscription is not None:
            self._subscription.cancel()
        self._closed = True
        logger.info("session_closed", user_id=self.user_id)


def build_store(
    settings: Settings,
    app_settings: AppSettings,
    identity: Identity,
) -> RecordStoreInterface:
    """The record store the settings select, scoped to this identity."""
    app_id = settings.identity.app_id
    if app_settings.storage_backend == "memory":
        return InMemoryRecordStore(app_id=app_id, user_id=identity.user_id)
    return GoogleSheetsRecordStore(
        app_id=app_id,
        user_id=identity.user_id,
        client=GoogleSheetsClient(settings.google_sheets),
    )


def create_session(
    settings: Optional[Settings] = None,
    identity_provider: Optional[IdentityProvider] = None,
    store_factory: Optional[Callable[[Identity], RecordStoreInterface]] = None,
) -> SessionContext:
    """
    Build the session context.

    Args:
        settings: Settings to use; the cached settings by default
        identity_provider: Overrides the provider chosen from settings
        store_factory: Builds the store for the resolved identity;
                       the configured backend by default

    Raises:
        SessionInitError: If identity or storage cannot be established
    """
    settings = settings or get_settings()

    try:
        app_settings = settings.app
        configure_logging(
            app_settings.log_level,
            json_logs=not app_settings.debug_mode,
        )

        provider = identity_provider or identity_provider_from_settings(settings.identity)
        identity = provider.resolve()

        if store_factory is not None:
            store = store_factory(identity)
        else:
            store = build_store(settings, app_settings, identity)
    except Exception as e:
        logger.error("session_init_failed", error=str(e))
        raise SessionInitError(f"Could not start the session: {e}") from e

    logger.info(
        "session_started",
        environment=app_settings.app_environment,
        user_id=identity.user_id,
        anonymous=identity.is_anonymous,
        collection=store.collection_path,
    )
    return SessionContext(identity=identity, store=store, app_settings=app_settings)
