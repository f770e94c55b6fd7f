"""Tests for settings, identity, the session context and the ledger flow."""

import pytest
import structlog

from registro_contable.config import (
    AppSettings,
    IdentitySettings,
    Settings,
    validate_all_settings,
)
from registro_contable.orchestrator import LedgerFlow, create_app_components
from registro_contable.services.identity import (
    AnonymousIdentityProvider,
    FallbackIdentityProvider,
    Identity,
    IdentityError,
    IdentityProvider,
    StaticIdentityProvider,
    identity_provider_from_settings,
)
from registro_contable.services.storage import InMemoryRecordStore
from registro_contable.session import (
    SessionContext,
    SessionInitError,
    SessionNotReadyError,
    create_session,
)
from registro_contable.status import (
    MSG_EXPORTED,
    MSG_LOAD_FAILED,
    MSG_NOT_READY,
    MSG_NOTHING_TO_EXPORT,
)
from registro_contable.models import Category

from tests.conftest import FailingStore, make_record, millis, run


class BrokenIdentityProvider(IdentityProvider):
    def resolve(self) -> Identity:
        raise IdentityError("sign-in rejected")


@pytest.fixture
def memory_env(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("TIMEZONE", "UTC")
    monkeypatch.setenv("IDENTITY_APP_ID", "test-app")
    monkeypatch.setenv("IDENTITY_USER_ID", "user-1")


class TestSettings:
    """Tests for the settings models."""

    def test_app_defaults(self, monkeypatch):
        for name in ("TIMEZONE", "CURRENCY", "CSV_DATE_SOURCE", "STORAGE_BACKEND"):
            monkeypatch.delenv(name, raising=False)
        settings = AppSettings(_env_file=None)
        assert settings.timezone == "America/Mexico_City"
        assert settings.currency == "MXN"
        assert settings.csv_date_source == "created_at"
        assert settings.storage_backend == "google_sheets"

    def test_unknown_time_zone_rejected(self):
        with pytest.raises(ValueError, match="Unknown time zone"):
            AppSettings(timezone="Mars/Olympus_Mons")

    def test_identity_from_env(self, memory_env):
        settings = IdentitySettings()
        assert settings.app_id == "test-app"
        assert settings.user_id == "user-1"


class TestSettingsCheck:
    """Tests for validate_all_settings."""

    def test_missing_sheets_config_reported(self, memory_env, monkeypatch, tmp_path):
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)
        monkeypatch.chdir(tmp_path)

        status = validate_all_settings()

        assert status["google_sheets"] is False
        assert "google_sheets_error" in status
        assert status["identity"] is True
        assert status["app"] is True

    def test_sheets_config_loads(self, memory_env, monkeypatch, tmp_path):
        credentials = tmp_path / "credentials.json"
        credentials.write_text("{}")
        monkeypatch.setenv("GOOGLE_SHEETS_CREDENTIALS_PATH", str(credentials))
        monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "sheet-123")

        assert validate_all_settings()["google_sheets"] is True


class TestIdentityProviders:
    """Tests for the identity providers."""

    def test_static_identity(self):
        identity = StaticIdentityProvider(" user-7 ").resolve()
        assert identity.user_id == "user-7"
        assert identity.is_anonymous is False

    def test_static_identity_rejects_blank(self):
        with pytest.raises(IdentityError):
            StaticIdentityProvider("  ").resolve()

    def test_anonymous_identity_is_stable(self):
        provider = AnonymousIdentityProvider()
        first = provider.resolve()
        assert first.is_anonymous is True
        assert provider.resolve() == first
        assert AnonymousIdentityProvider().resolve().user_id != first.user_id

    def test_fallback_to_anonymous(self):
        provider = FallbackIdentityProvider(
            BrokenIdentityProvider(), AnonymousIdentityProvider()
        )
        assert provider.resolve().is_anonymous is True

    def test_provider_from_settings(self):
        configured = identity_provider_from_settings(IdentitySettings(user_id="abc"))
        assert configured.resolve().user_id == "abc"
        anonymous = identity_provider_from_settings(IdentitySettings(user_id=None))
        assert anonymous.resolve().is_anonymous is True


class TestCreateSession:
    """Tests for create_session."""

    def test_memory_backend_session(self, memory_env):
        session = create_session(Settings())
        assert session.is_ready
        assert session.user_id == "user-1"
        assert isinstance(session.store, InMemoryRecordStore)
        assert session.store.collection_path == (
            "artifacts/test-app/users/user-1/accounting_entries"
        )

    def test_debug_mode_uses_console_logs(self, memory_env, monkeypatch):
        monkeypatch.setenv("DEBUG_MODE", "true")
        create_session(Settings())
        assert isinstance(
            structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer
        )

        monkeypatch.setenv("DEBUG_MODE", "false")
        create_session(Settings())
        assert isinstance(
            structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer
        )

    def test_store_factory_gets_identity(self, memory_env):
        seen = []

        def factory(identity):
            seen.append(identity)
            return InMemoryRecordStore(user_id=identity.user_id)

        session = create_session(
            Settings(),
            identity_provider=StaticIdentityProvider("user-2"),
            store_factory=factory,
        )
        assert [i.user_id for i in seen] == ["user-2"]
        assert session.user_id == "user-2"

    def test_identity_failure_is_fatal(self, memory_env):
        with pytest.raises(SessionInitError):
            create_session(Settings(), identity_provider=BrokenIdentityProvider())

    def test_store_failure_is_fatal(self, memory_env):
        def factory(identity):
            raise RuntimeError("no backend")

        with pytest.raises(SessionInitError):
            create_session(Settings(), store_factory=factory)


class TestSessionContext:
    """Tests for SessionContext."""

    def test_one_subscription_per_session(self, session):
        first = session.subscribe()
        assert session.subscribe() is first

    def test_resubscribe_replaces_subscription(self, session):
        first = session.subscribe()
        second = session.resubscribe()
        assert second is not first
        assert not first.active

    def test_close_cancels_subscription(self, session):
        subscription = session.subscribe()
        session.close()
        assert not subscription.active
        assert not session.is_ready
        with pytest.raises(SessionNotReadyError):
            session.subscribe()

    def test_not_ready_without_store(self, app_settings):
        session = SessionContext(identity=Identity(user_id="u"), store=None, app_settings=app_settings)
        assert not session.is_ready
        with pytest.raises(SessionNotReadyError):
            session.store


class TestLedgerFlow:
    """Tests for LedgerFlow."""

    def test_refresh_reads_snapshot(self, ledger, store):
        run(store.create_record(make_record(Category.INCOME, "100")))
        run(store.create_record(make_record(Category.EXPENSE, "40")))
        run(store.create_record(make_record(Category.SUPPORT, "20")))

        run(ledger.refresh())

        assert len(ledger.records) == 3
        assert str(ledger.balance) == "80"
        assert len(ledger.entries) == 3

    def test_records_empty_before_refresh(self, ledger):
        assert ledger.records == []
        assert ledger.entries == []

    def test_balance_follows_deletes(self, ledger, store):
        keep = run(store.create_record(make_record(Category.INCOME, "10")))
        drop = run(store.create_record(make_record(Category.EXPENSE, "4")))
        run(ledger.refresh())
        run(store.delete_record(drop))
        run(ledger.refresh())
        assert [r.id for r in ledger.records] == [keep]
        assert str(ledger.balance) == "10"

    def test_load_failure_keeps_status(self, app_settings, status):
        session = SessionContext(
            identity=Identity(user_id="u"),
            store=FailingStore(),
            app_settings=app_settings,
        )
        ledger = LedgerFlow(session, status=status)
        assert run(ledger.refresh()) == []
        assert status.text == MSG_LOAD_FAILED

    def test_refresh_not_ready(self, app_settings, status):
        session = SessionContext(identity=None, store=None, app_settings=app_settings)
        ledger = LedgerFlow(session, status=status)
        assert run(ledger.refresh()) == []
        assert status.text == MSG_NOT_READY

    def test_export_empty(self, ledger):
        run(ledger.refresh())
        assert ledger.export_csv() is None
        assert ledger.status.text == MSG_NOTHING_TO_EXPORT

    def test_export_rows(self, ledger, store):
        run(store.create_record(make_record(created_at=millis(2024, 1, 1))))
        run(ledger.refresh())

        export = ledger.export_csv()

        lines = export.content.split("\n")
        assert len(lines) == 2
        assert ",01/01/2024," in lines[1]
        assert ledger.status.text == MSG_EXPORTED

    def test_components_share_status(self, session):
        _, controller, ledger = create_app_components(session)
        assert controller.status is ledger.status
