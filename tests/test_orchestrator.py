"""Integration tests for BudgetSession and component wiring."""

import json
import pytest
from decimal import Decimal

from budget_ledger.config import get_settings, validate_all_settings
from budget_ledger.ledger import Ledger
from budget_ledger.models.audit import AuditEventType
from budget_ledger.orchestrator import BudgetSession, create_app_components, create_storage
from budget_ledger.services.persistence import LedgerPersistence
from budget_ledger.services.storage import (
    FileKeyValueStorage,
    InMemoryKeyValueStorage,
)
from budget_ledger.validation import EmptyDescriptionError, InvalidAmountError


@pytest.fixture
def session(ledger, memory_storage, audit_logger):
    persistence = LedgerPersistence(memory_storage, audit_logger=audit_logger)
    return BudgetSession(ledger, persistence, audit_logger)


@pytest.fixture
def isolated_settings(tmp_path, monkeypatch):
    """Point file storage at a temp dir for the duration of a test."""
    monkeypatch.setenv("LEDGER_STORAGE_DATA_DIR", str(tmp_path / "ledger"))
    monkeypatch.setenv("LEDGER_STORAGE_RETRY_WAIT", "0")
    get_settings.cache_clear()
    yield tmp_path / "ledger"
    get_settings.cache_clear()


def stored_snapshot(memory_storage):
    return json.loads(memory_storage.get_item("budget_data_v1"))


class TestBudgetSession:
    """Tests for the add / remove / summary flows."""

    def test_add_income_from_form_text(self, session, memory_storage):
        """Raw form text is parsed, added and persisted."""
        entry = session.add_income("  Paycheck ", " 2000 ")

        assert entry.description == "Paycheck"
        assert entry.amount == Decimal("2000")
        assert stored_snapshot(memory_storage)["incomes"][0]["id"] == entry.id

    def test_add_expense_from_form_text(self, session):
        entry = session.add_expense("Rent", "1200.00")
        assert session.ledger.expenses == (entry,)

    def test_non_numeric_amount_rejected(self, session, memory_storage, audit_logger):
        """Rejected input raises, is audited, and stores nothing."""
        with pytest.raises(InvalidAmountError):
            session.add_expense("Rent", "twelve hundred")

        assert len(session.ledger) == 0
        assert memory_storage.get_item("budget_data_v1") is None
        rejected = audit_logger.recent_events()[0]
        assert rejected.event_type == AuditEventType.ENTRY_REJECTED
        assert rejected.details == {"kind": "expense", "field": "amount"}

    def test_empty_amount_rejected(self, session):
        with pytest.raises(InvalidAmountError):
            session.add_income("Paycheck", "")

    def test_empty_description_rejected(self, session, audit_logger):
        with pytest.raises(EmptyDescriptionError):
            session.add_income("   ", "10")
        assert audit_logger.recent_events()[0].details["field"] == "description"

    def test_remove(self, session, memory_storage):
        entry = session.add_expense("Rent", "1200")

        assert session.remove(entry.id) is True
        assert stored_snapshot(memory_storage)["expenses"] == []

    def test_remove_unknown_is_not_an_error(self, session, audit_logger):
        assert session.remove("_missing") is False
        assert audit_logger.recent_events()[0].event_type == AuditEventType.ENTRY_NOT_FOUND

    def test_end_to_end_example(self, session):
        session.add_income("Paycheck", "2000")
        rent = session.add_expense("Rent", "1200")

        summary = session.summary()
        assert (summary.income, summary.expenses, summary.budget) == (2000, 1200, 800)

        assert session.remove(rent.id) is True

        summary = session.summary()
        assert (summary.income, summary.expenses, summary.budget) == (2000, 0, 2000)

    def test_persist_failure_does_not_abort_mutation(self, ledger, audit_logger):
        """The entry is kept in memory even when storage is full."""
        storage = InMemoryKeyValueStorage(quota_bytes=5)
        persistence = LedgerPersistence(storage, audit_logger=audit_logger)
        session = BudgetSession(ledger, persistence, audit_logger)

        entry = session.add_income("Paycheck", "2000")

        assert session.ledger.incomes == (entry,)
        assert session.summary().income == 2000
        assert AuditEventType.PERSIST_FAILED in [
            e.event_type for e in audit_logger.recent_events()
        ]

    def test_amount_beyond_double_range_rejected(self, session, memory_storage):
        """An overflowing amount is refused, so later saves keep working."""
        with pytest.raises(InvalidAmountError):
            session.add_income("Paycheck", "1e400")

        rent = session.add_expense("Rent", "100")

        assert session.summary().income == 0
        assert [e["id"] for e in stored_snapshot(memory_storage)["expenses"]] == [rent.id]

    def test_out_of_range_stored_timestamp_does_not_break_saves(self, memory_storage):
        memory_storage.set_item("budget_data_v1", json.dumps({
            "incomes": [{
                "id": "_ancient",
                "description": "Paycheck",
                "amount": 2000,
                "createdAt": "0001-01-01T00:00:00+05:00",
            }],
        }))
        session = BudgetSession.start(LedgerPersistence(memory_storage))

        session.add_expense("Rent", "10")

        stored = stored_snapshot(memory_storage)
        assert stored["incomes"][0]["id"] == "_ancient"
        assert stored["incomes"][0]["createdAt"].endswith("Z")
        assert len(stored["expenses"]) == 1

    def test_session_without_persistence(self):
        session = BudgetSession(Ledger())
        session.add_income("Paycheck", 10)
        assert session.summary().budget == 10

    def test_start_hydrates_previous_session(self, memory_storage):
        persistence = LedgerPersistence(memory_storage)
        first = BudgetSession.start(persistence)
        kept = first.add_income("Paycheck", "2000")

        second = BudgetSession.start(persistence)

        assert [e.id for e in second.ledger.incomes] == [kept.id]


class TestComponentFactory:
    """Tests for create_storage / create_app_components."""

    def test_file_storage_by_default(self, isolated_settings):
        storage = create_storage(use_storage=True)
        assert isinstance(storage, FileKeyValueStorage)
        assert storage.data_dir == isolated_settings

    def test_memory_when_storage_disabled(self, isolated_settings):
        assert isinstance(create_storage(use_storage=False), InMemoryKeyValueStorage)

    def test_memory_backend_setting(self, isolated_settings, monkeypatch):
        monkeypatch.setenv("LEDGER_STORAGE_BACKEND", "memory")
        assert isinstance(create_storage(), InMemoryKeyValueStorage)

    def test_falls_back_to_memory_when_dir_unusable(self, tmp_path, monkeypatch):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        monkeypatch.setenv("LEDGER_STORAGE_DATA_DIR", str(blocker / "data"))
        assert isinstance(create_storage(), InMemoryKeyValueStorage)

    def test_create_app_components_round_trip(self, isolated_settings):
        session, persistence, audit_logger = create_app_components(use_storage=True)
        entry = session.add_expense("Rent", "1200")

        assert (isolated_settings / "budget_data_v1.json").exists()

        restored_session, _, _ = create_app_components(use_storage=True)
        assert restored_session.ledger.get(entry.id) is not None
        assert restored_session.summary().expenses == 1200

    def test_validate_all_settings(self, isolated_settings):
        status = validate_all_settings()
        assert status["storage"] is True
        assert status["app"] is True

    def test_invalid_storage_key_reported(self, isolated_settings, monkeypatch):
        monkeypatch.setenv("LEDGER_STORAGE_KEY", "../etc/passwd")
        status = validate_all_settings()
        assert status["storage"] is False
        assert "storage_error" in status

    def test_debug_mode_read_from_environment(self, isolated_settings, monkeypatch):
        monkeypatch.delenv("DEBUG_MODE", raising=False)
        assert get_settings().app.debug_mode is False
        monkeypatch.setenv("DEBUG_MODE", "true")
        assert get_settings().app.debug_mode is True
