"""
Main Orchestrator for Budget Ledger

This module ties together the ledger, persistence and audit trail and
defines the flows a host shell (UI, CLI) drives:
1. Add entry (raw input -> parse -> validate -> add -> persist)
2. Remove entry (id -> remove -> persist)
3. Summary (totals from the current entries)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Validation errors reach the caller; nothing is stored on rejection
- Persistence failures never reach the caller
- Every user action is audited
"""

from typing import Any, Optional
from uuid import UUID

import structlog

from budget_ledger.audit import AuditLogger, create_correlation_id
from budget_ledger.config import get_settings
from budget_ledger.ledger import Ledger
from budget_ledger.models.entry import EntryKind, LedgerEntry, LedgerSummary
from budget_ledger.services.persistence import LedgerPersistence
from budget_ledger.services.storage import (
    FileKeyValueStorage,
    InMemoryKeyValueStorage,
    KeyValueStorageInterface,
    StorageError,
)
from budget_ledger.validation import LedgerValidationError, parse_amount


logger = structlog.get_logger(__name__)


class BudgetSession:
    """
    One hosting session around a single Ledger instance.

    Flow for an add:
    1. Parse → raw amount text becomes a Decimal (or NaN)
    2. Validate/Add → Ledger rejects or appends the entry
    3. Persist → best-effort snapshot write
    4. Audit → outcome recorded

    The ledger is always updated before persistence is attempted.
    """

    def __init__(
        self,
        ledger: Ledger,
        persistence: Optional[LedgerPersistence] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._ledger = ledger
        self._persistence = persistence
        self._audit_logger = audit_logger or AuditLogger()

    @classmethod
    def start(
        cls,
        persistence: LedgerPersistence,
        audit_logger: Optional[AuditLogger] = None,
    ) -> "BudgetSession":
        """Create a session whose ledger is hydrated from storage."""
        return cls(persistence.hydrate(), persistence, audit_logger)

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    def add_income(
        self,
        description: str,
        raw_amount: Any,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEntry:
        """
        Add an income from raw user input.

        Raises:
            EmptyDescriptionError, InvalidAmountError: input rejected
        """
        return self._add(EntryKind.INCOME, description, raw_amount, correlation_id)

    def add_expense(
        self,
        description: str,
        raw_amount: Any,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEntry:
        """
        Add an expense from raw user input.

        Raises:
            EmptyDescriptionError, InvalidAmountError: input rejected
        """
        return self._add(EntryKind.EXPENSE, description, raw_amount, correlation_id)

    def _add(
        self,
        kind: EntryKind,
        description: str,
        raw_amount: Any,
        correlation_id: Optional[UUID],
    ) -> LedgerEntry:
        correlation_id = correlation_id or create_correlation_id()
        amount = parse_amount(raw_amount)

        try:
            if kind is EntryKind.INCOME:
                entry = self._ledger.add_income(description, amount)
            else:
                entry = self._ledger.add_expense(description, amount)
        except LedgerValidationError as e:
            self._audit_logger.log_entry_rejected(
                kind=kind.value,
                field=e.field,
                reason=e.message,
                correlation_id=correlation_id,
            )
            raise

        self._audit_logger.log_entry_added(
            entry_id=entry.id,
            kind=kind.value,
            amount=str(entry.amount),
            correlation_id=correlation_id,
        )
        self._persist()
        return entry

    def remove(self, entry_id: str, correlation_id: Optional[UUID] = None) -> bool:
        """
        Remove an entry by id. Returns False if it does not exist.
        """
        correlation_id = correlation_id or create_correlation_id()
        entry = self._ledger.get(entry_id)

        if not self._ledger.remove_by_id(entry_id):
            self._audit_logger.log_entry_not_found(entry_id, correlation_id)
            return False

        self._audit_logger.log_entry_removed(
            entry_id=entry_id,
            kind=entry.kind.value if entry else "unknown",
            correlation_id=correlation_id,
        )
        self._persist()
        return True

    def summary(self) -> LedgerSummary:
        return self._ledger.summary()

    def _persist(self) -> bool:
        if self._persistence is None:
            return True
        return self._persistence.persist(self._ledger)


# =============================================================================
# FACTORY
# =============================================================================

def create_storage(use_storage: bool = True) -> KeyValueStorageInterface:
    """
    Build the configured storage backend.

    Falls back to in-memory storage when file storage is disabled or
    cannot be set up.
    """
    storage_settings = get_settings().storage

    if use_storage and storage_settings.backend == "file":
        try:
            return FileKeyValueStorage(
                storage_settings.data_dir,
                max_attempts=storage_settings.max_attempts,
                retry_wait=storage_settings.retry_wait,
            )
        except StorageError as e:
            logger.warning(
                "file_storage_unavailable",
                error=str(e),
                data_dir=storage_settings.data_dir,
            )

    return InMemoryKeyValueStorage(quota_bytes=storage_settings.quota_bytes)


def create_app_components(
    use_storage: bool = True,
) -> tuple[BudgetSession, LedgerPersistence, AuditLogger]:
    """
    Create all application components.

    Args:
        use_storage: If False, keep snapshots in memory only (testing mode)

    Returns:
        (session, persistence, audit_logger)
    """
    settings = get_settings()

    audit_logger = AuditLogger(history_size=settings.app.audit_history_size)
    persistence = LedgerPersistence(
        storage=create_storage(use_storage),
        key=settings.storage.key,
        audit_logger=audit_logger,
    )
    session = BudgetSession.start(persistence, audit_logger)

    return session, persistence, audit_logger
