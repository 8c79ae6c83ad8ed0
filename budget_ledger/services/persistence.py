"""
Best-effort Ledger Persistence

DESIGN DECISION: The in-memory ledger is the source of truth.
Persistence failures (storage full, disk unavailable, corrupt data)
are caught HERE, logged, and reported as data:
- persist() returns False
- hydrate() returns an empty ledger

Nothing raised by storage ever reaches a ledger caller, and a failed
save never undoes the mutation that triggered it.
"""

import json
from typing import Optional

from budget_ledger.audit import AuditLogger
from budget_ledger.ledger import Ledger, SnapshotError, deserialize, serialize
from budget_ledger.ledger.budget import Clock, IdFactory, utc_now
from budget_ledger.ledger.identifiers import generate_id
from budget_ledger.services.storage import KeyValueStorageInterface, StorageError


DEFAULT_STORAGE_KEY = "budget_data_v1"


class LedgerPersistence:
    """
    Saves and restores a Ledger through a key/value storage backend.
    """

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        key: str = DEFAULT_STORAGE_KEY,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._key = key
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def key(self) -> str:
        return self._key

    def persist(self, ledger: Ledger) -> bool:
        """
        Write the ledger's snapshot to storage.

        Returns True on success, False if anything went wrong.
        """
        try:
            payload = json.dumps(serialize(ledger), allow_nan=False)
            self._storage.set_item(self._key, payload)
        except (StorageError, OSError, TypeError, ValueError, ArithmeticError) as e:
            # ArithmeticError covers timestamps that overflow when moved to UTC
            self._audit_logger.log_persist_failed(self._key, e)
            return False

        self._audit_logger.log_persisted(
            self._key, len(ledger.incomes), len(ledger.expenses)
        )
        return True

    def hydrate(
        self,
        id_factory: IdFactory = generate_id,
        clock: Clock = utc_now,
    ) -> Ledger:
        """
        Load the stored snapshot into a new Ledger.

        Returns an empty ledger when nothing is stored or the stored
        data cannot be read or decoded.
        """
        try:
            raw = self._storage.get_item(self._key)
            if not raw:
                return Ledger(id_factory=id_factory, clock=clock)
            ledger = deserialize(json.loads(raw), id_factory=id_factory, clock=clock)
        except (StorageError, OSError, SnapshotError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            self._audit_logger.log_hydrate_failed(self._key, e)
            return Ledger(id_factory=id_factory, clock=clock)

        self._audit_logger.log_hydrated(
            self._key, len(ledger.incomes), len(ledger.expenses)
        )
        return ledger

    def clear(self) -> bool:
        """Remove the stored snapshot. Returns False on failure."""
        try:
            self._storage.remove_item(self._key)
        except (StorageError, OSError) as e:
            self._audit_logger.log_persist_failed(self._key, e)
            return False
        return True
