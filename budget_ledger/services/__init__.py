"""
Services Package

External collaborators of the ledger:
- storage: Key/value backends for snapshots
- persistence: Best-effort save/restore boundary
"""

from budget_ledger.services.persistence import DEFAULT_STORAGE_KEY, LedgerPersistence
from budget_ledger.services.storage import (
    FileKeyValueStorage,
    InMemoryKeyValueStorage,
    KeyValueStorageInterface,
    QuotaExceededError,
    StorageError,
    StorageUnavailableError,
)

__all__ = [
    # Persistence
    "DEFAULT_STORAGE_KEY",
    "LedgerPersistence",
    # Storage
    "FileKeyValueStorage",
    "InMemoryKeyValueStorage",
    "KeyValueStorageInterface",
    "QuotaExceededError",
    "StorageError",
    "StorageUnavailableError",
]
