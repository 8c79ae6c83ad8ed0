"""
Storage Services Package

Provides the abstract key/value interface and concrete implementations
for persisting ledger snapshots. Local files are the default backend,
but the interface is designed to be swappable.
"""

from budget_ledger.services.storage.interface import (
    KeyValueStorageInterface,
    QuotaExceededError,
    StorageError,
    StorageUnavailableError,
)
from budget_ledger.services.storage.file_storage import FileKeyValueStorage
from budget_ledger.services.storage.memory import InMemoryKeyValueStorage

__all__ = [
    # Interfaces
    "KeyValueStorageInterface",
    # Exceptions
    "QuotaExceededError",
    "StorageError",
    "StorageUnavailableError",
    # Implementations
    "FileKeyValueStorage",
    "InMemoryKeyValueStorage",
]
