"""
Abstract Storage Interface

DESIGN DECISION: The ledger is persisted through a plain key/value
interface, the same shape as a browser's localStorage. This allows us to:
1. Store snapshots on local disk today
2. Use in-memory storage for testing (with an optional quota)
3. Swap in another backend without touching the ledger

Values are opaque text. Encoding the ledger snapshot is the caller's job.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for snapshot storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under key.

        Returns:
            The stored text, or None if nothing is stored

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store value under key, replacing any previous value.

        Raises:
            StorageError: If the write fails
            QuotaExceededError: If the backend has no room for the value
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """
        Remove the value stored under key. Missing keys are ignored.

        Raises:
            StorageError: If the backend cannot be modified
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageUnavailableError(StorageError):
    """Storage backend could not be reached or opened."""
    pass


class QuotaExceededError(StorageError):
    """Value does not fit in the backend's storage quota."""
    pass
