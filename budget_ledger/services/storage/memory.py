"""
In-Memory Storage Implementation

Used in tests and as the fallback when file storage cannot be set up.
An optional byte quota mimics the browser's localStorage limit.
"""

from typing import Optional

from budget_ledger.services.storage.interface import (
    KeyValueStorageInterface,
    QuotaExceededError,
)


class InMemoryKeyValueStorage(KeyValueStorageInterface):
    """Dict-backed key/value storage."""

    def __init__(self, quota_bytes: Optional[int] = None):
        self._items: dict[str, str] = {}
        self._quota_bytes = quota_bytes

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self._quota_bytes is not None:
            used = sum(
                _size(k, v) for k, v in self._items.items() if k != key
            )
            if used + _size(key, value) > self._quota_bytes:
                raise QuotaExceededError(
                    f"Storing '{key}' would exceed the {self._quota_bytes} byte quota"
                )
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def __len__(self) -> int:
        return len(self._items)


def _size(key: str, value: str) -> int:
    return len(key.encode("utf-8")) + len(value.encode("utf-8"))
