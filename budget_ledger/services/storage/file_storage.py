"""
Local File Storage Implementation

DESIGN DECISION: Snapshots live as plain JSON files on local disk because:
1. Users can open and back up their data directly
2. No database setup required
3. One file per key keeps the key/value model obvious

TRADEOFFS:
- Not suitable for concurrent writers (we're a single-user ledger)
- Writes are atomic per key (temp file + rename), nothing more

Transient OS errors (locked files, flaky network mounts) are retried
with exponential backoff before surfacing as StorageError.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from budget_ledger.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
    StorageUnavailableError,
)


_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")
FILE_SUFFIX = ".json"

logger = structlog.get_logger(__name__)


class FileKeyValueStorage(KeyValueStorageInterface):
    """
    Stores each key as `<data_dir>/<key>.json`.
    """

    def __init__(
        self,
        data_dir: Union[str, Path],
        max_attempts: int = 3,
        retry_wait: float = 1.0,
    ):
        """
        Initialize file storage.

        Args:
            data_dir: Directory holding one file per key. Created if missing.
            max_attempts: Attempts per read/write before giving up.
            retry_wait: Backoff multiplier in seconds (0 disables waiting).
        """
        self._data_dir = Path(data_dir)
        self._max_attempts = max_attempts
        self._retry_wait = retry_wait
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailableError(
                f"Cannot create data directory {self._data_dir}: {e}"
            ) from e

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}{FILE_SUFFIX}"

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=self._retry_wait, max=10),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )

    def get_item(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            for attempt in self._retrying():
                with attempt:
                    if not path.exists():
                        return None
                    return path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            for attempt in self._retrying():
                with attempt:
                    self._write_atomic(path, value)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e
        logger.debug("storage_item_written", key=key, bytes=len(value))

    def remove_item(self, key: str) -> None:
        path = self.path_for(key)
        try:
            for attempt in self._retrying():
                with attempt:
                    path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to remove {path}: {e}") from e

    def _write_atomic(self, path: Path, value: str) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self._data_dir, prefix=f".{path.stem}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
