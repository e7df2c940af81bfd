"""
JSON File Storage Implementation

DESIGN DECISION: One file per collection key in a data directory.
Each collection is one plain JSON array, so a user can read or back up
their data directly.

TRADEOFFS:
- No transactions across keys (a crash between two writes can leave
  stages and payments out of step; accepted)
- Whole-document rewrites on every save (collections are small)

Each write goes to a temporary file first and is moved into place, so a
reader never sees a half-written document.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from construction_ledger.services.storage.interface import (
    KeyValueStore,
    StorageError,
    StorageWriteError,
)


_KEY_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class JsonFileStore(KeyValueStore):
    """Key-value store backed by a directory of ``<key>.json`` files."""

    def __init__(
        self,
        data_dir: Path,
        write_attempts: int = 3,
        retry_wait_seconds: float = 0.5,
    ):
        """
        Args:
            data_dir: Directory for the documents; created if missing.
            write_attempts: Attempts per write before giving up.
            retry_wait_seconds: Base for the exponential backoff between attempts.
        """
        self._dir = Path(data_dir)
        self._write_attempts = write_attempts
        self._retry_wait = retry_wait_seconds
        self._dir.mkdir(parents=True, exist_ok=True)

    @property
    def data_dir(self) -> Path:
        return self._dir

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Could not read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        retrying = Retrying(
            stop=stop_after_attempt(self._write_attempts),
            wait=wait_exponential(multiplier=self._retry_wait, max=10),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    self._write_atomic(path, value)
        except OSError as e:
            raise StorageWriteError(f"Could not write {path}: {e}") from e

    def _write_atomic(self, path: Path, value: str) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self._dir, prefix=f".{path.stem}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> bool:
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True

    def keys(self) -> list[str]:
        return sorted(path.stem for path in self._dir.glob("*.json"))
