"""
In-Memory Storage Implementation

Used by the test suite and for throwaway sessions. Nothing survives the
process; otherwise it behaves exactly like the file backend.
"""

from typing import Optional

from construction_ledger.services.storage.interface import KeyValueStore


class InMemoryStore(KeyValueStore):
    """Dictionary-backed key-value store."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        return sorted(self._data)
