"""
Persistence Adapter

Turns ledger collections into JSON documents and back, on top of any
KeyValueStore.

DESIGN DECISION: Liberal recovery on load. A missing, unreadable or
corrupt document yields the caller's default seed instead of an error.
The ledger is not critical infrastructure; reverting to seed data is an
accepted, logged risk.

Saves are write-through: the ledger calls save() once per affected
collection on every mutation. A failed save is logged and reported as
False, never raised, so an in-memory mutation is never rolled back by
the storage layer.
"""

from functools import lru_cache
from typing import Optional, Sequence, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from construction_ledger.audit import LedgerEventLogger
from construction_ledger.models.events import LedgerEventBuilder
from construction_ledger.services.storage.interface import (
    KeyValueStore,
    SerializationError,
    StorageError,
)


M = TypeVar("M", bound=BaseModel)


@lru_cache(maxsize=None)
def _collection_adapter(model: type[BaseModel]) -> TypeAdapter:
    return TypeAdapter(list[model])


class PersistenceAdapter:
    """Load/save contract between the ledger and a key-value store."""

    def __init__(
        self,
        store: KeyValueStore,
        event_logger: Optional[LedgerEventLogger] = None,
    ):
        self._store = store
        self._events = event_logger or LedgerEventLogger()

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def serialize(self, model: type[M], items: Sequence[M]) -> str:
        return _collection_adapter(model).dump_json(list(items), indent=2).decode("utf-8")

    def deserialize(self, model: type[M], raw: str) -> list[M]:
        """
        Parse a stored document.

        Raises:
            SerializationError: If the document is not a valid collection
        """
        try:
            return _collection_adapter(model).validate_json(raw)
        except ValidationError as e:
            raise SerializationError(
                f"Invalid {model.__name__} collection: {e.error_count()} error(s)"
            ) from e

    def load(self, key: str, model: type[M], default: Sequence[M]) -> list[M]:
        """
        Load the collection stored under ``key``.

        Returns a copy of ``default`` when nothing is stored or the stored
        document cannot be read or parsed.
        """
        try:
            raw = self._store.get(key)
            if raw is None:
                items = self._seed(default)
                self._events.log(LedgerEventBuilder.collection_loaded(key, len(items), seeded=True))
                return items
            items = self.deserialize(model, raw)
        except StorageError as e:
            self._events.log(LedgerEventBuilder.serialization_failed(key, str(e)))
            return self._seed(default)

        self._events.log(LedgerEventBuilder.collection_loaded(key, len(items), seeded=False))
        return items

    def save(self, key: str, model: type[M], items: Sequence[M]) -> bool:
        """
        Serialize and write a collection.

        Returns True if the write succeeded.
        """
        try:
            self._store.set(key, self.serialize(model, items))
        except StorageError as e:
            self._events.log(LedgerEventBuilder.save_failed(key, str(e)))
            return False
        return True

    @staticmethod
    def _seed(default: Sequence[M]) -> list[M]:
        return [item.model_copy(deep=True) for item in default]
