"""Services package."""

from construction_ledger.services.storage import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
    PersistenceAdapter,
    SerializationError,
    StorageError,
    StorageWriteError,
)

__all__ = [
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "PersistenceAdapter",
    "SerializationError",
    "StorageError",
    "StorageWriteError",
]
