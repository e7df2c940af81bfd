"""
Storage Services Package

Provides the key-value storage contract, its file and in-memory
implementations, and the persistence adapter the ledger talks to.
"""

from construction_ledger.services.storage.interface import (
    KeyValueStore,
    SerializationError,
    StorageError,
    StorageWriteError,
)
from construction_ledger.services.storage.json_file import JsonFileStore
from construction_ledger.services.storage.memory import InMemoryStore
from construction_ledger.services.storage.adapter import PersistenceAdapter

__all__ = [
    # Interface
    "KeyValueStore",
    # Exceptions
    "SerializationError",
    "StorageError",
    "StorageWriteError",
    # Implementations
    "InMemoryStore",
    "JsonFileStore",
    # Adapter
    "PersistenceAdapter",
]
