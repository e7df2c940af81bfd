"""
Abstract Storage Interface

DESIGN DECISION: The ledger persists through a plain key-value contract:
one string document per collection key. This allows us to:
1. Use a directory of JSON files in production
2. Use in-memory storage for testing
3. Swap in another durable store without touching the ledger

Serialization is not the backend's job; the persistence adapter turns
collections into documents and back.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract interface for durable key-value storage.

    Any storage implementation must implement these methods.
    Writes to one key are applied in the order they are submitted.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the document stored under a key.

        Args:
            key: Collection key

        Returns:
            The stored document, or None if nothing is stored

        Raises:
            StorageError: If the backend could not be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a document under a key, replacing any previous one.

        Raises:
            StorageWriteError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if something was removed
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List stored keys."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class SerializationError(StorageError):
    """Stored data could not be parsed into a collection."""
    pass


class StorageWriteError(StorageError):
    """The backend could not write a document."""
    pass
