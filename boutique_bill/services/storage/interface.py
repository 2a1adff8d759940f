"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for the little state we
persist. This allows us to:
1. Keep the JSON file on disk in production
2. Use in-memory storage for testing
3. Swap the backend without touching the auth logic

The interface mirrors a browser's localStorage: string keys, string values.
"""

from abc import ABC, abstractmethod
from typing import Optional


class StorageError(Exception):
    """Base exception for storage errors."""
    pass


class CorruptStorageError(StorageError):
    """The backing store exists but can't be read."""
    pass


class LocalStorageInterface(ABC):
    """
    Abstract key/value storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read a value.

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageError: If the store can't be read
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Write a value, replacing any previous one.

        Raises:
            StorageError: If the store can't be written
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete a key. Deleting a missing key is not an error."""
        pass


class InMemoryStorage(LocalStorageInterface):
    """Dictionary-backed storage, for tests and throwaway sessions."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)
