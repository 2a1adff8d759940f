"""
Storage Services Package

Provides the key/value storage interface and its implementations.
The only persisted state is the logged-in user.
"""

from boutique_bill.services.storage.interface import (
    CorruptStorageError,
    InMemoryStorage,
    LocalStorageInterface,
    StorageError,
)
from boutique_bill.services.storage.json_file import JsonFileStorage

__all__ = [
    # Interfaces
    "LocalStorageInterface",
    # Exceptions
    "CorruptStorageError",
    "StorageError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
