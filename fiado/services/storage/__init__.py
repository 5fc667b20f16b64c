"""
Storage Services Package

Provides the abstract record store interface and its implementations.
Currently implements local JSON files as the backend, plus an in-memory
store for tests.
"""

from fiado.services.storage.interface import (
    NotFoundError,
    RecordKind,
    RecordStoreInterface,
    ReferentialIntegrityError,
    StorageError,
    default_collection,
)
from fiado.services.storage.json_store import JsonFileRecordStore
from fiado.services.storage.memory import InMemoryRecordStore

__all__ = [
    # Interface
    "RecordKind",
    "RecordStoreInterface",
    "default_collection",
    # Exceptions
    "NotFoundError",
    "ReferentialIntegrityError",
    "StorageError",
    # Implementations
    "InMemoryRecordStore",
    "JsonFileRecordStore",
]
