"""Services package."""

from fiado.services.storage import (
    InMemoryRecordStore,
    JsonFileRecordStore,
    NotFoundError,
    RecordKind,
    RecordStoreInterface,
    ReferentialIntegrityError,
    StorageError,
)

__all__ = [
    # Storage services
    "InMemoryRecordStore",
    "JsonFileRecordStore",
    "NotFoundError",
    "RecordKind",
    "RecordStoreInterface",
    "ReferentialIntegrityError",
    "StorageError",
]
