"""
Abstract Record Store Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the shop's data in local JSON files today
2. Use in-memory storage for testing
3. Keep ledger logic decoupled from the storage implementation

The interface is intentionally simple: three whole collections, each
loaded on start and overwritten after every mutation, plus a version
marker. No partial writes, no transactions across collections.
"""

import json
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Union

from pydantic import TypeAdapter, ValidationError

from fiado.models.ledger import (
    Debtor,
    Product,
    Transaction,
    default_product_catalog,
)


Record = Union[Debtor, Product, Transaction]


class RecordKind(str, Enum):
    """The three independently stored collections."""
    DEBTORS = "debtors"
    PRODUCTS = "products"
    TRANSACTIONS = "transactions"


_ADAPTERS = {
    RecordKind.DEBTORS: TypeAdapter(list[Debtor]),
    RecordKind.PRODUCTS: TypeAdapter(list[Product]),
    RecordKind.TRANSACTIONS: TypeAdapter(list[Transaction]),
}


def default_collection(kind: RecordKind) -> list:
    """Collection used when nothing has been persisted yet."""
    if kind == RecordKind.PRODUCTS:
        return default_product_catalog()
    return []


def dump_records(kind: RecordKind, records: list) -> str:
    """Serialize a whole collection to JSON text."""
    return _ADAPTERS[kind].dump_json(records, indent=2).decode("utf-8")


def parse_records(kind: RecordKind, payload: str) -> list:
    """
    Parse a whole collection from JSON text.

    Raises:
        StorageError: If the payload is not valid JSON or violates the schema
    """
    try:
        return _ADAPTERS[kind].validate_json(payload)
    except (ValidationError, json.JSONDecodeError) as e:
        raise StorageError(f"Stored {kind.value} are unreadable: {e}") from e


class RecordStoreInterface(ABC):
    """
    Abstract interface for record storage operations.

    Any storage implementation (JSON files, memory, etc.)
    must implement these methods.
    """

    @abstractmethod
    def load(self, kind: RecordKind) -> list:
        """
        Load a whole collection.

        Args:
            kind: Which collection to load

        Returns:
            The persisted records in stored order, or the default
            collection if nothing was persisted yet

        Raises:
            StorageError: If the stored data cannot be read
        """
        pass

    @abstractmethod
    def save(self, kind: RecordKind, records: list) -> None:
        """
        Persist a whole collection, replacing what was stored.

        Args:
            kind: Which collection to save
            records: Every record of that collection, in order

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def load_version(self) -> Optional[str]:
        """
        Get the app version that last wrote the data.

        Returns:
            The stored version marker, or None on first run
        """
        pass

    @abstractmethod
    def save_version(self, version: str) -> None:
        """Store the app version marker."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Record not found in storage."""
    pass


class ReferentialIntegrityError(StorageError):
    """A record cannot be removed while other records reference it."""
    pass
