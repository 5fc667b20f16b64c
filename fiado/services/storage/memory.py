"""
In-Memory Record Store

Keeps the serialized collections in a dict. Records still go through the
same JSON round trip as the file store, so tests exercise real
serialization without touching the disk.
"""

from typing import Optional

from fiado.services.storage.interface import (
    RecordKind,
    RecordStoreInterface,
    default_collection,
    dump_records,
    parse_records,
)


class InMemoryRecordStore(RecordStoreInterface):
    """Record store that lives only as long as the process."""

    def __init__(self):
        self._blobs: dict[RecordKind, str] = {}
        self._version: Optional[str] = None
        self.save_count = 0

    def load(self, kind: RecordKind) -> list:
        payload = self._blobs.get(kind)
        if payload is None:
            return default_collection(kind)
        return parse_records(kind, payload)

    def save(self, kind: RecordKind, records: list) -> None:
        self._blobs[kind] = dump_records(kind, records)
        self.save_count += 1

    def has_saved(self, kind: RecordKind) -> bool:
        """Whether anything was ever written for this collection."""
        return kind in self._blobs

    def load_version(self) -> Optional[str]:
        return self._version

    def save_version(self, version: str) -> None:
        self._version = version
