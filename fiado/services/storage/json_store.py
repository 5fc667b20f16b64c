"""
JSON File Record Store

DESIGN DECISION: Each collection lives in its own JSON file inside the
data directory, mirroring how the shop's browser app kept three
independent keys plus a version string:

    data/
      debtors.json
      products.json
      transactions.json
      app_version

TRADEOFFS:
- Whole-file overwrite on every mutation (fine for one small shop)
- No transactions across files (each mutation touches one collection)
- Writes go through a temp file and os.replace so a crash never leaves
  a half-written collection behind
"""

import os
from pathlib import Path
from typing import Optional

import structlog

from fiado.services.storage.interface import (
    RecordKind,
    RecordStoreInterface,
    StorageError,
    default_collection,
    dump_records,
    parse_records,
)


VERSION_FILENAME = "app_version"


class JsonFileRecordStore(RecordStoreInterface):
    """Record store backed by one JSON file per collection."""

    def __init__(self, data_dir: Path):
        self._data_dir = Path(data_dir)
        self._logger = structlog.get_logger(__name__)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, kind: RecordKind) -> Path:
        return self._data_dir / f"{kind.value}.json"

    def _read_text(self, path: Path) -> Optional[str]:
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Could not read {path}: {e}") from e

    def _write_text(self, path: Path, text: str) -> None:
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(text, encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            raise StorageError(f"Could not write {path}: {e}") from e

    def load(self, kind: RecordKind) -> list:
        payload = self._read_text(self._path_for(kind))
        if payload is None:
            self._logger.debug("collection_defaulted", kind=kind.value)
            return default_collection(kind)
        records = parse_records(kind, payload)
        self._logger.debug("collection_loaded", kind=kind.value, count=len(records))
        return records

    def save(self, kind: RecordKind, records: list) -> None:
        self._write_text(self._path_for(kind), dump_records(kind, records))
        self._logger.debug("collection_saved", kind=kind.value, count=len(records))

    def load_version(self) -> Optional[str]:
        text = self._read_text(self._data_dir / VERSION_FILENAME)
        return text.strip() if text is not None else None

    def save_version(self, version: str) -> None:
        self._write_text(self._data_dir / VERSION_FILENAME, version)
