"""JSON-file-backed implementation of EntityStore.

Each collection is one JSON document mapping partition key -> row key ->
``{"etag": ..., "data": {...}}``.  Writes go through a temp file and an
atomic rename.  Every read-modify-write of a collection, including the
conditional ``replace``, runs under a thread lock and a ``<collection>.lock``
file lock, so it is a single step across threads and processes sharing
the directory.
"""

from __future__ import annotations

import json
import os
import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout

from retail.domain.exceptions import (
    ConcurrencyConflictError,
    EntityAlreadyExistsError,
    StoreUnavailableError,
)
from retail.domain.repository.entity_store import EntityStore, Record

LOCK_TIMEOUT = 30.0  # seconds


class JsonTableStore(EntityStore):

    def __init__(self, directory: Path) -> None:
        self._directory = directory
        self._lock = threading.RLock()
        self._file_locks: dict[str, FileLock] = {}
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreUnavailableError(f"Cannot create store at {directory}") from exc

    # --- EntityStore interface ------------------------------------------------

    def get(self, collection: str, partition_key: str, row_key: str) -> Record | None:
        with self._locked(collection):
            entry = self._load(collection).get(partition_key, {}).get(row_key)
        if entry is None:
            return None
        return self._to_record(partition_key, row_key, entry)

    def scan(self, collection: str, partition_key: str) -> Iterator[Record]:
        with self._locked(collection):
            rows = self._load(collection).get(partition_key, {})
        for row_key, entry in rows.items():
            yield self._to_record(partition_key, row_key, entry)

    def insert(self, collection: str, record: Record) -> Record:
        with self._locked(collection):
            tables = self._load(collection)
            rows = tables.setdefault(record.partition_key, {})
            if record.row_key in rows:
                raise EntityAlreadyExistsError(
                    f"{collection}: '{record.row_key}' already exists"
                )
            return self._write(collection, tables, record)

    def upsert(self, collection: str, record: Record) -> Record:
        with self._locked(collection):
            tables = self._load(collection)
            return self._write(collection, tables, record)

    def replace(self, collection: str, record: Record, if_match: str) -> Record:
        with self._locked(collection):
            tables = self._load(collection)
            current = tables.get(record.partition_key, {}).get(record.row_key)
            if current is None or current["etag"] != if_match:
                raise ConcurrencyConflictError(
                    f"{collection}: '{record.row_key}' was modified concurrently"
                )
            return self._write(collection, tables, record)

    def delete(self, collection: str, partition_key: str, row_key: str) -> None:
        with self._locked(collection):
            tables = self._load(collection)
            rows = tables.get(partition_key, {})
            if rows.pop(row_key, None) is not None:
                self._persist(collection, tables)

    # --- Locking --------------------------------------------------------------

    @contextmanager
    def _locked(self, collection: str) -> Iterator[None]:
        with self._lock:
            lock = self._file_locks.get(collection)
            if lock is None:
                path = self._directory / f"{collection.lower()}.lock"
                lock = self._file_locks[collection] = FileLock(str(path), timeout=LOCK_TIMEOUT)
            try:
                lock.acquire()
            except Timeout as exc:
                raise StoreUnavailableError(f"Timed out waiting for {lock.lock_file}") from exc
            try:
                yield
            finally:
                lock.release()

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_record(partition_key: str, row_key: str, entry: dict) -> Record:
        return Record(
            partition_key=partition_key,
            row_key=row_key,
            data=dict(entry["data"]),
            etag=entry["etag"],
        )

    # --- File helpers ---------------------------------------------------------

    def _write(self, collection: str, tables: dict, record: Record) -> Record:
        etag = uuid.uuid4().hex
        tables.setdefault(record.partition_key, {})[record.row_key] = {
            "etag": etag,
            "data": record.data,
        }
        self._persist(collection, tables)
        return record.with_etag(etag)

    def _path(self, collection: str) -> Path:
        return self._directory / f"{collection.lower()}.json"

    def _load(self, collection: str) -> dict[str, dict[str, dict]]:
        path = self._path(collection)
        if not path.exists():
            return {}
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StoreUnavailableError(f"Cannot read {path}") from exc

    def _persist(self, collection: str, tables: dict) -> None:
        path = self._path(collection)
        tmp = path.with_suffix(".json.tmp")
        try:
            tmp.write_text(json.dumps(tables, indent=2) + "\n", encoding="utf-8")
            os.replace(tmp, path)
        except (OSError, TypeError, ValueError) as exc:
            raise StoreUnavailableError(f"Cannot write {path}") from exc
