"""Abstract entity store.

A table-style key/value store: records are addressed by
(collection, partition key, row key) and carry an opaque version tag
(``etag``) that changes on every write.  Defined in the domain layer so
services never depend on a concrete backend.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class Record:

    partition_key: str
    row_key: str
    data: dict[str, Any] = field(default_factory=dict)
    etag: str | None = None

    def with_etag(self, etag: str) -> Record:
        return replace(self, etag=etag)


class EntityStore(ABC):

    @abstractmethod
    def get(self, collection: str, partition_key: str, row_key: str) -> Record | None:
        """Return a record, or None if it does not exist."""

    @abstractmethod
    def scan(self, collection: str, partition_key: str) -> Iterator[Record]:
        """Lazily yield every record in one partition."""

    @abstractmethod
    def insert(self, collection: str, record: Record) -> Record:
        """Add a new record; raise EntityAlreadyExistsError on collision."""

    @abstractmethod
    def upsert(self, collection: str, record: Record) -> Record:
        """Insert or fully replace a record."""

    @abstractmethod
    def replace(self, collection: str, record: Record, if_match: str) -> Record:
        """Replace a record only if its stored etag equals *if_match*.

        Raises ConcurrencyConflictError when the record changed or vanished
        since it was read.
        """

    @abstractmethod
    def delete(self, collection: str, partition_key: str, row_key: str) -> None:
        """Remove a record; deleting a missing record is a no-op."""
