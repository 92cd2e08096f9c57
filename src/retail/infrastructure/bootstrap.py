"""Composition root - wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.  Store and sink are
built once per process and shared by every service.
"""

from __future__ import annotations

from functools import lru_cache

from retail.application.catalog_service import CatalogService
from retail.application.directory_service import DirectoryService
from retail.application.order_workflow import OrderWorkflow
from retail.infrastructure.config import Settings
from retail.infrastructure.messaging.file_queue_sink import FileQueueSink
from retail.infrastructure.persistence.json_table_store import JsonTableStore


@lru_cache(maxsize=1)
def settings() -> Settings:
    return Settings.from_env()


@lru_cache(maxsize=1)
def entity_store() -> JsonTableStore:
    return JsonTableStore(settings().data_dir / "tables")


@lru_cache(maxsize=1)
def notification_sink() -> FileQueueSink:
    return FileQueueSink(settings().data_dir / "queues", settings().events_queue)


def catalog_service() -> CatalogService:
    return CatalogService(
        store=entity_store(),
        notifications=notification_sink(),
        stock_retry_limit=settings().stock_retry_limit,
    )


def directory_service() -> DirectoryService:
    return DirectoryService(store=entity_store())


def order_workflow() -> OrderWorkflow:
    return OrderWorkflow(
        store=entity_store(),
        catalog=catalog_service(),
        directory=directory_service(),
        notifications=notification_sink(),
    )


def reset() -> None:
    """Drop cached singletons so the next call re-reads the environment."""
    settings.cache_clear()
    entity_store.cache_clear()
    notification_sink.cache_clear()
