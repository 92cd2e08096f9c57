"""File-backed event queue.

Messages are appended one per line, base64-encoded the way storage
queues expect their payloads.  Publishing is best effort: a failed
write is logged and dropped.
"""

from __future__ import annotations

import base64
import threading
from pathlib import Path

import structlog

from retail.domain.repository.notification_sink import NotificationSink

logger = structlog.get_logger(__name__)


class FileQueueSink(NotificationSink):

    def __init__(self, directory: Path, queue_name: str = "events") -> None:
        self._path = directory / f"{queue_name}.queue"
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def publish(self, message: str) -> None:
        encoded = base64.b64encode(message.encode("utf-8")).decode("ascii")
        try:
            with self._lock:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                with self._path.open("a", encoding="utf-8") as fh:
                    fh.write(encoded + "\n")
        except OSError:
            logger.warning("notification_dropped", queue=str(self._path), exc_info=True)

    def read_messages(self) -> list[str]:
        """Decode every queued message, oldest first."""
        if not self._path.exists():
            return []
        lines = self._path.read_text(encoding="utf-8").splitlines()
        return [base64.b64decode(line).decode("utf-8") for line in lines if line]
