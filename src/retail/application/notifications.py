"""Best-effort publishing shared by the application services."""

from __future__ import annotations

import structlog

from retail.domain.repository.notification_sink import NotificationSink

logger = structlog.get_logger(__name__)


def publish_safely(sink: NotificationSink, message: str) -> None:
    """Publish *message*; a failing sink never affects the caller."""
    try:
        sink.publish(message)
    except Exception:
        logger.warning("notification_failed", message=message, exc_info=True)
