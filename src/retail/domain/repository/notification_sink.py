"""Abstract sink for best-effort event notifications."""

from __future__ import annotations

from abc import ABC, abstractmethod


class NotificationSink(ABC):

    @abstractmethod
    def publish(self, message: str) -> None:
        """Send *message*; implementations must never raise."""
