"""Runtime settings, read once from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class ConfigurationError(ValueError):
    """An environment variable holds a value the application cannot use."""


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    log_level: str
    events_queue: str
    stock_retry_limit: int

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            data_dir=Path(os.getenv("RETAIL_DATA_DIR", str(_DEFAULT_DATA_DIR))),
            log_level=os.getenv("RETAIL_LOG_LEVEL", "WARNING").upper(),
            events_queue=os.getenv("RETAIL_EVENTS_QUEUE", "events"),
            stock_retry_limit=_positive_int("RETAIL_STOCK_RETRY_LIMIT", "5"),
        )


def _positive_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ConfigurationError(f"{name} must be at least 1, got {value}")
    return value
