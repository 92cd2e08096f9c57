"""Normalization of order dates to absolute UTC instants.

Naive datetimes carry no zone information; their wall-clock fields are
taken to already be UTC. Aware datetimes in any other zone are converted
through their offset.
"""

from __future__ import annotations

from datetime import datetime, timezone

from retail.domain.exceptions import DateNormalizationError


def normalize_order_date(value: datetime) -> datetime:
    if value.tzinfo is None or value.utcoffset() is None:
        normalized = value.replace(tzinfo=timezone.utc)
    else:
        normalized = value.astimezone(timezone.utc)

    if not is_utc(normalized):
        raise DateNormalizationError(
            "Order date must be in UTC format for storage.", field="order_date"
        )
    return normalized


def is_utc(value: datetime) -> bool:
    return value.tzinfo is timezone.utc
