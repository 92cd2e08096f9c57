"""Translate domain and storage failures into CLI errors."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import click

from retail.domain.exceptions import DomainException, StoreError


@contextmanager
def reported_errors() -> Iterator[None]:
    try:
        yield
    except DomainException as exc:
        field = getattr(exc, "field", None)
        prefix = f"[{field}] " if field else ""
        raise click.ClickException(f"{prefix}{exc}")
    except StoreError as exc:
        raise click.ClickException(f"Storage error: {exc}")
