"""Identifier and timestamp helpers used as column defaults."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime


def new_id() -> str:
    """Return a fresh opaque row identifier."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def is_uuid(value: str | None) -> bool:
    """Return True when ``value`` parses as a UUID."""
    if not value:
        return False
    try:
        uuid.UUID(str(value))
    except (ValueError, AttributeError, TypeError):
        return False
    return True
