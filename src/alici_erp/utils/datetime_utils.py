"""Datetime utilities for timezone-aware UTC timestamps.

Usage:
    from alici_erp.utils.datetime_utils import utc_now, parse_api_datetime

    # For SQLAlchemy Column defaults
    updated_at = Column(DateTime, default=utc_now)
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def parse_api_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp as sent by the API ('2025-03-01T10:00:00.000Z').

    Naive values are assumed to be UTC. Returns None for empty or
    unparseable input.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
