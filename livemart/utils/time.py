"""Time helpers shared by checkout and lifecycle services."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def scheduled_delivery_date(created_at: datetime, lead_days: int, hour: int) -> datetime:
    """Return the delivery slot ``lead_days`` after creation at ``hour``:00.

    Orders are stored with UTC timestamps, so the slot is computed in UTC as
    well.
    """
    target = created_at + timedelta(days=lead_days)
    return target.replace(hour=hour, minute=0, second=0, microsecond=0)
