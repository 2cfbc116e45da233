# parking_lot/utils/clock.py
"""UTC wall clock used for entry/exit timestamps (stored as naive UTC)."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)
