# blogapi/utils/datetime_utils.py
"""
Central date/time handling for the backend.

- Every timestamp the backend writes is a timezone-aware UTC datetime.
- Firestore stores datetimes natively, but dates and naive datetimes must be normalized first.
- Values read back from Firestore may be ``DatetimeWithNanoseconds`` and are normalized to plain UTC datetimes.
"""

from datetime import datetime, date, timezone, time
from typing import Any


class DateTimeUtils:
    """Static helpers for consistent UTC handling."""

    @staticmethod
    def now() -> datetime:
        """Current time as a timezone-aware UTC datetime."""
        return datetime.now(timezone.utc)

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """
        Prepares a value for Firestore.

        - date -> datetime at 00:00 UTC
        - naive datetime -> UTC datetime
        - dict/list are converted recursively
        """
        if isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return obj.astimezone(timezone.utc)
        if isinstance(obj, date):
            return datetime.combine(obj, time.min).replace(tzinfo=timezone.utc)
        if isinstance(obj, dict):
            return {k: DateTimeUtils.for_firestore(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [DateTimeUtils.for_firestore(item) for item in obj]
        return obj

    @staticmethod
    def from_firestore(obj: Any) -> Any:
        """Normalizes Firestore timestamps (and nested containers) to UTC datetimes."""
        if isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return datetime.fromtimestamp(obj.timestamp(), tz=timezone.utc)
        if isinstance(obj, dict):
            return {k: DateTimeUtils.from_firestore(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [DateTimeUtils.from_firestore(item) for item in obj]
        return obj

