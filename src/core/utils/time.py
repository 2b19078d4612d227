"""
Time-related utilities for the application.

Response timestamps are generated in UTC and serialized using
ISO-8601 format with timezone information. Stored filenames embed
epoch milliseconds instead.
"""

import time
from datetime import datetime, timezone


def utc_now_iso() -> str:
    """Return current UTC time in ISO-8601 format.

    Example:
        2024-01-15T10:42:31.123456+00:00
    """
    return datetime.now(timezone.utc).isoformat()


def epoch_millis() -> int:
    """Return milliseconds since the Unix epoch, as used in image filenames."""
    return time.time_ns() // 1_000_000


def from_timestamp(seconds: float) -> datetime:
    """Convert a POSIX timestamp (e.g. from os.stat) into an aware UTC datetime."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)
