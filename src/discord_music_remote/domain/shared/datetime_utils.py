"""Date/time helpers.

- Always store and operate on timezone-aware UTC datetimes.
- Elapsed playback time uses the monotonic clock, never wall time.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime


def utcnow() -> datetime:
    """Preferred replacement for `datetime.now(UTC)`."""
    return datetime.now(UTC)


def monotonic() -> float:
    """Seconds from an arbitrary origin, unaffected by wall-clock changes."""
    return time.monotonic()
