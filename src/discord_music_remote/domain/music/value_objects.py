"""Immutable value objects and pure helpers for the music bounded context."""

from __future__ import annotations

import hashlib
import math
import re
from dataclasses import dataclass
from typing import Annotated, Any

from pydantic import PlainSerializer, PlainValidator

from discord_music_remote.domain.shared.messages import ErrorMessages

_YOUTUBE_PATTERNS = (
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtube\.com/shorts/([a-zA-Z0-9_-]{11})"),
)


@dataclass(frozen=True)
class TrackId:
    """Typically a YouTube video ID or a hash of the URL."""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError(ErrorMessages.EMPTY_TRACK_ID)

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_url(cls, url: str) -> TrackId:
        """Extract track ID from a URL, using YouTube video ID or a URL hash as fallback."""
        for pattern in _YOUTUBE_PATTERNS:
            match = pattern.search(url)
            if match:
                return cls(match.group(1))

        url_hash = hashlib.md5(url.encode()).hexdigest()[:16]
        return cls(url_hash)


# Serializes as plain string in JSON, stores as TrackId in the model.
TrackIdField = Annotated[
    TrackId,
    PlainValidator(lambda v: TrackId(v) if isinstance(v, str) else v),
    PlainSerializer(lambda v: v.value, return_type=str),
]


def format_duration(seconds: Any) -> str:
    """Format a duration as ``M:SS``.

    Minutes are not folded into hours, so an 83 minute mix reads ``83:00``.
    Anything that is not a finite, non-negative number formats as ``0:00``.
    """
    if isinstance(seconds, bool) or not isinstance(seconds, int | float):
        return "0:00"
    if not math.isfinite(seconds) or seconds < 0:
        return "0:00"

    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"


# ── Upcoming/queue index translation ────────────────────────────────
#
# The web client addresses tracks by their position in the *upcoming*
# list; the queue itself stores the current track at index 0.


def upcoming_to_queue_index(upcoming_index: int) -> int:
    """Translate a zero-based upcoming index to a full queue index."""
    return upcoming_index + 1


def queue_to_upcoming_index(queue_index: int) -> int:
    """Translate a full queue index back to a zero-based upcoming index.

    Index 0 (the current track) has no upcoming position.
    """
    if queue_index < 1:
        raise ValueError(f"queue index {queue_index} is the current track")
    return queue_index - 1
