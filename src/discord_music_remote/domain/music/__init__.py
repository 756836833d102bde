"""
Music Bounded Context

Domain logic for tracks and the per-guild playback queue.
"""

from discord_music_remote.domain.music.entities import GuildQueue, Track, UserRef
from discord_music_remote.domain.music.repository import QueueRepository
from discord_music_remote.domain.music.value_objects import (
    TrackId,
    format_duration,
    queue_to_upcoming_index,
    upcoming_to_queue_index,
)

__all__ = [
    # Entities
    "Track",
    "UserRef",
    "GuildQueue",
    # Value Objects
    "TrackId",
    "format_duration",
    "upcoming_to_queue_index",
    "queue_to_upcoming_index",
    # Repository
    "QueueRepository",
]
