"""Core domain entities for the music bounded context."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from discord_music_remote.domain.music.value_objects import (
    TrackIdField,
    format_duration,
    upcoming_to_queue_index,
)
from discord_music_remote.domain.shared.datetime_utils import monotonic, utcnow
from discord_music_remote.domain.shared.exceptions import (
    AlreadyInStateError,
    InvalidInputError,
    OutOfBoundsError,
)
from discord_music_remote.domain.shared.messages import ErrorMessages
from discord_music_remote.domain.shared.types import (
    DiscordSnowflake,
    DurationSeconds,
    HttpUrlStr,
    NonEmptyStr,
    NonNegativeFloat,
    TrackTitleStr,
    UtcDatetimeField,
    VolumePercent,
)

UNKNOWN_USER_NAME = "Unknown User"


class UserRef(BaseModel):
    """Who asked for something. Attribution metadata only.

    The id is kept as a string so it survives JSON round-trips through
    JavaScript clients without losing precision.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    id: NonEmptyStr
    display_name: NonEmptyStr
    avatar_url: str | None = None

    @classmethod
    def unknown(cls, user_id: str | int) -> UserRef:
        return cls(id=str(user_id), display_name=UNKNOWN_USER_NAME)


class Track(BaseModel):
    """Immutable value object representing a playable track."""

    model_config = ConfigDict(frozen=True, strict=True)

    id: TrackIdField
    title: TrackTitleStr
    url: HttpUrlStr
    stream_url: HttpUrlStr | None = None
    duration_seconds: DurationSeconds = 0
    thumbnail_url: str | None = None
    uploader: NonEmptyStr | None = None
    is_live: bool = False

    # Request metadata (set when queued)
    added_by: UserRef | None = None
    added_at: UtcDatetimeField | None = None

    @property
    def duration_formatted(self) -> str:
        return format_duration(self.duration_seconds)

    @property
    def is_seekable(self) -> bool:
        return not self.is_live and self.duration_seconds > 0

    def with_requester(self, user: UserRef, added_at: datetime | None = None) -> Track:
        """Return a copy of this track with requester metadata populated."""
        return self.model_copy(update={"added_by": user, "added_at": added_at or utcnow()})

    def with_stream_url(self, stream_url: str) -> Track:
        return self.model_copy(update={"stream_url": stream_url})


class GuildQueue(BaseModel):
    """Aggregate root holding the one playback queue of a guild.

    ``songs[0]`` is the current track; everything after it is upcoming.
    Elapsed time of the current track is tracked as an offset plus the
    monotonic instant the offset was taken, so pausing freezes it and a
    seek replaces it.
    """

    model_config = ConfigDict(validate_assignment=True)

    guild_id: DiscordSnowflake
    voice_channel_id: DiscordSnowflake | None = None
    text_channel_id: DiscordSnowflake | None = None
    songs: list[Track] = Field(default_factory=list)
    volume: VolumePercent = 50
    paused: bool = False

    position_offset: NonNegativeFloat = 0.0
    clock_started_at: float | None = None

    created_at: UtcDatetimeField = Field(default_factory=utcnow)

    # ── Queries ─────────────────────────────────────────────────────

    @property
    def current(self) -> Track | None:
        return self.songs[0] if self.songs else None

    @property
    def upcoming(self) -> list[Track]:
        return self.songs[1:]

    @property
    def upcoming_length(self) -> int:
        return max(0, len(self.songs) - 1)

    @property
    def is_empty(self) -> bool:
        return not self.songs

    def current_time(self, now: float | None = None) -> float:
        """Elapsed seconds into the current track."""
        if self.current is None:
            return 0.0
        if self.clock_started_at is None or self.paused:
            return self.position_offset
        now = monotonic() if now is None else now
        return self.position_offset + max(0.0, now - self.clock_started_at)

    # ── Playback clock ──────────────────────────────────────────────

    def start_clock(self, offset: float = 0.0, now: float | None = None) -> None:
        """Mark the current track as audible from ``offset`` seconds."""
        self.position_offset = max(0.0, float(offset))
        self.clock_started_at = monotonic() if now is None else now

    def seek_to(self, position: float, now: float | None = None) -> None:
        """Jump to ``position``; a paused queue stays frozen there."""
        self.start_clock(position, now)
        if self.paused:
            self.clock_started_at = None

    def _reset_clock(self) -> None:
        self.position_offset = 0.0
        self.clock_started_at = None

    # ── Mutations ───────────────────────────────────────────────────

    def enqueue(self, track: Track) -> int:
        """Append a track and return its full queue index."""
        self.songs.append(track)
        return len(self.songs) - 1

    def advance(self) -> Track | None:
        """Drop the current track and return the new current one."""
        if self.songs:
            self.songs.pop(0)
        self.paused = False
        self._reset_clock()
        return self.current

    def clear(self) -> int:
        """Remove every track and return how many were removed."""
        count = len(self.songs)
        self.songs.clear()
        self.paused = False
        self._reset_clock()
        return count

    def move_upcoming(self, old_index: int, new_index: int) -> bool:
        """Move an upcoming track, addressed by upcoming indices.

        ``new_index`` may equal the upcoming length, which appends at the
        tail. Returns False when the positions are equal and nothing moved.
        This is remove-then-insert, not a swap.
        """
        upcoming = self.upcoming_length
        if not 0 <= old_index < upcoming:
            raise OutOfBoundsError(old_index, upcoming, ErrorMessages.REORDER_OUT_OF_BOUNDS)
        if not 0 <= new_index <= upcoming:
            raise OutOfBoundsError(new_index, upcoming, ErrorMessages.REORDER_OUT_OF_BOUNDS)
        if old_index == new_index:
            return False

        track = self.songs.pop(upcoming_to_queue_index(old_index))
        self.songs.insert(upcoming_to_queue_index(new_index), track)
        return True

    def remove_upcoming(self, index: int) -> Track:
        """Remove and return the upcoming track at ``index``."""
        if not 0 <= index < self.upcoming_length:
            raise OutOfBoundsError(index, self.upcoming_length)
        return self.songs.pop(upcoming_to_queue_index(index))

    def set_volume(self, level: int) -> None:
        if not 0 <= level <= 200:
            raise InvalidInputError(ErrorMessages.INVALID_VOLUME, field="volume")
        self.volume = level

    def pause(self, now: float | None = None) -> None:
        if self.paused:
            raise AlreadyInStateError("paused")
        self.position_offset = self.current_time(now)
        self.clock_started_at = None
        self.paused = True

    def resume(self, now: float | None = None) -> None:
        if not self.paused:
            raise AlreadyInStateError("playing")
        self.paused = False
        if self.current is not None:
            self.start_clock(self.position_offset, now)
