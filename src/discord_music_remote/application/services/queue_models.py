"""Wire projections of the queue, shared by the HTTP API and the realtime channel.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...domain.music.entities import GuildQueue, Track, UserRef
from ...domain.shared.types import NonNegativeInt, VolumePercent

NOT_AVAILABLE = "N/A"


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class UserView(WireModel):
    id: str
    display_name: str
    avatar_url: str | None = None

    @classmethod
    def from_user(cls, user: UserRef) -> UserView:
        return cls(id=user.id, display_name=user.display_name, avatar_url=user.avatar_url)


class TrackView(WireModel):
    """Stable projection of a track. Engine objects never leave the process."""

    id: str
    title: str
    duration_seconds: NonNegativeInt = 0
    formatted_duration: str = "0:00"
    url: str
    thumbnail_url: str | None = None
    is_live: bool = False
    added_by: UserView | None = None

    @classmethod
    def _fields_from(cls, track: Track) -> dict[str, Any]:
        return {
            "id": str(track.id),
            "title": track.title,
            "duration_seconds": track.duration_seconds,
            "formatted_duration": track.duration_formatted,
            "url": track.url,
            "thumbnail_url": track.thumbnail_url,
            "is_live": bool(track.is_live),
            "added_by": UserView.from_user(track.added_by) if track.added_by else None,
        }

    @classmethod
    def from_track(cls, track: Track) -> TrackView:
        return cls(**cls._fields_from(track))


class CurrentTrackView(TrackView):
    """The now-playing track plus the queue-level playback state."""

    paused: bool = False
    current_time: float = 0.0
    volume: VolumePercent = 50

    @classmethod
    def from_queue(cls, queue: GuildQueue, now: float | None = None) -> CurrentTrackView | None:
        track = queue.current
        if track is None:
            return None
        return cls(
            **cls._fields_from(track),
            paused=queue.paused,
            current_time=queue.current_time(now),
            volume=queue.volume,
        )


class QueueSnapshot(WireModel):
    """``{current, queue}``: what every observer sees."""

    current: CurrentTrackView | None = None
    queue: list[TrackView] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> QueueSnapshot:
        return cls()

    @classmethod
    def from_queue(cls, queue: GuildQueue | None, now: float | None = None) -> QueueSnapshot:
        if queue is None:
            return cls.empty()
        return cls(
            current=CurrentTrackView.from_queue(queue, now),
            queue=[TrackView.from_track(track) for track in queue.upcoming],
        )

    def to_payload(self, overrides: dict[str, Any] | None = None) -> dict[str, Any]:
        """Wire dict with *overrides* merged shallowly into ``current``."""
        payload = self.to_wire()
        if overrides and payload["current"] is not None:
            payload["current"].update(overrides)
        return payload


# ── Search results ──────────────────────────────────────────────────
# Shaped like the YouTube Data API search response the web client expects.


class SearchHitId(WireModel):
    video_id: str


class Thumbnail(WireModel):
    url: str | None = None


class Thumbnails(WireModel):
    medium: Thumbnail = Field(default_factory=Thumbnail)


class SearchSnippet(WireModel):
    title: str
    channel_title: str = NOT_AVAILABLE
    thumbnails: Thumbnails = Field(default_factory=Thumbnails)


class SearchHit(WireModel):
    id: SearchHitId
    snippet: SearchSnippet

    @classmethod
    def from_track(cls, track: Track) -> SearchHit:
        return cls(
            id=SearchHitId(video_id=str(track.id)),
            snippet=SearchSnippet(
                title=track.title,
                channel_title=track.uploader or NOT_AVAILABLE,
                thumbnails=Thumbnails(medium=Thumbnail(url=track.thumbnail_url)),
            ),
        )
