"""Domain events and the in-process event bus that carries them.

Engine-driven transitions (a track starting, ending on its own, the queue
running dry, the engine reporting an error) are published here, so the
broadcaster and the announcement cog can react without the playback
engine knowing about either.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from discord_music_remote.domain.music.value_objects import TrackId
from discord_music_remote.domain.shared.datetime_utils import utcnow
from discord_music_remote.domain.shared.types import (
    DiscordSnowflake,
    NonEmptyStr,
    NonNegativeInt,
    UtcDatetimeField,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="DomainEvent")
EventHandler = Callable[[T], Awaitable[None]]


class DomainEvent(BaseModel):
    """Base class for all domain events."""

    model_config = ConfigDict(frozen=True)

    event_id: NonEmptyStr = Field(default_factory=lambda: str(uuid4()))
    occurred_at: UtcDatetimeField = Field(default_factory=utcnow)


# === Music Domain Events ===


class TrackAddedToQueue(DomainEvent):
    guild_id: DiscordSnowflake
    track_id: TrackId | None = None
    track_title: str = ""
    duration_seconds: NonNegativeInt = 0
    added_by_name: str | None = None
    queue_position: NonNegativeInt = 0
    text_channel_id: DiscordSnowflake | None = None


class TrackStartedPlaying(DomainEvent):
    guild_id: DiscordSnowflake
    track_id: TrackId | None = None
    track_title: str = ""
    duration_seconds: NonNegativeInt = 0
    added_by_name: str | None = None
    text_channel_id: DiscordSnowflake | None = None


class TrackFinishedPlaying(DomainEvent):
    """A track ended on its own and the queue advanced past it."""

    guild_id: DiscordSnowflake
    track_id: TrackId | None = None
    track_title: str = ""


class QueueExhausted(DomainEvent):
    """The last track ended on its own; the queue is gone."""

    guild_id: DiscordSnowflake
    last_track_id: TrackId | None = None
    last_track_title: str = ""
    text_channel_id: DiscordSnowflake | None = None


class PlaybackFailed(DomainEvent):
    guild_id: DiscordSnowflake
    track_title: str = ""
    error: str = ""
    text_channel_id: DiscordSnowflake | None = None


# === Event Bus ===


class EventBus:
    """In-memory pub/sub event bus for domain events.

    Handlers are called concurrently. Exceptions in handlers are logged
    but do not prevent other handlers from running.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[DomainEvent], list[EventHandler[Any]]] = defaultdict(list)

    def subscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        self._handlers[event_type].append(handler)
        logger.debug("Subscribed handler to: %s", event_type.__name__)

    def unsubscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        handlers = self._handlers[event_type]
        if handler in handlers:
            handlers.remove(handler)
            logger.debug("Unsubscribed handler from %s", event_type.__name__)

    def handler_count(self, event_type: type[DomainEvent]) -> int:
        return len(self._handlers.get(event_type, []))

    async def publish(self, event: DomainEvent) -> None:
        event_type = type(event)
        handlers = list(self._handlers.get(event_type, []))

        if not handlers:
            logger.debug("No handlers for %s", event_type.__name__)
            return

        logger.debug("Publishing %s to %d handlers", event_type.__name__, len(handlers))

        async def safe_call(handler: EventHandler[Any]) -> None:
            try:
                await handler(event)
            except Exception as e:
                logger.exception("Error in handler for %s: %s", event_type.__name__, e)

        async with asyncio.TaskGroup() as tg:
            for handler in handlers:
                tg.create_task(safe_call(handler))

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()
        logger.debug("Cleared all event handlers")
