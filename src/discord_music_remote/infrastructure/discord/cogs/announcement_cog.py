"""Posts playback announcements to the queue's text channel."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from discord.ext import commands

from discord_music_remote.domain.music.value_objects import format_duration
from discord_music_remote.domain.shared.events import (
    PlaybackFailed,
    QueueExhausted,
    TrackAddedToQueue,
    TrackStartedPlaying,
)
from discord_music_remote.domain.shared.exceptions import ENGINE_MESSAGE_LIMIT, DeliveryFailureError
from discord_music_remote.domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


def _added_by(name: str | None) -> str:
    return DiscordUIMessages.ANNOUNCE_ADDED_BY.format(name=name) if name else ""


class AnnouncementCog(commands.Cog):
    """Listens on the event bus; never sends anything in reply to a command."""

    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container
        self._event_bus = container.event_bus
        self._pending: set[asyncio.Task[None]] = set()

    async def cog_load(self) -> None:
        self._event_bus.subscribe(TrackStartedPlaying, self._on_track_started)
        self._event_bus.subscribe(TrackAddedToQueue, self._on_track_added)
        self._event_bus.subscribe(QueueExhausted, self._on_queue_exhausted)
        self._event_bus.subscribe(PlaybackFailed, self._on_playback_failed)

    async def cog_unload(self) -> None:
        self._event_bus.unsubscribe(TrackStartedPlaying, self._on_track_started)
        self._event_bus.unsubscribe(TrackAddedToQueue, self._on_track_added)
        self._event_bus.unsubscribe(QueueExhausted, self._on_queue_exhausted)
        self._event_bus.unsubscribe(PlaybackFailed, self._on_playback_failed)

        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def _on_track_started(self, event: TrackStartedPlaying) -> None:
        content = DiscordUIMessages.ANNOUNCE_NOW_PLAYING.format(
            title=event.track_title,
            duration=format_duration(event.duration_seconds),
            added_by=_added_by(event.added_by_name),
        )
        self._announce(event.guild_id, event.text_channel_id, content)

    async def _on_track_added(self, event: TrackAddedToQueue) -> None:
        content = DiscordUIMessages.ANNOUNCE_ADDED.format(
            title=event.track_title,
            duration=format_duration(event.duration_seconds),
            added_by=_added_by(event.added_by_name),
        )
        self._announce(event.guild_id, event.text_channel_id, content)

    async def _on_queue_exhausted(self, event: QueueExhausted) -> None:
        self._announce(event.guild_id, event.text_channel_id, DiscordUIMessages.ANNOUNCE_QUEUE_FINISHED)

    async def _on_playback_failed(self, event: PlaybackFailed) -> None:
        content = DiscordUIMessages.ANNOUNCE_ENGINE_ERROR.format(error=event.error[:ENGINE_MESSAGE_LIMIT])
        self._announce(event.guild_id, event.text_channel_id, content)

    def _announce(self, guild_id: int, channel_id: int | None, content: str) -> None:
        """Send in the background so a slow chat API never holds up the publisher."""
        if channel_id is None:
            logger.debug(LogTemplates.ANNOUNCE_NO_CHANNEL, guild_id)
            return

        task = asyncio.create_task(self._send(channel_id, content))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _send(self, channel_id: int, content: str) -> None:
        try:
            await self.container.chat_platform.send_message(channel_id, content)
        except DeliveryFailureError as exc:
            logger.warning(LogTemplates.ANNOUNCE_FAILED, channel_id, exc.message)
        except Exception:
            logger.exception(LogTemplates.ANNOUNCE_FAILED, channel_id, "unexpected error")


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(AnnouncementCog(bot, container))
