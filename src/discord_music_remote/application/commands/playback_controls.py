"""
Playback Controls

Commands and handlers for skip, stop, pause, resume and volume.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from discord_music_remote.application.commands.base import CommandResult, QueueCommandHandler
from discord_music_remote.domain.shared.exceptions import (
    AlreadyInStateError,
    InvalidInputError,
    NoNextTrackError,
)
from discord_music_remote.domain.shared.messages import ErrorMessages, ResponseMessages


@dataclass(frozen=True)
class SkipTrackCommand:
    """Skip the current track of the configured queue."""


@dataclass(frozen=True)
class StopPlaybackCommand:
    """Stop playback and clear the configured queue."""


@dataclass(frozen=True)
class PausePlaybackCommand:
    pass


@dataclass(frozen=True)
class ResumePlaybackCommand:
    pass


@dataclass(frozen=True)
class SetVolumeCommand:
    volume: Any

    def level(self) -> int:
        """Validated volume in percent.

        Raises:
            InvalidInputError: Not a finite number in [0, 200].
        """
        value = self.volume
        if isinstance(value, bool) or not isinstance(value, int | float) or not math.isfinite(value):
            raise InvalidInputError(ErrorMessages.VOLUME_OUT_OF_RANGE, field="volume")
        if not 0 <= value <= 200:
            raise InvalidInputError(ErrorMessages.VOLUME_OUT_OF_RANGE, field="volume")
        return round(value)


class SkipTrackHandler(QueueCommandHandler):
    """Advances to the next track; on the last track this is a stop."""

    async def handle(self, command: SkipTrackCommand) -> CommandResult:
        queue = await self._gateway.resolve_queue()
        if queue.is_empty:
            raise NoNextTrackError()

        if len(queue.songs) <= 1:
            await self._engine(self._playback_service.stop(queue.guild_id), "stop playback")
            await self._broadcaster.broadcast(queue.guild_id)
            return CommandResult(message=ResponseMessages.SKIPPED_LAST)

        await self._engine(self._playback_service.skip(queue.guild_id), "skip the track")
        await self._broadcaster.broadcast(queue.guild_id)
        return CommandResult(message=ResponseMessages.SKIPPED)


class StopPlaybackHandler(QueueCommandHandler):
    """Clears the queue and halts playback. The empty snapshot is always broadcast."""

    async def handle(self, command: StopPlaybackCommand) -> CommandResult:
        queue = await self._gateway.resolve_queue()
        try:
            await self._engine(self._playback_service.stop(queue.guild_id), "stop playback")
        finally:
            await self._broadcaster.broadcast(queue.guild_id)
        return CommandResult(message=ResponseMessages.STOPPED)


class PausePlaybackHandler(QueueCommandHandler):
    async def handle(self, command: PausePlaybackCommand) -> CommandResult:
        queue = await self._gateway.resolve_queue()
        if queue.paused:
            raise AlreadyInStateError("paused")

        await self._engine(self._playback_service.pause(queue.guild_id), "pause")
        await self._broadcaster.broadcast(queue.guild_id)
        return CommandResult(message=ResponseMessages.PAUSED)


class ResumePlaybackHandler(QueueCommandHandler):
    async def handle(self, command: ResumePlaybackCommand) -> CommandResult:
        queue = await self._gateway.resolve_queue()
        if not queue.paused:
            raise AlreadyInStateError("playing")

        await self._engine(self._playback_service.resume(queue.guild_id), "resume")
        await self._broadcaster.broadcast(queue.guild_id)
        return CommandResult(message=ResponseMessages.RESUMED)


class SetVolumeHandler(QueueCommandHandler):
    async def handle(self, command: SetVolumeCommand) -> CommandResult:
        level = command.level()
        queue = await self._gateway.resolve_queue()

        await self._engine(self._playback_service.set_volume(queue.guild_id, level), "set the volume")
        await self._broadcaster.broadcast(queue.guild_id)
        return CommandResult(message=ResponseMessages.VOLUME_SET.format(volume=level))
