"""Command and handler for seeking within the current track."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

from discord_music_remote.application.commands.base import CommandResult, QueueCommandHandler
from discord_music_remote.domain.music.value_objects import format_duration
from discord_music_remote.domain.shared.exceptions import (
    EngineFailureError,
    InvalidInputError,
    NothingPlayingError,
    NotSeekableError,
)
from discord_music_remote.domain.shared.messages import ErrorMessages, LogTemplates, ResponseMessages

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeekCommand:
    time: Any

    def target(self) -> float:
        """The requested position as a finite number.

        Negative values are accepted here and clamped to 0 later.

        Raises:
            InvalidInputError: Missing, not a number, NaN or infinite.
        """
        value = self.time
        if isinstance(value, bool) or not isinstance(value, int | float) or not math.isfinite(value):
            raise InvalidInputError(ErrorMessages.SEEK_TIME_REQUIRED, field="time")
        return value


class SeekResult(CommandResult):
    requested_seek_time: float


def clamp_seek_target(target: float, duration_seconds: int) -> float:
    """Clamp into ``[0, duration - 1]`` so a seek never races the natural end of the track."""
    return max(0, min(target, duration_seconds - 1))


class SeekTrackHandler(QueueCommandHandler):
    async def handle(self, command: SeekCommand) -> SeekResult:
        target = command.target()
        queue = await self._gateway.resolve_queue()

        track = queue.current
        if track is None:
            raise NothingPlayingError()
        if not track.is_seekable:
            raise NotSeekableError(track.title)

        clamped = clamp_seek_target(target, track.duration_seconds)
        logger.info(LogTemplates.PLAYBACK_SEEKED, track.title, clamped, queue.guild_id, target, track.duration_seconds)

        try:
            await self._engine(self._playback_service.seek(queue.guild_id, clamped), "seek")
        except EngineFailureError:
            await self._broadcaster.broadcast(queue.guild_id)
            raise
        await self._broadcaster.broadcast(queue.guild_id, overrides={"currentTime": clamped})
        return SeekResult(
            message=ResponseMessages.SEEKED.format(position=format_duration(clamped)),
            requested_seek_time=clamped,
        )
