"""
Queue Edits

Reorder and remove operate on the *upcoming* list: index 0 is the first
track after the one playing. The current track can never be moved or
removed this way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from discord_music_remote.application.commands.base import CommandResult, QueueCommandHandler
from discord_music_remote.domain.music.entities import Track
from discord_music_remote.domain.shared.exceptions import InvalidInputError
from discord_music_remote.domain.shared.messages import ErrorMessages, LogTemplates, ResponseMessages

logger = logging.getLogger(__name__)


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


@dataclass(frozen=True)
class ReorderQueueCommand:
    old_index: Any
    new_index: Any

    def indexes(self) -> tuple[int, int]:
        if not (_is_index(self.old_index) and _is_index(self.new_index)):
            raise InvalidInputError(ErrorMessages.REORDER_INDEXES_REQUIRED)
        return self.old_index, self.new_index


@dataclass(frozen=True)
class RemoveTrackCommand:
    index: Any

    def position(self) -> int:
        if not _is_index(self.index):
            raise InvalidInputError(ErrorMessages.REMOVE_INDEX_REQUIRED, field="index")
        return self.index


class RemoveTrackResult(CommandResult):
    removed_track: Track


class ReorderQueueHandler(QueueCommandHandler):
    """Remove-then-insert; moving a track onto its own position is a successful no-op."""

    async def handle(self, command: ReorderQueueCommand) -> CommandResult:
        old_index, new_index = command.indexes()
        queue = await self._gateway.resolve_queue()

        if not queue.move_upcoming(old_index, new_index):
            return CommandResult(message=ResponseMessages.REORDER_UNCHANGED)

        logger.info(LogTemplates.QUEUE_MOVED, old_index, new_index, queue.guild_id)
        await self._broadcaster.broadcast(queue.guild_id)
        return CommandResult(message=ResponseMessages.REORDERED)


class RemoveTrackHandler(QueueCommandHandler):
    async def handle(self, command: RemoveTrackCommand) -> RemoveTrackResult:
        index = command.position()
        queue = await self._gateway.resolve_queue()

        removed = queue.remove_upcoming(index)
        logger.info(LogTemplates.QUEUE_REMOVED, removed.title, queue.guild_id)
        await self._broadcaster.broadcast(queue.guild_id)
        return RemoveTrackResult(
            message=ResponseMessages.REMOVED.format(title=removed.title),
            removed_track=removed,
        )
