"""In-memory implementation of the queue repository.

Queue state lives only as long as the process; nothing survives a restart.
"""

from __future__ import annotations

import logging

from discord_music_remote.domain.music.entities import GuildQueue
from discord_music_remote.domain.music.repository import QueueRepository
from discord_music_remote.domain.shared.messages import LogTemplates
from discord_music_remote.domain.shared.types import DiscordSnowflake

logger = logging.getLogger(__name__)


class InMemoryQueueRepository(QueueRepository):
    """Keeps at most one ``GuildQueue`` per guild in a plain dict.

    Callers mutate the returned aggregate in place; there is no save step.
    """

    def __init__(self) -> None:
        self._queues: dict[DiscordSnowflake, GuildQueue] = {}

    async def get(self, guild_id: DiscordSnowflake) -> GuildQueue | None:
        return self._queues.get(guild_id)

    async def get_or_create(self, guild_id: DiscordSnowflake) -> tuple[GuildQueue, bool]:
        queue = self._queues.get(guild_id)
        if queue is not None:
            return queue, False

        queue = GuildQueue(guild_id=guild_id)
        self._queues[guild_id] = queue
        logger.info(LogTemplates.QUEUE_CREATED, guild_id)
        return queue, True

    async def delete(self, guild_id: DiscordSnowflake) -> bool:
        return self._queues.pop(guild_id, None) is not None

    async def all(self) -> list[GuildQueue]:
        return list(self._queues.values())

    async def clear(self) -> None:
        self._queues.clear()

    def __len__(self) -> int:
        return len(self._queues)
