"""
Music Domain Repository Interfaces

Abstract base classes defining the contracts for queue storage.
Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod

from discord_music_remote.domain.music.entities import GuildQueue


class QueueRepository(ABC):
    """Abstract repository for guild queues.

    There is at most one queue per guild. Queues are process-scoped state
    and are lost on restart.
    """

    @abstractmethod
    async def get(self, guild_id: int) -> GuildQueue | None:
        """Retrieve a queue by guild ID.

        Args:
            guild_id: The Discord guild ID.

        Returns:
            The queue if found, None otherwise.
        """
        ...

    @abstractmethod
    async def get_or_create(self, guild_id: int) -> tuple[GuildQueue, bool]:
        """Get an existing queue or create a new one.

        Args:
            guild_id: The Discord guild ID.

        Returns:
            The queue and whether it was created by this call.
        """
        ...

    @abstractmethod
    async def delete(self, guild_id: int) -> bool:
        """Delete a queue by guild ID.

        Returns:
            True if the queue was deleted, False if it didn't exist.
        """
        ...

    @abstractmethod
    async def all(self) -> list[GuildQueue]:
        """Get every queue currently held."""
        ...

    @abstractmethod
    async def clear(self) -> None:
        """Drop every queue (used at shutdown)."""
        ...
