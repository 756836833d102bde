"""Port interface for chat-platform lookups and messages."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from discord_music_remote.domain.shared.types import ChannelIdField, GuildIdField

if TYPE_CHECKING:
    from ...domain.music.entities import UserRef


class VoiceChannelInfo(BaseModel):
    """What the rest of the app needs to know about a channel."""

    model_config = ConfigDict(frozen=True)

    channel_id: ChannelIdField
    guild_id: GuildIdField
    name: str = ""
    is_voice: bool = True


class ChatPlatform(ABC):
    """Interface for the chat platform the bot lives on."""

    @abstractmethod
    async def fetch_channel(self, channel_id: int) -> VoiceChannelInfo | None:
        """Look a channel up, returning None when it cannot be resolved."""
        ...

    @abstractmethod
    async def fetch_user(self, user_id: str) -> "UserRef | None":
        """Look a user up by id, returning None when they cannot be resolved."""
        ...

    @abstractmethod
    async def find_announcement_channel(self, guild_id: int, preferred_id: int | None) -> int | None:
        """Pick the text channel announcements for a guild go to."""
        ...

    @abstractmethod
    async def send_message(self, channel_id: int, content: str) -> None:
        """Send a plain text message.

        Raises:
            DeliveryFailureError: The message could not be delivered.
        """
        ...

    @abstractmethod
    async def delete_direct_message(self, user_id: str, message_id: int) -> bool:
        """Delete a direct message previously sent to a user.

        Returns:
            True if a message was deleted, False if it no longer existed.
        """
        ...
