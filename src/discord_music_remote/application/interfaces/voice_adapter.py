"""Port interface for the playback engine (Discord voice)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from discord_music_remote.domain.shared.types import ChannelIdField, DiscordSnowflake

if TYPE_CHECKING:
    from ...domain.music.entities import Track

TrackEndCallback = Callable[[DiscordSnowflake, "Exception | None"], Awaitable[None]]


class VoiceAdapter(ABC):
    """Interface for Discord voice channel operations."""

    @abstractmethod
    async def ensure_connected(self, guild_id: DiscordSnowflake, channel_id: ChannelIdField) -> bool:
        """Ensure bot is connected to the specified channel, connecting or moving as needed."""
        ...

    @abstractmethod
    async def disconnect(self, guild_id: DiscordSnowflake) -> bool:
        """Disconnect from voice in a guild."""
        ...

    @abstractmethod
    async def disconnect_all(self) -> None:
        """Disconnect from every guild (shutdown)."""
        ...

    @abstractmethod
    async def play(
        self,
        guild_id: DiscordSnowflake,
        track: "Track",
        *,
        start_seconds: float = 0.0,
        volume: float = 0.5,
    ) -> bool:
        """Start playing a track, optionally from *start_seconds*, at a 0.0-2.0 *volume*."""
        ...

    @abstractmethod
    async def stop(self, guild_id: DiscordSnowflake) -> bool:
        """Stop current playback."""
        ...

    @abstractmethod
    async def pause(self, guild_id: DiscordSnowflake) -> bool:
        """Pause current playback."""
        ...

    @abstractmethod
    async def resume(self, guild_id: DiscordSnowflake) -> bool:
        """Resume paused playback."""
        ...

    @abstractmethod
    def set_volume(self, guild_id: DiscordSnowflake, volume: float) -> bool:
        """Set the volume multiplier (0.0-2.0) of the current source."""
        ...

    @abstractmethod
    def is_connected(self, guild_id: DiscordSnowflake) -> bool:
        ...

    @abstractmethod
    def is_active(self, guild_id: DiscordSnowflake) -> bool:
        """True while a source is loaded, playing or paused."""
        ...

    @abstractmethod
    def set_on_track_end_callback(self, callback: TrackEndCallback) -> None:
        """Set callback for when a track ends, with the engine error if any."""
        ...
