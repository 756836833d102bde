"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Persistence (in-memory queue repository)
- Discord (bot, cogs, adapters)
- Audio (yt-dlp, FFmpeg)
- Web (FastAPI, Socket.IO)
"""

from discord_music_remote.infrastructure.discord.adapters.voice_adapter import DiscordVoiceAdapter
from discord_music_remote.infrastructure.discord.bot import create_bot
from discord_music_remote.infrastructure.persistence.memory_queue_repository import InMemoryQueueRepository

__all__ = [
    "create_bot",
    "DiscordVoiceAdapter",
    "InMemoryQueueRepository",
]
