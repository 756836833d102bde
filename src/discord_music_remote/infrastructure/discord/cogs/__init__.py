"""Discord cogs - command handlers and event listeners."""

from discord_music_remote.infrastructure.discord.cogs.announcement_cog import AnnouncementCog
from discord_music_remote.infrastructure.discord.cogs.link_cog import LinkCog

__all__ = [
    "AnnouncementCog",
    "LinkCog",
]
