"""Discord bot class integrating the DI container and cog lifecycle."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from discord_music_remote.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...config.container import Container
    from ...config.settings import Settings

logger = logging.getLogger(__name__)

COGS: tuple[str, ...] = (
    "discord_music_remote.infrastructure.discord.cogs.link_cog",
    "discord_music_remote.infrastructure.discord.cogs.announcement_cog",
)


class MusicRemoteBot(commands.Bot):
    def __init__(
        self,
        container: Container,
        settings: Settings,
        **kwargs,
    ) -> None:
        intents = discord.Intents.default()
        intents.message_content = True
        intents.voice_states = True
        intents.guilds = True

        super().__init__(
            command_prefix=settings.command_prefix,
            intents=intents,
            help_command=None,
            **kwargs,
        )

        self.container = container
        self.settings = settings
        container.set_bot(self)

    async def setup_hook(self) -> None:
        logger.info(LogTemplates.BOT_SETUP)

        await self.container.initialize()
        logger.info(LogTemplates.BOT_CONTAINER_INITIALIZED)

        await self._load_cogs()

    async def _load_cogs(self) -> None:
        for cog in COGS:
            try:
                await self.load_extension(cog)
                logger.info(LogTemplates.BOT_EXTENSION_LOADED, cog)
            except Exception:
                logger.exception(LogTemplates.BOT_EXTENSION_FAILED, cog)

    async def on_ready(self) -> None:
        logger.info(
            LogTemplates.BOT_READY,
            self.user,
            getattr(self.user, "id", "?"),
        )
        logger.info(LogTemplates.BOT_CONNECTED_GUILDS, len(self.guilds))

        activity = discord.Activity(
            type=discord.ActivityType.listening,
            name=f"{self.settings.command_prefix}music",
        )
        await self.change_presence(activity=activity)

    async def on_command_error(self, ctx: commands.Context, error: commands.CommandError) -> None:
        if isinstance(error, commands.CommandNotFound):
            return
        # Cogs with their own handler have already replied.
        if ctx.cog is not None and ctx.cog.has_error_handler():
            return
        logger.error(LogTemplates.BOT_COMMAND_ERROR, getattr(ctx.command, "name", "<unknown>"), error)

    async def close(self) -> None:
        logger.info(LogTemplates.BOT_SHUTTING_DOWN)

        try:
            await self.container.shutdown()
        except Exception as e:
            logger.warning("Error shutting down container: %r", e)

        await super().close()
        logger.info(LogTemplates.BOT_SHUTDOWN_COMPLETE)


def create_bot(container: Container, settings: Settings) -> MusicRemoteBot:
    return MusicRemoteBot(container=container, settings=settings)
