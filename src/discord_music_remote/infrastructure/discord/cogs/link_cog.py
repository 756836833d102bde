"""Text command that sends a user their private web control link."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from discord_music_remote.application.services.session_registry import build_control_link
from discord_music_remote.domain.music.entities import UserRef
from discord_music_remote.domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)

# "Cannot send messages to this user"
DMS_CLOSED_ERROR_CODE = 50007


def _dms_closed(error: discord.HTTPException) -> bool:
    return isinstance(error, discord.Forbidden) or error.code == DMS_CLOSED_ERROR_CODE


class LinkCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    @commands.command(name="music", help="Get a private link to control the music from your browser.")
    @commands.guild_only()
    async def music(self, ctx: commands.Context) -> None:
        author = ctx.author
        user = UserRef(
            id=str(author.id),
            display_name=author.display_name,
            avatar_url=str(author.display_avatar.url),
        )

        registry = self.container.session_registry
        await registry.revoke_obsolete(user.id, self.container.chat_platform.delete_direct_message)

        session = registry.issue(user)
        link = build_control_link(self.container.settings.base_url, session.token)

        try:
            dm = await author.send(DiscordUIMessages.LINK_DM.format(link=link, hours=registry.ttl_hours))
        except discord.HTTPException as exc:
            if _dms_closed(exc):
                await self._reply(ctx, DiscordUIMessages.LINK_DMS_CLOSED.format(mention=author.mention))
            else:
                logger.exception(LogTemplates.LINK_DM_FAILED, author.id)
                await self._reply(ctx, DiscordUIMessages.LINK_FAILED.format(mention=author.mention))
            return

        registry.remember_link(user.id, dm.id)
        await self._reply(ctx, DiscordUIMessages.LINK_SENT.format(mention=author.mention))

    async def cog_command_error(self, ctx: commands.Context, error: Exception) -> None:
        if isinstance(error, commands.NoPrivateMessage):
            await self._reply(ctx, DiscordUIMessages.STATE_SERVER_ONLY)
            return

        original = getattr(error, "original", error)
        logger.error(LogTemplates.BOT_COMMAND_ERROR, getattr(ctx.command, "name", "<unknown>"), original)
        await self._reply(ctx, DiscordUIMessages.LINK_FAILED.format(mention=ctx.author.mention))

    async def _reply(self, ctx: commands.Context, content: str) -> None:
        try:
            await ctx.reply(content)
        except discord.HTTPException as exc:
            logger.warning(LogTemplates.LINK_REPLY_FAILED, ctx.author.id, exc)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(LinkCog(bot, container))
