"""Discord implementation of the ChatPlatform port."""

from __future__ import annotations

import logging
from typing import Any

import discord

from discord_music_remote.application.interfaces.chat_platform import ChatPlatform, VoiceChannelInfo
from discord_music_remote.domain.music.entities import UserRef
from discord_music_remote.domain.shared.exceptions import DeliveryFailureError
from discord_music_remote.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class DiscordChatPlatform(ChatPlatform):
    """Channel and user lookups plus plain-text messaging through the bot client.

    Lookups prefer the gateway cache and fall back to a REST fetch.
    """

    def __init__(self, bot: discord.Client) -> None:
        self._bot = bot

    async def _get_channel(self, channel_id: int) -> Any:
        channel = self._bot.get_channel(channel_id)
        if channel is not None:
            return channel
        try:
            return await self._bot.fetch_channel(channel_id)
        except (discord.NotFound, discord.Forbidden, discord.InvalidData):
            return None

    async def fetch_channel(self, channel_id: int) -> VoiceChannelInfo | None:
        channel = await self._get_channel(channel_id)
        guild = getattr(channel, "guild", None)
        if channel is None or guild is None:
            return None

        return VoiceChannelInfo(
            channel_id=channel.id,
            guild_id=guild.id,
            name=getattr(channel, "name", "") or "",
            is_voice=isinstance(channel, discord.VoiceChannel | discord.StageChannel),
        )

    async def fetch_user(self, user_id: str) -> UserRef | None:
        try:
            snowflake = int(user_id)
        except (TypeError, ValueError):
            return None

        user = self._bot.get_user(snowflake)
        if user is None:
            try:
                user = await self._bot.fetch_user(snowflake)
            except discord.HTTPException as exc:
                logger.warning(LogTemplates.USER_FETCH_FAILED, user_id, exc)
                return None

        return UserRef(
            id=str(user.id),
            display_name=user.display_name or user.name,
            avatar_url=str(user.display_avatar.url),
        )

    async def find_announcement_channel(self, guild_id: int, preferred_id: int | None) -> int | None:
        guild = self._bot.get_guild(guild_id)
        if guild is None:
            return None

        if preferred_id is not None:
            preferred = guild.get_channel(preferred_id)
            if isinstance(preferred, discord.TextChannel):
                return preferred.id

        me = guild.me
        for channel in guild.text_channels:
            if me is not None and channel.permissions_for(me).send_messages:
                return channel.id

        system = guild.system_channel
        if system is not None and me is not None and system.permissions_for(me).send_messages:
            return system.id

        logger.warning(LogTemplates.ANNOUNCE_NO_CHANNEL, guild_id)
        return None

    async def send_message(self, channel_id: int, content: str) -> None:
        channel = await self._get_channel(channel_id)
        if not isinstance(channel, discord.abc.Messageable):
            raise DeliveryFailureError(f"channel {channel_id}")

        try:
            await channel.send(content)
        except discord.HTTPException as exc:
            raise DeliveryFailureError(f"channel {channel_id}") from exc

    async def delete_direct_message(self, user_id: str, message_id: int) -> bool:
        user = await self._bot.fetch_user(int(user_id))
        dm = user.dm_channel or await user.create_dm()
        try:
            message = await dm.fetch_message(message_id)
            await message.delete()
        except discord.NotFound:
            return False
        return True
