"""
Unit Tests for DiscordChatPlatform

Tests for:
- Channel lookups (cache first, REST fallback, voice detection)
- User lookups
- Announcement channel selection
- Sending messages and wrapping delivery failures
- Deleting a previous direct message
"""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from conftest import GUILD_ID, TEXT_CHANNEL_ID, USER_ID, VOICE_CHANNEL_ID
from discord_music_remote.domain.shared.exceptions import DeliveryFailureError
from discord_music_remote.infrastructure.discord.adapters.chat_platform import DiscordChatPlatform


def _response(status: int) -> MagicMock:
    return MagicMock(status=status, reason="error")


@pytest.fixture
def guild():
    guild = MagicMock(spec=discord.Guild)
    guild.id = GUILD_ID
    guild.text_channels = []
    guild.system_channel = None
    return guild


@pytest.fixture
def voice_channel(guild):
    channel = MagicMock(spec=discord.VoiceChannel)
    channel.id = VOICE_CHANNEL_ID
    channel.name = "Music"
    channel.guild = guild
    return channel


@pytest.fixture
def text_channel(guild):
    channel = MagicMock(spec=discord.TextChannel)
    channel.id = TEXT_CHANNEL_ID
    channel.name = "general"
    channel.guild = guild
    channel.send = AsyncMock()
    return channel


@pytest.fixture
def bot(guild):
    bot = MagicMock()
    bot.get_channel.return_value = None
    bot.fetch_channel = AsyncMock(side_effect=discord.NotFound(_response(404), "Unknown Channel"))
    bot.get_guild.side_effect = lambda gid: guild if gid == GUILD_ID else None
    bot.get_user.return_value = None
    bot.fetch_user = AsyncMock()
    return bot


@pytest.fixture
def platform(bot):
    return DiscordChatPlatform(bot)


class TestFetchChannel:
    @pytest.mark.asyncio
    async def test_cached_voice_channel(self, platform, bot, voice_channel):
        bot.get_channel.return_value = voice_channel

        info = await platform.fetch_channel(VOICE_CHANNEL_ID)

        assert info.channel_id == VOICE_CHANNEL_ID
        assert info.guild_id == GUILD_ID
        assert info.name == "Music"
        assert info.is_voice

    @pytest.mark.asyncio
    async def test_rest_fallback(self, platform, bot, voice_channel):
        bot.fetch_channel = AsyncMock(return_value=voice_channel)
        assert (await platform.fetch_channel(VOICE_CHANNEL_ID)).is_voice

    @pytest.mark.asyncio
    async def test_text_channel_not_voice(self, platform, bot, text_channel):
        bot.get_channel.return_value = text_channel
        assert not (await platform.fetch_channel(TEXT_CHANNEL_ID)).is_voice

    @pytest.mark.asyncio
    async def test_not_found(self, platform):
        assert await platform.fetch_channel(VOICE_CHANNEL_ID) is None

    @pytest.mark.asyncio
    async def test_dm_channel_has_no_guild(self, platform, bot):
        bot.get_channel.return_value = MagicMock(spec=discord.DMChannel, guild=None)
        assert await platform.fetch_channel(1) is None


class TestFetchUser:
    @pytest.mark.asyncio
    async def test_cached_user(self, platform, bot):
        user = MagicMock(id=int(USER_ID), display_name="Alice")
        user.display_avatar.url = "https://cdn.example.com/a.png"
        bot.get_user.return_value = user

        ref = await platform.fetch_user(USER_ID)

        assert ref.id == USER_ID
        assert ref.display_name == "Alice"
        assert ref.avatar_url == "https://cdn.example.com/a.png"
        bot.fetch_user.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rest_fallback(self, platform, bot):
        user = MagicMock(id=int(USER_ID), display_name="Alice")
        user.display_avatar.url = "https://cdn.example.com/a.png"
        bot.fetch_user = AsyncMock(return_value=user)

        assert (await platform.fetch_user(USER_ID)).display_name == "Alice"

    @pytest.mark.asyncio
    async def test_unknown_user(self, platform, bot):
        bot.fetch_user = AsyncMock(side_effect=discord.NotFound(_response(404), "Unknown User"))
        assert await platform.fetch_user(USER_ID) is None

    @pytest.mark.parametrize("user_id", ["alice", ""])
    @pytest.mark.asyncio
    async def test_non_numeric_id(self, platform, user_id):
        assert await platform.fetch_user(user_id) is None


class TestFindAnnouncementChannel:
    @pytest.mark.asyncio
    async def test_preferred_text_channel(self, platform, guild, text_channel):
        guild.get_channel.return_value = text_channel
        assert await platform.find_announcement_channel(GUILD_ID, TEXT_CHANNEL_ID) == TEXT_CHANNEL_ID

    @pytest.mark.asyncio
    async def test_first_writable_channel(self, platform, guild):
        guild.get_channel.return_value = None
        read_only = MagicMock(id=1)
        read_only.permissions_for.return_value.send_messages = False
        writable = MagicMock(id=2)
        writable.permissions_for.return_value.send_messages = True
        guild.text_channels = [read_only, writable]

        assert await platform.find_announcement_channel(GUILD_ID, None) == 2

    @pytest.mark.asyncio
    async def test_system_channel_fallback(self, platform, guild):
        guild.system_channel = MagicMock(id=7)
        guild.system_channel.permissions_for.return_value.send_messages = True
        assert await platform.find_announcement_channel(GUILD_ID, None) == 7

    @pytest.mark.asyncio
    async def test_system_channel_needs_send_permission(self, platform, guild):
        guild.system_channel = MagicMock(id=7)
        guild.system_channel.permissions_for.return_value.send_messages = False
        assert await platform.find_announcement_channel(GUILD_ID, None) is None

    @pytest.mark.asyncio
    async def test_system_channel_skipped_without_member(self, platform, guild):
        guild.me = None
        guild.system_channel = MagicMock(id=7)
        assert await platform.find_announcement_channel(GUILD_ID, None) is None

    @pytest.mark.asyncio
    async def test_nothing_suitable(self, platform, guild):
        assert await platform.find_announcement_channel(GUILD_ID, None) is None

    @pytest.mark.asyncio
    async def test_unknown_guild(self, platform):
        assert await platform.find_announcement_channel(999, None) is None


class TestSendMessage:
    @pytest.mark.asyncio
    async def test_send(self, platform, bot, text_channel):
        bot.get_channel.return_value = text_channel
        await platform.send_message(TEXT_CHANNEL_ID, "hello")
        text_channel.send.assert_awaited_once_with("hello")

    @pytest.mark.asyncio
    async def test_missing_channel(self, platform):
        with pytest.raises(DeliveryFailureError):
            await platform.send_message(TEXT_CHANNEL_ID, "hello")

    @pytest.mark.asyncio
    async def test_http_error_wrapped(self, platform, bot, text_channel):
        text_channel.send.side_effect = discord.Forbidden(_response(403), "Missing Access")
        bot.get_channel.return_value = text_channel

        with pytest.raises(DeliveryFailureError) as exc_info:
            await platform.send_message(TEXT_CHANNEL_ID, "hello")

        assert isinstance(exc_info.value.__cause__, discord.Forbidden)


class TestDeleteDirectMessage:
    @pytest.fixture
    def dm(self, bot):
        dm = MagicMock()
        message = MagicMock(delete=AsyncMock())
        dm.fetch_message = AsyncMock(return_value=message)
        user = MagicMock(dm_channel=dm)
        bot.fetch_user = AsyncMock(return_value=user)
        return dm

    @pytest.mark.asyncio
    async def test_deletes(self, platform, dm):
        assert await platform.delete_direct_message(USER_ID, 555) is True
        dm.fetch_message.assert_awaited_once_with(555)
        dm.fetch_message.return_value.delete.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_already_gone(self, platform, dm):
        dm.fetch_message.side_effect = discord.NotFound(_response(404), "Unknown Message")
        assert await platform.delete_direct_message(USER_ID, 555) is False

    @pytest.mark.asyncio
    async def test_opens_dm_when_missing(self, platform, bot, dm):
        user = bot.fetch_user.return_value
        user.dm_channel = None
        user.create_dm = AsyncMock(return_value=dm)

        assert await platform.delete_direct_message(USER_ID, 555) is True
        user.create_dm.assert_awaited_once()
