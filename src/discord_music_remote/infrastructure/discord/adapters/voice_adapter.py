"""Discord voice adapter implementing VoiceAdapter for connection and playback."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import discord

from discord_music_remote.application.interfaces.voice_adapter import TrackEndCallback, VoiceAdapter
from discord_music_remote.domain.shared.messages import LogTemplates
from discord_music_remote.infrastructure.audio.ffmpeg_player import FFmpegSourceFactory, clamp_volume

if TYPE_CHECKING:
    from ....domain.music.entities import Track

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT: float = 10.0


class DiscordVoiceAdapter(VoiceAdapter):
    def __init__(self, bot: discord.Client, source_factory: FFmpegSourceFactory | None = None) -> None:
        self._bot = bot
        self._source_factory = source_factory or FFmpegSourceFactory()
        self._on_track_end: TrackEndCallback | None = None

    def _get_voice_client(self, guild_id: int) -> discord.VoiceClient | None:
        guild = self._bot.get_guild(guild_id)
        if not guild:
            return None

        vc = guild.voice_client
        return vc if isinstance(vc, discord.VoiceClient) else None

    def _get_voice_channel(
        self, guild_id: int, channel_id: int
    ) -> tuple[discord.Guild, discord.VoiceChannel | discord.StageChannel] | None:
        guild = self._bot.get_guild(guild_id)
        if not guild:
            return None

        channel = guild.get_channel(channel_id)
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            return None
        return guild, channel

    # ── Connection ─────────────────────────────────────────────────

    async def connect(self, guild_id: int, channel_id: int) -> bool:
        found = self._get_voice_channel(guild_id, channel_id)
        if found is None:
            return False
        guild, channel = found

        try:
            async with asyncio.timeout(CONNECT_TIMEOUT):
                await channel.connect(self_deaf=True)
            await self._ensure_self_deaf(guild, channel)
            logger.info(LogTemplates.VOICE_CONNECTED, channel.name, guild.name)
            return True
        except TimeoutError:
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, channel_id)
            return False
        except discord.Forbidden:
            logger.error(LogTemplates.VOICE_NO_PERMISSION, channel_id)
            return False
        except discord.ClientException as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            return False
        except Exception:
            logger.exception("Failed to connect to voice")
            return False

    async def _ensure_self_deaf(
        self,
        guild: discord.Guild,
        channel: discord.VoiceChannel | discord.StageChannel,
    ) -> None:
        try:
            await guild.change_voice_state(channel=channel, self_deaf=True)
        except Exception as exc:
            logger.debug(LogTemplates.VOICE_SELF_DEAFEN_FAILED, guild.id, exc)

    async def disconnect(self, guild_id: int) -> bool:
        vc = self._get_voice_client(guild_id)
        if not vc:
            return True

        try:
            await vc.disconnect(force=True)
            logger.info(LogTemplates.VOICE_DISCONNECTED, guild_id)
            return True
        except Exception:
            logger.exception("Failed to disconnect from voice")
            return False

    async def disconnect_all(self) -> None:
        for vc in list(self._bot.voice_clients):
            guild = getattr(vc, "guild", None)
            if guild is not None:
                await self.disconnect(guild.id)

    async def ensure_connected(self, guild_id: int, channel_id: int) -> bool:
        """Connect if not connected, move if in a different channel."""
        vc = self._get_voice_client(guild_id)

        if vc and not vc.is_connected():
            logger.warning(LogTemplates.VOICE_STALE_CLEANUP, guild_id)
            await self.disconnect(guild_id)
            vc = None

        if vc and vc.channel:
            if vc.channel.id == channel_id:
                return True
            return await self.move_to(guild_id, channel_id)

        return await self.connect(guild_id, channel_id)

    async def move_to(self, guild_id: int, channel_id: int) -> bool:
        vc = self._get_voice_client(guild_id)
        if not vc:
            return await self.connect(guild_id, channel_id)

        found = self._get_voice_channel(guild_id, channel_id)
        if found is None:
            return False
        guild, channel = found

        try:
            async with asyncio.timeout(CONNECT_TIMEOUT):
                await vc.move_to(channel)
            await self._ensure_self_deaf(guild, channel)
            logger.info(LogTemplates.VOICE_MOVED, channel.name)
            return True
        except TimeoutError:
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, channel_id)
            return False
        except Exception:
            logger.exception("Failed to move to channel")
            return False

    # ── Playback ───────────────────────────────────────────────────

    async def play(
        self,
        guild_id: int,
        track: Track,
        *,
        start_seconds: float = 0.0,
        volume: float = 0.5,
    ) -> bool:
        vc = self._get_voice_client(guild_id)
        if not vc:
            logger.warning(LogTemplates.VOICE_NOT_CONNECTED, guild_id)
            return False

        if not track.stream_url:
            logger.error(LogTemplates.YTDLP_NO_STREAM_URL, track.title)
            return False

        if vc.is_playing() or vc.is_paused():
            vc.stop()

        try:
            source = self._source_factory.create_source(
                track, start_seconds=start_seconds, volume=volume
            )
            loop = asyncio.get_running_loop()

            def after_callback(error: Exception | None = None) -> None:
                # Runs on the audio player thread.
                logger.debug(LogTemplates.TRACK_ENDED, guild_id, error)
                if error:
                    logger.warning(LogTemplates.PLAYBACK_ERROR, guild_id, error)

                asyncio.run_coroutine_threadsafe(self._handle_track_end(guild_id, error), loop)

            vc.play(source, after=after_callback)
            return True

        except discord.ClientException as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            return False
        except Exception as e:
            logger.error(LogTemplates.PLAYBACK_FAILED_START, e)
            return False

    async def stop(self, guild_id: int) -> bool:
        vc = self._get_voice_client(guild_id)
        if not vc:
            return True

        if vc.is_playing() or vc.is_paused():
            vc.stop()
            logger.info(LogTemplates.PLAYBACK_STOPPED, guild_id)

        return True

    async def pause(self, guild_id: int) -> bool:
        vc = self._get_voice_client(guild_id)
        if not vc:
            return False

        if vc.is_playing():
            vc.pause()
            logger.info(LogTemplates.PLAYBACK_PAUSED, guild_id)
            return True

        return False

    async def resume(self, guild_id: int) -> bool:
        vc = self._get_voice_client(guild_id)
        if not vc:
            return False

        if vc.is_paused():
            vc.resume()
            logger.info(LogTemplates.PLAYBACK_RESUMED, guild_id)
            return True

        return False

    def set_volume(self, guild_id: int, volume: float) -> bool:
        vc = self._get_voice_client(guild_id)
        if not vc or not vc.source:
            return False

        if isinstance(vc.source, discord.PCMVolumeTransformer):
            vc.source.volume = clamp_volume(volume)
            return True

        return False

    def is_connected(self, guild_id: int) -> bool:
        vc = self._get_voice_client(guild_id)
        return vc is not None and vc.is_connected()

    def is_active(self, guild_id: int) -> bool:
        vc = self._get_voice_client(guild_id)
        return vc is not None and (vc.is_playing() or vc.is_paused())

    def set_on_track_end_callback(self, callback: TrackEndCallback) -> None:
        self._on_track_end = callback

    async def _handle_track_end(self, guild_id: int, error: Exception | None) -> None:
        """Called from the audio thread via run_coroutine_threadsafe."""
        if self._on_track_end is None:
            logger.warning(LogTemplates.PLAYBACK_NO_CALLBACK, guild_id)
            return

        try:
            await self._on_track_end(guild_id, error)
        except Exception as e:
            logger.error(LogTemplates.PLAYBACK_CALLBACK_ERROR, guild_id, e)
