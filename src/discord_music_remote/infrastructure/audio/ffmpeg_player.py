"""
FFmpeg Audio Sources

Builds discord.py audio sources for a track, including the seek offset
and the volume transformer the voice adapter adjusts later.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import discord

from discord_music_remote.config.settings import AudioSettings

if TYPE_CHECKING:
    from ...domain.music.entities import Track

# Matches yt-dlp's Android client user-agent to avoid YouTube 403 responses
ANDROID_USER_AGENT = "com.google.android.youtube/19.44.38 (Linux; U; Android 14) gzip"

MAX_VOLUME: float = 2.0


@dataclass
class FFmpegConfig:
    """Configuration for FFmpeg audio processing."""

    before_options: str = "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5"
    options: str = "-vn"
    fade_in_seconds: float = 0.5
    user_agent: str | None = ANDROID_USER_AGENT

    @classmethod
    def from_settings(cls, settings: AudioSettings) -> FFmpegConfig:
        opts = settings.ffmpeg_options
        return cls(
            before_options=opts.get("before_options", cls.before_options),
            options=opts.get("options", cls.options),
        )

    def get_before_options(self, start_seconds: float = 0.0) -> str:
        """Input options; ``-ss`` here seeks the input before decoding."""
        opts = [self.before_options] if self.before_options else []
        if start_seconds > 0:
            opts.append(f"-ss {start_seconds:.3f}")
        if self.user_agent:
            opts.append(f'-headers "User-Agent: {self.user_agent}"')
        return " ".join(opts)

    def get_options(self, start_seconds: float = 0.0) -> str:
        opts = [self.options] if self.options else []
        # A fade after a seek sounds like a glitch.
        if self.fade_in_seconds > 0 and start_seconds <= 0:
            opts.append(f'-af "afade=t=in:ss=0:d={self.fade_in_seconds}"')
        return " ".join(opts)


class FFmpegSourceFactory:
    """Creates FFmpeg-backed audio sources wrapped in a volume transformer."""

    def __init__(self, settings: AudioSettings | None = None, config: FFmpegConfig | None = None) -> None:
        self._settings = settings or AudioSettings()
        self._config = config or FFmpegConfig.from_settings(self._settings)

    @property
    def config(self) -> FFmpegConfig:
        return self._config

    def create_source(
        self,
        track: Track,
        *,
        start_seconds: float = 0.0,
        volume: float = 0.5,
    ) -> discord.PCMVolumeTransformer:
        """Create an audio source for a track.

        Args:
            track: The track to play.
            start_seconds: Offset to start from.
            volume: Volume multiplier (0.0-2.0).

        Raises:
            ValueError: If track has no stream URL.
        """
        if not track.stream_url:
            raise ValueError(f"Track '{track.title}' has no stream URL")

        start_seconds = max(0.0, start_seconds)
        source = discord.FFmpegPCMAudio(
            track.stream_url,
            before_options=self._config.get_before_options(start_seconds),
            options=self._config.get_options(start_seconds),
        )
        return discord.PCMVolumeTransformer(source, volume=clamp_volume(volume))


def clamp_volume(volume: float) -> float:
    return max(0.0, min(MAX_VOLUME, volume))
