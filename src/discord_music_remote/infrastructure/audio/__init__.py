"""Audio infrastructure - yt-dlp resolver and FFmpeg sources."""

from discord_music_remote.infrastructure.audio.ffmpeg_player import FFmpegConfig, FFmpegSourceFactory
from discord_music_remote.infrastructure.audio.models import (
    AudioFormatInfo,
    CacheEntry,
    YtDlpOpts,
    YtDlpTrackInfo,
)
from discord_music_remote.infrastructure.audio.ytdlp_resolver import YtDlpResolver

__all__ = [
    "AudioFormatInfo",
    "CacheEntry",
    "FFmpegConfig",
    "FFmpegSourceFactory",
    "YtDlpOpts",
    "YtDlpResolver",
    "YtDlpTrackInfo",
]
