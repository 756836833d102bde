"""AudioResolver implementation using yt-dlp for URL resolution and search."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from typing import Any, Final, cast

from yt_dlp import YoutubeDL

from discord_music_remote.application.interfaces.audio_resolver import AudioResolver
from discord_music_remote.config.settings import AudioSettings
from discord_music_remote.domain.music.entities import Track
from discord_music_remote.domain.music.value_objects import TrackId
from discord_music_remote.domain.shared.messages import LogTemplates
from discord_music_remote.infrastructure.audio.models import (
    CACHE_MAX_SIZE,
    CACHE_TTL,
    DEFAULT_SEARCH_LIMIT,
    LOG_URL_TRUNCATE,
    AudioFormatInfo,
    CacheEntry,
    YtDlpOpts,
    YtDlpTrackInfo,
)

logger = logging.getLogger(__name__)

URL_PATTERNS: Final[list[re.Pattern[str]]] = [
    re.compile(r"^https?://"),
    re.compile(r"^www\."),
]

YOUTUBE_WATCH_URL: Final[str] = "https://www.youtube.com/watch?v={video_id}"


class YtDlpResolver(AudioResolver):

    def __init__(self, settings: AudioSettings | None = None) -> None:
        self._settings = settings or AudioSettings()
        self._base_opts = YtDlpOpts(format=self._settings.ytdlp_format)
        self._info_cache: dict[str, CacheEntry] = {}

    def _get_opts(self, **overrides: Any) -> YtDlpOpts:
        if overrides:
            return self._base_opts.model_copy(update=overrides)
        return self._base_opts

    def _get_search_opts(self) -> YtDlpOpts:
        return self._get_opts(extract_flat="in_playlist", format=None)

    # ── Conversion ─────────────────────────────────────────────────

    def _info_to_track(self, info: YtDlpTrackInfo, *, require_stream: bool = True) -> Track | None:
        try:
            url = self._extract_webpage_url(info)
            if not url:
                logger.warning(LogTemplates.YTDLP_NO_STREAM_URL, info.title)
                return None

            stream_url = self._extract_stream_url(info) if require_stream else None
            if require_stream and not stream_url:
                logger.warning(LogTemplates.YTDLP_NO_STREAM_URL, info.title)
                return None

            track_id = TrackId(info.id) if info.id else TrackId.from_url(url)
            return Track(
                id=track_id,
                title=info.title,
                url=url,
                stream_url=stream_url,
                duration_seconds=info.duration or 0,
                thumbnail_url=info.best_thumbnail,
                uploader=info.uploader or info.channel,
                is_live=info.live,
            )
        except Exception:
            logger.exception(LogTemplates.YTDLP_FAILED_INFO_TO_TRACK)
            return None

    def _extract_webpage_url(self, info: YtDlpTrackInfo) -> str | None:
        if info.webpage_url:
            return info.webpage_url
        if info.url and info.url.startswith(("http://", "https://")):
            return info.url
        if info.id:
            return YOUTUBE_WATCH_URL.format(video_id=info.id)
        return None

    def _extract_stream_url(self, info: YtDlpTrackInfo) -> str | None:
        # A full extraction without webpage_url has no separate stream.
        if info.url and info.webpage_url:
            return info.url
        return self._extract_stream_from_formats(info.formats)

    @staticmethod
    def _extract_stream_from_formats(formats: list[AudioFormatInfo]) -> str | None:
        if not formats:
            return None
        audio_formats = [f for f in formats if f.acodec != "none" and f.url]
        if audio_formats:
            return audio_formats[-1].url
        return None

    @staticmethod
    def _parse_info(data: dict[str, Any]) -> YtDlpTrackInfo:
        return YtDlpTrackInfo.model_validate(data)

    # ── Blocking yt-dlp calls (run in a worker thread) ─────────────

    def _extract_info_sync(self, url: str) -> YtDlpTrackInfo | None:
        now = time.time()
        cached = self._info_cache.get(url)
        if cached is not None:
            if now - cached.cached_at < CACHE_TTL:
                logger.debug("Cache hit for %s", url[:LOG_URL_TRUNCATE])
                return cached.info
            self._info_cache.pop(url, None)

        try:
            with YoutubeDL(params=cast(Any, self._get_opts().model_dump())) as ydl:
                data = ydl.extract_info(url, download=False)
        except Exception:
            logger.exception(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, url)
            return None

        if isinstance(data, dict) and isinstance(data.get("entries"), list):
            # A search term resolves to a one-entry playlist.
            entries = [e for e in data["entries"] if isinstance(e, dict)]
            data = entries[0] if entries else None

        result = self._parse_info(dict(data)) if isinstance(data, dict) else None
        if result is not None:
            self._remember(url, result, now)
        return result

    def _remember(self, key: str, info: YtDlpTrackInfo, now: float) -> None:
        self._info_cache[key] = CacheEntry(info=info, cached_at=now)
        if len(self._info_cache) <= CACHE_MAX_SIZE:
            return

        expired = [k for k, entry in self._info_cache.items() if now - entry.cached_at >= CACHE_TTL]
        for k in expired:
            self._info_cache.pop(k, None)
        # Still full: evict the oldest.
        while len(self._info_cache) > CACHE_MAX_SIZE:
            oldest = min(self._info_cache, key=lambda k: self._info_cache[k].cached_at)
            self._info_cache.pop(oldest, None)

    def _search_sync(self, query: str, limit: int) -> list[YtDlpTrackInfo]:
        search_query = f"ytsearch{limit}:{query}"
        with YoutubeDL(params=cast(Any, self._get_search_opts().model_dump())) as ydl:
            data = ydl.extract_info(search_query, download=False)

        if not isinstance(data, dict):
            return []

        entries = data.get("entries", [])
        if not isinstance(entries, list):
            return []

        return [self._parse_info(dict(e)) for e in entries if isinstance(e, dict)]

    # ── AudioResolver ──────────────────────────────────────────────

    async def resolve(self, query: str) -> Track | None:
        try:
            target = query if self.is_url(query) else f"ytsearch1:{query}"
            info = await asyncio.to_thread(self._extract_info_sync, target)
            if not info:
                return None
            return self._info_to_track(info)
        except Exception:
            logger.exception(LogTemplates.YTDLP_FAILED_RESOLVE, query)
            return None

    async def search(self, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[Track]:
        """Flat search. Raises if yt-dlp itself fails so callers can report it."""
        results = await asyncio.to_thread(self._search_sync, query, limit)

        tracks: list[Track] = []
        for info in results:
            track = self._info_to_track(info, require_stream=False)
            if track:
                tracks.append(track)
        return tracks

    def is_url(self, query: str) -> bool:
        return any(pattern.search(query.strip()) for pattern in URL_PATTERNS)

    def clear_cache(self) -> None:
        self._info_cache.clear()
