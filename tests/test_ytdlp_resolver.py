"""
Unit Tests for YtDlpResolver

Tests for the yt-dlp based audio resolver infrastructure:
- URL detection
- Info model coercion
- Info dict to Track conversion (full and flat extractions)
- Resolve (URL and search term)
- Flat search
- Caching behavior
- Error handling

yt-dlp itself is never called; ``YoutubeDL`` is patched in every test that
reaches it.
"""

import time
from unittest.mock import MagicMock, patch

import pytest

from discord_music_remote.config.settings import AudioSettings
from discord_music_remote.infrastructure.audio.models import (
    CACHE_MAX_SIZE,
    CACHE_TTL,
    UNKNOWN_TITLE,
    CacheEntry,
    YtDlpTrackInfo,
)
from discord_music_remote.infrastructure.audio.ytdlp_resolver import YtDlpResolver

YTDLP = "discord_music_remote.infrastructure.audio.ytdlp_resolver.YoutubeDL"

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def resolver():
    return YtDlpResolver(AudioSettings())


@pytest.fixture
def full_info():
    """A full (non-flat) extraction result."""
    return {
        "id": "dQw4w9WgXcQ",
        "webpage_url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "url": "https://rr1.googlevideo.com/videoplayback?id=1",
        "title": "Never Gonna Give You Up",
        "duration": 213,
        "thumbnail": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hq.jpg",
        "uploader": "Rick Astley",
        "is_live": False,
        "like_count": 1000,
    }


def _mock_ydl(mock_cls: MagicMock, result=None, side_effect=None) -> MagicMock:
    ydl = mock_cls.return_value.__enter__.return_value
    if side_effect is not None:
        ydl.extract_info.side_effect = side_effect
    else:
        ydl.extract_info.return_value = result
    return ydl


# =============================================================================
# URL Detection
# =============================================================================


class TestURLDetection:
    @pytest.mark.parametrize(
        "query",
        ["http://youtube.com/watch?v=abc", "https://youtu.be/abc", "www.youtube.com/watch?v=abc", "  https://x.y  "],
    )
    def test_urls(self, resolver, query):
        assert resolver.is_url(query)

    @pytest.mark.parametrize("query", ["never gonna give you up", "", "youtube.com"])
    def test_not_urls(self, resolver, query):
        assert not resolver.is_url(query)


# =============================================================================
# Info model
# =============================================================================


class TestTrackInfoModel:
    def test_garbage_values_coerced(self):
        info = YtDlpTrackInfo.model_validate(
            {"id": "", "title": None, "duration": "n/a", "is_live": None, "formats": "nope", "thumbnails": [1, {}]}
        )
        assert info.id is None
        assert info.title == UNKNOWN_TITLE
        assert info.duration is None
        assert info.is_live is False
        assert info.formats == []
        assert len(info.thumbnails) == 1

    def test_negative_duration(self):
        assert YtDlpTrackInfo(duration=-5).duration is None

    def test_float_duration_truncated(self):
        assert YtDlpTrackInfo.model_validate({"duration": 213.9}).duration == 213

    def test_live_status(self):
        assert YtDlpTrackInfo(live_status="is_live").live
        assert YtDlpTrackInfo(live_status="is_upcoming").live
        assert not YtDlpTrackInfo(live_status="was_live").live

    def test_best_thumbnail_prefers_widest(self):
        info = YtDlpTrackInfo.model_validate(
            {
                "thumbnails": [
                    {"url": "https://i.ytimg.com/small.jpg", "width": 120},
                    {"url": "https://i.ytimg.com/large.jpg", "width": 1280},
                    {"url": "not-a-url", "width": 4000},
                ]
            }
        )
        assert info.best_thumbnail == "https://i.ytimg.com/large.jpg"

    def test_explicit_thumbnail_wins(self):
        info = YtDlpTrackInfo(thumbnail="https://i.ytimg.com/x.jpg")
        assert info.best_thumbnail == "https://i.ytimg.com/x.jpg"


# =============================================================================
# Conversion
# =============================================================================


class TestInfoToTrack:
    def test_full_extraction(self, resolver, full_info):
        track = resolver._info_to_track(YtDlpTrackInfo.model_validate(full_info))

        assert track.id.value == "dQw4w9WgXcQ"
        assert track.url == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
        assert track.stream_url == "https://rr1.googlevideo.com/videoplayback?id=1"
        assert track.duration_seconds == 213
        assert track.uploader == "Rick Astley"
        assert track.is_seekable

    def test_stream_from_formats(self, resolver):
        info = YtDlpTrackInfo.model_validate(
            {
                "id": "abc",
                "webpage_url": "https://www.youtube.com/watch?v=abcabcabcab",
                "formats": [
                    {"url": "https://cdn/video-only", "acodec": "none"},
                    {"url": "https://cdn/audio-low", "acodec": "opus"},
                    {"url": "https://cdn/audio-high", "acodec": "opus"},
                ],
            }
        )
        assert resolver._info_to_track(info).stream_url == "https://cdn/audio-high"

    def test_no_stream_returns_none(self, resolver):
        info = YtDlpTrackInfo(id="abc", webpage_url="https://www.youtube.com/watch?v=abc")
        assert resolver._info_to_track(info) is None

    def test_flat_entry_without_stream(self, resolver):
        info = YtDlpTrackInfo(id="abcabcabcab", url="https://www.youtube.com/watch?v=abcabcabcab", title="Flat")
        track = resolver._info_to_track(info, require_stream=False)

        assert track.url == "https://www.youtube.com/watch?v=abcabcabcab"
        assert track.stream_url is None

    def test_flat_entry_with_only_id(self, resolver):
        track = resolver._info_to_track(YtDlpTrackInfo(id="abcabcabcab"), require_stream=False)
        assert track.url == "https://www.youtube.com/watch?v=abcabcabcab"

    def test_no_page_url(self, resolver):
        assert resolver._info_to_track(YtDlpTrackInfo(), require_stream=False) is None

    def test_live_stream(self, resolver, full_info):
        full_info.update(is_live=True, duration=None)
        track = resolver._info_to_track(YtDlpTrackInfo.model_validate(full_info))
        assert track.is_live
        assert track.duration_seconds == 0
        assert not track.is_seekable


# =============================================================================
# Resolve
# =============================================================================


class TestResolve:
    @pytest.mark.asyncio
    async def test_resolve_url(self, resolver, full_info):
        with patch(YTDLP) as mock_cls:
            ydl = _mock_ydl(mock_cls, full_info)
            track = await resolver.resolve("https://www.youtube.com/watch?v=dQw4w9WgXcQ")

        assert track.title == "Never Gonna Give You Up"
        ydl.extract_info.assert_called_once_with("https://www.youtube.com/watch?v=dQw4w9WgXcQ", download=False)

    @pytest.mark.asyncio
    async def test_resolve_search_term_takes_first_entry(self, resolver, full_info):
        with patch(YTDLP) as mock_cls:
            ydl = _mock_ydl(mock_cls, {"entries": [full_info, {"id": "other"}]})
            track = await resolver.resolve("rick astley")

        assert track.id.value == "dQw4w9WgXcQ"
        assert ydl.extract_info.call_args.args[0] == "ytsearch1:rick astley"

    @pytest.mark.asyncio
    async def test_no_results(self, resolver):
        with patch(YTDLP) as mock_cls:
            _mock_ydl(mock_cls, {"entries": []})
            assert await resolver.resolve("nothing at all") is None

    @pytest.mark.asyncio
    async def test_extraction_error(self, resolver):
        with patch(YTDLP) as mock_cls:
            _mock_ydl(mock_cls, side_effect=RuntimeError("Video unavailable"))
            assert await resolver.resolve("https://www.youtube.com/watch?v=gone") is None

    @pytest.mark.asyncio
    async def test_options_passed(self, resolver, full_info):
        with patch(YTDLP) as mock_cls:
            _mock_ydl(mock_cls, full_info)
            await resolver.resolve("https://www.youtube.com/watch?v=dQw4w9WgXcQ")

        params = mock_cls.call_args.kwargs["params"]
        assert params["format"] == "bestaudio/best"
        assert params["noplaylist"] is True
        assert params["extract_flat"] is False


# =============================================================================
# Search
# =============================================================================


class TestSearch:
    @pytest.mark.asyncio
    async def test_flat_search(self, resolver):
        entries = [
            {"id": "aaaaaaaaaaa", "url": "https://www.youtube.com/watch?v=aaaaaaaaaaa", "title": "One", "channel": "C1"},
            {"id": "bbbbbbbbbbb", "url": "https://www.youtube.com/watch?v=bbbbbbbbbbb", "title": "Two"},
            "garbage",
        ]
        with patch(YTDLP) as mock_cls:
            ydl = _mock_ydl(mock_cls, {"entries": entries})
            tracks = await resolver.search("lofi", limit=5)

        assert [t.title for t in tracks] == ["One", "Two"]
        assert tracks[0].uploader == "C1"
        assert ydl.extract_info.call_args.args[0] == "ytsearch5:lofi"
        params = mock_cls.call_args.kwargs["params"]
        assert params["extract_flat"] == "in_playlist"
        assert params["format"] is None

    @pytest.mark.asyncio
    async def test_empty_result(self, resolver):
        with patch(YTDLP) as mock_cls:
            _mock_ydl(mock_cls, None)
            assert await resolver.search("lofi") == []

    @pytest.mark.asyncio
    async def test_failure_propagates(self, resolver):
        with patch(YTDLP) as mock_cls:
            _mock_ydl(mock_cls, side_effect=RuntimeError("Sign in to confirm you're not a bot"))
            with pytest.raises(RuntimeError, match="not a bot"):
                await resolver.search("lofi")


# =============================================================================
# Cache
# =============================================================================


class TestCache:
    @pytest.mark.asyncio
    async def test_second_resolve_hits_cache(self, resolver, full_info):
        with patch(YTDLP) as mock_cls:
            ydl = _mock_ydl(mock_cls, full_info)
            await resolver.resolve("https://www.youtube.com/watch?v=dQw4w9WgXcQ")
            await resolver.resolve("https://www.youtube.com/watch?v=dQw4w9WgXcQ")

        assert ydl.extract_info.call_count == 1

    @pytest.mark.asyncio
    async def test_expired_entry_refetched(self, resolver, full_info):
        url = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
        resolver._info_cache[url] = CacheEntry(
            info=YtDlpTrackInfo.model_validate(full_info), cached_at=time.time() - CACHE_TTL - 1
        )
        with patch(YTDLP) as mock_cls:
            ydl = _mock_ydl(mock_cls, full_info)
            await resolver.resolve(url)

        assert ydl.extract_info.call_count == 1

    def test_cache_bounded(self, resolver):
        now = time.time()
        info = YtDlpTrackInfo(id="x")
        for n in range(CACHE_MAX_SIZE + 5):
            resolver._remember(f"key-{n}", info, now + n)

        assert len(resolver._info_cache) == CACHE_MAX_SIZE
        assert "key-0" not in resolver._info_cache
        assert f"key-{CACHE_MAX_SIZE + 4}" in resolver._info_cache

    def test_cache_per_instance(self, resolver):
        resolver._remember("key", YtDlpTrackInfo(id="x"), time.time())
        assert YtDlpResolver()._info_cache == {}

    def test_clear_cache(self, resolver):
        resolver._remember("key", YtDlpTrackInfo(id="x"), time.time())
        resolver.clear_cache()
        assert resolver._info_cache == {}
