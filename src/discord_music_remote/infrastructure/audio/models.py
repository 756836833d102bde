"""Pydantic models for yt-dlp data transformation and configuration.

These are infrastructure-specific models for parsing external yt-dlp data,
caching extraction results, and configuring yt-dlp options.
"""

from __future__ import annotations

from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from discord_music_remote.domain.shared.types import (
    HttpUrlStr,
    NonEmptyStr,
    NonNegativeFloat,
    NonNegativeInt,
    PositiveInt,
)

CACHE_TTL: Final[int] = 1800
CACHE_MAX_SIZE: Final[int] = 200
DEFAULT_RETRIES: Final[int] = 3
DEFAULT_SOCKET_TIMEOUT: Final[int] = 10
DEFAULT_SEARCH_LIMIT: Final[int] = 10
LOG_URL_TRUNCATE: Final[int] = 60
TITLE_MAX_LENGTH: Final[int] = 500
UNKNOWN_TITLE: Final[str] = "Unknown Title"

LIVE_STATUSES: Final[frozenset[str]] = frozenset({"is_live", "is_upcoming"})


# ── Pydantic models for yt-dlp data ────────────────────────────────────


class AudioFormatInfo(BaseModel):
    """A single audio format entry from yt-dlp extraction."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: NonEmptyStr | None = None
    acodec: NonEmptyStr | None = None


class ThumbnailInfo(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    url: NonEmptyStr | None = None
    width: NonNegativeInt | None = None


class YtDlpTrackInfo(BaseModel):
    """Trimmed yt-dlp extraction result, from a full or a flat extraction.

    Flat search entries put the watch page in ``url`` and carry no stream;
    full extractions put the stream in ``url`` and the page in ``webpage_url``.
    Extra fields from yt-dlp are ignored; garbage values are coerced away.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: NonEmptyStr | None = None
    webpage_url: HttpUrlStr | None = None
    url: NonEmptyStr | None = None
    title: NonEmptyStr = UNKNOWN_TITLE
    duration: NonNegativeInt | None = None
    thumbnail: HttpUrlStr | None = None
    thumbnails: list[ThumbnailInfo] = Field(default_factory=list)
    uploader: NonEmptyStr | None = None
    channel: NonEmptyStr | None = None
    is_live: bool = False
    live_status: NonEmptyStr | None = None
    formats: list[AudioFormatInfo] = Field(default_factory=list)

    @field_validator(
        "id", "webpage_url", "url", "thumbnail", "uploader", "channel", "live_status",
        mode="before",
    )
    @classmethod
    def _coerce_empty_to_none(cls, v: Any) -> str | None:
        if not isinstance(v, str) or not v.strip():
            return None
        return v

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, v: Any) -> str:
        """Fall back to default when yt-dlp sends empty or non-string title."""
        if not isinstance(v, str) or not v.strip():
            return UNKNOWN_TITLE
        return v[:TITLE_MAX_LENGTH]

    @field_validator("duration", mode="before")
    @classmethod
    def _coerce_duration(cls, v: Any) -> int | None:
        """Coerce to non-negative int; return None for garbage values."""
        if v is None or isinstance(v, bool):
            return None
        try:
            val = int(v)
            return val if val >= 0 else None
        except (TypeError, ValueError, OverflowError):
            return None

    @field_validator("is_live", mode="before")
    @classmethod
    def _coerce_is_live(cls, v: Any) -> bool:
        # yt-dlp reports None when it does not know.
        return v is True

    @field_validator("thumbnails", "formats", mode="before")
    @classmethod
    def _coerce_list(cls, v: Any) -> list[Any]:
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, dict)]

    @property
    def live(self) -> bool:
        return self.is_live or self.live_status in LIVE_STATUSES

    @property
    def best_thumbnail(self) -> str | None:
        if self.thumbnail:
            return self.thumbnail
        candidates = [t for t in self.thumbnails if t.url and t.url.startswith(("http://", "https://"))]
        if not candidates:
            return None
        return max(candidates, key=lambda t: t.width or 0).url


class CacheEntry(BaseModel):
    """Cached yt-dlp extraction result with expiry timestamp."""

    model_config = ConfigDict(frozen=True)

    info: YtDlpTrackInfo | None = None
    cached_at: NonNegativeFloat


# ── yt-dlp option models ───────────────────────────────────────────────


class YtDlpOpts(BaseModel):
    """Typed yt-dlp configuration options passed to YoutubeDL."""

    model_config = ConfigDict(frozen=True)

    quiet: bool = True
    no_warnings: bool = True
    noprogress: bool = True
    noplaylist: bool = True
    default_search: NonEmptyStr = "ytsearch"
    forceipv4: bool = True
    retries: PositiveInt = DEFAULT_RETRIES
    socket_timeout: PositiveInt = DEFAULT_SOCKET_TIMEOUT
    format: NonEmptyStr | None = None
    skip_download: bool = True
    extract_flat: NonEmptyStr | bool = False
