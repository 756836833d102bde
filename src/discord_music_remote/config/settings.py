"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import (
    CommandPrefixStr,
    DiscordSnowflake,
    NonEmptyStr,
    PortInt,
    SearchLimit,
    SessionTtlHours,
    SweepIntervalMinutes,
    TokenBytes,
    VolumePercent,
)

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class WebSettings(BaseModel):
    """HTTP server and realtime channel configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    host: NonEmptyStr = "0.0.0.0"
    cors_origins: tuple[str, ...] = Field(
        default=("*",),
        validation_alias=AliasChoices("cors_origins", "allowed_origins"),
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, v: object) -> object:
        """Accept a comma-separated string as well as a JSON array."""
        if isinstance(v, str):
            return tuple(origin.strip() for origin in v.split(",") if origin.strip())
        return v


class SessionSettings(BaseModel):
    """Control-link session configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    ttl_hours: SessionTtlHours = 24
    sweep_interval_minutes: SweepIntervalMinutes = Field(
        default=60,
        validation_alias=AliasChoices("sweep_interval_minutes", "cleanup_interval_minutes"),
    )
    token_bytes: TokenBytes = 16


class AudioSettings(BaseModel):
    """Audio playback configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    default_volume: VolumePercent = 50
    search_limit: SearchLimit = 10
    ytdlp_format: NonEmptyStr = "bestaudio/best"
    ffmpeg_options: dict[str, str] = Field(
        default_factory=lambda: {
            "before_options": "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5",
            "options": "-vn",
        }
    )


class Settings(BaseSettings):
    """Application settings container.

    Environment variable naming:
    - DISCORD_TOKEN, PORT, WEB_UI_URL, VOICE_CHANNEL_ID (flat, as deployed)
    - TEXT_CHANNEL_ID_FOR_BOT_MESSAGES or TEXT_CHANNEL_ID
    - ENVIRONMENT, DEBUG, LOG_LEVEL, COMMAND_PREFIX (top-level)
    - WEB__HOST, SESSIONS__TTL_HOURS, AUDIO__DEFAULT_VOLUME, ... (nested groups)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    discord_token: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("discord_token", "bot_token"),
    )
    command_prefix: CommandPrefixStr = "!"
    port: PortInt = 3000
    web_ui_url: str | None = None
    voice_channel_id: DiscordSnowflake | None = None
    text_channel_id: DiscordSnowflake | None = Field(
        default=None,
        validation_alias=AliasChoices("text_channel_id_for_bot_messages", "text_channel_id"),
    )

    web: WebSettings = Field(default_factory=WebSettings)
    sessions: SessionSettings = Field(default_factory=SessionSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v_upper = v.upper()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=sorted(VALID_LOG_LEVELS))
            )
        return v_upper

    @field_validator("web_ui_url")
    @classmethod
    def validate_web_ui_url(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("WEB_UI_URL must start with http:// or https://")
        return v.rstrip("/")

    @property
    def base_url(self) -> str:
        """Externally reachable address of the web UI."""
        return self.web_ui_url or f"http://localhost:{self.port}"

    @property
    def has_discord_token(self) -> bool:
        return bool(self.discord_token.get_secret_value().strip())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
