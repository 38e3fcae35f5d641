"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded once at startup from environment variables with support
for .env files, type validation, and sensible defaults. All settings are
frozen and immutable after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import TimeoutMs, TimeoutSeconds, VolumeFloat
from ..domain.shared.validators import validate_discord_snowflake

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
)


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    home_channel_id: int | None = Field(
        default=None,
        validation_alias=AliasChoices("home_channel_id", "vc_id", "default_vc_id"),
    )
    test_guild_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("test_guild_ids", "test_guilds")
    )
    sync_on_startup: bool = True

    @field_validator("home_channel_id")
    @classmethod
    def validate_home_channel(cls, v: int | None) -> int | None:
        """Validate the home channel as a Discord snowflake when set."""
        if v is None:
            return v
        return validate_discord_snowflake(v)

    @field_validator("test_guild_ids", mode="before")
    @classmethod
    def validate_snowflake_ids(cls, v: tuple[int, ...] | list[int]) -> tuple[int, ...]:
        """Validate Discord snowflake IDs and convert lists to tuples."""
        if isinstance(v, list):
            v = tuple(v)
        for snowflake in v:
            validate_discord_snowflake(snowflake)
        return v


class PlaybackSettings(BaseModel):
    """Playback engine, session and idle-timer configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    idle_timeout_ms: TimeoutMs = Field(
        default=120_000, validation_alias=AliasChoices("idle_timeout_ms", "idle_timeout")
    )
    connect_timeout_s: TimeoutSeconds = 10.0
    leave_grace_ms: TimeoutMs = 1_000
    startup_join_delay_s: float = Field(default=3.0, ge=0.0, le=600.0)
    retry_delay_ms: TimeoutMs = 250


class MediaSettings(BaseModel):
    """Media source configuration (yt-dlp lookups and FFmpeg streaming)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user_agent: str = Field(default=DEFAULT_USER_AGENT, min_length=1)
    ytdlp_format: str = "bestaudio/best"
    lookup_timeout_s: TimeoutSeconds = 10.0
    playlist_timeout_s: TimeoutSeconds = 60.0
    default_volume: VolumeFloat = 1.0
    ffmpeg_options: dict[str, str] = Field(
        default_factory=lambda: {
            "before_options": "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5",
            "options": "-vn",
        }
    )

    @property
    def http_headers(self) -> dict[str, str]:
        """Outbound request headers for metadata and stream requests."""
        return {"User-Agent": self.user_agent}


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DISCORD__TOKEN, DISCORD__HOME_CHANNEL_ID, DISCORD__SYNC_ON_STARTUP
    - PLAYBACK__IDLE_TIMEOUT_MS, PLAYBACK__CONNECT_TIMEOUT_S, ...
    - MEDIA__USER_AGENT, MEDIA__LOOKUP_TIMEOUT_S, ...
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    playback: PlaybackSettings = Field(default_factory=PlaybackSettings)
    media: MediaSettings = Field(default_factory=MediaSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


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
