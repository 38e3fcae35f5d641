"""Pydantic models for yt-dlp payload parsing and option building.

These are infrastructure-specific models: extraction payloads are trimmed
to what a ``Track`` needs and garbage from yt-dlp is coerced away rather
than rejected.
"""

from __future__ import annotations

from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from discord_home_player.domain.music.entities import Track
from discord_home_player.domain.music.value_objects import format_duration
from discord_home_player.domain.shared.types import NonEmptyStr, PositiveInt

DEFAULT_RETRIES: Final[int] = 3
DEFAULT_SOCKET_TIMEOUT: Final[int] = 10
UNKNOWN_TITLE: Final[str] = "Unknown Title"
WATCH_URL_TEMPLATE: Final[str] = "https://www.youtube.com/watch?v={item_id}"


# ── Pydantic models for yt-dlp data ────────────────────────────────────


class AudioFormatInfo(BaseModel):
    """A single format entry from yt-dlp extraction."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: NonEmptyStr | None = None
    acodec: NonEmptyStr | None = None


class ThumbnailInfo(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    url: NonEmptyStr | None = None


class YtDlpEntryInfo(BaseModel):
    """Trimmed yt-dlp result for a single item, full or flat.

    In a full extraction ``url`` is the media stream; in a flat playlist or
    search entry it is the item's page.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: NonEmptyStr | None = None
    webpage_url: NonEmptyStr | None = None
    url: NonEmptyStr | None = None
    title: NonEmptyStr = UNKNOWN_TITLE
    duration: float | None = None
    thumbnail: NonEmptyStr | None = None
    thumbnails: list[ThumbnailInfo] = Field(default_factory=list)
    formats: list[AudioFormatInfo] = Field(default_factory=list)

    @field_validator("id", "webpage_url", "url", "thumbnail", mode="before")
    @classmethod
    def _coerce_empty_to_none(cls, v: Any) -> str | None:
        """Convert empty / whitespace-only / non-string values to None."""
        if not isinstance(v, str) or not v.strip():
            return None
        return v

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            return UNKNOWN_TITLE
        return v

    @field_validator("duration", mode="before")
    @classmethod
    def _coerce_duration(cls, v: Any) -> float | None:
        if v is None:
            return None
        try:
            val = float(v)
        except (TypeError, ValueError):
            return None
        return val if val >= 0 else None

    @field_validator("thumbnails", "formats", mode="before")
    @classmethod
    def _coerce_list(cls, v: Any) -> list[Any]:
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, dict)]

    @property
    def first_thumbnail(self) -> str | None:
        if self.thumbnail:
            return self.thumbnail
        for thumb in self.thumbnails:
            if thumb.url:
                return thumb.url
        return None

    def page_url(self, *, flat: bool) -> str | None:
        """The item's page address, used as the track's source reference."""
        if self.webpage_url:
            return self.webpage_url
        if flat and self.url and self.url.startswith("http"):
            return self.url
        if self.id:
            return WATCH_URL_TEMPLATE.format(item_id=self.id)
        return None

    def stream_url(self) -> str | None:
        if self.url:
            return self.url
        audio_formats = [f for f in self.formats if f.acodec != "none" and f.url]
        if audio_formats:
            return audio_formats[-1].url
        return None

    def to_track(self, *, flat: bool, fallback_ref: str | None = None) -> Track | None:
        source_ref = self.page_url(flat=flat) or fallback_ref
        if not source_ref:
            return None
        return Track(
            title=self.title,
            source_ref=source_ref,
            duration_display=format_duration(self.duration),
            thumbnail_ref=self.first_thumbnail,
        )


# ── yt-dlp option model ────────────────────────────────────────────────


class YtDlpOpts(BaseModel):
    """Typed yt-dlp configuration options passed to YoutubeDL."""

    model_config = ConfigDict(frozen=True)

    quiet: bool = True
    no_warnings: bool = True
    noprogress: bool = True
    noplaylist: bool = True
    default_search: NonEmptyStr = "ytsearch"
    retries: PositiveInt = DEFAULT_RETRIES
    socket_timeout: PositiveInt = DEFAULT_SOCKET_TIMEOUT
    format: NonEmptyStr | None = None
    skip_download: bool = True
    extract_flat: NonEmptyStr | bool = False
    playlistend: PositiveInt | None = None
    http_headers: dict[str, str] = Field(default_factory=dict)

    def to_params(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
