"""Audio infrastructure - yt-dlp media catalog."""

from discord_home_player.infrastructure.audio.models import (
    AudioFormatInfo,
    ThumbnailInfo,
    YtDlpEntryInfo,
    YtDlpOpts,
)
from discord_home_player.infrastructure.audio.ytdlp_catalog import YtDlpCatalog

__all__ = [
    "AudioFormatInfo",
    "ThumbnailInfo",
    "YtDlpCatalog",
    "YtDlpEntryInfo",
    "YtDlpOpts",
]
