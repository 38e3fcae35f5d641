"""MediaCatalog implementation using yt-dlp for lookups, search and streams."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Final

from yt_dlp import YoutubeDL

from discord_home_player.application.interfaces.media_catalog import MediaCatalog
from discord_home_player.config.settings import MediaSettings
from discord_home_player.domain.music.entities import Track
from discord_home_player.domain.shared.exceptions import TransientMediaError
from discord_home_player.domain.shared.messages import ErrorMessages, LogTemplates
from discord_home_player.infrastructure.audio.models import YtDlpEntryInfo, YtDlpOpts

logger = logging.getLogger(__name__)

RADIO_URL_TEMPLATE: Final[str] = "https://www.youtube.com/watch?v={item_id}&list=RD{item_id}"


class YtDlpCatalog(MediaCatalog):
    """Blocking yt-dlp calls run in a worker thread via ``asyncio.to_thread``."""

    def __init__(self, settings: MediaSettings | None = None) -> None:
        self._settings = settings or MediaSettings()
        self._base_opts = YtDlpOpts(
            format=self._settings.ytdlp_format,
            http_headers=self._settings.http_headers,
        )

    def _get_opts(self, **overrides: Any) -> YtDlpOpts:
        if overrides:
            return self._base_opts.model_copy(update=overrides)
        return self._base_opts

    def _get_flat_opts(self, **overrides: Any) -> YtDlpOpts:
        return self._get_opts(noplaylist=False, extract_flat="in_playlist", **overrides)

    def _extract_sync(self, target: str, opts: YtDlpOpts) -> dict[str, Any]:
        try:
            with YoutubeDL(params=opts.to_params()) as ydl:
                data = ydl.extract_info(target, download=False)
        except Exception as e:
            logger.warning(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, target)
            raise TransientMediaError(
                ErrorMessages.LOOKUP_FAILED.format(reference=target), reference=target
            ) from e

        if not isinstance(data, dict):
            raise TransientMediaError(
                ErrorMessages.LOOKUP_FAILED.format(reference=target), reference=target
            )
        return dict(data)

    @staticmethod
    def _entries(data: dict[str, Any]) -> list[YtDlpEntryInfo]:
        entries = data.get("entries") or []
        if not isinstance(entries, list):
            entries = list(entries)
        return [YtDlpEntryInfo.model_validate(dict(e)) for e in entries if isinstance(e, dict)]

    def _to_tracks(self, entries: list[YtDlpEntryInfo], origin: str) -> list[Track]:
        tracks: list[Track] = []
        for entry in entries:
            track = entry.to_track(flat=True)
            if track is None:
                logger.debug(LogTemplates.YTDLP_SKIPPED_ENTRY, origin)
                continue
            tracks.append(track)
        return tracks

    async def fetch_track(self, reference: str) -> Track:
        data = await asyncio.to_thread(self._extract_sync, reference, self._get_opts())
        track = YtDlpEntryInfo.model_validate(data).to_track(flat=False, fallback_ref=reference)
        if track is None:
            raise TransientMediaError(
                ErrorMessages.LOOKUP_FAILED.format(reference=reference), reference=reference
            )
        return track

    async def fetch_related(self, item_id: str, limit: int) -> list[Track]:
        """Related items come from the item's auto-generated radio list."""
        url = RADIO_URL_TEMPLATE.format(item_id=item_id)
        data = await asyncio.to_thread(
            self._extract_sync, url, self._get_flat_opts(playlistend=limit + 1)
        )
        entries = [e for e in self._entries(data) if e.id != item_id]
        return self._to_tracks(entries, url)[:limit]

    async def search(self, query: str, limit: int) -> list[Track]:
        target = f"ytsearch{limit}:{query}"
        try:
            data = await asyncio.to_thread(self._extract_sync, target, self._get_flat_opts())
        except TransientMediaError:
            logger.warning(LogTemplates.YTDLP_FAILED_SEARCH, query)
            raise
        return self._to_tracks(self._entries(data), target)[:limit]

    async def fetch_playlist(self, reference: str) -> list[Track]:
        try:
            data = await asyncio.to_thread(self._extract_sync, reference, self._get_flat_opts())
        except TransientMediaError:
            logger.warning(LogTemplates.YTDLP_FAILED_EXTRACT_PLAYLIST, reference)
            raise
        return self._to_tracks(self._entries(data), reference)

    async def resolve_stream(self, source_ref: str) -> str:
        data = await asyncio.to_thread(self._extract_sync, source_ref, self._get_opts())
        stream_url = YtDlpEntryInfo.model_validate(data).stream_url()
        if not stream_url:
            raise TransientMediaError(
                ErrorMessages.NO_STREAM_URL.format(reference=source_ref), reference=source_ref
            )
        return stream_url
