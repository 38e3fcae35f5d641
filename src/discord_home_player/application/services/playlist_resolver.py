"""Playlist expansion with per-kind strategies and fallbacks."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from ...domain.music.value_objects import PlaylistKind, PlaylistReference
from ...domain.shared.exceptions import PlaylistEmptyError, TransientMediaError
from ...domain.shared.messages import ErrorMessages, LogTemplates
from .lookup import bounded_lookup

if TYPE_CHECKING:
    from ...domain.music.entities import Track
    from ..interfaces.media_catalog import MediaCatalog
    from .track_resolver import TrackResolver

logger = logging.getLogger(__name__)

REGULAR_FALLBACK_LIMIT: Final[int] = 50
MIX_FALLBACK_LIMIT: Final[int] = 20
MIX_TOTAL_LIMIT: Final[int] = 20
WATCH_URL_TEMPLATE: Final[str] = "https://www.youtube.com/watch?v={item_id}"


class PlaylistResolver:
    """Expands a playlist reference into an ordered list of tracks.

    Regular playlists are read member by member and fall back to a keyword
    search on the list id (capped at 50). Mixes and other special lists
    start from the referenced item followed by up to 19 related items; with
    no item id they fall back to a keyword search capped at 20.

    Partial results are returned as-is; only a fully empty outcome raises
    ``PlaylistEmptyError``. Source order is preserved and duplicates kept.
    """

    def __init__(
        self,
        *,
        catalog: MediaCatalog,
        track_resolver: TrackResolver,
        playlist_timeout_s: float = 60.0,
    ) -> None:
        self._catalog = catalog
        self._track_resolver = track_resolver
        self._timeout = playlist_timeout_s

    async def resolve(self, reference: str | PlaylistReference) -> list[Track]:
        ref = (
            reference
            if isinstance(reference, PlaylistReference)
            else PlaylistReference.parse(reference)
        )
        if not ref.is_playlist:
            raise ValueError(f"Not a playlist reference: {ref.raw}")
        if ref.playlist_id is None:
            raise PlaylistEmptyError(ref.raw, ErrorMessages.NO_PLAYLIST_ID)

        logger.info(LogTemplates.PLAYLIST_DETECTED, ref.kind.value, ref.playlist_id)
        if ref.kind is PlaylistKind.REGULAR:
            tracks = await self._resolve_regular(ref)
        else:
            logger.info(LogTemplates.PLAYLIST_SPECIAL, ref.playlist_id)
            tracks = await self._resolve_special(ref)

        if not tracks:
            raise PlaylistEmptyError(ref.raw, ErrorMessages.PLAYLIST_EMPTY)

        logger.info(LogTemplates.PLAYLIST_RESOLVED, len(tracks), ref.kind.value, ref.playlist_id)
        return tracks

    async def _resolve_regular(self, ref: PlaylistReference) -> list[Track]:
        try:
            tracks = await bounded_lookup(
                self._catalog.fetch_playlist(ref.raw), timeout=self._timeout, reference=ref.raw
            )
        except TransientMediaError as e:
            logger.warning(LogTemplates.PLAYLIST_LOOKUP_FAILED, ref.raw, e.message)
            tracks = []

        if tracks:
            return list(tracks)
        return await self._search_fallback(ref, REGULAR_FALLBACK_LIMIT)

    async def _resolve_special(self, ref: PlaylistReference) -> list[Track]:
        if ref.item_id is None:
            return await self._search_fallback(ref, MIX_FALLBACK_LIMIT)

        tracks: list[Track] = []
        seed_ref = WATCH_URL_TEMPLATE.format(item_id=ref.item_id)
        try:
            tracks.append(await self._track_resolver.resolve_direct(seed_ref))
        except TransientMediaError as e:
            logger.warning(LogTemplates.PLAYLIST_SEED_FAILED, ref.item_id, e.message)

        try:
            related = await bounded_lookup(
                self._catalog.fetch_related(ref.item_id, MIX_TOTAL_LIMIT - 1),
                timeout=self._timeout,
                reference=ref.item_id,
            )
            tracks.extend(related[: MIX_TOTAL_LIMIT - 1])
        except TransientMediaError as e:
            logger.warning(LogTemplates.PLAYLIST_RELATED_FAILED, ref.item_id, e.message)

        if tracks:
            return tracks[:MIX_TOTAL_LIMIT]
        return await self._search_fallback(ref, MIX_FALLBACK_LIMIT)

    async def _search_fallback(self, ref: PlaylistReference, limit: int) -> list[Track]:
        playlist_id = ref.playlist_id or ref.raw
        logger.info(LogTemplates.PLAYLIST_FALLBACK_SEARCH, playlist_id, limit)
        try:
            results = await bounded_lookup(
                self._catalog.search(playlist_id, limit), timeout=self._timeout, reference=ref.raw
            )
        except TransientMediaError as e:
            logger.warning(LogTemplates.PLAYLIST_SEARCH_FAILED, playlist_id, e.message)
            return []
        return list(results[:limit])
