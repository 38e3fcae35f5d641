"""Single-track resolution for direct references and free-text queries."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.shared.exceptions import NoResultsError
from ...domain.shared.messages import ErrorMessages, LogTemplates
from .lookup import bounded_lookup

if TYPE_CHECKING:
    from ...domain.music.entities import Track
    from ..interfaces.media_catalog import MediaCatalog
    from .track_cache import TrackInfoCache

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 1


class TrackResolver:
    """Turns a direct reference or a query into exactly one ``Track``.

    Direct references go through the ``TrackInfoCache``; keyword searches are
    never memoized because upstream ranking changes over time.
    """

    def __init__(
        self,
        *,
        catalog: MediaCatalog,
        cache: TrackInfoCache,
        lookup_timeout_s: float = 10.0,
    ) -> None:
        self._catalog = catalog
        self._cache = cache
        self._timeout = lookup_timeout_s

    async def resolve_direct(self, reference: str) -> Track:
        """Return the track for ``reference``, looking it up on a cache miss.

        Raises:
            TransientMediaError: The lookup failed or timed out.
        """
        cached = self._cache.get(reference)
        if cached is not None:
            return cached

        logger.info(LogTemplates.RESOLVE_DIRECT, reference)
        track = await bounded_lookup(
            self._catalog.fetch_track(reference), timeout=self._timeout, reference=reference
        )
        self._cache.store(reference, track)
        return track

    async def resolve_by_query(self, text: str) -> Track:
        """Return the top keyword-search hit for ``text``.

        Raises:
            NoResultsError: The search returned nothing.
            TransientMediaError: The search failed or timed out.
        """
        logger.info(LogTemplates.RESOLVE_QUERY, text)
        results = await bounded_lookup(
            self._catalog.search(text, SEARCH_LIMIT), timeout=self._timeout, reference=text
        )
        if not results:
            raise NoResultsError(text, ErrorMessages.NO_SEARCH_RESULTS)
        return results[0]
