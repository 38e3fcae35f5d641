"""Process-lifetime memo of direct-reference metadata lookups."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...domain.music.entities import Track

logger = logging.getLogger(__name__)


class TrackInfoCache:
    """Exact-string keyed store of resolved tracks. Never evicts."""

    def __init__(self) -> None:
        self._entries: dict[str, Track] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, reference: object) -> bool:
        return reference in self._entries

    def get(self, reference: str) -> Track | None:
        track = self._entries.get(reference)
        if track is not None:
            logger.debug(LogTemplates.CACHE_HIT, reference)
        return track

    def store(self, reference: str, track: Track) -> None:
        self._entries[reference] = track
        logger.debug(LogTemplates.CACHE_STORED, reference, len(self._entries))

    def clear(self) -> None:
        self._entries.clear()
