"""Port interface for metadata lookups, search and playlist expansion."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.music.entities import Track


class MediaCatalog(ABC):
    """Interface to the media site's metadata, search and stream endpoints.

    Implementations raise ``TransientMediaError`` when a lookup fails; an
    empty result is returned as an empty list, not an error.
    """

    @abstractmethod
    async def fetch_track(self, reference: str) -> Track:
        """Look up metadata for a single direct reference."""
        ...

    @abstractmethod
    async def fetch_related(self, item_id: str, limit: int) -> list[Track]:
        """Fetch up to ``limit`` items related to ``item_id``, excluding it."""
        ...

    @abstractmethod
    async def search(self, query: str, limit: int) -> list[Track]:
        """Keyword search returning at most ``limit`` tracks in ranking order."""
        ...

    @abstractmethod
    async def fetch_playlist(self, reference: str) -> list[Track]:
        """Return a playlist's member items in playlist order."""
        ...

    @abstractmethod
    async def resolve_stream(self, source_ref: str) -> str:
        """Turn a track's source reference into a streamable media URL."""
        ...
