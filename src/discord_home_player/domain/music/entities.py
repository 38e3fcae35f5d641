"""Core domain entities for the music bounded context."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator

from pydantic import BaseModel, ConfigDict, field_validator

from discord_home_player.domain.shared.messages import ErrorMessages
from discord_home_player.domain.shared.types import NonEmptyStr, TrackTitleStr


class Track(BaseModel):
    """Immutable value object representing a playable item.

    ``source_ref`` is opaque to the engine; the media catalog turns it into
    a byte stream when playback starts.
    """

    model_config = ConfigDict(frozen=True)

    title: TrackTitleStr
    source_ref: NonEmptyStr
    duration_display: str = "N/A"
    thumbnail_ref: str | None = None

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError(ErrorMessages.EMPTY_TRACK_TITLE)
        return v

    @field_validator("thumbnail_ref", mode="before")
    @classmethod
    def _empty_thumbnail_to_none(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class TrackQueue:
    """FIFO sequence of tracks; insertion order is playback order.

    Unbounded. Never holds a placeholder entry, and dequeue on an empty
    queue returns None instead of raising.
    """

    def __init__(self, tracks: Iterable[Track] = ()) -> None:
        self._items: deque[Track] = deque()
        self.extend(tracks)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[Track]:
        return iter(tuple(self._items))

    @property
    def is_empty(self) -> bool:
        return not self._items

    def enqueue(self, track: Track) -> int:
        """Append a track and return its zero-based position."""
        if track is None:
            raise ValueError("Cannot enqueue an empty slot")
        self._items.append(track)
        return len(self._items) - 1

    def extend(self, tracks: Iterable[Track]) -> int:
        """Append tracks in order and return how many were added."""
        added = 0
        for track in tracks:
            self.enqueue(track)
            added += 1
        return added

    def dequeue(self) -> Track | None:
        """Remove and return the next track, or None when empty."""
        if not self._items:
            return None
        return self._items.popleft()

    def peek(self) -> Track | None:
        return self._items[0] if self._items else None

    def clear(self) -> int:
        """Drop every queued track and return the count removed."""
        count = len(self._items)
        self._items.clear()
        return count

    def snapshot(self) -> list[Track]:
        return list(self._items)
