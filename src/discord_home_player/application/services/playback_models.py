"""DTOs returned by the playback orchestrator."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ...domain.music.entities import Track
from ...domain.music.value_objects import PlaybackStatus, PlaylistKind
from ...domain.shared.types import NonNegativeInt

QUEUE_PREVIEW_LIMIT = 10


class EnqueueResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    tracks: list[Track]
    kind: PlaylistKind = PlaylistKind.NONE
    position: NonNegativeInt = 0
    queue_length: NonNegativeInt = 0
    started: bool = False

    @property
    def first_track(self) -> Track:
        return self.tracks[0]

    @property
    def count(self) -> int:
        return len(self.tracks)

    @property
    def is_playlist(self) -> bool:
        return self.kind.is_playlist


class NowPlayingInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    track: Track | None
    status: PlaybackStatus
    queue_length: NonNegativeInt

    @property
    def is_paused(self) -> bool:
        return self.status is PlaybackStatus.PAUSED


class QueueInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_track: Track | None
    upcoming: list[Track]
    total: NonNegativeInt

    @property
    def is_empty(self) -> bool:
        return self.current_track is None and not self.upcoming

    def preview(self, limit: int = QUEUE_PREVIEW_LIMIT) -> tuple[list[Track], int]:
        """Return the first ``limit`` upcoming tracks and how many were left out."""
        shown = self.upcoming[:limit]
        return shown, max(0, len(self.upcoming) - len(shown))
