"""Music bounded context - tracks, queue and playback/session states."""

from discord_home_player.domain.music.entities import Track, TrackQueue
from discord_home_player.domain.music.value_objects import (
    PlaybackState,
    PlaybackStatus,
    PlaylistKind,
    PlaylistReference,
    SessionState,
    SessionStatus,
)

__all__ = [
    "PlaybackState",
    "PlaybackStatus",
    "PlaylistKind",
    "PlaylistReference",
    "SessionState",
    "SessionStatus",
    "Track",
    "TrackQueue",
]
