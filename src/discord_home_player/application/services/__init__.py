"""Application services for queue, session and playback orchestration."""

from discord_home_player.application.services.idle_timer import IdleTimer
from discord_home_player.application.services.orchestrator import PlaybackOrchestrator
from discord_home_player.application.services.playback_engine import PlaybackEngine
from discord_home_player.application.services.playback_models import (
    EnqueueResult,
    NowPlayingInfo,
    QueueInfo,
)
from discord_home_player.application.services.playlist_resolver import PlaylistResolver
from discord_home_player.application.services.session_manager import SessionManager
from discord_home_player.application.services.track_cache import TrackInfoCache
from discord_home_player.application.services.track_resolver import TrackResolver

__all__ = [
    "EnqueueResult",
    "IdleTimer",
    "NowPlayingInfo",
    "PlaybackEngine",
    "PlaybackOrchestrator",
    "PlaylistResolver",
    "QueueInfo",
    "SessionManager",
    "TrackInfoCache",
    "TrackResolver",
]
