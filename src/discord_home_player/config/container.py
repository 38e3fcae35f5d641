"""Dependency Injection Container

Lazily builds the playback graph: media catalog, voice adapter, resolvers,
idle timer, session manager, engine and the orchestrator that owns them.
Components are created on first access and cached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.interfaces.media_catalog import MediaCatalog
    from ..application.services.idle_timer import IdleTimer
    from ..application.services.orchestrator import PlaybackOrchestrator
    from ..application.services.playback_engine import PlaybackEngine
    from ..application.services.playlist_resolver import PlaylistResolver
    from ..application.services.session_manager import SessionManager
    from ..application.services.track_cache import TrackInfoCache
    from ..application.services.track_resolver import TrackResolver
    from ..infrastructure.discord.adapters.voice_adapter import DiscordVoiceAdapter
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed. The voice adapter
    (and everything depending on it) needs ``set_bot`` first.
    """

    settings: Settings
    _bot: Bot | None = None

    # Infrastructure adapters
    _catalog: MediaCatalog | None = None
    _voice_adapter: DiscordVoiceAdapter | None = None

    # Application services
    _track_cache: TrackInfoCache | None = None
    _track_resolver: TrackResolver | None = None
    _playlist_resolver: PlaylistResolver | None = None
    _idle_timer: IdleTimer | None = None
    _session_manager: SessionManager | None = None
    _playback_engine: PlaybackEngine | None = None
    _orchestrator: PlaybackOrchestrator | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Infrastructure Adapters ===

    @property
    def catalog(self) -> MediaCatalog:
        if self._catalog is None:
            from ..infrastructure.audio.ytdlp_catalog import YtDlpCatalog

            self._catalog = YtDlpCatalog(self.settings.media)
        return self._catalog

    @property
    def voice_adapter(self) -> DiscordVoiceAdapter:
        if self._voice_adapter is None:
            from ..infrastructure.discord.adapters.voice_adapter import DiscordVoiceAdapter

            self._voice_adapter = DiscordVoiceAdapter(self.bot, self.settings.media)
        return self._voice_adapter

    # === Application Services ===

    @property
    def track_cache(self) -> TrackInfoCache:
        if self._track_cache is None:
            from ..application.services.track_cache import TrackInfoCache

            self._track_cache = TrackInfoCache()
        return self._track_cache

    @property
    def track_resolver(self) -> TrackResolver:
        if self._track_resolver is None:
            from ..application.services.track_resolver import TrackResolver

            self._track_resolver = TrackResolver(
                catalog=self.catalog,
                cache=self.track_cache,
                lookup_timeout_s=self.settings.media.lookup_timeout_s,
            )
        return self._track_resolver

    @property
    def playlist_resolver(self) -> PlaylistResolver:
        if self._playlist_resolver is None:
            from ..application.services.playlist_resolver import PlaylistResolver

            self._playlist_resolver = PlaylistResolver(
                catalog=self.catalog,
                track_resolver=self.track_resolver,
                playlist_timeout_s=self.settings.media.playlist_timeout_s,
            )
        return self._playlist_resolver

    @property
    def idle_timer(self) -> IdleTimer:
        if self._idle_timer is None:
            from ..application.services.idle_timer import IdleTimer

            self._idle_timer = IdleTimer()
        return self._idle_timer

    @property
    def session_manager(self) -> SessionManager:
        if self._session_manager is None:
            from ..application.services.session_manager import SessionManager

            self._session_manager = SessionManager(
                voice_adapter=self.voice_adapter,
                connect_timeout_s=self.settings.playback.connect_timeout_s,
            )
        return self._session_manager

    @property
    def playback_engine(self) -> PlaybackEngine:
        if self._playback_engine is None:
            from ..application.services.playback_engine import PlaybackEngine

            playback = self.settings.playback
            self._playback_engine = PlaybackEngine(
                voice_adapter=self.voice_adapter,
                catalog=self.catalog,
                session_manager=self.session_manager,
                idle_timer=self.idle_timer,
                idle_timeout_ms=playback.idle_timeout_ms,
                retry_delay_ms=playback.retry_delay_ms,
                stream_timeout_s=self.settings.media.lookup_timeout_s,
            )
        return self._playback_engine

    @property
    def orchestrator(self) -> PlaybackOrchestrator:
        if self._orchestrator is None:
            from ..application.services.orchestrator import PlaybackOrchestrator

            playback = self.settings.playback
            self._orchestrator = PlaybackOrchestrator(
                engine=self.playback_engine,
                session_manager=self.session_manager,
                idle_timer=self.idle_timer,
                track_resolver=self.track_resolver,
                playlist_resolver=self.playlist_resolver,
                home_channel_id=self.settings.discord.home_channel_id,
                leave_grace_ms=playback.leave_grace_ms,
                startup_join_delay_s=playback.startup_join_delay_s,
            )
        return self._orchestrator

    # === Lifecycle ===

    async def shutdown(self) -> None:
        """Stop playback and leave voice if the orchestrator was ever built."""
        if self._orchestrator is not None:
            await self._orchestrator.shutdown()


def create_container(settings: Settings | None = None) -> Container:
    """Create a new DI container instance."""
    if settings is None:
        from .settings import get_settings

        settings = get_settings()

    return Container(settings=settings)
