"""Playback Orchestrator - the single owner of queue, playback, session and idle timer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.music.value_objects import PlaylistKind, PlaylistReference, is_direct_reference
from ...domain.shared.exceptions import (
    ChannelConflictError,
    ConnectFailedError,
    ConnectivityError,
    NotInSameChannelError,
    NotPlayingError,
)
from ...domain.shared.messages import ErrorMessages, LogTemplates
from .playback_models import EnqueueResult, NowPlayingInfo, QueueInfo

if TYPE_CHECKING:
    from ...domain.music.entities import Track
    from .idle_timer import IdleTimer
    from .playback_engine import PlaybackEngine
    from .playlist_resolver import PlaylistResolver
    from .session_manager import SessionManager
    from .track_resolver import TrackResolver

logger = logging.getLogger(__name__)


class PlaybackOrchestrator:
    """Request surface for play, skip, pause, resume, stop, leave and queries.

    All shared state is reached only through the engine, the session
    manager and the idle timer held here. Every request re-checks its
    channel assumptions after each suspension point.
    """

    def __init__(
        self,
        *,
        engine: PlaybackEngine,
        session_manager: SessionManager,
        idle_timer: IdleTimer,
        track_resolver: TrackResolver,
        playlist_resolver: PlaylistResolver,
        home_channel_id: int | None = None,
        leave_grace_ms: int = 1_000,
        startup_join_delay_s: float = 3.0,
    ) -> None:
        self._engine = engine
        self._sessions = session_manager
        self._idle_timer = idle_timer
        self._track_resolver = track_resolver
        self._playlist_resolver = playlist_resolver
        self._home_channel_id = home_channel_id
        self._leave_grace_ms = leave_grace_ms
        self._startup_join_delay_ms = int(startup_join_delay_s * 1000)

        self._engine.set_idle_expiry_handler(self.handle_idle_expired)
        self._sessions.set_on_dropped_callback(self.handle_session_dropped)

    @property
    def engine(self) -> PlaybackEngine:
        return self._engine

    @property
    def session_manager(self) -> SessionManager:
        return self._sessions

    @property
    def idle_timer(self) -> IdleTimer:
        return self._idle_timer

    # === Lifecycle ===

    def start(self) -> None:
        """Schedule the first return-to-home once the client is ready."""
        self._idle_timer.arm(self._startup_join_delay_ms, self.handle_idle_expired)

    async def shutdown(self) -> None:
        await self._engine.stop(reason="shutdown", arm_idle=False)
        self._idle_timer.cancel()
        await self._sessions.leave()

    # === Requests ===

    async def play(self, query: str, requesting_channel_id: int | None) -> EnqueueResult:
        """Resolve ``query`` and append the result, joining the caller's channel.

        Raises:
            NotInSameChannelError: The caller is not in a voice channel.
            ChannelConflictError: Playback is running in another channel.
            NoResultsError: A keyword search found nothing.
            PlaylistEmptyError: No playlist strategy produced a track.
            TransientMediaError: A direct lookup failed or timed out.
            ConnectFailedError: The caller's channel could not be joined.
        """
        if requesting_channel_id is None:
            raise NotInSameChannelError(ErrorMessages.CALLER_NOT_IN_VOICE)
        self._check_conflict(requesting_channel_id)

        tracks, kind = await self._resolve(query)

        self._check_conflict(requesting_channel_id)
        self._idle_timer.cancel()
        try:
            await self._sessions.ensure_connected(requesting_channel_id)
            if not self._sessions.is_ready_on(requesting_channel_id):
                raise ConnectFailedError(
                    requesting_channel_id, ErrorMessages.SESSION_NOT_READY_AFTER_CONNECT
                )
        except ConnectivityError:
            self._arm_idle_timer_if_quiet()
            raise
        self._check_conflict(requesting_channel_id)

        position = self._engine.queue_length + 1
        started = await self._engine.enqueue_many(tracks, channel_id=requesting_channel_id)
        return EnqueueResult(
            tracks=tracks,
            kind=kind,
            position=position,
            queue_length=self._engine.queue_length,
            started=started,
        )

    async def skip(self, caller_channel_id: int | None) -> Track:
        self._require_same_channel(caller_channel_id)
        return await self._engine.skip()

    async def pause(self, caller_channel_id: int | None) -> Track:
        self._require_same_channel(caller_channel_id)
        return await self._engine.pause()

    async def resume(self, caller_channel_id: int | None) -> Track:
        self._require_same_channel(caller_channel_id)
        return await self._engine.resume()

    async def stop(self, caller_channel_id: int | None) -> int:
        """Clear the queue and go idle. Returns the number of dropped queued tracks."""
        self._require_same_channel(caller_channel_id)
        if not self._engine.is_busy:
            raise NotPlayingError("stop", ErrorMessages.MUSIC_NOT_PLAYING)
        return await self._engine.stop()

    async def leave(self, caller_channel_id: int | None) -> None:
        """Destroy the session, clear the queue and schedule return-to-home."""
        self._require_same_channel(caller_channel_id)
        await self._engine.stop(reason="leave", arm_idle=False)
        await self._sessions.leave()
        self._idle_timer.arm(self._leave_grace_ms, self.handle_idle_expired)

    def now_playing(self, caller_channel_id: int | None) -> NowPlayingInfo:
        self._require_same_channel(caller_channel_id)
        state = self._engine.state
        return NowPlayingInfo(
            track=state.track, status=state.status, queue_length=self._engine.queue_length
        )

    def queue_snapshot(self, caller_channel_id: int | None) -> QueueInfo:
        self._require_same_channel(caller_channel_id)
        upcoming = self._engine.queue_snapshot()
        current = self._engine.current_track
        return QueueInfo(
            current_track=current,
            upcoming=upcoming,
            total=len(upcoming) + (1 if current else 0),
        )

    # === Policies ===

    async def handle_idle_expired(self) -> None:
        """Leave a live session alone; otherwise head back to the home channel."""
        if self._sessions.is_ready():
            logger.info(LogTemplates.IDLE_STILL_CONNECTED)
            return
        logger.info(LogTemplates.IDLE_NOT_CONNECTED)
        await self._sessions.return_to_home(self._home_channel_id)

    async def handle_session_dropped(self, channel_id: int, reason: str) -> None:
        if self._engine.is_busy:
            await self._engine.stop(reason="session_dropped")
            logger.info(LogTemplates.PLAYBACK_STOPPED_ON_DROP)
        else:
            self._arm_idle_timer_if_quiet()

    # === Internals ===

    async def _resolve(self, query: str) -> tuple[list[Track], PlaylistKind]:
        query = query.strip()
        reference = PlaylistReference.parse(query)
        if reference.is_playlist:
            return await self._playlist_resolver.resolve(reference), reference.kind
        if is_direct_reference(query):
            return [await self._track_resolver.resolve_direct(query)], PlaylistKind.NONE
        return [await self._track_resolver.resolve_by_query(query)], PlaylistKind.NONE

    def _arm_idle_timer_if_quiet(self) -> None:
        if self._engine.is_busy or self._idle_timer.is_armed:
            return
        self._idle_timer.arm(self._engine.idle_timeout_ms, self.handle_idle_expired)

    def _active_channel_id(self) -> int | None:
        return self._sessions.channel_id or self._engine.target_channel_id

    def _check_conflict(self, requesting_channel_id: int) -> None:
        if not self._engine.is_busy:
            return
        active = self._active_channel_id()
        if active is not None and active != requesting_channel_id:
            raise ChannelConflictError(active, ErrorMessages.PLAYING_ELSEWHERE)

    def _require_same_channel(self, caller_channel_id: int | None) -> None:
        if caller_channel_id is None:
            raise NotInSameChannelError(ErrorMessages.CALLER_NOT_IN_VOICE)
        session_channel = self._sessions.channel_id
        if session_channel is None or not self._sessions.is_ready():
            raise NotInSameChannelError(ErrorMessages.BOT_NOT_CONNECTED)
        if session_channel != caller_channel_id:
            raise NotInSameChannelError(ErrorMessages.NOT_SAME_CHANNEL)
