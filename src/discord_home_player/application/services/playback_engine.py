"""Playback Engine - the audio-player state machine over the track queue."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import TYPE_CHECKING

from ...domain.music.entities import Track, TrackQueue
from ...domain.music.value_objects import PlaybackState
from ...domain.shared.events import (
    PlaybackStopped,
    QueueExhausted,
    TrackFailed,
    TrackStartedPlaying,
    get_event_bus,
)
from ...domain.shared.exceptions import (
    ConnectivityError,
    InvalidStateError,
    NotPlayingError,
    TransientMediaError,
)
from ...domain.shared.messages import ErrorMessages, LogTemplates
from .lookup import bounded_lookup

if TYPE_CHECKING:
    from ..interfaces.media_catalog import MediaCatalog
    from ..interfaces.voice_adapter import VoiceAdapter
    from .idle_timer import IdleTimer
    from .session_manager import SessionManager

logger = logging.getLogger(__name__)


class PlaybackEngine:
    """Consumes the queue and drives the voice adapter.

    ``Idle -> Playing -> Paused -> Playing -> (advance) -> Playing | Idle``,
    with ``stop`` reachable from every state.

    Every stream start gets a fresh token. The voice adapter hands the token
    back with its end-of-track callback, so ends caused by skip/stop (or by a
    stream that was already replaced) are recognised as stale and dropped.
    """

    def __init__(
        self,
        *,
        voice_adapter: VoiceAdapter,
        catalog: MediaCatalog,
        session_manager: SessionManager,
        idle_timer: IdleTimer,
        idle_timeout_ms: int = 120_000,
        retry_delay_ms: int = 250,
        stream_timeout_s: float = 10.0,
    ) -> None:
        self._voice = voice_adapter
        self._catalog = catalog
        self._sessions = session_manager
        self._idle_timer = idle_timer
        self._idle_timeout_ms = idle_timeout_ms
        self._retry_delay = retry_delay_ms / 1000
        self._stream_timeout = stream_timeout_s

        self._queue = TrackQueue()
        self._state = PlaybackState.idle()
        self._target_channel_id: int | None = None
        self._token = 0
        self._advancing = False
        self._advance_pending = False
        self._on_idle_expired: Callable[[], Awaitable[None]] | None = None

        self._voice.set_on_track_end_callback(self.handle_track_end)

    # === Read-only views ===

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def current_track(self) -> Track | None:
        return self._state.track

    @property
    def queue_length(self) -> int:
        return len(self._queue)

    @property
    def idle_timeout_ms(self) -> int:
        return self._idle_timeout_ms

    @property
    def target_channel_id(self) -> int | None:
        return self._target_channel_id

    @property
    def is_busy(self) -> bool:
        """True while a track is current or a start attempt is in flight."""
        return not self._state.is_idle or self._advancing

    def queue_snapshot(self) -> list[Track]:
        return self._queue.snapshot()

    def set_idle_expiry_handler(self, handler: Callable[[], Awaitable[None]]) -> None:
        self._on_idle_expired = handler

    # === Operations ===

    async def enqueue(self, track: Track, *, channel_id: int | None = None) -> bool:
        return await self.enqueue_many([track], channel_id=channel_id)

    async def enqueue_many(self, tracks: Iterable[Track], *, channel_id: int | None = None) -> bool:
        """Append tracks; start playback when idle. Returns whether it started."""
        should_start = not self.is_busy
        if channel_id is not None and should_start:
            self._target_channel_id = channel_id

        added = self._queue.extend(tracks)
        logger.info(LogTemplates.QUEUE_ENQUEUED, added, len(self._queue))

        if should_start and added:
            await self.advance()
            return True
        return False

    async def advance(self) -> None:
        """Move to the next queued track, draining failures, or go idle."""
        if self._advancing:
            self._advance_pending = True
            return

        self._advancing = True
        try:
            while True:
                self._advance_pending = False
                await self._advance_loop()
                if not self._advance_pending:
                    break
        finally:
            self._advancing = False

    async def skip(self) -> Track:
        """Stop the current track and advance.

        Raises:
            NotPlayingError: Nothing is playing or paused.
        """
        skipped = self._state.track
        if skipped is None:
            raise NotPlayingError("skip", ErrorMessages.NOTHING_PLAYING)

        logger.info(LogTemplates.TRACK_SKIPPING)
        self._token += 1
        await self._stop_output()
        logger.info(LogTemplates.TRACK_SKIPPED, skipped.title)
        await self.advance()
        return skipped

    async def pause(self) -> Track:
        track = self._state.track
        if self._state.is_paused:
            raise InvalidStateError("pause", self._state.status.value, ErrorMessages.ALREADY_PAUSED)
        if track is None:
            raise InvalidStateError("pause", self._state.status.value, ErrorMessages.MUSIC_NOT_PLAYING)

        if not await self._voice.pause():
            raise InvalidStateError("pause", self._state.status.value, ErrorMessages.MUSIC_NOT_PLAYING)
        self.transition_to(PlaybackState.paused(track))
        logger.info(LogTemplates.PLAYBACK_PAUSED)
        return track

    async def resume(self) -> Track:
        track = self._state.track
        if not self._state.is_paused or track is None:
            raise InvalidStateError("resume", self._state.status.value, ErrorMessages.NOT_PAUSED)

        if not await self._voice.resume():
            raise InvalidStateError("resume", self._state.status.value, ErrorMessages.NOT_PAUSED)
        self.transition_to(PlaybackState.playing(track))
        logger.info(LogTemplates.PLAYBACK_RESUMED)
        return track

    async def stop(self, *, reason: str = "requested", arm_idle: bool = True) -> int:
        """Clear the queue and current track, go idle. Legal from any state."""
        self._token += 1
        self._advance_pending = False
        cleared = self._queue.clear()

        await self._stop_output()
        self.transition_to(PlaybackState.idle())
        if arm_idle:
            self._arm_idle_timer()

        logger.info(LogTemplates.PLAYBACK_STOPPED, cleared)
        await get_event_bus().publish(PlaybackStopped(cleared_count=cleared, reason=reason))
        return cleared

    async def handle_track_end(self, token: int, error: Exception | None) -> None:
        """End-of-stream notification from the voice adapter."""
        if token != self._token:
            logger.debug(LogTemplates.TRACK_STALE_END, token)
            return

        track = self._state.track
        title = track.title if track else ""
        if error is not None:
            logger.warning(LogTemplates.TRACK_STREAM_ERROR, title, error)
            logger.info(LogTemplates.TRACK_SKIPPING)
            await get_event_bus().publish(TrackFailed(track_title=title, reason=str(error)))
        else:
            logger.info(LogTemplates.TRACK_FINISHED, title)

        await self.advance()

    def transition_to(self, new_state: PlaybackState) -> None:
        """Replace the playback state, enforcing the allowed status transitions."""
        current = self._state.status
        if not current.can_transition_to(new_state.status):
            raise InvalidStateError(
                f"transition to {new_state.status.value}",
                current.value,
                ErrorMessages.INVALID_TRANSITION.format(
                    current=current.value, target=new_state.status.value
                ),
            )
        self._state = new_state

    # === Internals ===

    async def _advance_loop(self) -> None:
        last_title = self._state.track.title if self._state.track else ""
        while True:
            self._token += 1
            token = self._token

            track = self._queue.dequeue()
            if track is None:
                self.transition_to(PlaybackState.idle())
                logger.info(LogTemplates.QUEUE_EMPTY)
                self._arm_idle_timer()
                await get_event_bus().publish(QueueExhausted(last_track_title=last_title))
                return

            self.transition_to(PlaybackState.playing(track))
            logger.info(LogTemplates.TRACK_ATTEMPT, track.title)
            if await self._start(track, token):
                return

            # Stream could not start: drop it and try the next one
            last_title = track.title
            self.transition_to(PlaybackState.idle())
            if self._retry_delay:
                await asyncio.sleep(self._retry_delay)
            if token != self._token:
                return

    async def _start(self, track: Track, token: int) -> bool:
        """Try to start ``track``. False means it failed and the loop moves on."""
        target = self._target_channel_id or self._sessions.channel_id
        if target is None:
            logger.warning(LogTemplates.PLAYBACK_NO_TARGET)
            await self.stop(reason="no_target")
            return True

        try:
            await self._sessions.ensure_connected(target)
        except ConnectivityError as e:
            if token == self._token:
                logger.error(LogTemplates.PLAYBACK_CONNECT_LOST, target, e.message)
                await self.stop(reason="connect_failed")
            return True
        if token != self._token:
            return True

        try:
            stream_url = await bounded_lookup(
                self._catalog.resolve_stream(track.source_ref),
                timeout=self._stream_timeout,
                reference=track.source_ref,
            )
            if token != self._token:
                return True
            started = await self._voice.play(track, stream_url, token=token)
        except TransientMediaError as e:
            return await self._start_failed(track, token, e.message)
        except Exception as e:
            logger.exception(LogTemplates.VOICE_PLAYBACK_ERROR, e)
            return await self._start_failed(track, token, repr(e))

        if token != self._token:
            return True
        if not started:
            return await self._start_failed(track, token, "voice adapter refused to play")

        self._idle_timer.cancel()
        logger.info(LogTemplates.TRACK_NOW_PLAYING, track.title)
        await get_event_bus().publish(
            TrackStartedPlaying(
                track_title=track.title, source_ref=track.source_ref, channel_id=target
            )
        )
        return True

    async def _start_failed(self, track: Track, token: int, reason: str) -> bool:
        if token != self._token:
            return True
        logger.warning(LogTemplates.TRACK_STREAM_ERROR, track.title, reason)
        logger.info(LogTemplates.TRACK_SKIPPING)
        await get_event_bus().publish(TrackFailed(track_title=track.title, reason=reason))
        return False

    async def _stop_output(self) -> None:
        if not self._voice.is_connected():
            return
        try:
            await self._voice.stop()
        except Exception as e:
            logger.exception(LogTemplates.VOICE_PLAYBACK_ERROR, e)

    def _arm_idle_timer(self) -> None:
        self._idle_timer.arm(self._idle_timeout_ms, self._on_idle_expired or _noop)


async def _noop() -> None:
    return None
