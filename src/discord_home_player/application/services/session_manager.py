"""Voice-session lifecycle: connect, switch, destroy and return-to-home."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from ...domain.music.value_objects import SessionState, SessionStatus
from ...domain.shared.events import SessionDropped, SessionReady, get_event_bus
from ...domain.shared.exceptions import ConnectFailedError, ConnectivityError
from ...domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ..interfaces.voice_adapter import VoiceAdapter

logger = logging.getLogger(__name__)

SessionDroppedCallback = Callable[[int, str], Awaitable[None]]


class SessionManager:
    """Owns the single voice session and its ``SessionState``.

    Only drops of the Ready channel are reported to the dropped callback.
    Disconnects this manager initiates itself (leave, channel switch) move
    the state away from Ready first, so the transport's echo is ignored.
    """

    def __init__(self, *, voice_adapter: VoiceAdapter, connect_timeout_s: float = 10.0) -> None:
        self._voice = voice_adapter
        self._timeout = connect_timeout_s
        self._state = SessionState.disconnected()
        self._connect_generation = 0
        self._pending_connect: asyncio.Task[None] | None = None
        self._pending_channel_id: int | None = None
        self._on_dropped: SessionDroppedCallback | None = None

        self._voice.set_on_connection_lost_callback(self.handle_connection_lost)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def channel_id(self) -> int | None:
        return self._state.channel_id

    def is_ready(self) -> bool:
        return self._state.is_ready

    def is_ready_on(self, channel_id: int) -> bool:
        return self._state.is_ready and self._state.channel_id == channel_id

    def set_on_dropped_callback(self, callback: SessionDroppedCallback) -> None:
        self._on_dropped = callback

    async def ensure_connected(self, channel_id: int) -> None:
        """Make sure a Ready session exists on ``channel_id``.

        A request for the channel an in-flight attempt is already joining
        waits for that attempt instead of starting its own. A request for
        another channel waits for the in-flight attempt to settle, then
        tears the session down and switches.

        Raises:
            ConnectFailedError: Ready was not reached within the bounded wait,
                or the session was destroyed meanwhile.
        """
        while True:
            if self.is_ready_on(channel_id) and self._voice.get_current_channel_id() == channel_id:
                logger.debug(LogTemplates.SESSION_ALREADY_READY, channel_id)
                return

            pending = self._pending_connect
            if pending is None or pending.done():
                break

            logger.info(LogTemplates.SESSION_AWAITING_PENDING, self._pending_channel_id, channel_id)
            if self._pending_channel_id == channel_id:
                await asyncio.shield(pending)
                if not self.is_ready_on(channel_id):
                    raise ConnectFailedError(channel_id, ErrorMessages.SESSION_NOT_READY_AFTER_CONNECT)
                return

            with contextlib.suppress(ConnectivityError):
                await asyncio.shield(pending)

        self._connect_generation += 1
        self._state = SessionState.connecting(channel_id)
        self._pending_channel_id = channel_id
        self._pending_connect = asyncio.create_task(
            self._connect(channel_id, self._connect_generation)
        )
        await asyncio.shield(self._pending_connect)

    async def _connect(self, channel_id: int, generation: int) -> None:
        await self._teardown()
        logger.info(LogTemplates.SESSION_CONNECTING, channel_id)

        reason = "not ready in time"
        try:
            connected = await self._voice.connect(channel_id, timeout=self._timeout)
        except Exception as e:
            connected = False
            reason = repr(e)

        if generation != self._connect_generation:
            if self.is_ready_on(channel_id):
                return
            logger.info(LogTemplates.SESSION_CONNECT_ABANDONED, channel_id, self._state.status.value)
            if self._state.status is SessionStatus.DESTROYED:
                await self._teardown()
            raise ConnectFailedError(channel_id, ErrorMessages.SESSION_NOT_READY_AFTER_CONNECT)

        if not connected:
            logger.error(LogTemplates.SESSION_CONNECT_FAILED, channel_id, reason)
            await self._teardown()
            self._state = SessionState.disconnected()
            raise ConnectFailedError(channel_id, ErrorMessages.CONNECT_FAILED)

        self._state = SessionState.ready(channel_id)
        logger.info(LogTemplates.SESSION_READY, channel_id)
        await get_event_bus().publish(SessionReady(channel_id=channel_id))

    async def return_to_home(self, home_channel_id: int | None) -> bool:
        """Best-effort connect to the home channel. Failures are only logged."""
        if home_channel_id is None:
            logger.info(LogTemplates.HOME_NOT_CONFIGURED)
            return False

        logger.info(LogTemplates.HOME_RETURNING, home_channel_id)
        try:
            await self.ensure_connected(home_channel_id)
        except ConnectivityError as e:
            logger.warning(LogTemplates.HOME_RETURN_FAILED, home_channel_id, e.message)
            return False
        return True

    async def leave(self) -> None:
        """Destroy the session unconditionally."""
        channel_id = self._state.channel_id
        self._connect_generation += 1
        self._state = SessionState.destroyed()
        await self._teardown()
        logger.info(LogTemplates.SESSION_DESTROYED, channel_id)

    async def handle_connection_lost(self, channel_id: int, reason: str) -> None:
        """Transport-observed drop of ``channel_id``."""
        if not self.is_ready_on(channel_id):
            logger.debug(LogTemplates.SESSION_DROP_IGNORED, channel_id)
            return

        self._state = SessionState.disconnected()
        logger.warning(LogTemplates.SESSION_DROPPED, channel_id, reason)
        await get_event_bus().publish(SessionDropped(channel_id=channel_id, reason=reason))

        if self._on_dropped is not None:
            await self._on_dropped(channel_id, reason)

    async def _teardown(self) -> None:
        if not self._voice.is_connected():
            return
        previous = self._voice.get_current_channel_id()
        try:
            await self._voice.disconnect()
        except Exception:
            logger.exception(LogTemplates.SESSION_TEARDOWN_FAILED, previous)

    @property
    def status(self) -> SessionStatus:
        return self._state.status
