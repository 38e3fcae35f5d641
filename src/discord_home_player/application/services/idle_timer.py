"""Single-shot, cancellable deadline scheduler."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from ...domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

ExpiryCallback = Callable[[], Awaitable[None]]


class IdleTimer:
    """At most one pending deadline; arming again replaces the previous one."""

    def __init__(self) -> None:
        self._task: asyncio.Task[None] | None = None
        self._deadline: float | None = None
        self._duration_ms: int | None = None

    @property
    def is_armed(self) -> bool:
        return self._task is not None

    @property
    def deadline(self) -> float | None:
        """Event-loop time at which the pending timer fires."""
        return self._deadline

    @property
    def duration_ms(self) -> int | None:
        return self._duration_ms

    def arm(self, duration_ms: int, on_expire: ExpiryCallback) -> None:
        self._discard()

        seconds = max(0, duration_ms) / 1000
        loop = asyncio.get_running_loop()
        self._deadline = loop.time() + seconds
        self._duration_ms = duration_ms
        self._task = loop.create_task(self._run(seconds, on_expire))
        logger.info(LogTemplates.IDLE_TIMER_ARMED, seconds)

    def cancel(self) -> None:
        """Invalidate the pending timer. No-op when nothing is pending."""
        if self._discard():
            logger.info(LogTemplates.IDLE_TIMER_CLEARED)

    def _discard(self) -> bool:
        task, self._task = self._task, None
        self._deadline = None
        self._duration_ms = None
        if task is None:
            return False
        if task is not asyncio.current_task():
            task.cancel()
        return True

    async def _run(self, seconds: float, on_expire: ExpiryCallback) -> None:
        await asyncio.sleep(seconds)

        # Expired: forget the handle before the callback so it may re-arm.
        self._task = None
        self._deadline = None
        self._duration_ms = None
        logger.info(LogTemplates.IDLE_TIMER_EXPIRED)
        try:
            await on_expire()
        except Exception:
            logger.exception(LogTemplates.IDLE_TIMER_CALLBACK_ERROR)
