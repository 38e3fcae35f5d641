"""Port interface for voice connectivity and audio output."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.music.entities import Track

TrackEndCallback = Callable[[int, "Exception | None"], Awaitable[None]]
ConnectionLostCallback = Callable[[int, str], Awaitable[None]]


class VoiceAdapter(ABC):
    """Interface for the single voice connection and its audio sink."""

    @abstractmethod
    async def connect(self, channel_id: int, *, timeout: float) -> bool:
        """Open a connection to ``channel_id`` and wait until it is ready."""
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Tear down the current connection, if any."""
        ...

    @abstractmethod
    def is_connected(self) -> bool:
        ...

    @abstractmethod
    def get_current_channel_id(self) -> int | None:
        """Get the connected voice channel ID, or None if not connected."""
        ...

    @abstractmethod
    async def play(self, track: Track, stream_url: str, *, token: int) -> bool:
        """Start streaming ``stream_url``; the end callback receives ``token``."""
        ...

    @abstractmethod
    async def stop(self) -> None:
        ...

    @abstractmethod
    async def pause(self) -> bool:
        ...

    @abstractmethod
    async def resume(self) -> bool:
        ...

    @abstractmethod
    def set_on_track_end_callback(self, callback: TrackEndCallback) -> None:
        """Set callback for when a stream ends, naturally or with an error."""
        ...

    @abstractmethod
    def set_on_connection_lost_callback(self, callback: ConnectionLostCallback) -> None:
        """Set callback for connections dropped outside our control."""
        ...
