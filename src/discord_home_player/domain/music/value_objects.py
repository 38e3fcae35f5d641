"""Immutable value objects for the music bounded context."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Final

from pydantic import BaseModel, ConfigDict, model_validator

from discord_home_player.domain.music.entities import Track
from discord_home_player.domain.shared.types import ChannelIdField

UNKNOWN_DURATION: Final[str] = "N/A"


def format_duration(seconds: int | float | None) -> str:
    """Format seconds as ``m:ss`` (or ``h:mm:ss``), ``N/A`` when unknown."""
    if seconds is None or seconds < 0:
        return UNKNOWN_DURATION

    total_seconds = int(seconds)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


class PlaybackStatus(Enum):
    """Playback status with enforced transitions.

    State transitions:
    - IDLE -> PLAYING (advance with a queued track)
    - PLAYING -> PAUSED (pause)
    - PAUSED -> PLAYING (resume)
    - PLAYING/PAUSED -> PLAYING (advance after end, error or skip)
    - Any -> IDLE (stop, or advance on an empty queue)
    """

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"

    def can_transition_to(self, target: PlaybackStatus) -> bool:
        """Check if transition to target status is valid."""
        valid_transitions = {
            PlaybackStatus.IDLE: {PlaybackStatus.PLAYING, PlaybackStatus.IDLE},
            PlaybackStatus.PLAYING: {
                PlaybackStatus.PAUSED,
                PlaybackStatus.PLAYING,
                PlaybackStatus.IDLE,
            },
            PlaybackStatus.PAUSED: {PlaybackStatus.PLAYING, PlaybackStatus.IDLE},
        }
        return target in valid_transitions[self]

    @property
    def is_active(self) -> bool:
        return self in {PlaybackStatus.PLAYING, PlaybackStatus.PAUSED}


class PlaybackState(BaseModel):
    """Tagged playback state: Idle, Playing(track) or Paused(track).

    ``track`` is present iff the status is PLAYING or PAUSED.
    """

    model_config = ConfigDict(frozen=True)

    status: PlaybackStatus = PlaybackStatus.IDLE
    track: Track | None = None

    @model_validator(mode="after")
    def _track_matches_status(self) -> PlaybackState:
        if self.status.is_active and self.track is None:
            raise ValueError(f"{self.status.value} state requires a track")
        if not self.status.is_active and self.track is not None:
            raise ValueError("idle state cannot carry a track")
        return self

    @classmethod
    def idle(cls) -> PlaybackState:
        return cls()

    @classmethod
    def playing(cls, track: Track) -> PlaybackState:
        return cls(status=PlaybackStatus.PLAYING, track=track)

    @classmethod
    def paused(cls, track: Track) -> PlaybackState:
        return cls(status=PlaybackStatus.PAUSED, track=track)

    @property
    def is_idle(self) -> bool:
        return self.status is PlaybackStatus.IDLE

    @property
    def is_playing(self) -> bool:
        return self.status is PlaybackStatus.PLAYING

    @property
    def is_paused(self) -> bool:
        return self.status is PlaybackStatus.PAUSED


class SessionStatus(Enum):
    """Voice-session connectivity, independent of playback."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    READY = "ready"
    DESTROYED = "destroyed"


class SessionState(BaseModel):
    """Tagged session state: Disconnected, Connecting(channel), Ready(channel), Destroyed."""

    model_config = ConfigDict(frozen=True)

    status: SessionStatus = SessionStatus.DISCONNECTED
    channel_id: ChannelIdField | None = None

    @model_validator(mode="after")
    def _channel_matches_status(self) -> SessionState:
        if self.status in {SessionStatus.CONNECTING, SessionStatus.READY} and self.channel_id is None:
            raise ValueError(f"{self.status.value} state requires a target channel")
        return self

    @classmethod
    def disconnected(cls) -> SessionState:
        return cls()

    @classmethod
    def connecting(cls, channel_id: int) -> SessionState:
        return cls(status=SessionStatus.CONNECTING, channel_id=channel_id)

    @classmethod
    def ready(cls, channel_id: int) -> SessionState:
        return cls(status=SessionStatus.READY, channel_id=channel_id)

    @classmethod
    def destroyed(cls) -> SessionState:
        return cls(status=SessionStatus.DESTROYED)

    @property
    def is_ready(self) -> bool:
        return self.status is SessionStatus.READY


class PlaylistKind(Enum):
    """Classification of a playlist reference."""

    REGULAR = "regular"
    MIX = "mix"
    WATCH_LATER = "watch_later"
    LIKES = "likes"
    NONE = "none"

    @property
    def is_playlist(self) -> bool:
        return self is not PlaylistKind.NONE


_LIST_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"[?&]list=([^&]+)")
_ITEM_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"[?&]v=([^&]+)")
_SHORT_ITEM_PATTERN: Final[re.Pattern[str]] = re.compile(r"youtu\.be/([^?&]+)")
_DIRECT_REFERENCE_PATTERN: Final[re.Pattern[str]] = re.compile(r"(?:youtube\.com/|youtu\.be/)")


def is_direct_reference(text: str) -> bool:
    """True when the text points at the media site rather than being a search query."""
    return _DIRECT_REFERENCE_PATTERN.search(text) is not None


def extract_item_id(reference: str) -> str | None:
    match = _ITEM_ID_PATTERN.search(reference) or _SHORT_ITEM_PATTERN.search(reference)
    return match.group(1) if match else None


def extract_playlist_id(reference: str) -> str | None:
    match = _LIST_ID_PATTERN.search(reference)
    return match.group(1) if match else None


def classify_playlist(reference: str) -> PlaylistKind:
    """Classify a reference by its list-id markers."""
    if "list=RD" in reference:
        return PlaylistKind.MIX
    if "list=WL" in reference:
        return PlaylistKind.WATCH_LATER
    if "list=LL" in reference:
        return PlaylistKind.LIKES

    is_regular = "youtube.com/playlist?list=" in reference or (
        "youtube.com/watch?v=" in reference and "&list=PL" in reference
    )
    if is_regular:
        return PlaylistKind.REGULAR

    # Any other list parameter is still a playlist, resolved like a mix
    if "list=" in reference:
        return PlaylistKind.MIX
    return PlaylistKind.NONE


@dataclass(frozen=True)
class PlaylistReference:
    """A parsed playlist reference: kind, list id and optional item id."""

    raw: str
    kind: PlaylistKind
    playlist_id: str | None
    item_id: str | None

    @classmethod
    def parse(cls, reference: str) -> PlaylistReference:
        return cls(
            raw=reference,
            kind=classify_playlist(reference),
            playlist_id=extract_playlist_id(reference),
            item_id=extract_item_id(reference),
        )

    @property
    def is_playlist(self) -> bool:
        return self.kind.is_playlist
