"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


# === User input errors: surfaced verbatim to the requester ===


class UserInputError(DomainError):
    """Raised when a request cannot be honored as issued."""


class NoResultsError(UserInputError):
    """Raised when a keyword search yields nothing."""

    def __init__(self, query: str, message: str | None = None) -> None:
        super().__init__(message or f"No results found for '{query}'", code="NO_RESULTS")
        self.query = query


class PlaylistEmptyError(UserInputError):
    """Raised when every playlist strategy yields zero tracks."""

    def __init__(self, reference: str, message: str | None = None) -> None:
        super().__init__(
            message or "Failed to load playlist or playlist is empty", code="PLAYLIST_EMPTY"
        )
        self.reference = reference


class NotInSameChannelError(UserInputError):
    """Raised when the caller does not share the session's voice channel."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="NOT_IN_SAME_CHANNEL")


class NotPlayingError(UserInputError):
    """Raised when an operation needs a current track and there is none."""

    def __init__(self, operation: str, message: str | None = None) -> None:
        super().__init__(message or "No song is currently playing", code="NOT_PLAYING")
        self.operation = operation


class InvalidStateError(UserInputError):
    """Raised when an operation is invalid in the current playback state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_STATE")
        self.operation = operation
        self.current_state = current_state


class ChannelConflictError(UserInputError):
    """Raised when playback is already running in a different channel."""

    def __init__(self, active_channel_id: int | None, message: str | None = None) -> None:
        super().__init__(
            message or "Already playing music in another voice channel",
            code="CHANNEL_CONFLICT",
        )
        self.active_channel_id = active_channel_id


# === Media errors: recovered locally ===


class TransientMediaError(DomainError):
    """Raised when a lookup or stream fails for reasons outside our control."""

    def __init__(self, message: str, reference: str | None = None) -> None:
        super().__init__(message, code="TRANSIENT_MEDIA")
        self.reference = reference


# === Connectivity errors ===


class ConnectivityError(DomainError):
    """Raised when the voice session cannot be used."""


class ConnectFailedError(ConnectivityError):
    """Raised when a session does not reach Ready within the bounded wait."""

    def __init__(self, channel_id: int, message: str | None = None) -> None:
        super().__init__(
            message or f"Failed to join voice channel {channel_id}", code="CONNECT_FAILED"
        )
        self.channel_id = channel_id


# === Startup ===


class FatalStartupError(DomainError):
    """Raised when the process cannot start serving requests."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="FATAL_STARTUP")
