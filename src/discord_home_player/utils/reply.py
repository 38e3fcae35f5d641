"""Utility functions for formatting Discord messages."""

from __future__ import annotations

from functools import cache
from typing import TYPE_CHECKING

from discord_home_player.domain.music.value_objects import PlaylistKind
from discord_home_player.domain.shared.messages import DiscordUIMessages

if TYPE_CHECKING:
    from discord_home_player.application.services.playback_models import QueueInfo

_KIND_LABELS: dict[PlaylistKind, str] = {
    PlaylistKind.REGULAR: DiscordUIMessages.KIND_REGULAR,
    PlaylistKind.MIX: DiscordUIMessages.KIND_MIX,
    PlaylistKind.WATCH_LATER: DiscordUIMessages.KIND_WATCH_LATER,
    PlaylistKind.LIKES: DiscordUIMessages.KIND_LIKES,
}


@cache
def truncate(text: str, max_length: int = 90) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"


def playlist_kind_label(kind: PlaylistKind) -> str:
    return _KIND_LABELS.get(kind, DiscordUIMessages.KIND_REGULAR)


def format_queue(info: QueueInfo) -> str:
    """Render the now-playing line and the first upcoming titles."""
    lines: list[str] = []
    if info.current_track is not None:
        lines.append(DiscordUIMessages.QUEUE_NOW_PLAYING_LINE.format(title=info.current_track.title))

    shown, hidden = info.preview()
    if shown:
        lines.append(DiscordUIMessages.QUEUE_HEADER)
        lines.extend(
            DiscordUIMessages.QUEUE_LINE.format(index=i, title=truncate(track.title))
            for i, track in enumerate(shown, start=1)
        )
    if hidden:
        lines.append(DiscordUIMessages.QUEUE_MORE.format(count=hidden))
    return "\n".join(lines)
