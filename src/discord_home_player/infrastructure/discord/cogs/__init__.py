"""Discord cogs - command handlers and gateway listeners."""

from discord_home_player.infrastructure.discord.cogs.event_cog import EventCog
from discord_home_player.infrastructure.discord.cogs.playback_cog import PlaybackCog

__all__ = ["EventCog", "PlaybackCog"]
