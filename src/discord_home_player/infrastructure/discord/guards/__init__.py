"""Interaction guard helpers shared by cogs."""

from discord_home_player.infrastructure.discord.guards.voice_guards import (
    caller_voice_channel_id,
    send_ephemeral,
)

__all__ = ["caller_voice_channel_id", "send_ephemeral"]
