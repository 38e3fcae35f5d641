"""Adapters implementing application ports on top of discord.py."""

from discord_home_player.infrastructure.discord.adapters.voice_adapter import DiscordVoiceAdapter

__all__ = ["DiscordVoiceAdapter"]
