"""Voice-channel helpers for Discord slash commands.

These are free functions that work on the interaction alone; the channel
rules themselves live in the orchestrator.
"""

from __future__ import annotations

import discord


async def send_ephemeral(interaction: discord.Interaction, message: str) -> None:
    """Send an ephemeral message, handling both fresh and already-responded interactions."""
    if interaction.response.is_done():
        await interaction.followup.send(message, ephemeral=True)
    else:
        await interaction.response.send_message(message, ephemeral=True)


def caller_voice_channel_id(interaction: discord.Interaction) -> int | None:
    """Voice channel the invoking member is in, or None."""
    user = interaction.user
    if not isinstance(user, discord.Member):
        return None
    if not user.voice or not user.voice.channel:
        return None
    return user.voice.channel.id
