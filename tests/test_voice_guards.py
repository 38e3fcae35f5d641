"""Tests for the slash-command voice helpers."""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from discord_home_player.infrastructure.discord.guards.voice_guards import (
    caller_voice_channel_id,
    send_ephemeral,
)

from conftest import CHANNEL_A


@pytest.fixture
def interaction():
    inter = MagicMock(spec=discord.Interaction)
    inter.response = MagicMock()
    inter.response.is_done.return_value = False
    inter.response.send_message = AsyncMock()
    inter.followup = MagicMock()
    inter.followup.send = AsyncMock()
    return inter


class TestSendEphemeral:
    async def test_fresh_interaction_uses_response(self, interaction):
        await send_ephemeral(interaction, "hello")

        interaction.response.send_message.assert_awaited_once_with("hello", ephemeral=True)
        interaction.followup.send.assert_not_awaited()

    async def test_deferred_interaction_uses_followup(self, interaction):
        interaction.response.is_done.return_value = True

        await send_ephemeral(interaction, "hello")

        interaction.followup.send.assert_awaited_once_with("hello", ephemeral=True)
        interaction.response.send_message.assert_not_awaited()


class TestCallerVoiceChannelId:
    def test_member_in_voice(self, interaction):
        member = MagicMock(spec=discord.Member)
        member.voice = MagicMock()
        member.voice.channel = MagicMock()
        member.voice.channel.id = CHANNEL_A
        interaction.user = member

        assert caller_voice_channel_id(interaction) == CHANNEL_A

    def test_member_not_in_voice(self, interaction):
        member = MagicMock(spec=discord.Member)
        member.voice = None
        interaction.user = member

        assert caller_voice_channel_id(interaction) is None

    def test_non_member_user(self, interaction):
        interaction.user = MagicMock(spec=discord.User)

        assert caller_voice_channel_id(interaction) is None
