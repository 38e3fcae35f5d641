"""
Unit Tests for PlaybackCog

Slash commands render orchestrator results as embeds or plain replies;
domain errors are answered ephemerally and verbatim; unexpected errors get
a generic reply. Presence follows playback events.
"""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
from discord.ext import commands

from discord_home_player.application.services.playback_models import (
    EnqueueResult,
    NowPlayingInfo,
    QueueInfo,
)
from discord_home_player.domain.music.value_objects import PlaybackStatus, PlaylistKind
from discord_home_player.domain.shared.events import (
    QueueExhausted,
    TrackStartedPlaying,
    get_event_bus,
)
from discord_home_player.domain.shared.exceptions import NoResultsError, NotPlayingError
from discord_home_player.domain.shared.messages import DiscordUIMessages, ErrorMessages
from discord_home_player.infrastructure.discord.cogs.playback_cog import (
    PlaybackCog,
    build_enqueue_embed,
    build_now_playing_embed,
    setup,
)

from conftest import CHANNEL_A, make_track

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def mock_bot():
    bot = MagicMock(spec=commands.Bot)
    bot.is_ready.return_value = True
    bot.change_presence = AsyncMock()
    bot.add_cog = AsyncMock()
    return bot


@pytest.fixture
def orchestrator():
    orch = MagicMock()
    for name in ("play", "skip", "pause", "resume", "stop", "leave"):
        setattr(orch, name, AsyncMock())
    return orch


@pytest.fixture
def mock_container(orchestrator):
    container = MagicMock()
    container.orchestrator = orchestrator
    return container


@pytest.fixture
def cog(mock_bot, mock_container):
    return PlaybackCog(mock_bot, mock_container)


@pytest.fixture
def mock_interaction():
    """Create a mock Discord Interaction from a member in CHANNEL_A."""
    interaction = MagicMock(spec=discord.Interaction)
    interaction.response = MagicMock()
    interaction.response.is_done.return_value = False
    interaction.response.send_message = AsyncMock()
    interaction.response.defer = AsyncMock()
    interaction.followup = MagicMock()
    interaction.followup.send = AsyncMock()
    interaction.guild = MagicMock()

    member = MagicMock(spec=discord.Member)
    member.voice = MagicMock()
    member.voice.channel = MagicMock()
    member.voice.channel.id = CHANNEL_A
    interaction.user = member
    return interaction


def sent_text(interaction) -> str:
    return interaction.response.send_message.await_args.args[0]


def sent_embed(interaction) -> discord.Embed:
    return interaction.response.send_message.await_args.kwargs["embed"]


# =============================================================================
# Embed builders
# =============================================================================


class TestEmbeds:
    def test_single_song_embed(self):
        track = make_track("a", duration_display="3:33", thumbnail_ref="https://t/a.jpg")
        embed = build_enqueue_embed(EnqueueResult(tracks=[track], position=2))

        assert embed.title == DiscordUIMessages.EMBED_SONG_ADDED
        assert embed.description == "**Song a**"
        assert [f.value for f in embed.fields] == ["3:33", "2"]
        assert embed.thumbnail.url == "https://t/a.jpg"

    def test_playlist_embed_names_kind(self):
        result = EnqueueResult(tracks=[make_track("a"), make_track("b")], kind=PlaylistKind.MIX)
        embed = build_enqueue_embed(result)

        assert embed.title == "🎵 Mix Added to Queue"
        assert "2 songs" in embed.description
        assert embed.fields[0].value == "Song a"

    def test_now_playing_embed_shows_paused(self):
        info = NowPlayingInfo(track=make_track("a"), status=PlaybackStatus.PAUSED, queue_length=4)
        embed = build_now_playing_embed(info)

        assert embed.fields[1].value == DiscordUIMessages.STATUS_PAUSED
        assert embed.fields[2].value == "4"

    def test_now_playing_embed_requires_track(self):
        info = NowPlayingInfo(track=None, status=PlaybackStatus.IDLE, queue_length=0)

        with pytest.raises(ValueError):
            build_now_playing_embed(info)


# =============================================================================
# Commands
# =============================================================================


class TestPlayCommand:
    """Tests for /play."""

    async def test_caller_not_in_voice(self, cog, mock_interaction, orchestrator):
        mock_interaction.user.voice = None

        await cog.play.callback(cog, mock_interaction, "song")

        assert ErrorMessages.CALLER_NOT_IN_VOICE in sent_text(mock_interaction)
        orchestrator.play.assert_not_awaited()

    async def test_success_sends_embed(self, cog, mock_interaction, orchestrator):
        orchestrator.play.return_value = EnqueueResult(tracks=[make_track("a")], position=1)

        await cog.play.callback(cog, mock_interaction, "song")

        mock_interaction.response.defer.assert_awaited_once()
        orchestrator.play.assert_awaited_once_with("song", CHANNEL_A)
        embed = mock_interaction.followup.send.await_args.kwargs["embed"]
        assert embed.title == DiscordUIMessages.EMBED_SONG_ADDED

    async def test_domain_error_is_ephemeral(self, cog, mock_interaction, orchestrator):
        orchestrator.play.side_effect = NoResultsError("song", ErrorMessages.NO_SEARCH_RESULTS)
        mock_interaction.response.is_done.return_value = True

        await cog.play.callback(cog, mock_interaction, "song")

        args, kwargs = mock_interaction.followup.send.await_args
        assert args[0] == f"❌ {ErrorMessages.NO_SEARCH_RESULTS}"
        assert kwargs["ephemeral"] is True

    async def test_unexpected_error_generic_reply(self, cog, mock_interaction, orchestrator):
        orchestrator.play.side_effect = RuntimeError("kaboom")

        await cog.play.callback(cog, mock_interaction, "song")

        assert sent_text(mock_interaction) == DiscordUIMessages.ERROR_OCCURRED


class TestControlCommands:
    async def test_server_only(self, cog, mock_interaction, orchestrator):
        mock_interaction.guild = None

        await cog.pause.callback(cog, mock_interaction)

        assert sent_text(mock_interaction) == DiscordUIMessages.STATE_SERVER_ONLY
        orchestrator.pause.assert_not_awaited()

    async def test_skip_defers_before_advancing(self, cog, mock_interaction, orchestrator):
        """The reply goes through the followup because the advance can be slow."""

        async def slow_skip(channel_id):
            mock_interaction.response.defer.assert_awaited_once()
            return make_track("a")

        orchestrator.skip.side_effect = slow_skip

        await cog.skip.callback(cog, mock_interaction)

        embed = mock_interaction.followup.send.await_args.kwargs["embed"]
        assert "Song a" in embed.description
        mock_interaction.response.send_message.assert_not_awaited()

    async def test_skip_nothing_playing(self, cog, mock_interaction, orchestrator):
        orchestrator.skip.side_effect = NotPlayingError("skip", ErrorMessages.NOTHING_PLAYING)
        mock_interaction.response.is_done.return_value = True

        await cog.skip.callback(cog, mock_interaction)

        args, kwargs = mock_interaction.followup.send.await_args
        assert ErrorMessages.NOTHING_PLAYING in args[0]
        assert kwargs["ephemeral"] is True

    async def test_stop(self, cog, mock_interaction, orchestrator):
        await cog.stop.callback(cog, mock_interaction)

        orchestrator.stop.assert_awaited_once_with(CHANNEL_A)
        assert sent_embed(mock_interaction).title == DiscordUIMessages.EMBED_MUSIC_STOPPED

    @pytest.mark.parametrize(
        ("command", "reply"),
        [
            ("pause", DiscordUIMessages.PAUSED),
            ("resume", DiscordUIMessages.RESUMED),
            ("leave", DiscordUIMessages.LEFT_CHANNEL),
        ],
    )
    async def test_plain_replies(self, cog, mock_interaction, orchestrator, command, reply):
        await getattr(cog, command).callback(cog, mock_interaction)

        getattr(orchestrator, command).assert_awaited_once_with(CHANNEL_A)
        assert sent_text(mock_interaction) == reply


class TestQueryCommands:
    async def test_queue_empty(self, cog, mock_interaction, orchestrator):
        orchestrator.queue_snapshot.return_value = QueueInfo(
            current_track=None, upcoming=[], total=0
        )

        await cog.queue.callback(cog, mock_interaction)

        assert sent_text(mock_interaction) == DiscordUIMessages.QUEUE_EMPTY

    async def test_queue_listing(self, cog, mock_interaction, orchestrator):
        orchestrator.queue_snapshot.return_value = QueueInfo(
            current_track=make_track("now"), upcoming=[make_track("next")], total=2
        )

        await cog.queue.callback(cog, mock_interaction)

        description = sent_embed(mock_interaction).description
        assert "Song now" in description
        assert "1. Song next" in description

    async def test_nowplaying_idle(self, cog, mock_interaction, orchestrator):
        orchestrator.now_playing.return_value = NowPlayingInfo(
            track=None, status=PlaybackStatus.IDLE, queue_length=0
        )

        await cog.nowplaying.callback(cog, mock_interaction)

        assert ErrorMessages.NOTHING_PLAYING in sent_text(mock_interaction)

    async def test_nowplaying(self, cog, mock_interaction, orchestrator):
        orchestrator.now_playing.return_value = NowPlayingInfo(
            track=make_track("a"), status=PlaybackStatus.PLAYING, queue_length=0
        )

        await cog.nowplaying.callback(cog, mock_interaction)

        assert sent_embed(mock_interaction).title == DiscordUIMessages.EMBED_NOW_PLAYING


class TestPresence:
    """Presence follows playback events while the cog is loaded."""

    async def test_track_start_updates_presence(self, cog, mock_bot):
        await cog.cog_load()

        await get_event_bus().publish(TrackStartedPlaying(track_title="Song a"))

        activity = mock_bot.change_presence.await_args.kwargs["activity"]
        assert activity.name == "Song a"

    async def test_idle_resets_presence(self, cog, mock_bot):
        await cog.cog_load()

        await get_event_bus().publish(QueueExhausted())

        activity = mock_bot.change_presence.await_args.kwargs["activity"]
        assert activity.name == DiscordUIMessages.PRESENCE_IDLE

    async def test_unload_unsubscribes(self, cog, mock_bot):
        await cog.cog_load()
        await cog.cog_unload()

        await get_event_bus().publish(QueueExhausted())

        mock_bot.change_presence.assert_not_awaited()

    async def test_not_ready_skips_presence(self, cog, mock_bot):
        mock_bot.is_ready.return_value = False
        await cog.cog_load()

        await get_event_bus().publish(QueueExhausted())

        mock_bot.change_presence.assert_not_awaited()


class TestSetup:
    async def test_setup_adds_cog(self, mock_bot, mock_container):
        mock_bot.container = mock_container

        await setup(mock_bot)

        mock_bot.add_cog.assert_awaited_once()

    async def test_setup_requires_container(self):
        bot = MagicMock(spec=["add_cog"])

        with pytest.raises(RuntimeError):
            await setup(bot)
