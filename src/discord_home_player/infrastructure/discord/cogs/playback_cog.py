"""Slash-command cog for playback: play, skip, queue, stop, nowplaying, pause, resume, leave."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

import discord
from discord import app_commands
from discord.ext import commands

from discord_home_player.domain.shared.events import (
    PlaybackStopped,
    QueueExhausted,
    TrackStartedPlaying,
    get_event_bus,
)
from discord_home_player.domain.shared.exceptions import DomainError
from discord_home_player.domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates
from discord_home_player.infrastructure.discord.guards.voice_guards import (
    caller_voice_channel_id,
    send_ephemeral,
)
from discord_home_player.utils.reply import format_queue, playlist_kind_label, truncate

if TYPE_CHECKING:
    from ....application.services.orchestrator import PlaybackOrchestrator
    from ....application.services.playback_models import EnqueueResult, NowPlayingInfo
    from ....config.container import Container

logger = logging.getLogger(__name__)

T = TypeVar("T")

COLOR_SUCCESS = discord.Colour(0x00FF00)
COLOR_SKIP = discord.Colour(0xFFFF00)
COLOR_QUEUE = discord.Colour(0x0099FF)
COLOR_STOP = discord.Colour(0xFF0000)


def build_enqueue_embed(result: EnqueueResult) -> discord.Embed:
    first = result.first_track
    if result.is_playlist:
        embed = discord.Embed(
            title=DiscordUIMessages.EMBED_PLAYLIST_ADDED.format(kind=playlist_kind_label(result.kind)),
            description=DiscordUIMessages.EMBED_PLAYLIST_DESCRIPTION.format(count=result.count),
            colour=COLOR_SUCCESS,
        )
        embed.add_field(name=DiscordUIMessages.FIELD_FIRST_SONG, value=truncate(first.title), inline=True)
        embed.add_field(name=DiscordUIMessages.FIELD_TOTAL_SONGS, value=str(result.count), inline=True)
    else:
        embed = discord.Embed(
            title=DiscordUIMessages.EMBED_SONG_ADDED,
            description=f"**{first.title}**",
            colour=COLOR_SUCCESS,
        )
        embed.add_field(name=DiscordUIMessages.FIELD_DURATION, value=first.duration_display, inline=True)
        embed.add_field(name=DiscordUIMessages.FIELD_POSITION, value=str(result.position), inline=True)
    if first.thumbnail_ref:
        embed.set_thumbnail(url=first.thumbnail_ref)
    return embed


def build_now_playing_embed(info: NowPlayingInfo) -> discord.Embed:
    if info.track is None:
        raise ValueError(ErrorMessages.NOTHING_PLAYING)
    status = DiscordUIMessages.STATUS_PAUSED if info.is_paused else DiscordUIMessages.STATUS_PLAYING
    embed = discord.Embed(
        title=DiscordUIMessages.EMBED_NOW_PLAYING,
        description=f"**{info.track.title}**",
        colour=COLOR_SUCCESS,
    )
    embed.add_field(name=DiscordUIMessages.FIELD_DURATION, value=info.track.duration_display, inline=True)
    embed.add_field(name=DiscordUIMessages.FIELD_STATUS, value=status, inline=True)
    embed.add_field(name=DiscordUIMessages.FIELD_SONGS_IN_QUEUE, value=str(info.queue_length), inline=True)
    if info.track.thumbnail_ref:
        embed.set_thumbnail(url=info.track.thumbnail_ref)
    return embed


class PlaybackCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    @property
    def orchestrator(self) -> PlaybackOrchestrator:
        return self.container.orchestrator

    async def cog_load(self) -> None:
        bus = get_event_bus()
        bus.subscribe(TrackStartedPlaying, self._on_track_started)
        bus.subscribe(QueueExhausted, self._on_playback_idle)
        bus.subscribe(PlaybackStopped, self._on_playback_idle)

    async def cog_unload(self) -> None:
        bus = get_event_bus()
        bus.unsubscribe(TrackStartedPlaying, self._on_track_started)
        bus.unsubscribe(QueueExhausted, self._on_playback_idle)
        bus.unsubscribe(PlaybackStopped, self._on_playback_idle)

    # ─────────────────────────────────────────────────────────────────
    # Presence
    # ─────────────────────────────────────────────────────────────────

    async def _on_track_started(self, event: TrackStartedPlaying) -> None:
        await self._set_presence(truncate(event.track_title, 120))

    async def _on_playback_idle(self, event: QueueExhausted | PlaybackStopped) -> None:
        await self._set_presence(DiscordUIMessages.PRESENCE_IDLE)

    async def _set_presence(self, name: str) -> None:
        if not self.bot.is_ready():
            return
        try:
            activity = discord.Activity(type=discord.ActivityType.listening, name=name)
            await self.bot.change_presence(activity=activity)
        except Exception as e:
            logger.warning(LogTemplates.BOT_PRESENCE_FAILED, e)

    # ─────────────────────────────────────────────────────────────────
    # Error rendering
    # ─────────────────────────────────────────────────────────────────

    async def _guarded(
        self,
        interaction: discord.Interaction,
        command: str,
        call: Callable[[], Awaitable[T]],
    ) -> tuple[bool, T | None]:
        """Run an orchestrator call; domain errors are answered verbatim and ephemeral."""
        if interaction.guild is None:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_SERVER_ONLY)
            return False, None
        try:
            return True, await call()
        except DomainError as e:
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_PREFIX.format(message=e.message))
        except Exception as e:
            logger.exception(LogTemplates.BOT_SLASH_COMMAND_ERROR, command, e)
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_OCCURRED)
        return False, None

    # ─────────────────────────────────────────────────────────────────
    # Commands
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="play", description="Play a song from YouTube")
    @app_commands.describe(query="Song name or YouTube URL")
    async def play(self, interaction: discord.Interaction, query: str) -> None:
        channel_id = caller_voice_channel_id(interaction)
        if channel_id is None:
            await send_ephemeral(
                interaction, DiscordUIMessages.ERROR_PREFIX.format(message=ErrorMessages.CALLER_NOT_IN_VOICE)
            )
            return

        await interaction.response.defer()
        ok, result = await self._guarded(
            interaction, "play", lambda: self.orchestrator.play(query, channel_id)
        )
        if ok and result is not None:
            await interaction.followup.send(embed=build_enqueue_embed(result))

    @app_commands.command(name="skip", description="Skip the current song")
    async def skip(self, interaction: discord.Interaction) -> None:
        channel_id = caller_voice_channel_id(interaction)
        # advance can outlast the 3 s interaction ack window
        await interaction.response.defer()
        ok, skipped = await self._guarded(
            interaction, "skip", lambda: self.orchestrator.skip(channel_id)
        )
        if not ok or skipped is None:
            return
        embed = discord.Embed(
            title=DiscordUIMessages.EMBED_SONG_SKIPPED,
            description=DiscordUIMessages.SKIPPED_DESCRIPTION.format(title=skipped.title),
            colour=COLOR_SKIP,
        )
        await interaction.followup.send(embed=embed)

    @app_commands.command(name="queue", description="Show the music queue")
    async def queue(self, interaction: discord.Interaction) -> None:
        channel_id = caller_voice_channel_id(interaction)

        async def snapshot():
            return self.orchestrator.queue_snapshot(channel_id)

        ok, info = await self._guarded(interaction, "queue", snapshot)
        if not ok or info is None:
            return
        if info.is_empty:
            await send_ephemeral(interaction, DiscordUIMessages.QUEUE_EMPTY)
            return
        embed = discord.Embed(
            title=DiscordUIMessages.EMBED_QUEUE,
            description=format_queue(info),
            colour=COLOR_QUEUE,
        )
        await interaction.response.send_message(embed=embed)

    @app_commands.command(name="stop", description="Stop music and clear queue")
    async def stop(self, interaction: discord.Interaction) -> None:
        channel_id = caller_voice_channel_id(interaction)
        ok, _ = await self._guarded(interaction, "stop", lambda: self.orchestrator.stop(channel_id))
        if not ok:
            return
        embed = discord.Embed(
            title=DiscordUIMessages.EMBED_MUSIC_STOPPED,
            description=DiscordUIMessages.STOPPED_DESCRIPTION,
            colour=COLOR_STOP,
        )
        await interaction.response.send_message(embed=embed)

    @app_commands.command(name="nowplaying", description="Show currently playing song")
    async def nowplaying(self, interaction: discord.Interaction) -> None:
        channel_id = caller_voice_channel_id(interaction)

        async def now_playing():
            return self.orchestrator.now_playing(channel_id)

        ok, info = await self._guarded(interaction, "nowplaying", now_playing)
        if not ok or info is None:
            return
        if info.track is None:
            await send_ephemeral(
                interaction, DiscordUIMessages.ERROR_PREFIX.format(message=ErrorMessages.NOTHING_PLAYING)
            )
            return
        await interaction.response.send_message(embed=build_now_playing_embed(info))

    @app_commands.command(name="pause", description="Pause the current song")
    async def pause(self, interaction: discord.Interaction) -> None:
        channel_id = caller_voice_channel_id(interaction)
        ok, _ = await self._guarded(interaction, "pause", lambda: self.orchestrator.pause(channel_id))
        if ok:
            await interaction.response.send_message(DiscordUIMessages.PAUSED)

    @app_commands.command(name="resume", description="Resume the paused song")
    async def resume(self, interaction: discord.Interaction) -> None:
        channel_id = caller_voice_channel_id(interaction)
        ok, _ = await self._guarded(interaction, "resume", lambda: self.orchestrator.resume(channel_id))
        if ok:
            await interaction.response.send_message(DiscordUIMessages.RESUMED)

    @app_commands.command(name="leave", description="Make the bot leave the voice channel")
    async def leave(self, interaction: discord.Interaction) -> None:
        channel_id = caller_voice_channel_id(interaction)
        ok, _ = await self._guarded(interaction, "leave", lambda: self.orchestrator.leave(channel_id))
        if ok:
            await interaction.response.send_message(DiscordUIMessages.LEFT_CHANNEL)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(PlaybackCog(bot, container))
