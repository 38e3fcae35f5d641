"""Discord voice adapter implementing VoiceAdapter for connection and playback."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import discord

from discord_home_player.application.interfaces.voice_adapter import (
    ConnectionLostCallback,
    TrackEndCallback,
    VoiceAdapter,
)
from discord_home_player.config.settings import MediaSettings
from discord_home_player.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ....domain.music.entities import Track

logger = logging.getLogger(__name__)


class DiscordVoiceAdapter(VoiceAdapter):
    """Single voice connection on top of discord.py.

    FFmpeg's ``after`` hook runs on the audio thread; it is bridged into the
    bot's event loop with ``run_coroutine_threadsafe``.
    """

    def __init__(self, bot: discord.Client, settings: MediaSettings | None = None) -> None:
        self._bot = bot
        self._settings = settings or MediaSettings()
        self._volume = self._settings.default_volume
        self._voice_client: discord.VoiceClient | None = None
        self._on_track_end: TrackEndCallback | None = None
        self._on_connection_lost: ConnectionLostCallback | None = None

    def _get_voice_client(self) -> discord.VoiceClient | None:
        vc = self._voice_client
        if vc is None or not vc.is_connected():
            return None
        return vc

    def _get_voice_channel(
        self, channel_id: int
    ) -> discord.VoiceChannel | discord.StageChannel | None:
        channel = self._bot.get_channel(channel_id)
        if isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            return channel
        return None

    async def connect(self, channel_id: int, *, timeout: float) -> bool:
        channel = self._get_voice_channel(channel_id)
        if channel is None:
            logger.warning(LogTemplates.VOICE_CHANNEL_NOT_FOUND, channel_id)
            return False

        try:
            async with asyncio.timeout(timeout):
                vc = await channel.connect(self_deaf=True, timeout=timeout, reconnect=False)
        except TimeoutError:
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, channel_id)
            await self._force_disconnect(channel.guild)
            return False
        except discord.Forbidden:
            logger.error(LogTemplates.VOICE_NO_PERMISSION, channel_id)
            return False
        except discord.ClientException as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            await self._force_disconnect(channel.guild)
            return False

        if not isinstance(vc, discord.VoiceClient):
            return False
        self._voice_client = vc
        await self._ensure_self_deaf(channel)
        logger.info(LogTemplates.VOICE_CONNECTED, channel.name, channel.guild.name)
        return True

    async def _ensure_self_deaf(self, channel: discord.VoiceChannel | discord.StageChannel) -> None:
        try:
            await channel.guild.change_voice_state(channel=channel, self_deaf=True)
        except Exception as exc:
            logger.debug(LogTemplates.VOICE_SELF_DEAFEN_FAILED, channel.id, exc)

    async def _force_disconnect(self, guild: discord.Guild) -> None:
        """Drop a half-open connection left behind by a failed connect."""
        vc = guild.voice_client
        if vc is not None:
            try:
                await vc.disconnect(force=True)
            except Exception:
                logger.debug(LogTemplates.SESSION_TEARDOWN_FAILED, guild.id)
        self._voice_client = None

    async def disconnect(self) -> None:
        vc, self._voice_client = self._voice_client, None
        if vc is None:
            return
        channel_id = vc.channel.id if vc.channel else None
        await vc.disconnect(force=True)
        logger.info(LogTemplates.VOICE_DISCONNECTED, channel_id)

    def is_connected(self) -> bool:
        return self._get_voice_client() is not None

    def get_current_channel_id(self) -> int | None:
        vc = self._get_voice_client()
        if vc and vc.channel:
            return vc.channel.id
        return None

    async def play(self, track: Track, stream_url: str, *, token: int) -> bool:
        vc = self._get_voice_client()
        if vc is None:
            logger.warning(LogTemplates.VOICE_NOT_CONNECTED)
            return False

        if vc.is_playing() or vc.is_paused():
            vc.stop()

        headers = "".join(f"{k}: {v}\r\n" for k, v in self._settings.http_headers.items())
        before_opts = f'{self._settings.ffmpeg_options.get("before_options", "")} -headers "{headers}"'
        source = discord.FFmpegPCMAudio(
            stream_url,
            before_options=before_opts.strip(),
            options=self._settings.ffmpeg_options.get("options", ""),
        )
        volume_source = discord.PCMVolumeTransformer(source, volume=self._volume)

        loop = self._bot.loop

        def after_callback(error: Exception | None = None) -> None:
            if error:
                logger.warning(LogTemplates.VOICE_PLAYBACK_ERROR, error)
            asyncio.run_coroutine_threadsafe(self._handle_track_end(token, error), loop)

        try:
            vc.play(volume_source, after=after_callback)
        except discord.ClientException as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            return False
        return True

    async def stop(self) -> None:
        vc = self._get_voice_client()
        if vc and (vc.is_playing() or vc.is_paused()):
            vc.stop()

    async def pause(self) -> bool:
        vc = self._get_voice_client()
        if vc and vc.is_playing():
            vc.pause()
            return True
        return False

    async def resume(self) -> bool:
        vc = self._get_voice_client()
        if vc and vc.is_paused():
            vc.resume()
            return True
        return False

    def set_on_track_end_callback(self, callback: TrackEndCallback) -> None:
        self._on_track_end = callback

    def set_on_connection_lost_callback(self, callback: ConnectionLostCallback) -> None:
        self._on_connection_lost = callback

    async def _handle_track_end(self, token: int, error: Exception | None) -> None:
        if self._on_track_end is None:
            logger.warning(LogTemplates.VOICE_NO_CALLBACK)
            return
        try:
            await self._on_track_end(token, error)
        except Exception as e:
            logger.exception(LogTemplates.VOICE_CALLBACK_ERROR, e)

    async def handle_voice_state_lost(self, channel_id: int, reason: str) -> None:
        """The bot's own voice state went to no channel (kick, network drop)."""
        logger.warning(LogTemplates.VOICE_STATE_LOST, channel_id)
        if self._voice_client is not None and not self._voice_client.is_connected():
            self._voice_client = None
        if self._on_connection_lost is None:
            return
        try:
            await self._on_connection_lost(channel_id, reason)
        except Exception as e:
            logger.exception(LogTemplates.VOICE_CALLBACK_ERROR, e)
