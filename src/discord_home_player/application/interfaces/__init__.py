"""Port interfaces implemented by the infrastructure layer."""

from discord_home_player.application.interfaces.media_catalog import MediaCatalog
from discord_home_player.application.interfaces.voice_adapter import VoiceAdapter

__all__ = ["MediaCatalog", "VoiceAdapter"]
