"""Configuration - settings and the dependency container."""

from discord_home_player.config.container import Container, create_container
from discord_home_player.config.settings import Settings, clear_settings_cache, get_settings

__all__ = ["Container", "Settings", "clear_settings_cache", "create_container", "get_settings"]
