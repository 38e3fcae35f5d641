"""Infrastructure layer - yt-dlp catalog and discord.py integration."""
