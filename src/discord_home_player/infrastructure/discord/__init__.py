"""Discord integration - bot, cogs, guards and the voice adapter."""
