"""Centralized message constants for error messages, validation, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Discord ID Validation Errors
    INVALID_SNOWFLAKE = "Discord snowflake ID must be positive"
    SNOWFLAKE_TOO_LARGE = "Discord snowflake ID exceeds maximum value (2^64)"

    # Track Validation Errors
    EMPTY_TRACK_TITLE = "Track title cannot be empty"

    # Settings Validation Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"

    # Channel Guard Errors
    CALLER_NOT_IN_VOICE = "You need to be in a voice channel to use this command!"
    BOT_NOT_CONNECTED = "Bot is not connected to any voice channel!"
    NOT_SAME_CHANNEL = "You need to be in the same voice channel as the bot to use this command!"
    PLAYING_ELSEWHERE = "Bot is currently playing music in another voice channel. Use `/stop` first."

    # Playback State Errors
    NOTHING_PLAYING = "No song is currently playing."
    MUSIC_NOT_PLAYING = "No music is currently playing."
    ALREADY_PAUSED = "Music is already paused."
    NOT_PAUSED = "Music is not paused."
    INVALID_TRANSITION = "Cannot transition from {current} to {target}"

    # Resolution Errors
    NO_SEARCH_RESULTS = "No results found for your search."
    PLAYLIST_EMPTY = "Failed to load playlist or playlist is empty."
    NO_PLAYLIST_ID = "Could not extract playlist ID from reference"
    LOOKUP_TIMED_OUT = "Lookup timed out after {seconds}s"
    LOOKUP_FAILED = "Lookup failed for {reference}"
    NO_STREAM_URL = "No stream URL found for {reference}"

    # Connectivity Errors
    CONNECT_FAILED = "Failed to join voice channel. Please try again."
    SESSION_NOT_READY_AFTER_CONNECT = "Voice session moved before playback could start"

    # Startup Errors
    DISCORD_TOKEN_REQUIRED = "DISCORD__TOKEN environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Container not found on bot instance"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Cache Operations
    CACHE_HIT = "Track cache hit for '%s'"
    CACHE_STORED = "Cached track '%s' (%d entries)"

    # Resolution
    RESOLVE_DIRECT = "Resolving direct reference %s"
    RESOLVE_QUERY = "Searching for '%s'"
    PLAYLIST_DETECTED = "Detected %s playlist %s"
    PLAYLIST_SPECIAL = "Detected special playlist (%s), using related-item strategy"
    PLAYLIST_LOOKUP_FAILED = "Playlist lookup failed for %s: %s"
    PLAYLIST_FALLBACK_SEARCH = "Falling back to keyword search for playlist %s (limit %d)"
    PLAYLIST_RELATED_FAILED = "Related-item lookup failed for %s: %s"
    PLAYLIST_SEED_FAILED = "Seed item lookup failed for %s: %s"
    PLAYLIST_SEARCH_FAILED = "Keyword search failed for playlist %s: %s"
    PLAYLIST_RESOLVED = "Resolved %d tracks from %s playlist %s"

    # yt-dlp
    YTDLP_FAILED_EXTRACT_INFO = "Failed to extract info for %s"
    YTDLP_FAILED_SEARCH = "Search failed for '%s'"
    YTDLP_FAILED_EXTRACT_PLAYLIST = "Failed to extract playlist %s"
    YTDLP_SKIPPED_ENTRY = "Skipping unusable entry in %s"

    # Session Lifecycle
    SESSION_CONNECTING = "Connecting voice session to channel %s"
    SESSION_READY = "Joined voice channel %s"
    SESSION_ALREADY_READY = "Voice session already ready on channel %s"
    SESSION_CONNECT_FAILED = "Failed to establish voice connection to channel %s: %s"
    SESSION_DESTROYED = "Voice session for channel %s destroyed"
    SESSION_DROPPED = "Voice session on channel %s dropped (%s)"
    SESSION_DROP_IGNORED = "Ignoring connectivity change for inactive channel %s"
    SESSION_CONNECT_ABANDONED = "Connect to %s abandoned, session is now %s"
    SESSION_AWAITING_PENDING = "Waiting for in-flight connect to %s before handling %s"
    SESSION_TEARDOWN_FAILED = "Failed to tear down voice session on channel %s"
    HOME_NOT_CONFIGURED = "No home channel configured, staying put"
    HOME_RETURNING = "Returning to home channel %s"
    HOME_RETURN_FAILED = "Could not return to home channel %s: %s"

    # Idle Timer
    IDLE_TIMER_ARMED = "Idle timeout started (%.1fs)"
    IDLE_TIMER_CLEARED = "Idle timeout cleared"
    IDLE_TIMER_EXPIRED = "Idle timeout reached"
    IDLE_TIMER_CALLBACK_ERROR = "Error in idle timeout callback"
    IDLE_STILL_CONNECTED = "Still in a voice channel, not moving to home channel"
    IDLE_NOT_CONNECTED = "Not in any voice channel, returning to home channel"

    # Playback
    TRACK_ATTEMPT = "Attempting to play: %s"
    TRACK_NOW_PLAYING = "Now playing: %s"
    TRACK_FINISHED = "Song finished: %s"
    TRACK_STREAM_ERROR = "Stream error for '%s': %s"
    TRACK_SKIPPING = "Skipping to next song..."
    TRACK_STALE_END = "Ignoring end-of-track for superseded playback %d"
    TRACK_SKIPPED = "Skipped '%s'"
    QUEUE_EMPTY = "Queue is empty"
    QUEUE_ENQUEUED = "Queued %d track(s), queue length now %d"
    PLAYBACK_PAUSED = "Music paused"
    PLAYBACK_RESUMED = "Music resumed"
    PLAYBACK_STOPPED = "Stopped music and cleared %d queued track(s)"
    PLAYBACK_STOPPED_ON_DROP = "Stopped music and cleared queue due to voice disconnect"
    PLAYBACK_CONNECT_LOST = "Could not reach channel %s for playback: %s"
    PLAYBACK_NO_TARGET = "No target channel for playback, draining to idle"

    # Voice Adapter
    VOICE_CONNECTED = "Connected to voice channel %s in %s"
    VOICE_DISCONNECTED = "Disconnected from voice channel %s"
    VOICE_CHANNEL_NOT_FOUND = "Voice channel %s not found"
    VOICE_CONNECTION_TIMEOUT = "Timeout connecting to channel %s"
    VOICE_NO_PERMISSION = "No permission to connect to channel %s"
    VOICE_CLIENT_ERROR = "Client error connecting: %r"
    VOICE_NOT_CONNECTED = "Not connected to voice"
    VOICE_SELF_DEAFEN_FAILED = "Failed to self-deafen in channel %s: %r"
    VOICE_STATE_LOST = "Bot left voice channel %s"
    VOICE_PLAYBACK_ERROR = "Player error: %s"
    VOICE_CALLBACK_ERROR = "Error in voice callback: %s"
    VOICE_NO_CALLBACK = "No track-end callback registered"

    # Bot Lifecycle
    BOT_STARTING = "Starting bot in {environment} mode"
    BOT_STARTING_RUN = "Starting bot run loop"
    BOT_SETUP = "Setting up bot"
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_READY = "Bot is ready! Logged in as %s (%s)"
    BOT_GATEWAY_DISCONNECTED = "WebSocket disconnected"
    BOT_COG_LOADED = "Loaded cog %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"
    BOT_SYNCED_GUILD = "Synced %d commands to guild %s"
    BOT_SYNC_GUILD_FAILED = "Failed to sync commands to guild %s: %s"
    BOT_SYNCED_GLOBAL = "Successfully registered %d commands"
    BOT_SYNC_GLOBAL_FAILED = "Error registering commands: %s"
    BOT_SLASH_COMMAND_ERROR = "Command error in /%s: %s"
    BOT_ERROR_MESSAGE_SEND_FAILED = "Failed to send error message to user"
    BOT_SHUTTING_DOWN = "Shutting down bot"
    BOT_SHUTDOWN_COMPLETE = "Bot shutdown complete"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error during container shutdown: %s"
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown timed out after %.1fs"
    BOT_STOPPED = "Bot stopped"
    BOT_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down"
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_PRESENCE_FAILED = "Failed to update presence: %s"


class DiscordUIMessages:
    """User-facing Discord replies and embed text."""

    # Generic
    ERROR_OCCURRED = "❌ An error occurred while executing the command."
    ERROR_PREFIX = "❌ {message}"
    STATE_SERVER_ONLY = "This command can only be used in a server."

    # Play
    EMBED_SONG_ADDED = "🎵 Song Added to Queue"
    EMBED_PLAYLIST_ADDED = "🎵 {kind} Added to Queue"
    EMBED_PLAYLIST_DESCRIPTION = "Added **{count} songs** to queue."
    FIELD_DURATION = "Duration"
    FIELD_POSITION = "Position in Queue"
    FIELD_FIRST_SONG = "First Song"
    FIELD_TOTAL_SONGS = "Total Songs"

    # Skip / Stop / Pause / Resume / Leave
    EMBED_SONG_SKIPPED = "⏭️ Song Skipped"
    SKIPPED_DESCRIPTION = "Skipped: **{title}**"
    EMBED_MUSIC_STOPPED = "⏹️ Music Stopped"
    STOPPED_DESCRIPTION = "Stopped music and cleared the queue."
    PAUSED = "⏸️ Music paused."
    RESUMED = "▶️ Music resumed."
    LEFT_CHANNEL = "👋 Left the voice channel and cleared the queue."

    # Now playing / Queue
    EMBED_NOW_PLAYING = "🎵 Now Playing"
    FIELD_STATUS = "Status"
    FIELD_SONGS_IN_QUEUE = "Songs in Queue"
    STATUS_PAUSED = "⏸️ Paused"
    STATUS_PLAYING = "▶️ Playing"
    EMBED_QUEUE = "🎵 Music Queue"
    QUEUE_EMPTY = "📭 The queue is empty."
    QUEUE_NOW_PLAYING_LINE = "**Now Playing:** {title}\n"
    QUEUE_HEADER = "**Queue:**"
    QUEUE_LINE = "{index}. {title}"
    QUEUE_MORE = "... and {count} more songs"

    # Playlist kind labels
    KIND_REGULAR = "Playlist"
    KIND_MIX = "Mix"
    KIND_WATCH_LATER = "Watch Later"
    KIND_LIKES = "Liked Videos"

    # Presence
    PRESENCE_IDLE = "/play"
