"""Centralized message constants for error messages, log templates, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Queue Resolution Errors
    VOICE_CHANNEL_NOT_CONFIGURED = "VOICE_CHANNEL_ID is not configured."
    VOICE_CHANNEL_NOT_FOUND = "Configured voice channel not found or is not a voice channel."
    VOICE_CHANNEL_NOT_JOINABLE = "Could not join the configured voice channel."
    NO_ACTIVE_QUEUE = "No active queue in this guild."

    # Playback Command Errors
    NOTHING_PLAYING = "No song is currently playing."
    NO_NEXT_TRACK = "The queue is empty, there is nothing to skip."
    NOT_SEEKABLE = "Cannot seek a live stream or song with zero duration."
    ALREADY_IN_STATE = "Playback is already {state}."
    INDEX_OUT_OF_BOUNDS = "Index is outside the upcoming queue."
    REORDER_OUT_OF_BOUNDS = "Reorder index out of bounds."
    INVALID_VOLUME = "Volume must be between 0 and 200."
    TRACK_RESOLVE_FAILED = "Could not find a playable track for: {query}"
    ENGINE_OPERATION_FAILED = "The playback engine failed to {operation}."

    # Request Validation Errors
    PLAY_FIELDS_REQUIRED = "URL and User ID are required."
    SEEK_TIME_REQUIRED = "Time (in seconds) is required and must be a number."
    REORDER_INDEXES_REQUIRED = "Valid oldIndex and newIndex are required."
    REMOVE_INDEX_REQUIRED = "A valid song index is required."
    VOLUME_OUT_OF_RANGE = "Volume must be a number between 0 and 200."
    SEARCH_QUERY_REQUIRED = "A search query (q) is required."
    INVALID_REQUEST = "Invalid request."
    INTERNAL_ERROR = "Internal server error."

    # Session Errors
    SESSION_TOKEN_REQUIRED = "Session token is required."
    INVALID_SESSION_TOKEN = "Invalid or expired session token."

    # Delivery Errors
    DELIVERY_FAILED = "Could not deliver message to {target}."

    # Track Validation Errors
    EMPTY_TRACK_ID = "Track ID cannot be empty"

    # Configuration Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    DISCORD_TOKEN_REQUIRED = "DISCORD_TOKEN environment variable is required"
    CONTAINER_NOT_FOUND = "Container not found on bot instance"


class ResponseMessages:
    """Acknowledgements returned by the HTTP API."""

    PLAY_ACCEPTED = "Request received, playing or adding to the queue..."
    STOPPED = "Stopped playback and cleared the queue."
    SKIPPED = "Skipped the current song."
    SKIPPED_LAST = "Skipped the last song and stopped playback."
    PAUSED = "Playback paused."
    RESUMED = "Playback resumed."
    VOLUME_SET = "Volume set to {volume}%."
    SEEKED = "Seek sent to {position}."
    REORDERED = "Queue reordered successfully."
    REORDER_UNCHANGED = "Song position unchanged."
    REMOVED = 'Removed "{title}" from the queue.'


class LogTemplates:
    """Log message templates.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting.
    """

    # Cleanup Operations
    CLEANUP_STARTED = "Session sweep job started"
    CLEANUP_STOPPED = "Session sweep job stopped"
    CLEANUP_ALREADY_RUNNING = "Session sweep job is already running"
    CLEANUP_CYCLE_RUNNING = "Running session sweep"
    CLEANUP_COMPLETED = "Session sweep removed %s expired sessions"
    CLEANUP_FAILED = "Session sweep failed: %r"

    # Voice/Audio Operations
    VOICE_CONNECTED = "Connected to voice channel %s in %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_MOVED = "Moved to voice channel %s"
    VOICE_CONNECTION_TIMEOUT = "Timeout connecting to channel %s"
    VOICE_NO_PERMISSION = "No permission to connect to channel %s"
    VOICE_CLIENT_ERROR = "Client error connecting: %r"
    VOICE_STALE_CLEANUP = "Found stale voice client in guild %s, cleaning up"
    VOICE_NOT_CONNECTED = "Not connected to voice in guild %s"
    VOICE_CLEANUP_ERROR = "Error during voice cleanup"
    VOICE_SELF_DEAFEN_FAILED = "Failed to self-deafen in guild %s: %r"

    # Playback Operations
    PLAYBACK_STARTED = "Started playing '%s' in guild %s"
    PLAYBACK_STOPPED = "Stopped playback in guild %s"
    PLAYBACK_PAUSED = "Paused playback in guild %s"
    PLAYBACK_RESUMED = "Resumed playback in guild %s"
    PLAYBACK_SEEKED = "Seeked '%s' to %ss in guild %s (requested %s, duration %s)"
    PLAYBACK_VOLUME_SET = "Volume set to %s in guild %s"
    PLAYBACK_ERROR = "Playback error in guild %s: %s"
    PLAYBACK_FAILED_START = "Failed to start playback: %s"
    PLAYBACK_FAILED_STOP = "Failed to stop playback: %s"
    PLAYBACK_FAILED_PAUSE = "Failed to pause: %s"
    PLAYBACK_FAILED_RESUME = "Failed to resume: %s"
    PLAYBACK_FAILED_VOLUME = "Failed to set volume: %s"
    PLAYBACK_NO_CALLBACK = "No track end callback set for guild %s"
    PLAYBACK_CALLBACK_ERROR = "Error in track end callback for guild %s: %s"
    PLAYBACK_IGNORING_CALLBACK = "Ignoring voice track-end callback for guild %s"
    PLAYBACK_RESOLVE_RETRY = "Stream URL for '%s' could not be refreshed (attempt %s/%s)"

    # Track Operations
    TRACK_SKIPPED = "Skipped track: %s in guild %s"
    TRACK_FINISHED = "Track finished: %s in guild %s"
    TRACK_ENDED = "Track ended in guild %s (error: %s)"
    TRACK_DROPPED = "Dropped unplayable track '%s' in guild %s"

    # Queue Operations
    QUEUE_CREATED = "Created queue for guild %s"
    QUEUE_DELETED = "Deleted queue for guild %s"
    QUEUE_EXHAUSTED = "Queue exhausted in guild %s"
    QUEUE_ENQUEUED = "Enqueued track '%s' at position %s in guild %s"
    QUEUE_REMOVED = "Removed track '%s' from queue in guild %s"
    QUEUE_MOVED = "Moved upcoming track from %s to %s in guild %s"
    QUEUE_CLEARED = "Cleared %s tracks from queue in guild %s"

    # Queue Gateway
    GATEWAY_NOT_CONFIGURED = "Queue lookup failed: no voice channel configured"
    GATEWAY_CHANNEL_NOT_FOUND = "Queue lookup failed: channel %s not found or not a voice channel"
    USER_FETCH_FAILED = "Could not fetch user details for %s: %r"

    # Broadcasting
    BROADCAST_SENT = "Broadcast queue snapshot for guild %s (%s upcoming)"
    BROADCAST_FAILED = "Failed to broadcast queue snapshot for guild %s: %r"

    # Sessions
    SESSION_ISSUED = "Issued control session for user %s"
    SESSION_EXPIRED = "Session for %s expired"
    SESSION_REVOKE_FAILED = "Could not delete previous link message for %s (may already be gone): %r"
    SESSION_REVOKED = "Deleted previous link message %s for %s"

    # Realtime Observers
    OBSERVER_CONNECTED = "Realtime client connected: %s"
    OBSERVER_IDENTIFIED = "Realtime client %s identified as %s"
    OBSERVER_IDENTIFY_FAILED = "Realtime client %s failed to identify: %s"
    OBSERVER_DISCONNECTED = "Realtime client disconnected: %s"

    # Announcements
    ANNOUNCE_FAILED = "Failed to send announcement to channel %s: %r"
    ANNOUNCE_NO_CHANNEL = "Could not find a suitable text channel for bot messages in guild %s"

    # Link Command
    LINK_DM_FAILED = "Failed to send control link DM to %s"
    LINK_REPLY_FAILED = "Failed to reply to link command from %s: %r"

    # Resolution/Search
    YTDLP_NO_STREAM_URL = "No stream URL found for %s"
    YTDLP_FAILED_INFO_TO_TRACK = "Failed to convert info to track"
    YTDLP_FAILED_EXTRACT_INFO = "Failed to extract info from %s"
    YTDLP_FAILED_SEARCH = "Failed to search for %r"
    YTDLP_FAILED_RESOLVE = "Failed to resolve %r"

    # HTTP API
    API_REQUEST_FAILED = "%s %s failed: %s"
    API_UNEXPECTED_ERROR = "Unexpected error handling %s %s"

    # Application Lifecycle
    APP_STARTING = "Starting Discord music remote in %s mode"
    APP_WEB_LISTENING = "Web UI available at %s (listening on %s:%s)"
    APP_SHUTDOWN_SIGNAL = "Received shutdown signal"
    APP_LOGIN_FAILED = "Discord login failed"
    APP_FATAL_ERROR = "Fatal error"
    BOT_SETUP = "Setting up bot..."
    BOT_CONTAINER_INITIALIZED = "Container initialized"
    BOT_EXTENSION_LOADED = "Loaded extension: %s"
    BOT_EXTENSION_FAILED = "Failed to load extension %s"
    BOT_READY = "Bot ready: %s (ID: %s)"
    BOT_CONNECTED_GUILDS = "Connected to %s guilds"
    BOT_SHUTTING_DOWN = "Shutting down bot..."
    BOT_SHUTDOWN_COMPLETE = "Bot shutdown complete"
    BOT_COMMAND_ERROR = "Command error in %s: %s"

    # Container
    CONTAINER_INITIALIZED = "Container initialized"
    CONTAINER_SHUTDOWN = "Container shut down"
    CONTAINER_BOT_ATTACHED = "Discord bot attached to container"


class DiscordUIMessages:
    """Text sent to Discord channels and direct messages."""

    # Announcements
    ANNOUNCE_NOW_PLAYING = "▶️ Now playing: **{title}** - `{duration}`{added_by}"
    ANNOUNCE_ADDED = "👍 Added to queue: **{title}** - `{duration}`{added_by}"
    ANNOUNCE_ADDED_BY = " (added by: {name})"
    ANNOUNCE_QUEUE_FINISHED = "✅ The queue has finished!"
    ANNOUNCE_ENGINE_ERROR = "Oops! The music engine ran into a problem: {error}"

    # Control Link
    LINK_DM = (
        "*Here is your private music control link:*\n||{link}||\n\n"
        "👉 The link is valid for {hours} hours. If it stops working, just run the command again 😗"
    )
    LINK_SENT = "{mention} I sent your music control link by DM 😉"
    LINK_DMS_CLOSED = (
        "{mention} It looks like your DMs are closed, so I can't send the link 😥 "
        "(check **Content & Social** -> **Social permissions** -> "
        "**Allow DMs from other server members**)"
    )
    LINK_FAILED = "Oops! {mention} something went wrong, please try again 😅"

    # Generic
    STATE_SERVER_ONLY = "This command can only be used in a server."
