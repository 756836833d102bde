"""Domain error taxonomy.

Every failure a playback command can report is one of these classes. The web
layer maps each class to an HTTP status; nothing else inspects the type.
"""

from __future__ import annotations

from discord_music_remote.domain.shared.messages import ErrorMessages

ENGINE_MESSAGE_LIMIT = 1900


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


# === Queue resolution ===


class NotConfiguredError(DomainError):
    """Raised when the deployment has no voice channel configured."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.VOICE_CHANNEL_NOT_CONFIGURED, code="NOT_CONFIGURED")


class ChannelNotFoundError(DomainError):
    """Raised when the configured channel cannot be resolved to a voice channel."""

    def __init__(self, channel_id: int | None = None, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.VOICE_CHANNEL_NOT_FOUND, code="CHANNEL_NOT_FOUND")
        self.channel_id = channel_id


class ChannelNotJoinableError(DomainError):
    """Raised when the bot cannot connect to the configured voice channel."""

    def __init__(self, channel_id: int | None = None, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.VOICE_CHANNEL_NOT_JOINABLE, code="CHANNEL_NOT_JOINABLE")
        self.channel_id = channel_id


class NoActiveQueueError(DomainError):
    """Raised when the guild has no playback queue."""

    def __init__(self, guild_id: int | None = None, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.NO_ACTIVE_QUEUE, code="NO_ACTIVE_QUEUE")
        self.guild_id = guild_id


# === Caller errors ===


class InvalidInputError(DomainError):
    """Raised when a request carries a missing or malformed value."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="INVALID_INPUT")
        self.field = field


class OutOfBoundsError(DomainError):
    """Raised when an index does not address an upcoming track."""

    def __init__(self, index: int, upcoming_length: int, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.INDEX_OUT_OF_BOUNDS, code="OUT_OF_BOUNDS")
        self.index = index
        self.upcoming_length = upcoming_length


class AlreadyInStateError(DomainError):
    """Raised when pause/resume is requested in the state it would produce."""

    def __init__(self, state: str, message: str | None = None) -> None:
        msg = message or ErrorMessages.ALREADY_IN_STATE.format(state=state)
        super().__init__(msg, code="ALREADY_IN_STATE")
        self.state = state


class NothingPlayingError(DomainError):
    """Raised when an operation needs a current track and there is none."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.NOTHING_PLAYING, code="NOTHING_PLAYING")


class NoNextTrackError(DomainError):
    """Raised when skipping on an empty queue."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.NO_NEXT_TRACK, code="NO_NEXT_TRACK")


class NotSeekableError(DomainError):
    """Raised when seeking a live stream or a track without a known duration."""

    def __init__(self, track_title: str = "", message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.NOT_SEEKABLE, code="NOT_SEEKABLE")
        self.track_title = track_title


# === External collaborators ===


class EngineFailureError(DomainError):
    """Raised when the playback engine rejects or fails an operation.

    The message is cut to what fits in a single chat message.
    """

    def __init__(self, message: str) -> None:
        super().__init__(str(message)[:ENGINE_MESSAGE_LIMIT], code="ENGINE_FAILURE")


class DeliveryFailureError(DomainError):
    """Raised by transports when a broadcast or direct message cannot be sent.

    Callers log it; it never reaches the request that triggered the delivery.
    """

    def __init__(self, target: str, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.DELIVERY_FAILED.format(target=target), code="DELIVERY_FAILURE")
        self.target = target


# === Sessions ===


class InvalidSessionError(DomainError):
    """Raised when a session token is unknown."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.INVALID_SESSION_TOKEN, code="INVALID_SESSION")


class SessionExpiredError(InvalidSessionError):
    """Raised when a session token outlived its TTL."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.INVALID_SESSION_TOKEN)
        self.code = "SESSION_EXPIRED"
