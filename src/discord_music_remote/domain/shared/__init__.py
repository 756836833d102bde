"""
Shared Domain Kernel

Contains types, messages, events and exceptions shared across all bounded contexts.
"""

from discord_music_remote.domain.shared.exceptions import (
    AlreadyInStateError,
    ChannelNotFoundError,
    ChannelNotJoinableError,
    DeliveryFailureError,
    DomainError,
    EngineFailureError,
    InvalidInputError,
    InvalidSessionError,
    NoActiveQueueError,
    NoNextTrackError,
    NotConfiguredError,
    NothingPlayingError,
    NotSeekableError,
    OutOfBoundsError,
    SessionExpiredError,
)

__all__ = [
    "DomainError",
    "NotConfiguredError",
    "ChannelNotFoundError",
    "ChannelNotJoinableError",
    "NoActiveQueueError",
    "NothingPlayingError",
    "NoNextTrackError",
    "InvalidInputError",
    "OutOfBoundsError",
    "AlreadyInStateError",
    "NotSeekableError",
    "EngineFailureError",
    "DeliveryFailureError",
    "InvalidSessionError",
    "SessionExpiredError",
]
