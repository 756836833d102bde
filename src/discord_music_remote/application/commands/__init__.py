"""
Application Commands (CQRS Write Side)

Command objects and their handlers for write operations. Every handler
resolves the queue through the gateway before touching it, and broadcasts
the new snapshot once it has changed.
"""

from discord_music_remote.application.commands.base import CommandResult, QueueCommandHandler
from discord_music_remote.application.commands.edit_queue import (
    RemoveTrackCommand,
    RemoveTrackHandler,
    RemoveTrackResult,
    ReorderQueueCommand,
    ReorderQueueHandler,
)
from discord_music_remote.application.commands.play_track import (
    PlayTrackCommand,
    PlayTrackHandler,
    PlayTrackResult,
)
from discord_music_remote.application.commands.playback_controls import (
    PausePlaybackCommand,
    PausePlaybackHandler,
    ResumePlaybackCommand,
    ResumePlaybackHandler,
    SetVolumeCommand,
    SetVolumeHandler,
    SkipTrackCommand,
    SkipTrackHandler,
    StopPlaybackCommand,
    StopPlaybackHandler,
)
from discord_music_remote.application.commands.seek_track import SeekCommand, SeekResult, SeekTrackHandler

__all__ = [
    "CommandResult",
    "QueueCommandHandler",
    # Play
    "PlayTrackCommand",
    "PlayTrackHandler",
    "PlayTrackResult",
    # Controls
    "SkipTrackCommand",
    "SkipTrackHandler",
    "StopPlaybackCommand",
    "StopPlaybackHandler",
    "PausePlaybackCommand",
    "PausePlaybackHandler",
    "ResumePlaybackCommand",
    "ResumePlaybackHandler",
    "SetVolumeCommand",
    "SetVolumeHandler",
    # Seek
    "SeekCommand",
    "SeekResult",
    "SeekTrackHandler",
    # Queue edits
    "ReorderQueueCommand",
    "ReorderQueueHandler",
    "RemoveTrackCommand",
    "RemoveTrackHandler",
    "RemoveTrackResult",
]
