"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from discord_music_remote.application.interfaces.audio_resolver import AudioResolver
from discord_music_remote.application.interfaces.chat_platform import ChatPlatform, VoiceChannelInfo
from discord_music_remote.application.interfaces.observer_transport import ObserverTransport
from discord_music_remote.application.interfaces.voice_adapter import TrackEndCallback, VoiceAdapter

__all__ = [
    "AudioResolver",
    "ChatPlatform",
    "ObserverTransport",
    "TrackEndCallback",
    "VoiceAdapter",
    "VoiceChannelInfo",
]
