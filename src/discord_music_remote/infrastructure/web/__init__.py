"""Web layer - FastAPI HTTP API, Socket.IO realtime channel and the static control page."""

from discord_music_remote.infrastructure.web.app import STATIC_DIR, build_api, create_app
from discord_music_remote.infrastructure.web.realtime import RealtimeHub, SocketIOTransport

__all__ = [
    "STATIC_DIR",
    "RealtimeHub",
    "SocketIOTransport",
    "build_api",
    "create_app",
]
