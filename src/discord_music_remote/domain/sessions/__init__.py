"""Sessions bounded context: control links and live observers."""

from discord_music_remote.domain.sessions.entities import ControlSession, Observer

__all__ = ["ControlSession", "Observer"]
