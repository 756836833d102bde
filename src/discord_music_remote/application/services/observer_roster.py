"""Who is currently connected to the web UI."""

from __future__ import annotations

from ...domain.music.entities import UserRef
from ...domain.sessions.entities import Observer


class ObserverRoster:
    """Connection id -> identified observer.

    Only used to render the listener list; it has no say over playback.
    """

    def __init__(self) -> None:
        self._observers: dict[str, Observer] = {}

    def __len__(self) -> int:
        return len(self._observers)

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self._observers

    def add(self, connection_id: str, user: UserRef) -> Observer:
        observer = Observer(connection_id=connection_id, user=user)
        self._observers[connection_id] = observer
        return observer

    def remove(self, connection_id: str) -> Observer | None:
        return self._observers.pop(connection_id, None)

    def get(self, connection_id: str) -> Observer | None:
        return self._observers.get(connection_id)

    def observers(self) -> list[Observer]:
        return list(self._observers.values())

    def clear(self) -> None:
        self._observers.clear()
