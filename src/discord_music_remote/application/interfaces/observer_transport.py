"""Port interface for pushing events to live web clients."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ObserverTransport(ABC):
    """Fan-out channel to connected observers."""

    @abstractmethod
    async def emit_to_all(self, event: str, payload: Any, *, skip: str | None = None) -> None:
        """Send an event to every connection, optionally skipping one."""
        ...

    @abstractmethod
    async def emit_to(self, connection_id: str, event: str, payload: Any) -> None:
        """Send an event to a single connection."""
        ...
