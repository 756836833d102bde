"""Change Broadcaster: pushes the queue snapshot to every live observer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ...domain.shared.events import QueueExhausted, TrackFinishedPlaying
from ...domain.shared.messages import LogTemplates
from .queue_models import QueueSnapshot

if TYPE_CHECKING:
    from ...domain.music.repository import QueueRepository
    from ...domain.shared.events import EventBus
    from ..interfaces.observer_transport import ObserverTransport

logger = logging.getLogger(__name__)

QUEUE_UPDATED_EVENT = "queue-updated"


class QueueBroadcaster:
    """Builds ``{current, queue}`` for a guild and emits it to all observers.

    Delivery is fire-and-forget: a failing transport is logged and never
    reaches the command that asked for the broadcast.
    """

    def __init__(
        self,
        *,
        queue_repository: QueueRepository,
        transport: ObserverTransport,
        event_bus: EventBus,
    ) -> None:
        self._queue_repo = queue_repository
        self._transport = transport
        self._event_bus = event_bus
        self._subscribed = False

    async def snapshot(self, guild_id: int | None) -> QueueSnapshot:
        if guild_id is None:
            return QueueSnapshot.empty()
        return QueueSnapshot.from_queue(await self._queue_repo.get(guild_id))

    async def broadcast(self, guild_id: int | None, overrides: dict[str, Any] | None = None) -> QueueSnapshot:
        snapshot = await self.snapshot(guild_id)
        try:
            await self._transport.emit_to_all(QUEUE_UPDATED_EVENT, snapshot.to_payload(overrides))
            logger.debug(LogTemplates.BROADCAST_SENT, guild_id, len(snapshot.queue))
        except Exception as exc:
            logger.warning(LogTemplates.BROADCAST_FAILED, guild_id, exc)
        return snapshot

    # ── Engine-driven transitions ───────────────────────────────────

    async def _on_track_finished(self, event: TrackFinishedPlaying) -> None:
        await self.broadcast(event.guild_id)

    async def _on_queue_exhausted(self, event: QueueExhausted) -> None:
        await self.broadcast(event.guild_id)

    def start(self) -> None:
        if self._subscribed:
            return
        self._event_bus.subscribe(TrackFinishedPlaying, self._on_track_finished)
        self._event_bus.subscribe(QueueExhausted, self._on_queue_exhausted)
        self._subscribed = True

    def stop(self) -> None:
        if not self._subscribed:
            return
        self._event_bus.unsubscribe(TrackFinishedPlaying, self._on_track_finished)
        self._event_bus.unsubscribe(QueueExhausted, self._on_queue_exhausted)
        self._subscribed = False
