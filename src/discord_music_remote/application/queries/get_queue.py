"""Query for retrieving the current queue snapshot."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from discord_music_remote.application.services.queue_models import QueueSnapshot
from discord_music_remote.domain.shared.exceptions import (
    ChannelNotFoundError,
    NoActiveQueueError,
    NotConfiguredError,
)

if TYPE_CHECKING:
    from ..services.queue_gateway import QueueGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GetQueueQuery:
    pass


class GetQueueHandler:
    """Reads the snapshot of the configured queue.

    Never fails for "no queue": an unconfigured, unresolvable or idle
    deployment reads as ``{current: null, queue: []}``.
    """

    def __init__(self, *, gateway: QueueGateway) -> None:
        self._gateway = gateway

    async def handle(self, query: GetQueueQuery) -> QueueSnapshot:
        try:
            queue = await self._gateway.resolve_queue()
        except (NotConfiguredError, ChannelNotFoundError, NoActiveQueueError) as exc:
            logger.debug("Queue read as empty: %s", exc.message)
            return QueueSnapshot.empty()
        return QueueSnapshot.from_queue(queue)
