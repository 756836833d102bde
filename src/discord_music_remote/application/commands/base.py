"""Shared plumbing for handlers that act on the resolved queue."""

from __future__ import annotations

from collections.abc import Awaitable
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel, ConfigDict

from discord_music_remote.domain.shared.exceptions import DomainError, EngineFailureError
from discord_music_remote.domain.shared.messages import ErrorMessages

if TYPE_CHECKING:
    from ..services.broadcaster import QueueBroadcaster
    from ..services.playback_service import PlaybackApplicationService
    from ..services.queue_gateway import QueueGateway

T = TypeVar("T")


class CommandResult(BaseModel):
    """Acknowledgement returned to the caller of a playback command."""

    model_config = ConfigDict(frozen=True)

    message: str
    success: bool = True


class QueueCommandHandler:
    """Base for handlers: resolve, validate, mutate, broadcast once."""

    def __init__(
        self,
        *,
        gateway: QueueGateway,
        playback_service: PlaybackApplicationService,
        broadcaster: QueueBroadcaster,
    ) -> None:
        self._gateway = gateway
        self._playback_service = playback_service
        self._broadcaster = broadcaster

    async def _engine(self, call: Awaitable[T], operation: str) -> T:
        """Await an engine call, turning a refusal or crash into EngineFailureError."""
        try:
            result = await call
        except DomainError:
            raise
        except Exception as exc:
            raise EngineFailureError(str(exc) or ErrorMessages.ENGINE_OPERATION_FAILED.format(operation=operation)) from exc

        if result is False or result is None:
            raise EngineFailureError(ErrorMessages.ENGINE_OPERATION_FAILED.format(operation=operation))
        return result
