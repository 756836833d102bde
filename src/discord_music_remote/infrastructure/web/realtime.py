"""Socket.IO realtime channel: queue snapshots out, observer identity in."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import socketio

from ...application.interfaces.observer_transport import ObserverTransport
from ...application.queries.get_queue import GetQueueQuery
from ...application.services.broadcaster import QUEUE_UPDATED_EVENT
from ...domain.shared.exceptions import DeliveryFailureError, InvalidSessionError
from ...domain.shared.messages import ErrorMessages, LogTemplates
from .schemas import ObserverView

if TYPE_CHECKING:
    from ...application.queries.get_queue import GetQueueHandler
    from ...application.services.observer_roster import ObserverRoster
    from ...application.services.session_registry import SessionRegistry

logger = logging.getLogger(__name__)

IDENTIFY_EVENT = "identify"
IDENTIFY_ERROR_EVENT = "identify-error"
CURRENT_USERS_EVENT = "current-users"
USER_JOINED_EVENT = "user-joined"
USER_LEFT_EVENT = "user-left"


class SocketIOTransport(ObserverTransport):
    """ObserverTransport over a python-socketio ``AsyncServer``."""

    def __init__(self, server: socketio.AsyncServer) -> None:
        self._server = server

    async def emit_to_all(self, event: str, payload: Any, *, skip: str | None = None) -> None:
        try:
            await self._server.emit(event, payload, skip_sid=skip)
        except Exception as exc:
            raise DeliveryFailureError("all observers", str(exc)) from exc

    async def emit_to(self, connection_id: str, event: str, payload: Any) -> None:
        try:
            await self._server.emit(event, payload, to=connection_id)
        except Exception as exc:
            raise DeliveryFailureError(f"connection {connection_id}", str(exc)) from exc


def _token_from(data: Any) -> str | None:
    if isinstance(data, str):
        return data or None
    if isinstance(data, dict):
        token = data.get("token") or data.get("sessionToken") or data.get("session_token")
        return token if isinstance(token, str) and token else None
    return None


class RealtimeHub:
    """Connection lifecycle for web observers.

    A fresh connection immediately gets the current snapshot. Identifying
    with a session token adds the connection to the roster, so other tabs
    can show who is listening. Identity is display-only.
    """

    def __init__(
        self,
        *,
        transport: ObserverTransport,
        session_registry: SessionRegistry,
        observer_roster: ObserverRoster,
        get_queue_handler: GetQueueHandler,
    ) -> None:
        self._transport = transport
        self._registry = session_registry
        self._roster = observer_roster
        self._get_queue = get_queue_handler

    def register(self, server: socketio.AsyncServer) -> None:
        server.on("connect", self.on_connect)
        server.on(IDENTIFY_EVENT, self.on_identify)
        server.on("disconnect", self.on_disconnect)

    async def _send(self, sid: str, event: str, payload: Any) -> None:
        try:
            await self._transport.emit_to(sid, event, payload)
        except DeliveryFailureError as exc:
            logger.warning(LogTemplates.BROADCAST_FAILED, sid, exc)

    async def _send_others(self, sid: str, event: str, payload: Any) -> None:
        try:
            await self._transport.emit_to_all(event, payload, skip=sid)
        except DeliveryFailureError as exc:
            logger.warning(LogTemplates.BROADCAST_FAILED, sid, exc)

    async def on_connect(self, sid: str, environ: dict, auth: Any = None) -> None:
        logger.debug(LogTemplates.OBSERVER_CONNECTED, sid)
        snapshot = await self._get_queue.handle(GetQueueQuery())
        await self._send(sid, QUEUE_UPDATED_EVENT, snapshot.to_payload())

    async def on_identify(self, sid: str, data: Any = None) -> dict[str, Any]:
        token = _token_from(data)
        if token is None:
            return await self._reject(sid, ErrorMessages.SESSION_TOKEN_REQUIRED)

        try:
            user = self._registry.resolve(token)
        except InvalidSessionError as exc:
            return await self._reject(sid, exc.message)

        newly_joined = sid not in self._roster
        observer = self._roster.add(sid, user)
        logger.info(LogTemplates.OBSERVER_IDENTIFIED, sid, user.display_name)

        users = [ObserverView.from_observer(o).to_wire() for o in self._roster.observers()]
        await self._send(sid, CURRENT_USERS_EVENT, users)
        if newly_joined:
            await self._send_others(sid, USER_JOINED_EVENT, ObserverView.from_observer(observer).to_wire())
        return {"ok": True}

    async def _reject(self, sid: str, message: str) -> dict[str, Any]:
        logger.info(LogTemplates.OBSERVER_IDENTIFY_FAILED, sid, message)
        await self._send(sid, IDENTIFY_ERROR_EVENT, {"error": message})
        return {"ok": False, "error": message}

    async def on_disconnect(self, sid: str, *args: Any) -> None:
        logger.debug(LogTemplates.OBSERVER_DISCONNECTED, sid)
        observer = self._roster.remove(sid)
        if observer is not None:
            await self._send_others(sid, USER_LEFT_EVENT, ObserverView.from_observer(observer).to_wire())
