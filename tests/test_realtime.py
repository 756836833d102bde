"""
Unit Tests for the Realtime Channel

Tests for:
- SocketIOTransport (emit targeting, failure wrapping)
- RealtimeHub (connect snapshot, identify, presence fan-out, disconnect)
- create_app wiring
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
import socketio

from conftest import make_track
from discord_music_remote.domain.shared.exceptions import DeliveryFailureError
from discord_music_remote.domain.shared.messages import ErrorMessages
from discord_music_remote.infrastructure.web.realtime import (
    CURRENT_USERS_EVENT,
    IDENTIFY_ERROR_EVENT,
    USER_JOINED_EVENT,
    USER_LEFT_EVENT,
    SocketIOTransport,
)


@pytest.fixture
def hub(container):
    return container.realtime_hub


@pytest.fixture
def token(container, sample_user):
    return container.session_registry.issue(sample_user).token


class TestSocketIOTransport:
    @pytest.mark.asyncio
    async def test_emit_to_all_skips(self):
        server = MagicMock()
        server.emit = AsyncMock()

        await SocketIOTransport(server).emit_to_all("queue-updated", {"a": 1}, skip="sid-1")

        server.emit.assert_awaited_once_with("queue-updated", {"a": 1}, skip_sid="sid-1")

    @pytest.mark.asyncio
    async def test_emit_to_one(self):
        server = MagicMock()
        server.emit = AsyncMock()

        await SocketIOTransport(server).emit_to("sid-1", "current-users", [])

        server.emit.assert_awaited_once_with("current-users", [], to="sid-1")

    @pytest.mark.asyncio
    async def test_failure_wrapped(self):
        server = MagicMock()
        server.emit = AsyncMock(side_effect=ConnectionResetError("gone"))

        with pytest.raises(DeliveryFailureError):
            await SocketIOTransport(server).emit_to_all("queue-updated", {})


class TestConnect:
    @pytest.mark.asyncio
    async def test_new_connection_gets_snapshot(self, hub, transport, playing_queue):
        await hub.on_connect("sid-1", {})

        [(sid, event, payload)] = transport.direct
        assert sid == "sid-1"
        assert event == "queue-updated"
        assert payload["current"]["title"] == "Song 1"

    @pytest.mark.asyncio
    async def test_idle_deployment_sends_empty(self, hub, transport):
        await hub.on_connect("sid-1", {})
        assert transport.direct[0][2] == {"current": None, "queue": []}


class TestIdentify:
    @pytest.mark.asyncio
    async def test_identify_with_string_token(self, hub, transport, token, container):
        ack = await hub.on_identify("sid-1", token)

        assert ack == {"ok": True}
        assert "sid-1" in container.observer_roster

        [(sid, event, users)] = transport.direct
        assert (sid, event) == ("sid-1", CURRENT_USERS_EVENT)
        assert users == [
            {
                "connectionId": "sid-1",
                "userId": "444444444444444444",
                "userName": "Alice",
                "userAvatar": "https://cdn.example.com/a.png",
            }
        ]

        [(event, joined, skip)] = transport.broadcasts
        assert event == USER_JOINED_EVENT
        assert joined["connectionId"] == "sid-1"
        assert skip == "sid-1"

    @pytest.mark.asyncio
    async def test_identify_with_dict_token(self, hub, token):
        assert (await hub.on_identify("sid-1", {"token": token}))["ok"] is True

    @pytest.mark.asyncio
    async def test_second_tab_sees_both(self, hub, transport, token):
        await hub.on_identify("sid-1", token)
        await hub.on_identify("sid-2", token)

        users = transport.direct[-1][2]
        assert [u["connectionId"] for u in users] == ["sid-1", "sid-2"]

    @pytest.mark.asyncio
    async def test_re_identify_does_not_announce_again(self, hub, transport, token):
        await hub.on_identify("sid-1", token)
        await hub.on_identify("sid-1", token)

        assert len(transport.events(USER_JOINED_EVENT)) == 1

    @pytest.mark.parametrize("data", [None, "", {}, {"token": 5}, 42])
    @pytest.mark.asyncio
    async def test_missing_token(self, hub, transport, container, data):
        ack = await hub.on_identify("sid-1", data)

        assert ack == {"ok": False, "error": ErrorMessages.SESSION_TOKEN_REQUIRED}
        assert transport.direct == [("sid-1", IDENTIFY_ERROR_EVENT, {"error": ErrorMessages.SESSION_TOKEN_REQUIRED})]
        assert len(container.observer_roster) == 0

    @pytest.mark.asyncio
    async def test_invalid_token(self, hub, transport, container):
        ack = await hub.on_identify("sid-1", "f" * 32)

        assert ack["ok"] is False
        assert transport.direct[0][1] == IDENTIFY_ERROR_EVENT
        assert transport.broadcasts == []
        assert len(container.observer_roster) == 0


class TestDisconnect:
    @pytest.mark.asyncio
    async def test_identified_observer_leaves(self, hub, transport, token, container):
        await hub.on_identify("sid-1", token)
        await hub.on_disconnect("sid-1")

        assert len(container.observer_roster) == 0
        left = transport.events(USER_LEFT_EVENT)
        assert [u["connectionId"] for u in left] == ["sid-1"]

    @pytest.mark.asyncio
    async def test_anonymous_disconnect_is_silent(self, hub, transport):
        await hub.on_disconnect("sid-9", "transport close")
        assert transport.broadcasts == []

    @pytest.mark.asyncio
    async def test_delivery_failure_logged_not_raised(self, hub, transport, token):
        await hub.on_identify("sid-1", token)
        transport.fail = True
        await hub.on_disconnect("sid-1")


class TestCreateApp:
    def test_wraps_api_and_registers_handlers(self, container):
        from discord_music_remote.infrastructure.web.app import create_app

        app = create_app(container)

        assert isinstance(app, socketio.ASGIApp)
        handlers = container.socket_server.handlers["/"]
        assert {"connect", "identify", "disconnect"} <= set(handlers)

    @pytest.mark.asyncio
    async def test_broadcast_reaches_socket_server(self, settings, playing_queue):
        from discord_music_remote.config.container import Container

        container = Container(settings=settings)
        container.socket_server.emit = AsyncMock()
        container.queue_repository._queues.update({playing_queue.guild_id: playing_queue})
        playing_queue.songs.append(make_track(9))

        await container.broadcaster.broadcast(playing_queue.guild_id)

        event, payload = container.socket_server.emit.await_args.args
        assert event == "queue-updated"
        assert payload["queue"][-1]["title"] == "Song 9"
