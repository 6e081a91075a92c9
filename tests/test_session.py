"""Tests for the TransportSession against the mock server."""

import asyncio
from unittest.mock import MagicMock

import pytest

from pyicbridge import (
    ICAuthenticationError,
    ICConnectionError,
    ICResponse,
    SessionState,
    TransportSession,
)
from pyicbridge.codec import subscribe_request
from tests.mock_server import MockIntelliCenterServer, wait_for


@pytest.fixture
async def server():
    """Run a mock IntelliCenter for the duration of a test."""
    async with MockIntelliCenterServer() as server:
        yield server


@pytest.fixture
async def closed_port():
    """Return a local port nothing listens on."""
    probe = MockIntelliCenterServer()
    await probe.start()
    port = probe.port
    await probe.stop()
    return port


@pytest.fixture
async def make_session():
    """Create sessions and stop them after the test."""
    sessions = []

    def factory(port, **kwargs):
        kwargs.setdefault("reconnect_delay", 0.05)
        kwargs.setdefault("connect_timeout", 2.0)
        session = TransportSession("127.0.0.1", port, **kwargs)
        session.on_connected = MagicMock()
        session.on_disconnected = MagicMock()
        session.on_message = MagicMock()
        session.on_send_error = MagicMock()
        sessions.append(session)
        return session

    yield factory

    for session in sessions:
        await session.stop()


class TestConnect:
    """Tests for connecting."""

    @pytest.mark.asyncio
    async def test_connect(self, server, make_session):
        """A successful connect starts generation 1."""
        session = make_session(server.port)
        assert session.state == SessionState.DISCONNECTED

        await session.start()

        assert session.connected
        assert session.state == SessionState.CONNECTED
        assert session.generation == 1
        session.on_connected.assert_called_once_with(1)
        await wait_for(lambda: server.client_count == 1)

    @pytest.mark.asyncio
    async def test_connect_failure(self, closed_port, make_session):
        """A refused connection raises and keeps retrying in the background."""
        session = make_session(closed_port, reconnect_delay=10)

        with pytest.raises(ICConnectionError):
            await session.start()

        assert not session.connected
        assert session.state == SessionState.DISCONNECTED
        assert session.reconnecting
        session.on_connected.assert_not_called()

    @pytest.mark.asyncio
    async def test_login(self, make_session):
        """Credentials are sent when the controller asks for them."""
        async with MockIntelliCenterServer(credentials=("admin", "secret")) as server:
            session = make_session(server.port, username="admin", password="secret")
            await session.start()

            assert session.connected
            await wait_for(lambda: server.client_count == 1)
            await session.stop()

    @pytest.mark.asyncio
    async def test_login_rejected(self, make_session):
        """Wrong credentials fail the connect."""
        async with MockIntelliCenterServer(credentials=("admin", "secret")) as server:
            session = make_session(server.port, username="admin", password="nope")
            with pytest.raises(ICAuthenticationError):
                await session.connect()
            assert not session.connected


class TestMessages:
    """Tests for sending and receiving."""

    @pytest.mark.asyncio
    async def test_send_and_receive(self, server, make_session):
        """Answers arrive tagged with the connection generation."""
        session = make_session(server.port)
        await session.start()

        msg_id = session.send(subscribe_request("B1101", ["STATUS", "LSTTMP"]))

        await wait_for(lambda: session.on_message.called)
        generation, msg = session.on_message.call_args.args
        assert generation == 1
        assert msg.command == "SendParamList"
        assert msg.message_id == msg_id
        assert msg.object_list == [
            {"objnam": "B1101", "params": {"STATUS": "OFF", "LSTTMP": "78"}}
        ]

    @pytest.mark.asyncio
    async def test_send_when_disconnected(self, make_session):
        """Sending without a connection reports the failure instead of raising."""
        session = make_session(6681)
        request = subscribe_request("B1101", ["STATUS"])

        assert session.send(request) is None

        session.on_send_error.assert_called_once()
        failed_request, exc = session.on_send_error.call_args.args
        assert failed_request is request
        assert isinstance(exc, ICConnectionError)

    @pytest.mark.asyncio
    async def test_stale_protocol_is_ignored(self, make_session):
        """Messages and closes from a replaced connection are dropped."""
        session = make_session(6681)
        stale = MagicMock(generation=7)

        session.message_received(stale, ICResponse(command="NotifyList"))
        session.connection_lost(stale, None)

        session.on_message.assert_not_called()
        session.on_disconnected.assert_not_called()
        assert not session.reconnecting


class TestReconnect:
    """Tests for the reconnect loop."""

    @pytest.mark.asyncio
    async def test_reconnect_after_drop(self, server, make_session):
        """A dropped connection is re-established with a new generation."""
        session = make_session(server.port)
        await session.start()

        await wait_for(lambda: server.client_count == 1)
        await server.drop_clients()

        await wait_for(lambda: session.on_disconnected.called)
        await wait_for(lambda: session.connected and session.generation == 2)

        assert server.connections == 2
        assert [call.args[0] for call in session.on_connected.call_args_list] == [1, 2]

    @pytest.mark.asyncio
    async def test_reconnect_until_available(self, make_session):
        """Reconnect attempts continue until the controller comes back."""
        server = MockIntelliCenterServer()
        await server.start()
        port = server.port
        await server.stop()

        session = make_session(port)
        with pytest.raises(ICConnectionError):
            await session.start()

        # let a couple of attempts fail before the controller returns
        await asyncio.sleep(0.15)
        async with MockIntelliCenterServer(port=port):
            await wait_for(lambda: session.connected)
        assert session.generation >= 2

    @pytest.mark.asyncio
    async def test_stop_does_not_reconnect(self, server, make_session):
        """Stopping closes the connection for good."""
        session = make_session(server.port)
        await session.start()

        await session.stop()
        await asyncio.sleep(0.15)

        assert session.state == SessionState.DISCONNECTED
        assert not session.reconnecting
        assert server.connections == 1
        session.on_disconnected.assert_not_called()

    @pytest.mark.asyncio
    async def test_stop_while_connecting(self, server, make_session):
        """A connect still in progress when stop() is called is abandoned."""
        session = make_session(server.port, login_timeout=0.1)
        start = asyncio.create_task(session.start())
        await asyncio.sleep(0)

        await session.stop()
        await start

        assert not session.connected
        assert session.state == SessionState.DISCONNECTED
        assert not session.reconnecting
        session.on_connected.assert_not_called()
        await wait_for(lambda: server.client_count == 0)
