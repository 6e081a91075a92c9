"""Connection lifecycle of the bridge.

The TransportSession owns the TCP connection to the IntelliCenter. It
connects (optionally logging in), sends requests without waiting for their
answers, and reconnects on its own after an unexpected close.

Each successful connect increments a generation counter. Messages are
handed to on_message() together with the generation of the connection they
arrived on, which lets consumers ignore results that belong to a connection
that has since been replaced.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from enum import StrEnum
from typing import TYPE_CHECKING

from .attributes import DEFAULT_PORT
from .exceptions import ICConnectionError
from .framing import DEFAULT_MAX_BUFFER_SIZE
from .protocol import KEEPALIVE_INTERVAL, LOGIN_PROMPT_TIMEOUT, ICProtocol

if TYPE_CHECKING:
    from .codec import ICRequest, ICResponse

_LOGGER = logging.getLogger(__name__)

DEFAULT_RECONNECT_DELAY = 30  # seconds between reconnect attempts
DEFAULT_CONNECT_TIMEOUT = 10.0  # seconds to wait for the TCP connection


class SessionState(StrEnum):
    """State of the transport session."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class TransportSession:
    """Manages the connection to an IntelliCenter, reconnecting as needed.

    Example:
        session = TransportSession("192.168.1.100")
        session.on_message = lambda generation, msg: print(msg)
        await session.start()
        session.send(subscribe_request("B1101", ["STATUS"]))
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        *,
        username: str | None = None,
        password: str | None = None,
        max_buffer_size: int = DEFAULT_MAX_BUFFER_SIZE,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        keepalive_interval: float = KEEPALIVE_INTERVAL,
        login_timeout: float = LOGIN_PROMPT_TIMEOUT,
    ) -> None:
        """Initialize the session.

        Args:
            host: IP address or hostname of IntelliCenter
            port: TCP port (default: 6681)
            username: Login name, only needed if the controller asks for one
            password: Login password
            max_buffer_size: Largest partial line kept before it is discarded
            connect_timeout: Seconds to wait for the TCP connection
            reconnect_delay: Seconds to wait before each reconnect attempt
            keepalive_interval: Seconds between keepalive queries
            login_timeout: Seconds to wait for a login prompt
        """
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._max_buffer_size = max_buffer_size
        self._connect_timeout = connect_timeout
        self._reconnect_delay = reconnect_delay
        self._keepalive_interval = keepalive_interval
        self._login_timeout = login_timeout

        self._state = SessionState.DISCONNECTED
        self._generation = 0
        self._protocol: ICProtocol | None = None
        self._reconnect_task: asyncio.Task[None] | None = None
        self._stopped = False

    def __repr__(self) -> str:
        return (
            f"TransportSession(host={self._host!r}, port={self._port}, "
            f"state={self._state}, generation={self._generation})"
        )

    @property
    def host(self) -> str:
        """Return the host address."""
        return self._host

    @property
    def port(self) -> int:
        """Return the port number."""
        return self._port

    @property
    def state(self) -> SessionState:
        """Return the current state."""
        return self._state

    @property
    def generation(self) -> int:
        """Return the generation of the current (or last) connection."""
        return self._generation

    @property
    def connected(self) -> bool:
        """Return True if connected."""
        return (
            self._state == SessionState.CONNECTED
            and self._protocol is not None
            and self._protocol.connected
        )

    @property
    def reconnecting(self) -> bool:
        """Return True while a reconnect attempt is scheduled."""
        return self._reconnect_task is not None and not self._reconnect_task.done()

    # -----------------------------------------------------------------------

    async def connect(self) -> None:
        """Open the connection and log in if the controller asks for it.

        Raises:
            ICConnectionError: If the connection fails or times out.
            ICAuthenticationError: If the controller rejects the credentials.
        """
        if self.connected:
            return

        self._state = SessionState.CONNECTING
        self._generation += 1
        generation = self._generation
        loop = asyncio.get_running_loop()

        try:
            async with asyncio.timeout(self._connect_timeout):
                transport, protocol = await loop.create_connection(
                    lambda: ICProtocol(
                        self,
                        generation,
                        username=self._username,
                        password=self._password,
                        max_buffer_size=self._max_buffer_size,
                        keepalive_interval=self._keepalive_interval,
                    ),
                    self._host,
                    self._port,
                )
        except TimeoutError as err:
            self._state = SessionState.DISCONNECTED
            raise ICConnectionError(f"Connection to {self._host}:{self._port} timed out") from err
        except OSError as err:
            self._state = SessionState.DISCONNECTED
            raise ICConnectionError(
                f"Failed to connect to {self._host}:{self._port}: {err}"
            ) from err

        if self._stopped:
            self._abandon(transport)
            return

        try:
            await protocol.wait_ready(self._login_timeout)
        except ICConnectionError:
            self._state = SessionState.DISCONNECTED
            transport.close()
            raise

        if self._stopped:
            self._abandon(transport)
            return

        self._protocol = protocol
        self._state = SessionState.CONNECTED
        _LOGGER.info(
            "Connected to IntelliCenter at %s:%s (generation %d)",
            self._host,
            self._port,
            generation,
        )
        self.on_connected(generation)

    def _abandon(self, transport: asyncio.BaseTransport) -> None:
        """Close a connection that finished opening after stop()."""
        _LOGGER.debug("Session stopped while connecting to %s, closing", self._host)
        self._state = SessionState.DISCONNECTED
        transport.close()

    async def start(self) -> None:
        """Connect for the first time.

        If this first attempt fails the error is raised, and reconnect
        attempts continue in the background until stop() is called.
        """
        self._stopped = False
        try:
            await self.connect()
        except ICConnectionError as err:
            _LOGGER.warning("Connection to %s failed: %s", self._host, err)
            self._schedule_reconnect()
            raise

    async def stop(self) -> None:
        """Close the connection and stop reconnecting."""
        self._stopped = True
        if self._reconnect_task and not self._reconnect_task.done():
            self._reconnect_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._reconnect_task
        self._reconnect_task = None

        protocol, self._protocol = self._protocol, None
        self._state = SessionState.DISCONNECTED
        if protocol:
            protocol.close()
        _LOGGER.debug("Disconnected from IC")

    def send(self, request: ICRequest) -> str | None:
        """Send a request without waiting for an answer.

        Failures never propagate to the caller: they are logged and passed to
        on_send_error().

        Returns:
            The message ID of the request, or None if it could not be sent.
        """
        if not self.connected or self._protocol is None:
            self._send_failed(request, ICConnectionError("Not connected"))
            return None
        try:
            return self._protocol.send_request(request)
        except (ICConnectionError, OSError, RuntimeError) as err:
            self._send_failed(request, err)
            return None

    def _send_failed(self, request: ICRequest, exc: Exception) -> None:
        _LOGGER.warning("Cannot send %s: %s", request.command, exc)
        self.on_send_error(request, exc)

    # -----------------------------------------------------------------------
    # called by ICProtocol

    def connection_lost(self, protocol: ICProtocol, exc: Exception | None) -> None:
        """Handle the loss of a connection."""
        if protocol is not self._protocol:
            _LOGGER.debug("Ignoring close of stale connection (generation %d)", protocol.generation)
            return

        self._protocol = None
        self._state = SessionState.DISCONNECTED
        if self._stopped:
            return

        _LOGGER.warning("Disconnected from %s: %s", self._host, exc)
        self.on_disconnected(exc)
        self._schedule_reconnect()

    def message_received(self, protocol: ICProtocol, msg: ICResponse) -> None:
        """Forward a message of the current connection to on_message()."""
        if protocol is not self._protocol or protocol.generation != self._generation:
            _LOGGER.debug(
                "Dropping %s from stale connection (generation %d)",
                msg.command,
                protocol.generation,
            )
            return
        self.on_message(protocol.generation, msg)

    # -----------------------------------------------------------------------

    def _schedule_reconnect(self) -> None:
        if self._stopped or self.reconnecting:
            return
        self._reconnect_task = asyncio.create_task(self._reconnect())

    async def _reconnect(self) -> None:
        """Wait for the backoff delay and reconnect, until it works or we stop."""
        while not self._stopped:
            self.on_retrying(self._reconnect_delay)
            await asyncio.sleep(self._reconnect_delay)
            if self._stopped:
                break
            try:
                await self.connect()
            except ICConnectionError as err:
                _LOGGER.warning("Reconnect to %s failed: %s", self._host, err)
                continue
            return

    # -----------------------------------------------------------------------
    # Override these methods or assign callables to handle events

    def on_connected(self, generation: int) -> None:
        """Called after every successful connect, including reconnects."""

    def on_disconnected(self, exc: Exception | None) -> None:
        """Called when the connection is lost unexpectedly."""

    def on_message(self, generation: int, msg: ICResponse) -> None:
        """Called for every message received on the current connection."""

    def on_send_error(self, request: ICRequest, exc: Exception) -> None:
        """Called when a request could not be sent."""

    def on_retrying(self, delay: float) -> None:
        """Called before waiting to reconnect."""
        _LOGGER.info("Reconnecting to %s in %ss", self._host, delay)
