"""Protocol for communicating with a Pentair system.

This module implements the low-level TCP protocol for communicating with
Pentair IntelliCenter pool control systems. It handles:
- an optional telnet style login before the JSON stream starts
- line framing of the JSON messages (see framing.py)
- message ids for outgoing requests
- connection health monitoring via keepalive queries
"""

from __future__ import annotations

import asyncio
import contextlib
import dataclasses
import logging
from typing import TYPE_CHECKING, cast

from .codec import decode_message, encode_request, keepalive_request
from .exceptions import DecodeError, FrameOverflowError, ICAuthenticationError, ICConnectionError
from .framing import DEFAULT_MAX_BUFFER_SIZE, FrameAssembler

if TYPE_CHECKING:
    from .codec import ICRequest, ICResponse
    from .session import TransportSession

_LOGGER = logging.getLogger(__name__)

# ---------------------------------------------------------------------------

# IntelliCenter does NOT support ping/pong, so we send a periodic query
HEARTBEAT_INTERVAL = 30  # check connection health every 30 seconds
KEEPALIVE_INTERVAL = 90  # send keepalive query every 90 seconds
CONNECTION_IDLE_TIMEOUT = 300  # close connection if nothing received for 5 minutes
MAX_MISSED_KEEPALIVES = 3

# how long to wait for a login prompt before assuming none is required
LOGIN_PROMPT_TIMEOUT = 1.5

LOGIN_PROMPTS = ("login", "username", "user name")
PASSWORD_PROMPT = "password"
LOGIN_FAILURES = ("incorrect", "fail", "denied", "invalid")


class ICProtocol(asyncio.Protocol):
    """The ICProtocol handles the low level protocol with a Pentair system.

    In particular, it takes care of the following:
    - answering the login prompt when credentials are configured
    - turning received data into decoded messages, one per line
    - generating unique msg ids for outgoing requests
    - monitoring connection health via keepalive queries and idle timeout

    Every protocol instance belongs to one connection attempt of the session
    and carries that attempt's generation, so that late callbacks of an old
    connection can be told apart from the current one.
    """

    def __init__(
        self,
        session: TransportSession,
        generation: int,
        *,
        username: str | None = None,
        password: str | None = None,
        max_buffer_size: int = DEFAULT_MAX_BUFFER_SIZE,
        keepalive_interval: float | None = None,
    ) -> None:
        self._session = session
        self._generation = generation
        self._username = username
        self._password = password
        self._keepalive_interval = keepalive_interval or KEEPALIVE_INTERVAL

        self._transport: asyncio.Transport | None = None
        self._assembler = FrameAssembler(max_buffer_size)

        # IntelliCenter expects each request to have a unique incrementing ID
        self._msg_id = 1

        # login state
        self._ready: asyncio.Future[None] | None = None
        self._logging_in = bool(username or password)
        self._password_sent = False

        self._last_data_received: float | None = None
        self._last_keepalive_sent: float | None = None
        self._pending_keepalive_id: str | None = None
        self._missed_keepalive_responses = 0

        self._heartbeat_task: asyncio.Task[None] | None = None

    def __repr__(self) -> str:
        return (
            f"ICProtocol(generation={self._generation}, "
            f"connected={self.connected}, logging_in={self._logging_in})"
        )

    @property
    def generation(self) -> int:
        """Return the connection generation this protocol serves."""
        return self._generation

    @property
    def connected(self) -> bool:
        """Return True while the transport is open."""
        return self._transport is not None and not self._transport.is_closing()

    # -----------------------------------------------------------------------
    # asyncio.Protocol callbacks

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        """Handle the callback for a successful connection."""
        self._transport = cast("asyncio.Transport", transport)
        self._msg_id = 1

        loop = asyncio.get_running_loop()
        current_time = loop.time()
        self._last_data_received = current_time
        self._last_keepalive_sent = current_time

        self._ready = loop.create_future()
        if not self._logging_in:
            self._ready.set_result(None)

        self._heartbeat_task = asyncio.create_task(self._heartbeat_loop())

    def connection_lost(self, exc: Exception | None) -> None:
        """Handle the callback for connection lost."""
        if self._heartbeat_task and not self._heartbeat_task.done():
            self._heartbeat_task.cancel()
        self._heartbeat_task = None
        self._transport = None
        self._assembler.reset()

        if self._ready and not self._ready.done():
            self._ready.set_exception(ICConnectionError(f"Connection closed during login: {exc}"))

        self._session.connection_lost(self, exc)

    def data_received(self, data: bytes) -> None:
        """Handle the callback for data received."""
        self._last_data_received = asyncio.get_running_loop().time()

        if self._logging_in and self._negotiate_login(data):
            return

        try:
            lines = self._assembler.feed(data)
        except FrameOverflowError as err:
            _LOGGER.warning("PROTOCOL: %s, discarding buffer", err)
            return

        for line in lines:
            self.process_line(line)

    # -----------------------------------------------------------------------
    # login

    async def wait_ready(self, timeout: float = LOGIN_PROMPT_TIMEOUT) -> None:
        """Wait until the connection can carry JSON messages.

        Without credentials this returns at once. With credentials, it waits
        for the login exchange to finish; if the controller does not prompt
        within timeout, no login is required and the connection is ready.

        Raises:
            ICAuthenticationError: If the controller rejected the credentials.
            ICConnectionError: If the connection closed during login.
        """
        if self._ready is None:
            raise ICConnectionError("Not connected")
        try:
            async with asyncio.timeout(timeout):
                await asyncio.shield(self._ready)
        except TimeoutError:
            if self._password_sent:
                _LOGGER.debug("PROTOCOL: no rejection after password, assuming login accepted")
            else:
                _LOGGER.debug("PROTOCOL: no login prompt received, assuming none is needed")
            self._login_complete()

    def _login_complete(self) -> None:
        self._logging_in = False
        if self._ready and not self._ready.done():
            self._ready.set_result(None)

    def _negotiate_login(self, data: bytes) -> bool:
        """Answer login prompts.

        Returns:
            True if data was consumed by the login exchange.
        """
        text = data.decode("utf-8", errors="replace")
        if text.lstrip().startswith("{"):
            # the JSON stream has started, so whatever login there was is over
            self._login_complete()
            return False

        lowered = text.lower()
        if any(marker in lowered for marker in LOGIN_FAILURES):
            _LOGGER.error("PROTOCOL: login failed: %s", text.strip())
            if self._ready and not self._ready.done():
                self._ready.set_exception(ICAuthenticationError(f"Login rejected: {text.strip()}"))
            if self._transport:
                self._transport.close()
            return True

        if PASSWORD_PROMPT in lowered:
            _LOGGER.debug("PROTOCOL: sending password")
            self._write_line(self._password or "")
            self._password_sent = True
        elif any(prompt in lowered for prompt in LOGIN_PROMPTS):
            _LOGGER.debug("PROTOCOL: sending username")
            self._write_line(self._username or "")
        elif self._password_sent:
            _LOGGER.debug("PROTOCOL: login accepted")
            self._login_complete()
        else:
            _LOGGER.debug("PROTOCOL: ignoring banner %r", text.strip())
        return True

    def _write_line(self, text: str) -> None:
        if self._transport:
            self._transport.write(text.encode("utf-8") + b"\r\n")

    # -----------------------------------------------------------------------
    # messages

    def send_request(self, request: ICRequest) -> str:
        """Send a request and return the message ID it was given.

        The request itself is not modified.

        Raises:
            ICConnectionError: If the transport is closed.
        """
        if not self.connected:
            raise ICConnectionError("Not connected")

        msg_id = str(self._msg_id)
        self._msg_id += 1
        packet = encode_request(dataclasses.replace(request, message_id=msg_id))
        _LOGGER.debug("PROTOCOL: writing to transport (size %d): %s", len(packet), packet)
        cast("asyncio.Transport", self._transport).write(packet)
        return msg_id

    def process_line(self, line: bytes) -> None:
        """Decode one line and hand it to the session."""
        _LOGGER.debug("PROTOCOL: received %s", line)
        try:
            msg = decode_message(line)
        except DecodeError as err:
            _LOGGER.error("PROTOCOL: %s", err)
            return

        if self._is_keepalive_response(msg):
            _LOGGER.debug("PROTOCOL: keepalive response received")
            return

        try:
            self._session.message_received(self, msg)
        except Exception:  # noqa: BLE001 - Protocol callback must not crash
            _LOGGER.exception("PROTOCOL: unexpected exception while handling %s", msg.command)

    def _is_keepalive_response(self, msg: ICResponse) -> bool:
        if self._pending_keepalive_id is None or msg.message_id != self._pending_keepalive_id:
            return False
        self._pending_keepalive_id = None
        self._missed_keepalive_responses = 0
        return True

    def send_keepalive(self) -> None:
        """Send the keepalive query, remembering its id."""
        try:
            self._pending_keepalive_id = self.send_request(keepalive_request())
        except ICConnectionError as err:
            _LOGGER.debug("PROTOCOL: keepalive query failed: %s", err)
            return
        self._last_keepalive_sent = asyncio.get_running_loop().time()

    def close(self) -> None:
        """Close the transport; connection_lost() follows."""
        if self._transport:
            self._transport.close()

    # -----------------------------------------------------------------------

    async def _heartbeat_loop(self) -> None:
        """Send keepalive queries and close the connection when it goes quiet."""
        with contextlib.suppress(asyncio.CancelledError):
            while True:
                await asyncio.sleep(HEARTBEAT_INTERVAL)

                if not self.connected:
                    _LOGGER.debug("PROTOCOL: heartbeat stopped - transport closed")
                    break

                current_time = asyncio.get_running_loop().time()

                if self._pending_keepalive_id is not None:
                    self._missed_keepalive_responses += 1
                    _LOGGER.warning(
                        "PROTOCOL: keepalive response not received (missed: %d/%d)",
                        self._missed_keepalive_responses,
                        MAX_MISSED_KEEPALIVES,
                    )
                    if self._missed_keepalive_responses >= MAX_MISSED_KEEPALIVES:
                        _LOGGER.error("PROTOCOL: keepalive responses missed - closing connection")
                        self.close()
                        break

                if (
                    self._last_keepalive_sent is not None
                    and current_time - self._last_keepalive_sent > self._keepalive_interval
                ):
                    _LOGGER.debug("PROTOCOL: sending keepalive query")
                    self.send_keepalive()

                if (
                    self._last_data_received is not None
                    and current_time - self._last_data_received > CONNECTION_IDLE_TIMEOUT
                ):
                    _LOGGER.warning(
                        "PROTOCOL: no data received for %.1fs - closing connection",
                        current_time - self._last_data_received,
                    )
                    self.close()
                    break
