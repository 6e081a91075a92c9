"""mDNS location of IntelliCenter controllers on the local network.

Used when no host is configured: the bridge browses Zeroconf for services
announced by a Pentair controller and connects to the first one found.

Example:
    ```python
    import asyncio
    from pyicbridge.locator import locate_controllers

    async def main():
        for address in await locate_controllers(timeout=5.0):
            print(f"{address.name} at {address.host}:{address.port}")

    asyncio.run(main())
    ```
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from zeroconf import ServiceBrowser
from zeroconf.asyncio import AsyncZeroconf

from .attributes import DEFAULT_PORT

if TYPE_CHECKING:
    from zeroconf import ServiceInfo, Zeroconf

_LOGGER = logging.getLogger(__name__)

SERVICE_TYPES = ("_http._tcp.local.", "_pentair._tcp.local.")
DEFAULT_LOCATE_TIMEOUT = 10.0

# bounded so a noisy network cannot grow it forever
MAX_PENDING_EVENTS = 100


@dataclass(frozen=True)
class ControllerAddress:
    """Where a located controller can be reached."""

    name: str
    host: str
    port: int = DEFAULT_PORT
    model: str | None = None


class _BrowseListener:
    """Collects Zeroconf callbacks into an asyncio queue.

    Zeroconf calls the listener from its own thread, so events are only
    queued here and resolved on the event loop.
    """

    def __init__(
        self, loop: asyncio.AbstractEventLoop, queue: asyncio.Queue[tuple[str, str]]
    ) -> None:
        self._loop = loop
        self._queue = queue
        self.found: dict[str, ControllerAddress] = {}

    def _enqueue(self, service_type: str, name: str) -> None:
        try:
            self._queue.put_nowait((service_type, name))
        except asyncio.QueueFull:
            _LOGGER.warning("Locator queue full, dropping %s", name)

    def add_service(self, zc: Zeroconf, service_type: str, name: str) -> None:  # noqa: ARG002
        self._loop.call_soon_threadsafe(self._enqueue, service_type, name)

    def update_service(self, zc: Zeroconf, service_type: str, name: str) -> None:  # noqa: ARG002
        self._loop.call_soon_threadsafe(self._enqueue, service_type, name)

    def remove_service(self, zc: Zeroconf, service_type: str, name: str) -> None:  # noqa: ARG002
        self.found.pop(name, None)


def is_pentair_service(name: str, info: ServiceInfo) -> bool:
    """Return True if a service looks like an IntelliCenter."""
    markers = ("pentair", "intellicenter")
    if any(marker in name.lower() for marker in markers):
        return True
    for key, value in (info.properties or {}).items():
        text = key.decode("utf-8", errors="ignore").lower()
        if value is not None:
            text += " " + value.decode("utf-8", errors="ignore").lower()
        if any(marker in text for marker in markers):
            return True
    return False


async def _resolve(aiozc: AsyncZeroconf, service_type: str, name: str) -> ControllerAddress | None:
    info = await aiozc.async_get_service_info(service_type, name, timeout=3000)
    if info is None:
        return None

    service_name = info.name or name
    if not is_pentair_service(service_name, info):
        return None

    addresses = info.parsed_addresses()
    if not addresses:
        return None

    model = None
    if info.properties and info.properties.get(b"model"):
        model = info.properties[b"model"].decode("utf-8", errors="ignore")

    return ControllerAddress(
        name=service_name,
        host=addresses[0],
        port=info.port or DEFAULT_PORT,
        model=model,
    )


async def locate_controllers(timeout: float = DEFAULT_LOCATE_TIMEOUT) -> list[ControllerAddress]:
    """Browse the network for IntelliCenter controllers.

    Args:
        timeout: How long to keep listening, in seconds.

    Returns:
        The controllers seen during that window.
    """
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue[tuple[str, str]] = asyncio.Queue(maxsize=MAX_PENDING_EVENTS)
    listener = _BrowseListener(loop, queue)

    aiozc = AsyncZeroconf()
    browsers = [
        ServiceBrowser(aiozc.zeroconf, service_type, listener) for service_type in SERVICE_TYPES
    ]

    try:
        deadline = loop.time() + timeout
        while (remaining := deadline - loop.time()) > 0:
            try:
                async with asyncio.timeout(min(remaining, 1.0)):
                    service_type, name = await queue.get()
            except TimeoutError:
                continue
            try:
                address = await _resolve(aiozc, service_type, name)
            except OSError as err:
                _LOGGER.debug("Cannot resolve %s: %s", name, err)
                continue
            if address:
                _LOGGER.debug(
                    "Located IntelliCenter %s at %s:%d", address.name, address.host, address.port
                )
                listener.found[name] = address
        return list(listener.found.values())
    finally:
        for browser in browsers:
            with contextlib.suppress(Exception):
                browser.cancel()
        await aiozc.async_close()


async def find_controller(
    name: str | None = None,
    host: str | None = None,
    timeout: float = DEFAULT_LOCATE_TIMEOUT,
) -> ControllerAddress | None:
    """Return the first located controller matching name and/or host.

    Args:
        name: Case-insensitive substring of the announced name.
        host: Exact IP address.
        timeout: How long to browse, in seconds.
    """
    for address in await locate_controllers(timeout):
        if name and name.lower() not in address.name.lower():
            continue
        if host and address.host != host:
            continue
        return address
    return None
