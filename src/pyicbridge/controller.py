"""Bridge controller for Pentair IntelliCenter.

The BridgeController ties the pieces together:

- the TransportSession keeps a connection open and reconnects after a close
- every (re)connect starts a discovery run; when it completes the merged
  hardware definition is transformed into panels, loaded into the
  EntityRegistry and subscriptions are sent for every exposed object
- change notifications are routed to the registry in the order received
- accessory commands are translated into SetParamList requests

Example:
    config = BridgeConfig(host="192.168.1.100")
    controller = BridgeController(config)
    controller.registry.on_entity_changed = lambda entity, fields: print(entity.name, fields)
    await controller.start()
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from .attributes import (
    ACT_ATTR,
    CHANGE_COMMANDS,
    GET_HARDWARE_DEFINITION_QUERY,
    HEATER_ATTR,
    LOTMP_ATTR,
    NULL_OBJNAM,
    REQUEST_COMMANDS,
    SEND_QUERY_CMD,
    SPEED_ATTR,
    STATUS_ATTR,
    STATUS_OFF,
    STATUS_ON,
)
from .codec import normalize_changes, set_params_request, subscribe_request
from .config import BridgeConfig
from .conversions import (
    celsius_to_fahrenheit,
    intellibrite_color,
    power_level_to_speed,
    round_half_up,
    speed_bounds,
    speed_to_power_level,
)
from .discovery import HardwareDiscovery
from .exceptions import ICConnectionError, ICResponseError, UnknownObjectError
from .locator import find_controller
from .model import Body, Circuit
from .registry import EntityRegistry
from .session import TransportSession
from .transform import transform_panels

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .codec import ICRequest, ICResponse
    from .model import Color, Panel

_LOGGER = logging.getLogger(__name__)

# Give the controller time to absorb a saturation change before the hue
LIGHT_SETTLE_DELAY = 0.01

SATURATION_BINDING = "saturation"
COLOR_BINDING = "color"


def _format_number(value: float) -> str:
    """Render a number the way the controller writes it."""
    return str(int(value)) if float(value).is_integer() else str(value)


class BridgeController:
    """Keeps an EntityRegistry in sync with an IntelliCenter."""

    def __init__(
        self,
        config: BridgeConfig | None = None,
        registry: EntityRegistry | None = None,
        *,
        light_settle_delay: float = LIGHT_SETTLE_DELAY,
    ) -> None:
        """Initialize the controller.

        Args:
            config: Bridge settings (default: locate the controller by mDNS)
            registry: Registry to keep up to date (default: a new one)
            light_settle_delay: Seconds set_light_hue() waits before sending
        """
        self._config = config or BridgeConfig()
        self._registry = registry if registry is not None else EntityRegistry()
        self._discovery = HardwareDiscovery()
        self._session: TransportSession | None = None
        self._light_settle_delay = light_settle_delay

    def __repr__(self) -> str:
        return (
            f"BridgeController(host={self.host!r}, connected={self.connected}, "
            f"discovering={self._discovery.in_progress})"
        )

    @property
    def config(self) -> BridgeConfig:
        """Return the bridge configuration."""
        return self._config

    @property
    def registry(self) -> EntityRegistry:
        """Return the entity registry."""
        return self._registry

    @property
    def discovery(self) -> HardwareDiscovery:
        """Return the discovery sequencer."""
        return self._discovery

    @property
    def session(self) -> TransportSession | None:
        """Return the transport session, once started."""
        return self._session

    @property
    def host(self) -> str | None:
        """Return the controller address in use (or configured)."""
        return self._session.host if self._session else self._config.host

    @property
    def connected(self) -> bool:
        """Return True if connected."""
        return self._session is not None and self._session.connected

    # -----------------------------------------------------------------------
    # lifecycle

    def create_session(self, host: str, port: int) -> TransportSession:
        """Build the transport session and wire its callbacks to this controller."""
        session = TransportSession(
            host,
            port,
            username=self._config.username,
            password=self._config.password,
            max_buffer_size=self._config.max_buffer_size,
            connect_timeout=self._config.connect_timeout,
            reconnect_delay=self._config.reconnect_delay,
            keepalive_interval=self._config.keepalive_interval,
        )
        session.on_connected = self._on_connected
        session.on_disconnected = self._on_disconnected
        session.on_message = self.handle_message
        session.on_send_error = self._on_send_error
        return session

    async def start(self) -> None:
        """Connect to the IntelliCenter and start discovery.

        Raises:
            ICConnectionError: If no controller could be located or the first
                connection attempt failed (reconnects continue regardless).
        """
        host, port = self._config.host, self._config.port
        if not host:
            _LOGGER.info("No host configured, looking for an IntelliCenter on the network")
            address = await find_controller(timeout=self._config.connect_timeout)
            if address is None:
                raise ICConnectionError("No IntelliCenter found on the network")
            _LOGGER.info("Found %s at %s:%d", address.name, address.host, address.port)
            host, port = address.host, address.port

        if self._session is None:
            self._session = self.create_session(host, port)
        await self._session.start()

    async def stop(self) -> None:
        """Stop reconnecting, drop any discovery in progress and disconnect."""
        self._discovery.cancel()
        if self._session:
            await self._session.stop()

    def _on_connected(self, generation: int) -> None:
        self._registry.clear()
        _LOGGER.info("Starting discovery (generation %d)", generation)
        self.send_command(self._discovery.start(generation))

    def _on_disconnected(self, exc: Exception | None) -> None:
        self._discovery.cancel()
        self._registry.clear()
        self.on_disconnected(exc)

    def _on_send_error(self, request: ICRequest, exc: Exception) -> None:
        self.on_send_error(request, exc)

    # -----------------------------------------------------------------------
    # inbound

    def handle_message(self, generation: int, msg: ICResponse) -> None:
        """Dispatch one message received on the connection of generation."""
        if not msg.ok:
            _LOGGER.error(
                "Received unsuccessful response code %s for %s: %s",
                msg.response,
                msg.command,
                msg.description or msg.raw,
            )
            self.on_response_error(msg, ICResponseError(msg.response))
            return

        if msg.command in REQUEST_COMMANDS:
            _LOGGER.debug("Request with message ID %s was successful", msg.message_id)
            return

        if msg.command == SEND_QUERY_CMD and msg.query_name == GET_HARDWARE_DEFINITION_QUERY:
            self._handle_hardware_definition(generation, msg.answer)
            return

        if msg.command in CHANGE_COMMANDS:
            if msg.object_list is None:
                _LOGGER.error("Object list missing in %s message", msg.command)
                return
            _LOGGER.debug("Handling %s for message ID %s", msg.command, msg.message_id)
            self._registry.apply_changes(normalize_changes(msg.object_list))
            return

        _LOGGER.debug("Unhandled command %s", msg.command)

    def _handle_hardware_definition(self, generation: int, answer: Any) -> None:
        next_request = self._discovery.handle_answer(generation, answer)
        if next_request is not None:
            self.send_command(next_request)
            return
        if not self._discovery.complete or self._discovery.generation != generation:
            return

        panels = transform_panels(self._discovery.take_result())
        for request in self._registry.load(panels):
            self.send_command(request)
        _LOGGER.info(
            "Discovery complete: %d panel(s), %d entities", len(panels), len(self._registry)
        )
        self.on_discovered(panels)

    # -----------------------------------------------------------------------
    # outbound

    def send_command(self, request: ICRequest) -> str | None:
        """Send a request without waiting for its answer.

        Returns:
            The message ID, or None if the request could not be sent.
        """
        if self._session is None:
            exc = ICConnectionError("Not started")
            _LOGGER.warning("Cannot send %s: %s", request.command, exc)
            self.on_send_error(request, exc)
            return None
        return self._session.send(request)

    def subscribe(self, objnam: str, keys: Iterable[str]) -> str | None:
        """Ask to be notified of changes to keys of objnam."""
        return self.send_command(subscribe_request(objnam, keys))

    def _circuit(self, objnam: str) -> Circuit:
        entity = self._registry.require(objnam)
        if not isinstance(entity, Circuit):
            raise UnknownObjectError(objnam)
        return entity

    def _body(self, objnam: str) -> Body:
        entity = self._registry.require(objnam)
        if not isinstance(entity, Body):
            raise UnknownObjectError(objnam)
        return entity

    def set_circuit_status(self, objnam: str, on: bool) -> str | None:
        """Turn a circuit (or body) on or off."""
        _LOGGER.info("Setting %s to %s", objnam, STATUS_ON if on else STATUS_OFF)
        return self.send_command(
            set_params_request(objnam, {STATUS_ATTR: STATUS_ON if on else STATUS_OFF})
        )

    def set_heater(self, body_id: str, heater_id: str, on: bool) -> str | None:
        """Select (or deselect) the heater of a body.

        Turning a heater on also turns the body on, since heating needs the
        pump running.
        """
        self._body(body_id)
        if on:
            self.set_circuit_status(body_id, True)
        _LOGGER.info("Setting heater of %s to %s", body_id, heater_id if on else NULL_OBJNAM)
        return self.send_command(
            set_params_request(body_id, {HEATER_ATTR: heater_id if on else NULL_OBJNAM})
        )

    def set_setpoint(self, body_id: str, celsius: float) -> str | None:
        """Set the target temperature of a body, given in Celsius."""
        self._body(body_id)
        if self._config.uses_fahrenheit:
            value = _format_number(round_half_up(celsius_to_fahrenheit(celsius)))
        else:
            value = _format_number(celsius)
        _LOGGER.info("Setting temperature of %s to %s (converted to %s)", body_id, celsius, value)
        return self.send_command(set_params_request(body_id, {LOTMP_ATTR: value}))

    def power_level(self, circuit_id: str) -> int:
        """Return the 0-100 power level of a pump backed circuit."""
        pump_circuit = self._circuit(circuit_id).pump_circuit
        if pump_circuit is None or pump_circuit.pump is None:
            return 0
        minimum, maximum = speed_bounds(pump_circuit.pump, pump_circuit.speed_type)
        return speed_to_power_level(pump_circuit.speed, minimum, maximum)

    def set_pump_power_level(self, circuit_id: str, power_level: float) -> str | None:
        """Run the pump of a circuit at a 0-100 power level.

        Level 0 turns the circuit off; any other level turns it on first if
        needed and then sets the pump circuit speed.
        """
        circuit = self._circuit(circuit_id)
        pump_circuit = circuit.pump_circuit
        if pump_circuit is None or pump_circuit.pump is None:
            _LOGGER.error("Cannot set speed of %s, no pump circuit", circuit_id)
            return None

        if power_level == 0:
            return self.set_circuit_status(circuit_id, False)
        if not circuit.is_on:
            self.set_circuit_status(circuit_id, True)

        minimum, maximum = speed_bounds(pump_circuit.pump, pump_circuit.speed_type)
        speed = power_level_to_speed(power_level, minimum, maximum, pump_circuit.speed_type)
        _LOGGER.info(
            "Setting speed of %s to %s, converted to %d %s",
            pump_circuit.pump.name,
            power_level,
            speed,
            pump_circuit.speed_type,
        )
        return self.send_command(set_params_request(pump_circuit.objnam, {SPEED_ATTR: str(speed)}))

    def set_light_saturation(self, objnam: str, saturation: float) -> None:
        """Remember the saturation for the hue that follows."""
        self._circuit(objnam)
        self._registry.binding(objnam)[SATURATION_BINDING] = saturation

    async def set_light_hue(self, objnam: str, hue: float) -> Color:
        """Set an IntelliBrite light to the color closest to hue.

        The saturation is usually set right before the hue; wait briefly so it
        has been recorded before picking the color.

        Returns:
            The color sent to the light.
        """
        self._circuit(objnam)
        await asyncio.sleep(self._light_settle_delay)

        binding = self._registry.binding(objnam)
        color = intellibrite_color(hue, binding.get(SATURATION_BINDING, 0))
        _LOGGER.info("Setting %s to %s", objnam, color.name)
        self.send_command(set_params_request(objnam, {ACT_ATTR: color.code}))

        binding[COLOR_BINDING] = color
        binding[SATURATION_BINDING] = color.saturation
        return color

    # -----------------------------------------------------------------------
    # Override these methods or assign callables to handle events

    def on_discovered(self, panels: list[Panel]) -> None:
        """Called when a discovery run has been loaded into the registry."""

    def on_disconnected(self, exc: Exception | None) -> None:
        """Called when the connection is lost; a reconnect follows."""

    def on_send_error(self, request: ICRequest, exc: Exception) -> None:
        """Called when a request could not be sent."""

    def on_response_error(self, msg: ICResponse, exc: ICResponseError) -> None:
        """Called when the controller answers with a non-200 status."""
