"""pyicbridge - keep a typed model in sync with a Pentair IntelliCenter.

This library discovers the equipment of an IntelliCenter pool control system
over the local network, exposes it as typed entities (bodies of water,
features, heaters, pump backed circuits) and applies the controller's change
notifications to them as they arrive.

Example usage:
    ```python
    import asyncio
    from pyicbridge import BridgeConfig, BridgeController

    async def main():
        controller = BridgeController(BridgeConfig(host="192.168.1.100"))
        controller.registry.on_entity_changed = (
            lambda entity, fields: print(f"{entity.name}: {fields}")
        )
        await controller.start()
        await asyncio.Event().wait()

    asyncio.run(main())
    ```
"""

from .attributes import (
    BODY_TYPE,
    CIRCUIT_TYPE,
    DEFAULT_PORT,
    DISCOVER_CATEGORIES,
    HEATER_TYPE,
    NULL_OBJNAM,
    PMPCIRC_TYPE,
    PUMP_TYPE,
)
from .codec import ICRequest, ICResponse, ObjectChange
from .config import BridgeConfig
from .controller import BridgeController
from .discovery import HardwareDiscovery
from .exceptions import (
    DecodeError,
    FrameOverflowError,
    ICAuthenticationError,
    ICConfigError,
    ICConnectionError,
    ICError,
    ICResponseError,
    RequiredFieldParseError,
    UnknownObjectError,
)
from .framing import FrameAssembler
from .locator import ControllerAddress, find_controller, locate_controllers
from .merge import merge_response
from .model import (
    Body,
    BodyHeater,
    Circuit,
    CircuitStatus,
    Color,
    HeatMode,
    Heater,
    Module,
    Panel,
    Pump,
    PumpCircuit,
    PumpSpeedType,
    TemperatureUnits,
)
from .registry import EntityRegistry
from .session import SessionState, TransportSession
from .transform import transform_panels

__version__ = "1.0.0"

__all__ = [
    # Version
    "__version__",
    # Bridge
    "BridgeConfig",
    "BridgeController",
    "EntityRegistry",
    "HardwareDiscovery",
    "SessionState",
    "TransportSession",
    # Wire
    "FrameAssembler",
    "ICRequest",
    "ICResponse",
    "ObjectChange",
    "merge_response",
    "transform_panels",
    # Location
    "ControllerAddress",
    "find_controller",
    "locate_controllers",
    # Model classes
    "Body",
    "BodyHeater",
    "Circuit",
    "CircuitStatus",
    "Color",
    "HeatMode",
    "Heater",
    "Module",
    "Panel",
    "Pump",
    "PumpCircuit",
    "PumpSpeedType",
    "TemperatureUnits",
    # Exceptions
    "DecodeError",
    "FrameOverflowError",
    "ICAuthenticationError",
    "ICConfigError",
    "ICConnectionError",
    "ICError",
    "ICResponseError",
    "RequiredFieldParseError",
    "UnknownObjectError",
    # Object types
    "BODY_TYPE",
    "CIRCUIT_TYPE",
    "HEATER_TYPE",
    "PMPCIRC_TYPE",
    "PUMP_TYPE",
    # Special values
    "DEFAULT_PORT",
    "DISCOVER_CATEGORIES",
    "NULL_OBJNAM",
]
