#!/usr/bin/env python3
"""Connect to a live IntelliCenter and print the discovered entities.

Reads INTELLICENTER_HOST, INTELLICENTER_PORT and the optional login from
the environment or a .env file at the repository root, then keeps printing
change notifications until interrupted (pass --once to exit after
discovery).
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pyicbridge import Body, BridgeConfig, BridgeController, ICConnectionError


def print_topology(controller: BridgeController) -> None:
    """Print every entity of the registry."""
    registry = controller.registry
    for panel in registry.panels:
        print(f"📋 Panel {panel.objnam}")

    print()
    print("Circuits:")
    for circuit in registry.circuits:
        line = f"  {circuit.objnam:8} {circuit.name or '':20} {circuit.status or '?'}"
        if isinstance(circuit, Body):
            line += f"  {circuit.temperature}° (set {circuit.low_temperature}°)"
        if circuit.pump_circuit:
            line += (
                f"  pump {circuit.speed} {circuit.speed_type}"
                f" ({controller.power_level(circuit.objnam)}%)"
            )
        print(line)

    print()
    print("Heaters:")
    for pairing in registry.body_heaters:
        state = "active" if pairing.active else "idle"
        print(f"  {pairing.objnam:14} {pairing.name:30} {state}")


async def main() -> bool:
    """Run discovery and print what was found."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(message)s")
    config = BridgeConfig.from_env(Path(__file__).parent.parent / ".env")
    once = "--once" in sys.argv

    controller = BridgeController(config)
    discovered = asyncio.Event()
    controller.on_discovered = lambda panels: discovered.set()
    controller.registry.on_entity_changed = lambda entity, fields: print(
        f"🔄 {entity.name}: {', '.join(fields)}"
    )

    try:
        await controller.start()
    except ICConnectionError as err:
        print(f"❌ {err}")
        await controller.stop()
        return False

    try:
        await asyncio.wait_for(discovered.wait(), timeout=30)
        print_topology(controller)
        if not once:
            print()
            print("Listening for changes, Ctrl+C to stop")
            await asyncio.Event().wait()
    except TimeoutError:
        print("❌ Discovery did not complete within 30 seconds")
        return False
    finally:
        await controller.stop()
    return True


if __name__ == "__main__":
    try:
        sys.exit(0 if asyncio.run(main()) else 1)
    except KeyboardInterrupt:
        pass
