#!/usr/bin/env python3
"""List the IntelliCenter controllers announced on the local network.

If INTELLICENTER_HOST is set (in the environment or a .env file), the
matching controller is highlighted.
"""

import asyncio
import sys
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pyicbridge import BridgeConfig, locate_controllers


async def main() -> bool:
    """Browse mDNS and print what was found."""
    config = BridgeConfig.from_env(Path(__file__).parent.parent / ".env")

    print("⏳ Browsing mDNS for 10 seconds...")
    addresses = await locate_controllers(timeout=10.0)

    if not addresses:
        print("❌ No IntelliCenter found!")
        print()
        print("Troubleshooting tips:")
        print("  1. Ensure IntelliCenter is powered on and connected to network")
        print("  2. Verify mDNS/Bonjour is not blocked by firewall")
        print("  3. Check that you're on the same network/VLAN")
        return False

    print(f"✅ Found {len(addresses)} controller(s):")
    for address in addresses:
        marker = "→" if address.host == config.host else " "
        print(f"  {marker} {address.name}")
        print(f"      Address: {address.host}:{address.port}")
        if address.model:
            print(f"      Model: {address.model}")

    if config.host and all(address.host != config.host for address in addresses):
        print()
        print(f"⚠️  Configured host {config.host} was not announced")
    return True


if __name__ == "__main__":
    sys.exit(0 if asyncio.run(main()) else 1)
