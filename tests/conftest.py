"""Pytest fixtures for pyicbridge tests."""

from typing import Any

import pytest

from pyicbridge import EntityRegistry, Panel, transform_panels
from pyicbridge.merge import merge_response
from tests.mock_server import sample_hardware_definition


@pytest.fixture
def hardware_answers() -> dict[str, list[dict[str, Any]]]:
    """Return sample GetHardwareDefinition answers keyed by category."""
    return sample_hardware_definition()


@pytest.fixture
def hardware_definition(hardware_answers: dict[str, list[dict[str, Any]]]) -> list[dict[str, Any]]:
    """Return the sample answers merged into one hardware definition."""
    merged: list[dict[str, Any]] = []
    for answer in hardware_answers.values():
        merge_response(merged, answer)
    return merged


@pytest.fixture
def panels(hardware_definition: list[dict[str, Any]]) -> list[Panel]:
    """Return the sample hardware definition as panels."""
    return transform_panels(hardware_definition)


@pytest.fixture
def registry(panels: list[Panel]) -> EntityRegistry:
    """Create an EntityRegistry loaded with the sample panels."""
    registry = EntityRegistry()
    registry.load(panels)
    return registry


@pytest.fixture
def minimal_tree() -> list[dict[str, Any]]:
    """Return one panel with one module holding a pool and a disabled feature."""
    return [
        {
            "objnam": "PNL01",
            "params": {
                "OBJTYP": "PANEL",
                "OBJLIST": [
                    {
                        "objnam": "M0101",
                        "params": {
                            "OBJTYP": "MODULE",
                            "CIRCUITS": [
                                {
                                    "objnam": "B1101",
                                    "params": {
                                        "OBJTYP": "BODY",
                                        "SUBTYP": "POOL",
                                        "SNAME": "Pool",
                                        "STATUS": "OFF",
                                        "LSTTMP": "77",
                                    },
                                },
                                {
                                    "objnam": "C0004",
                                    "params": {
                                        "OBJTYP": "CIRCUIT",
                                        "SUBTYP": "GENERIC",
                                        "SNAME": "Cleaner",
                                        "FEATR": "OFF",
                                        "STATUS": "OFF",
                                    },
                                },
                            ],
                        },
                    }
                ],
            },
        }
    ]
