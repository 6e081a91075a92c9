"""Tests for turning a hardware definition into panels."""

import pytest

from pyicbridge import Body, CircuitStatus, HeatMode, PumpSpeedType, RequiredFieldParseError
from pyicbridge.transform import transform_panels, transform_pump


class TestMinimalTree:
    """Tests with a single pool and a disabled feature."""

    def test_only_the_body_is_exposed(self, minimal_tree):
        """A feature with FEATR OFF is not exposed."""
        panels = transform_panels(minimal_tree)

        assert len(panels) == 1
        panel = panels[0]
        assert panel.objnam == "PNL01"
        assert len(panel.modules) == 1
        module = panel.modules[0]
        assert [body.objnam for body in module.bodies] == ["B1101"]
        assert module.features == []
        assert module.heaters == []
        assert panel.features == []
        assert panel.pumps == []

    def test_body_fields(self, minimal_tree):
        """Body params are decoded, absent ones stay unset."""
        body = transform_panels(minimal_tree)[0].modules[0].bodies[0]

        assert isinstance(body, Body)
        assert body.name == "Pool"
        assert body.subtype == "POOL"
        assert body.status == CircuitStatus.OFF
        assert body.temperature == 77.0
        assert body.low_temperature is None
        assert body.heat_mode is None

    def test_non_panel_roots_are_ignored(self, minimal_tree):
        """Top-level nodes that are not panels produce nothing."""
        tree = [{"objnam": "INCR", "params": {"OBJTYP": "SYSTEM"}}, "junk", *minimal_tree]
        assert [panel.objnam for panel in transform_panels(tree)] == ["PNL01"]

    def test_empty_answer(self):
        """No nodes, no panels."""
        assert transform_panels([]) == []


class TestSampleSystem:
    """Tests against the sample system of the mock server."""

    def test_features(self, panels):
        """Enabled non-legacy circuits become features, wherever they hang."""
        panel = panels[0]
        assert [feature.objnam for feature in panel.modules[0].features] == ["C0003"]
        assert [feature.objnam for feature in panel.features] == ["FTR01"]
        assert panel.modules[0].features[0].is_intellibrite

    def test_bodies(self, panels):
        """Both bodies are decoded with their heating state."""
        pool, spa = panels[0].modules[0].bodies

        assert pool.objnam == "B1101"
        assert pool.heat_mode == HeatMode.OFF
        assert not pool.has_heat_source
        assert pool.low_temperature == 80.0

        assert spa.objnam == "B1202"
        assert spa.is_on
        assert spa.heat_mode == HeatMode.ON
        assert spa.heater_id == "H0101"
        assert spa.has_heat_source

    def test_heaters(self, panels):
        """Heaters list the bodies they can serve."""
        heaters = panels[0].modules[0].heaters
        assert len(heaters) == 1
        assert heaters[0].objnam == "H0101"
        assert heaters[0].name == "Gas Heater"
        assert heaters[0].body_ids == ("B1101", "B1202")

    def test_only_variable_speed_pumps(self, panels):
        """Single speed pumps and pumps with broken bounds are left out."""
        assert [pump.objnam for pump in panels[0].pumps] == ["PMP01"]

    def test_pump_bounds(self, panels):
        """Pump bounds are parsed as numbers."""
        pump = panels[0].pumps[0]
        assert (pump.min_rpm, pump.max_rpm) == (450, 3450)
        assert (pump.min_flow, pump.max_flow) == (20, 140)

    def test_pump_circuits(self, panels):
        """Pump circuits carry their driven circuit, speed and unit."""
        pump = panels[0].pumps[0]
        by_id = {pump_circuit.objnam: pump_circuit for pump_circuit in pump.circuits}

        assert by_id["p0101"].circuit_id == "B1101"
        assert by_id["p0101"].speed == 2000
        assert by_id["p0101"].speed_type == PumpSpeedType.RPM
        assert by_id["p0102"].circuit_id == "FTR01"
        assert by_id["p0102"].speed_type == PumpSpeedType.GPM
        assert all(pump_circuit.pump is pump for pump_circuit in pump.circuits)


class TestTransformPump:
    """Tests for transform_pump()."""

    def test_missing_bound_raises(self):
        """A pump without a numeric bound cannot be built."""
        node = {
            "objnam": "PMP09",
            "params": {"OBJTYP": "PUMP", "SUBTYP": "SPEED", "MIN": "450", "MAX": "3450"},
        }
        with pytest.raises(RequiredFieldParseError) as exc_info:
            transform_pump(node)
        assert exc_info.value.objnam == "PMP09"
        assert exc_info.value.key == "MINF"

    def test_pump_circuit_status(self):
        """A pump circuit reporting '10' is running."""
        node = {
            "objnam": "PMP09",
            "params": {
                "OBJTYP": "PUMP",
                "SUBTYP": "SPEED",
                "MIN": "450",
                "MAX": "3450",
                "MINF": "20",
                "MAXF": "140",
                "OBJLIST": [
                    {
                        "objnam": "p0901",
                        "params": {
                            "OBJTYP": "PMPCIRC",
                            "CIRCUIT": "B1101",
                            "STATUS": "10",
                            "SPEED": "1500",
                            "SELECT": "RPM",
                        },
                    }
                ],
            },
        }
        pump_circuit = transform_pump(node).circuits[0]
        assert pump_circuit.status == CircuitStatus.ON
        assert pump_circuit.speed == 1500
