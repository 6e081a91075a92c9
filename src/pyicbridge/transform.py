"""Transform a merged hardware definition into the typed model.

The hardware definition is a list of nodes ``{objnam, params}``. Panels list
their children in ``OBJLIST``, modules in ``CIRCUITS`` and pumps list their
pump circuits in ``OBJLIST``. Which nodes become entities:

- features: circuits whose FEATR flag is ON and whose subtype is not LEGACY
- bodies and heaters: every BODY / HEATER node under a module
- pumps: only variable speed ('SPEED') and variable speed/flow ('VSF') pumps
"""

from __future__ import annotations

import logging
from typing import Any

from .attributes import (
    BODY_ATTR,
    BODY_TYPE,
    CIRCUIT_ATTR,
    CIRCUIT_TYPE,
    CIRCUITS_ATTR,
    FEATR_ATTR,
    HEATER_TYPE,
    LEGACY_SUBTYPE,
    MAX_ATTR,
    MAXF_ATTR,
    MIN_ATTR,
    MINF_ATTR,
    MODULE_TYPE,
    OBJLIST_ATTR,
    OBJNAM_KEY,
    OBJTYP_ATTR,
    PANEL_TYPE,
    PARAMS_KEY,
    PMPCIRC_TYPE,
    PUMP_TYPE,
    SNAME_ATTR,
    STATUS_ON,
    SUBTYP_ATTR,
    VARIABLE_SPEED_PUMP_SUBTYPES,
)
from .exceptions import RequiredFieldParseError
from .model import (
    BODY_FIELDS,
    CIRCUIT_FIELDS,
    PUMP_CIRCUIT_FIELDS,
    Body,
    Circuit,
    Heater,
    Module,
    Panel,
    Pump,
    PumpCircuit,
    apply_fields,
    to_number,
)

_LOGGER = logging.getLogger(__name__)


def _params(node: Any) -> dict[str, Any]:
    if isinstance(node, dict) and isinstance(node.get(PARAMS_KEY), dict):
        return node[PARAMS_KEY]
    return {}


def _upper(value: Any) -> str | None:
    return value.upper() if isinstance(value, str) else None


def _objtype(node: Any) -> str | None:
    return _upper(_params(node).get(OBJTYP_ATTR))


def _subtype(node: Any) -> str | None:
    return _upper(_params(node).get(SUBTYP_ATTR))


def _children(node: Any, key: str) -> list[Any]:
    children = _params(node).get(key)
    return children if isinstance(children, list) else []


def _of_type(nodes: list[Any], objtype: str) -> list[dict[str, Any]]:
    return [node for node in nodes if _objtype(node) == objtype and node.get(OBJNAM_KEY)]


def _require_number(objnam: str, params: dict[str, Any], key: str) -> int | float:
    value = params.get(key)
    try:
        return to_number(value)
    except (TypeError, ValueError) as err:
        raise RequiredFieldParseError(objnam, key, value) from err


# ---------------------------------------------------------------------------


def transform_features(nodes: list[Any]) -> list[Circuit]:
    """Return the enabled, non-legacy circuits among nodes."""
    features = []
    for node in _of_type(nodes, CIRCUIT_TYPE):
        params = _params(node)
        if _upper(params.get(FEATR_ATTR)) != STATUS_ON or _subtype(node) == LEGACY_SUBTYPE:
            continue
        feature = Circuit(
            objnam=node[OBJNAM_KEY],
            name=params.get(SNAME_ATTR),
            objtype=CIRCUIT_TYPE,
            subtype=_subtype(node),
        )
        apply_fields(feature, params, CIRCUIT_FIELDS)
        features.append(feature)
    return features


def transform_bodies(nodes: list[Any]) -> list[Body]:
    """Return the bodies of water among nodes."""
    bodies = []
    for node in _of_type(nodes, BODY_TYPE):
        params = _params(node)
        body = Body(
            objnam=node[OBJNAM_KEY],
            name=params.get(SNAME_ATTR),
            objtype=BODY_TYPE,
            subtype=_subtype(node),
        )
        apply_fields(body, params, CIRCUIT_FIELDS)
        apply_fields(body, params, BODY_FIELDS)
        bodies.append(body)
    return bodies


def transform_heaters(nodes: list[Any]) -> list[Heater]:
    """Return the heaters among nodes with the bodies each can serve."""
    heaters = []
    for node in _of_type(nodes, HEATER_TYPE):
        params = _params(node)
        body_ids = params.get(BODY_ATTR)
        heaters.append(
            Heater(
                objnam=node[OBJNAM_KEY],
                name=params.get(SNAME_ATTR),
                objtype=HEATER_TYPE,
                subtype=_subtype(node),
                body_ids=tuple(body_ids.split()) if isinstance(body_ids, str) else (),
            )
        )
    return heaters


def transform_pump(node: dict[str, Any]) -> Pump:
    """Build a pump and its pump circuits.

    Raises:
        RequiredFieldParseError: If one of the RPM or flow bounds is not a number.
    """
    objnam = node[OBJNAM_KEY]
    params = _params(node)
    pump = Pump(
        objnam=objnam,
        name=params.get(SNAME_ATTR),
        subtype=_subtype(node),
        min_rpm=_require_number(objnam, params, MIN_ATTR),
        max_rpm=_require_number(objnam, params, MAX_ATTR),
        min_flow=_require_number(objnam, params, MINF_ATTR),
        max_flow=_require_number(objnam, params, MAXF_ATTR),
    )
    for child in _of_type(_children(node, OBJLIST_ATTR), PMPCIRC_TYPE):
        child_params = _params(child)
        circuit_id = child_params.get(CIRCUIT_ATTR)
        pump_circuit = PumpCircuit(
            objnam=child[OBJNAM_KEY],
            name=child_params.get(SNAME_ATTR),
            objtype=PMPCIRC_TYPE,
            subtype=_subtype(child),
            circuit_id=circuit_id if isinstance(circuit_id, str) else None,
            pump=pump,
        )
        apply_fields(pump_circuit, child_params, CIRCUIT_FIELDS + PUMP_CIRCUIT_FIELDS)
        pump.circuits.append(pump_circuit)
    return pump


def transform_pumps(nodes: list[Any]) -> list[Pump]:
    """Return the variable speed pumps among nodes.

    A pump whose bounds cannot be parsed is left out rather than failing the
    whole transform.
    """
    pumps = []
    for node in _of_type(nodes, PUMP_TYPE):
        if _subtype(node) not in VARIABLE_SPEED_PUMP_SUBTYPES:
            _LOGGER.debug("Skipping fixed speed pump %s", node[OBJNAM_KEY])
            continue
        try:
            pumps.append(transform_pump(node))
        except RequiredFieldParseError as err:
            _LOGGER.warning("Excluding pump from topology: %s", err)
    return pumps


def transform_modules(nodes: list[Any]) -> list[Module]:
    """Return the modules among nodes with their bodies, features and heaters."""
    modules = []
    for node in _of_type(nodes, MODULE_TYPE):
        circuits = _children(node, CIRCUITS_ATTR)
        modules.append(
            Module(
                objnam=node[OBJNAM_KEY],
                subtype=_subtype(node),
                bodies=transform_bodies(circuits),
                features=transform_features(circuits),
                heaters=transform_heaters(circuits),
            )
        )
    return modules


def transform_panels(answer: list[Any]) -> list[Panel]:
    """Turn a merged hardware definition into panels."""
    panels = []
    for node in _of_type(answer, PANEL_TYPE):
        children = _children(node, OBJLIST_ATTR)
        panels.append(
            Panel(
                objnam=node[OBJNAM_KEY],
                modules=transform_modules(children),
                # some features hang directly off the panel
                features=transform_features(children),
                pumps=transform_pumps(children),
            )
        )
    return panels
