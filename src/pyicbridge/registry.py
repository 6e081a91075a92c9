"""Registry of live entities and routing of change notifications.

The registry is the single owner of the entity snapshot built by discovery.
Change notifications are applied to entities in place, field by field, with
the per-kind mapping tables of the model. Two indirections are resolved here:

- a pump circuit is addressed by its own objnam, but its speed and status
  belong to the circuit it runs for, so updates for it are routed to that circuit
- a heater is shown once per body it can serve; when the body changes, every
  pairing of that body is reported as changed since its active state is
  derived from the body
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .attributes import (
    BODY_SUBSCRIBE_KEYS,
    FEATURE_SUBSCRIBE_KEYS,
    PUMP_CIRCUIT_SUBSCRIBE_KEYS,
)
from .codec import subscribe_request
from .exceptions import UnknownObjectError
from .model import (
    BODY_FIELDS,
    CIRCUIT_FIELDS,
    PUMP_CIRCUIT_FIELDS,
    Body,
    BodyHeater,
    Circuit,
    Heater,
    apply_fields,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from .codec import ICRequest, ObjectChange
    from .model import Panel, Pump, PumpCircuit

_LOGGER = logging.getLogger(__name__)

# changed field reported on a body/heater pairing when its body changes
ACTIVE_FIELD = "active"
# changed field reported on a circuit when the status of its pump circuit changes
PUMP_STATUS_FIELD = "pump_status"

Entity = Circuit | BodyHeater


class EntityRegistry:
    """Owns the entity snapshot and applies changes to it.

    Accessory code reads entities from here and never mutates them. Assign or
    override the on_* methods to be told about entities being created,
    changed and removed.
    """

    def __init__(self) -> None:
        self._panels: list[Panel] = []
        self._circuits: dict[str, Circuit] = {}
        self._body_heaters: dict[str, BodyHeater] = {}
        self._heaters_by_body: dict[str, list[BodyHeater]] = {}
        self._pump_circuit_owners: dict[str, Circuit] = {}
        self._bindings: dict[str, dict[str, Any]] = {}
        self._stale = True

    def __repr__(self) -> str:
        return (
            f"EntityRegistry(circuits={len(self._circuits)}, "
            f"heaters={len(self._body_heaters)}, stale={self._stale})"
        )

    def __contains__(self, objnam: object) -> bool:
        return objnam in self._circuits or objnam in self._body_heaters

    def __len__(self) -> int:
        return len(self._circuits) + len(self._body_heaters)

    def __iter__(self) -> Iterator[Entity]:
        yield from self._circuits.values()
        yield from self._body_heaters.values()

    @property
    def stale(self) -> bool:
        """Return True until a snapshot is loaded, and again after clear()."""
        return self._stale

    @property
    def panels(self) -> list[Panel]:
        """Return the panels of the current snapshot."""
        return list(self._panels)

    @property
    def circuits(self) -> list[Circuit]:
        """Return the exposed circuits (bodies and features)."""
        return list(self._circuits.values())

    @property
    def body_heaters(self) -> list[BodyHeater]:
        """Return every heater/body pairing."""
        return list(self._body_heaters.values())

    @property
    def pumps(self) -> list[Pump]:
        """Return the variable speed pumps."""
        return [pump for panel in self._panels for pump in panel.pumps]

    def get(self, objnam: str) -> Entity | None:
        """Return an entity by objnam (or heater pairing id)."""
        return self._circuits.get(objnam) or self._body_heaters.get(objnam)

    def require(self, objnam: str) -> Entity:
        """Return an entity by objnam.

        Raises:
            UnknownObjectError: If there is no such entity.
        """
        entity = self.get(objnam)
        if entity is None:
            raise UnknownObjectError(objnam)
        return entity

    def owner_of_pump_circuit(self, objnam: str) -> Circuit | None:
        """Return the circuit a pump circuit runs for."""
        return self._pump_circuit_owners.get(objnam)

    def heaters_for_body(self, body_id: str) -> list[BodyHeater]:
        """Return the heater pairings of a body."""
        return list(self._heaters_by_body.get(body_id, []))

    def binding(self, objnam: str) -> dict[str, Any]:
        """Return the accessory data kept for objnam.

        This dictionary belongs to the accessory layer and survives snapshot
        reloads for as long as the entity exists.
        """
        return self._bindings.setdefault(objnam, {})

    def clear(self) -> None:
        """Mark the snapshot as stale; it will be replaced by the next load()."""
        self._stale = True

    # -----------------------------------------------------------------------

    def load(self, panels: list[Panel]) -> list[ICRequest]:
        """Replace the snapshot with freshly discovered panels.

        Returns:
            The subscription requests needed to keep the new snapshot current.
        """
        previous = set(self._circuits) | set(self._body_heaters)

        circuits: dict[str, Circuit] = {}
        bodies: dict[str, Body] = {}
        heaters: list[Heater] = []
        for panel in panels:
            for module in panel.modules:
                for body in module.bodies:
                    circuits[body.objnam] = body
                    bodies[body.objnam] = body
                for feature in module.features:
                    circuits[feature.objnam] = feature
                heaters.extend(module.heaters)
            for feature in panel.features:
                circuits[feature.objnam] = feature

        pump_circuits: dict[str, PumpCircuit] = {}
        for panel in panels:
            for pump in panel.pumps:
                for pump_circuit in pump.circuits:
                    if pump_circuit.circuit_id:
                        pump_circuits[pump_circuit.circuit_id] = pump_circuit

        owners: dict[str, Circuit] = {}
        for circuit in circuits.values():
            circuit.pump_circuit = pump_circuits.get(circuit.objnam)
            if circuit.pump_circuit:
                owners[circuit.pump_circuit.objnam] = circuit

        body_heaters: dict[str, BodyHeater] = {}
        heaters_by_body: dict[str, list[BodyHeater]] = {}
        for heater in heaters:
            for body_id in heater.body_ids:
                body = bodies.get(body_id)
                if body is None:
                    _LOGGER.warning("Heater %s refers to unknown body %s", heater.objnam, body_id)
                    continue
                pairing = BodyHeater(heater, body)
                body_heaters[pairing.objnam] = pairing
                heaters_by_body.setdefault(body_id, []).append(pairing)

        self._panels = list(panels)
        self._circuits = circuits
        self._body_heaters = body_heaters
        self._heaters_by_body = heaters_by_body
        self._pump_circuit_owners = owners
        self._stale = False

        current = set(circuits) | set(body_heaters)
        for objnam in sorted(previous - current):
            self._bindings.pop(objnam, None)
            self.on_entity_removed(objnam)
        for entity in self:
            self.on_entity_created(entity)

        _LOGGER.info(
            "Registry loaded %d circuits, %d heaters, %d pump circuits",
            len(circuits),
            len(body_heaters),
            len(owners),
        )
        return self._subscriptions(pump_circuits.values(), bodies.values())

    def _subscriptions(
        self, pump_circuits: Iterable[PumpCircuit], bodies: Iterable[Body]
    ) -> list[ICRequest]:
        requests = [
            subscribe_request(pump_circuit.objnam, PUMP_CIRCUIT_SUBSCRIBE_KEYS)
            for pump_circuit in pump_circuits
        ]
        requests.extend(subscribe_request(body.objnam, BODY_SUBSCRIBE_KEYS) for body in bodies)
        requests.extend(
            subscribe_request(circuit.objnam, FEATURE_SUBSCRIBE_KEYS)
            for circuit in self._circuits.values()
            if not isinstance(circuit, Body)
        )
        return requests

    # -----------------------------------------------------------------------

    def apply_change(self, objnam: str, params: Mapping[str, Any]) -> bool:
        """Apply the parameters of one change notification.

        Returns:
            True if the change was for a known object, False if it was dropped.
        """
        owner = self._pump_circuit_owners.get(objnam)
        if owner is not None and owner.pump_circuit is not None:
            _LOGGER.debug("Update for pump circuit %s routed to %s", objnam, owner.objnam)
            changed = [
                PUMP_STATUS_FIELD if name == "status" else name
                for name in apply_fields(
                    owner.pump_circuit, params, CIRCUIT_FIELDS + PUMP_CIRCUIT_FIELDS
                )
            ]
            body_changed: list[str] = []
            if isinstance(owner, Body):
                body_changed = apply_fields(owner, params, BODY_FIELDS)
                changed.extend(body_changed)
            if changed:
                self.on_entity_changed(owner, changed)
            if body_changed:
                self._body_changed(owner, body_changed)
            return True

        circuit = self._circuits.get(objnam)
        if circuit is not None:
            _LOGGER.debug("Update for circuit %s", objnam)
            changed = apply_fields(circuit, params, CIRCUIT_FIELDS)
            if isinstance(circuit, Body):
                changed.extend(apply_fields(circuit, params, BODY_FIELDS))
            if changed:
                self.on_entity_changed(circuit, changed)
                if isinstance(circuit, Body):
                    self._body_changed(circuit, changed)
            return True

        _LOGGER.warning("Update for unknown object %s skipped", objnam)
        return False

    def apply_changes(self, changes: Iterable[ObjectChange]) -> int:
        """Apply changes in order and return how many were routed."""
        return sum(1 for change in changes if self.apply_change(change.objnam, change.params))

    def _body_changed(self, body: Body, changed: list[str]) -> None:
        for pairing in self._heaters_by_body.get(body.objnam, []):
            _LOGGER.debug("Updating heater %s", pairing.name)
            self.on_entity_changed(pairing, [ACTIVE_FIELD, *changed])

    # -----------------------------------------------------------------------
    # Override these methods or assign callables to handle events

    def on_entity_created(self, entity: Entity) -> None:
        """Called for every entity of a newly loaded snapshot."""

    def on_entity_changed(self, entity: Entity, changed: list[str]) -> None:
        """Called when fields of an entity changed."""

    def on_entity_removed(self, objnam: str) -> None:
        """Called when a reload no longer contains objnam."""
