"""Typed model of a Pentair system.

The discovery answer of an IntelliCenter is a tree of flat, coded parameter
bags. This module defines the typed entities that tree is turned into
(Panel -> Module -> Circuit/Body/Heater, Panel -> Pump -> PumpCircuit) and the
fixed per-kind tables mapping protocol codes onto entity attributes. The same
tables are used when an entity is first built and when change notifications
are applied to it later.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, IntEnum, StrEnum
from typing import TYPE_CHECKING, Any

from .attributes import (
    HITMP_ATTR,
    HTSRC_ATTR,
    INTELLIBRITE_SUBTYPE,
    LOTMP_ATTR,
    LSTTMP_ATTR,
    MODE_ATTR,
    NULL_OBJNAM,
    PUMP_STATUS_ON,
    SELECT_ATTR,
    SPEED_ATTR,
    STATUS_ATTR,
    STATUS_ON,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

_LOGGER = logging.getLogger(__name__)

# ---------------------------------------------------------------------------


class CircuitStatus(StrEnum):
    """On/off state of a circuit."""

    ON = "ON"
    OFF = "OFF"

    @classmethod
    def from_code(cls, code: Any) -> CircuitStatus:
        """Decode a STATUS value; pumps report '10' when running."""
        value = str(code).upper()
        return cls.ON if value in (STATUS_ON, PUMP_STATUS_ON) else cls.OFF


class HeatMode(IntEnum):
    """Heat mode of a body of water."""

    OFF = 1
    ON = 2

    @classmethod
    def from_code(cls, code: Any) -> HeatMode:
        """Decode a MODE value: '0' and '1' mean off, any other mode heats."""
        return cls.OFF if int(code) in (0, 1) else cls.ON


class PumpSpeedType(StrEnum):
    """Unit a pump circuit speed is expressed in."""

    RPM = "RPM"
    GPM = "GPM"

    @classmethod
    def from_code(cls, code: Any) -> PumpSpeedType:
        return cls(str(code).upper())


class TemperatureUnits(StrEnum):
    """Temperature unit the controller is configured for."""

    C = "C"
    F = "F"


class Color(Enum):
    """IntelliBrite fixed colors.

    Each member carries its IntelliCenter ACT code, a hue in degrees and a
    saturation in percent.
    """

    WHITE = ("WHITER", 0, 0)
    RED = ("REDR", 0, 100)
    GREEN = ("GREENR", 120, 100)
    BLUE = ("BLUER", 240, 100)
    MAGENTA = ("MAGNTAR", 300, 100)

    def __init__(self, code: str, hue: int, saturation: int) -> None:
        self.code = code
        self.hue = hue
        self.saturation = saturation

    @classmethod
    def from_code(cls, code: str) -> Color | None:
        """Return the color matching an ACT code, if any."""
        for color in cls:
            if color.code == code:
                return color
        return None


# ---------------------------------------------------------------------------


def to_number(value: Any) -> int | float:
    """Parse a textual protocol number, keeping integers integral."""
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        return float(text)


def _to_float(value: Any) -> float:
    return float(str(value).strip())


# (protocol code, entity attribute, converter)
FieldSpec = tuple[str, str, "Callable[[Any], Any]"]

CIRCUIT_FIELDS: tuple[FieldSpec, ...] = ((STATUS_ATTR, "status", CircuitStatus.from_code),)

BODY_FIELDS: tuple[FieldSpec, ...] = (
    (LSTTMP_ATTR, "temperature", _to_float),
    (HITMP_ATTR, "high_temperature", _to_float),
    (LOTMP_ATTR, "low_temperature", _to_float),
    (HTSRC_ATTR, "heater_id", str),
    (MODE_ATTR, "heat_mode", HeatMode.from_code),
)

PUMP_CIRCUIT_FIELDS: tuple[FieldSpec, ...] = (
    (SELECT_ATTR, "speed_type", PumpSpeedType.from_code),
    (SPEED_ATTR, "speed", to_number),
)


def apply_fields(entity: Any, params: Mapping[str, Any], fields: Iterable[FieldSpec]) -> list[str]:
    """Copy the coded values present in params onto entity.

    Only codes present in params are applied; everything else on the entity
    is left alone. Values the controller reports for undefined attributes
    (the key echoed back as its own value) are ignored, and so are values
    that fail to convert.

    Returns:
        Names of the attributes whose value actually changed.
    """
    changed: list[str] = []
    for code, attribute, convert in fields:
        if code not in params:
            continue
        raw = params[code]
        if raw is None or raw == code:
            continue
        try:
            value = convert(raw)
        except (TypeError, ValueError):
            _LOGGER.warning(
                "Ignoring invalid %s value %r for %s",
                code,
                raw,
                getattr(entity, "objnam", entity),
            )
            continue
        if getattr(entity, attribute) != value:
            setattr(entity, attribute, value)
            changed.append(attribute)
    return changed


# ---------------------------------------------------------------------------


@dataclass(eq=False, kw_only=True)
class Circuit:
    """Any addressable object that can be switched on or off."""

    objnam: str
    name: str | None = None
    objtype: str
    subtype: str | None = None
    status: CircuitStatus | None = None

    # set when a pump circuit drives this circuit
    pump_circuit: PumpCircuit | None = field(default=None, repr=False)

    @property
    def is_on(self) -> bool:
        """Return True if the circuit is on."""
        return self.status == CircuitStatus.ON

    @property
    def is_intellibrite(self) -> bool:
        """Return True for IntelliBrite color lights."""
        return self.subtype == INTELLIBRITE_SUBTYPE

    @property
    def speed(self) -> int | float | None:
        """Return the speed of the pump circuit driving this circuit."""
        return self.pump_circuit.speed if self.pump_circuit else None

    @property
    def speed_type(self) -> PumpSpeedType | None:
        """Return the speed unit of the pump circuit driving this circuit."""
        return self.pump_circuit.speed_type if self.pump_circuit else None

    @property
    def pump_status(self) -> CircuitStatus | None:
        """Return whether the pump circuit driving this circuit is running."""
        return self.pump_circuit.status if self.pump_circuit else None


@dataclass(eq=False, kw_only=True)
class Body(Circuit):
    """A body of water (pool or spa)."""

    temperature: float | None = None
    high_temperature: float | None = None
    low_temperature: float | None = None
    heater_id: str | None = None
    heat_mode: HeatMode | None = None

    @property
    def has_heat_source(self) -> bool:
        """Return True if a heater is currently selected for this body."""
        return bool(self.heater_id) and self.heater_id != NULL_OBJNAM


@dataclass(eq=False, kw_only=True)
class Heater(Circuit):
    """A heater and the bodies it can serve."""

    body_ids: tuple[str, ...] = ()


@dataclass(eq=False, kw_only=True)
class PumpCircuit(Circuit):
    """One programmed speed of a pump, tied to the circuit it runs for."""

    circuit_id: str | None = None
    speed: int | float | None = None
    speed_type: PumpSpeedType | None = None
    pump: Pump | None = field(default=None, repr=False)


@dataclass(eq=False, kw_only=True)
class Pump:
    """A variable speed and/or flow pump."""

    objnam: str
    name: str | None = None
    subtype: str | None = None
    min_rpm: int | float
    max_rpm: int | float
    min_flow: int | float
    max_flow: int | float
    circuits: list[PumpCircuit] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class Module:
    """A logical grouping of bodies, features and heaters under a panel."""

    objnam: str
    subtype: str | None = None
    bodies: list[Body] = field(default_factory=list)
    features: list[Circuit] = field(default_factory=list)
    heaters: list[Heater] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class Panel:
    """Top-level controller unit."""

    objnam: str
    modules: list[Module] = field(default_factory=list)
    features: list[Circuit] = field(default_factory=list)
    pumps: list[Pump] = field(default_factory=list)


@dataclass(eq=False)
class BodyHeater:
    """A heater seen from one of the bodies it serves.

    This pairing is what gets exposed as a thermostat. Whether the heater is
    active is not stored anywhere: it is read from the body every time.
    """

    heater: Heater
    body: Body

    @property
    def objnam(self) -> str:
        """Return the identifier of the pairing."""
        return f"{self.heater.objnam}.{self.body.objnam}"

    @property
    def name(self) -> str:
        """Return a friendly name like 'Spa Gas Heater'."""
        return f"{self.body.name} {self.heater.name}"

    @property
    def active(self) -> bool:
        """Return True if this heater is the body's current heat source."""
        return self.body.heater_id == self.heater.objnam
