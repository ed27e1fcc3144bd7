"""Data models for Tydom Thermostat integration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class Characteristic(StrEnum):
    """Facets of the thermostat exposed to Home Assistant."""

    CURRENT_MODE = "current_mode"
    TARGET_MODE = "target_mode"
    CURRENT_TEMPERATURE = "current_temperature"
    TARGET_TEMPERATURE = "target_temperature"


@dataclass(frozen=True)
class TydomConnection:
    """Credentials used to reach a Tydom box on the local network."""

    host: str
    mac: str
    password: str


@dataclass(frozen=True)
class TydomThermostat:
    """Represents a thermostat endpoint declared in the Tydom configuration.

    Attributes:
        device_id: Tydom device identifier.
        endpoint_id: Endpoint identifier within the device.
        name: Human-readable name given in the Tydom app.

    """

    device_id: int
    endpoint_id: int
    name: str


@dataclass(frozen=True, slots=True)
class DeviceProperty:
    """A single named data item reported by a Tydom endpoint."""

    name: str
    value: float | int | str | bool | None
    validity: str | None = None


@dataclass(frozen=True, slots=True)
class PropertyMetadata:
    """Descriptive metadata of a Tydom property (type, permission, bounds)."""

    name: str
    type: str | None = None
    permission: str | None = None
    enum_values: tuple[str, ...] | None = None
    min: float | None = None
    max: float | None = None
    step: float | None = None
    unit: str | None = None


@dataclass(frozen=True, slots=True)
class DeviceWrite:
    """A single property write submitted to a Tydom endpoint."""

    name: str
    value: Any

    def as_payload(self) -> dict[str, Any]:
        """Return the JSON body item expected by the Tydom box."""
        return {"name": self.name, "value": self.value}
