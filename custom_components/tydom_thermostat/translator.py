"""State translation between Tydom thermostat data and climate characteristics.

Modes are never read from a single Tydom field: they are projections of the
endpoint snapshot, recomputed on every read. Temperatures pass through
unchanged. Writes only ever touch ``hvacMode`` and ``setpoint``; the
``authorization`` gate is left to the physical device and its schedule.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol

from homeassistant.components.climate import HVACMode

from . import api
from .const import (
    AUTHORIZATION_HEATING,
    HVAC_MODE_NORMAL,
    HVAC_MODE_STOP,
    PROP_AUTHORIZATION,
    PROP_HVAC_MODE,
    PROP_SETPOINT,
    PROP_TEMPERATURE,
)
from .models import Characteristic, DeviceProperty, DeviceWrite

if TYPE_CHECKING:
    import httpx

    from .models import TydomConnection

_LOGGER = logging.getLogger(__name__)

VALIDITY_UP_TO_DATE = "upToDate"

PUSH_CHARACTERISTICS = {
    PROP_SETPOINT: Characteristic.TARGET_TEMPERATURE,
    PROP_TEMPERATURE: Characteristic.CURRENT_TEMPERATURE,
}


class MissingPropertyError(Exception):
    """Raised when a required data item is absent from a snapshot."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Missing `{name}` data item")
        self.name = name


class MissingServiceError(Exception):
    """Raised when an accessory is asked to update without its climate service."""


class ThermostatAccessory(Protocol):
    """Accessory-model side of the translator, updated by push notifications."""

    def update_characteristic(
        self, characteristic: Characteristic, value: Any
    ) -> None:
        """Store a new characteristic value and notify listeners."""
        ...


def find_property(snapshot: Sequence[DeviceProperty], name: str) -> DeviceProperty:
    """Return the first data item called ``name``.

    Raises:
        MissingPropertyError: If no item has that name.

    """
    for prop in snapshot:
        if prop.name == name:
            if prop.validity not in (None, VALIDITY_UP_TO_DATE):
                _LOGGER.debug("Using %s data item `%s`", prop.validity, name)
            return prop
    raise MissingPropertyError(name)


def _is_above(setpoint: Any, temperature: Any) -> bool:
    if setpoint is None or temperature is None:
        return False
    return setpoint > temperature


def derive_current_mode(snapshot: Sequence[DeviceProperty]) -> HVACMode:
    """Derive whether the thermostat is actively heating right now.

    Heating requires the authorization gate to be open and the room to be
    below its setpoint; a thermostat that reached its setpoint reports OFF
    even though it is still switched on.
    """
    authorization = find_property(snapshot, PROP_AUTHORIZATION).value
    setpoint = find_property(snapshot, PROP_SETPOINT).value
    temperature = find_property(snapshot, PROP_TEMPERATURE).value
    if authorization == AUTHORIZATION_HEATING and _is_above(setpoint, temperature):
        return HVACMode.HEAT
    return HVACMode.OFF


def derive_target_mode(snapshot: Sequence[DeviceProperty]) -> HVACMode:
    """Derive the requested mode; only HEATING with NORMAL maps to HEAT."""
    hvac_mode = find_property(snapshot, PROP_HVAC_MODE).value
    authorization = find_property(snapshot, PROP_AUTHORIZATION).value
    if authorization == AUTHORIZATION_HEATING and hvac_mode == HVAC_MODE_NORMAL:
        return HVACMode.HEAT
    return HVACMode.OFF


def derive_target_temperature(snapshot: Sequence[DeviceProperty]) -> Any:
    """Return the setpoint verbatim."""
    return find_property(snapshot, PROP_SETPOINT).value


def derive_current_temperature(snapshot: Sequence[DeviceProperty]) -> Any:
    """Return the measured temperature verbatim."""
    return find_property(snapshot, PROP_TEMPERATURE).value


def translate_target_mode(mode: HVACMode | str) -> DeviceWrite:
    """Translate a requested mode into an ``hvacMode`` write.

    ``authorization`` is deliberately left untouched.
    """
    value = HVAC_MODE_NORMAL if mode == HVACMode.HEAT else HVAC_MODE_STOP
    return DeviceWrite(name=PROP_HVAC_MODE, value=value)


def translate_target_temperature(value: float) -> DeviceWrite:
    """Translate a requested temperature into a ``setpoint`` write."""
    return DeviceWrite(name=PROP_SETPOINT, value=value)


def apply_push_updates(
    accessory: ThermostatAccessory,
    updates: Iterable[Mapping[str, Any]],
) -> None:
    """Apply incremental data updates pushed by the box to an accessory.

    Only temperatures are refreshed. Mode characteristics are left as they
    are even when ``authorization`` or ``hvacMode`` change; they are
    re-derived on the next read.
    """
    for update in updates:
        characteristic = PUSH_CHARACTERISTICS.get(update.get("name"))
        if characteristic is None:
            continue
        _LOGGER.debug("Push update %s=%s", characteristic, update.get("value"))
        accessory.update_characteristic(characteristic, update.get("value"))


class TydomThermostatTranslator:
    """Reads and writes the characteristics of one Tydom thermostat endpoint.

    Every read fetches a fresh snapshot; nothing is cached here. Writes
    complete once the box has accepted them, without waiting for the new
    state to come back through the push channel.
    """

    def __init__(
        self,
        session: httpx.AsyncClient,
        connection: TydomConnection,
        device_id: int,
        endpoint_id: int,
    ) -> None:
        """Initialize the translator for a device endpoint."""
        self._session = session
        self._connection = connection
        self.device_id = device_id
        self.endpoint_id = endpoint_id

    async def _async_fetch(self) -> list[DeviceProperty]:
        return await api.async_fetch_snapshot(
            self._session, self._connection, self.device_id, self.endpoint_id
        )

    async def _async_submit(self, write: DeviceWrite) -> None:
        await api.async_submit_write(
            self._session,
            self._connection,
            self.device_id,
            self.endpoint_id,
            [write],
        )

    async def async_get_current_mode(self) -> HVACMode:
        """Return the current heating state."""
        _LOGGER.debug("Get %s for %s", Characteristic.CURRENT_MODE, self.endpoint_id)
        return derive_current_mode(await self._async_fetch())

    async def async_get_target_mode(self) -> HVACMode:
        """Return the target mode."""
        _LOGGER.debug("Get %s for %s", Characteristic.TARGET_MODE, self.endpoint_id)
        return derive_target_mode(await self._async_fetch())

    async def async_get_current_temperature(self) -> Any:
        """Return the measured temperature."""
        _LOGGER.debug(
            "Get %s for %s", Characteristic.CURRENT_TEMPERATURE, self.endpoint_id
        )
        return derive_current_temperature(await self._async_fetch())

    async def async_get_target_temperature(self) -> Any:
        """Return the setpoint."""
        _LOGGER.debug(
            "Get %s for %s", Characteristic.TARGET_TEMPERATURE, self.endpoint_id
        )
        return derive_target_temperature(await self._async_fetch())

    async def async_set_target_mode(self, mode: HVACMode | str) -> None:
        """Request a new target mode."""
        _LOGGER.debug(
            "Set %s=%s for %s", Characteristic.TARGET_MODE, mode, self.endpoint_id
        )
        await self._async_submit(translate_target_mode(mode))

    async def async_set_target_temperature(self, value: float) -> None:
        """Request a new setpoint."""
        _LOGGER.debug(
            "Set %s=%s for %s",
            Characteristic.TARGET_TEMPERATURE,
            value,
            self.endpoint_id,
        )
        await self._async_submit(translate_target_temperature(value))
