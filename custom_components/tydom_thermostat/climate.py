"""Climate entities for Tydom thermostats.

This module exposes each Tydom thermostat endpoint as a Home Assistant
climate entity. State is read through the translator on every poll and
temperatures are refreshed by push updates routed through the registry.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import httpx
from homeassistant.components.climate import (
    ClimateEntity,
    ClimateEntityFeature,
    HVACMode,
)
from homeassistant.components.climate.const import ATTR_HVAC_MODE
from homeassistant.const import ATTR_TEMPERATURE, UnitOfTemperature
from homeassistant.exceptions import HomeAssistantError

from .api import TydomApiClientError
from .const import (
    COMMAND_REFRESH_DELAY,
    CURRENT_MODE_ACTION_MAP,
    DEFAULT_MAX_TEMP,
    DEFAULT_MIN_TEMP,
    DEFAULT_SCAN_INTERVAL,
    DEFAULT_TEMP_STEP,
    DOMAIN,
    PROP_SETPOINT,
    SUPPORTED_MODES,
)
from .models import Characteristic
from .translator import (
    MissingPropertyError,
    MissingServiceError,
    TydomThermostatTranslator,
)

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from .models import PropertyMetadata, TydomThermostat
    from .registry import TydomAccessoryRegistry

_LOGGER = logging.getLogger(__name__)

SCAN_INTERVAL = DEFAULT_SCAN_INTERVAL


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up climate entities for Tydom thermostats."""
    entry_data = hass.data[DOMAIN][entry.entry_id]
    metadata = entry_data["metadata"]

    entities = [
        TydomThermostatClimateEntity(
            TydomThermostatTranslator(
                entry_data["session"],
                entry_data["connection"],
                thermostat.device_id,
                thermostat.endpoint_id,
            ),
            entry_data["registry"],
            thermostat,
            metadata.get((thermostat.device_id, thermostat.endpoint_id), {}),
        )
        for thermostat in entry_data["thermostats"]
    ]
    async_add_entities(entities, update_before_add=True)


class TydomThermostatClimateEntity(ClimateEntity):
    """Climate entity for a Tydom thermostat endpoint.

    Only OFF and HEAT are offered. The current mode is reported as the HVAC
    action (heating or off).
    """

    _attr_temperature_unit = UnitOfTemperature.CELSIUS
    _attr_has_entity_name = True
    _attr_should_poll = True
    _attr_hvac_modes = SUPPORTED_MODES
    _attr_supported_features = (
        ClimateEntityFeature.TARGET_TEMPERATURE
        | ClimateEntityFeature.TURN_OFF
        | ClimateEntityFeature.TURN_ON
    )

    def __init__(
        self,
        translator: TydomThermostatTranslator,
        registry: TydomAccessoryRegistry,
        thermostat: TydomThermostat,
        metadata: dict[str, PropertyMetadata],
    ) -> None:
        """Initialize the Tydom thermostat climate entity.

        Args:
            translator: Translator bound to the thermostat endpoint.
            registry: Registry routing push updates to this entity.
            thermostat: Thermostat endpoint information.
            metadata: Property metadata of the endpoint, keyed by name.

        """
        self._translator = translator
        self._registry = registry
        self._thermostat = thermostat
        self._attr_unique_id = f"{thermostat.device_id}_{thermostat.endpoint_id}"
        self._attr_name = thermostat.name

        self._attr_hvac_mode = None
        self._attr_hvac_action = None
        self._attr_current_temperature = None
        self._attr_target_temperature = None
        self._registry_unsub = None
        self._refresh_task: asyncio.Task[None] | None = None

        self._configure_bounds(metadata.get(PROP_SETPOINT))

    def _configure_bounds(self, setpoint: PropertyMetadata | None) -> None:
        """Bound the target temperature with the setpoint metadata, if known."""
        self._attr_min_temp = DEFAULT_MIN_TEMP
        self._attr_max_temp = DEFAULT_MAX_TEMP
        self._attr_target_temperature_step = DEFAULT_TEMP_STEP
        if setpoint is None:
            return
        if setpoint.min is not None:
            self._attr_min_temp = setpoint.min
        if setpoint.max is not None:
            self._attr_max_temp = setpoint.max
        if setpoint.step is not None:
            self._attr_target_temperature_step = setpoint.step

    async def async_added_to_hass(self) -> None:
        """Bind this entity to its endpoint in the registry."""
        await super().async_added_to_hass()
        self._registry_unsub = self._registry.register(
            self._thermostat.device_id,
            self._thermostat.endpoint_id,
            self,
        )

    async def async_will_remove_from_hass(self) -> None:
        """Unbind this entity from the registry."""
        await super().async_will_remove_from_hass()

        if self._registry_unsub is not None:
            self._registry_unsub()
            self._registry_unsub = None

        if self._refresh_task is not None and not self._refresh_task.done():
            self._refresh_task.cancel()
        self._refresh_task = None

    async def async_update(self) -> None:
        """Read every characteristic from the thermostat."""
        try:
            current_mode = await self._translator.async_get_current_mode()
            target_mode = await self._translator.async_get_target_mode()
            current_temperature = (
                await self._translator.async_get_current_temperature()
            )
            target_temperature = await self._translator.async_get_target_temperature()
        except MissingPropertyError as err:
            _LOGGER.warning("Incomplete data for %s: %s", self.name, err)
            self._attr_available = False
            return
        except TydomApiClientError as err:
            _LOGGER.warning("API error while reading %s: %s", self.name, err)
            self._attr_available = False
            return
        except httpx.RequestError as err:
            _LOGGER.warning("Connection error while reading %s: %s", self.name, err)
            self._attr_available = False
            return

        self._attr_available = True
        self._attr_hvac_action = CURRENT_MODE_ACTION_MAP[current_mode]
        self._attr_hvac_mode = target_mode
        self._attr_current_temperature = current_temperature
        self._attr_target_temperature = target_temperature

    def update_characteristic(
        self, characteristic: Characteristic, value: Any
    ) -> None:
        """Store a pushed characteristic value and notify Home Assistant.

        Raises:
            MissingServiceError: If the entity is not attached to Home Assistant.

        """
        if getattr(self, "hass", None) is None:
            error_msg = f"Unexpected missing climate service for {self.unique_id}"
            raise MissingServiceError(error_msg)

        if characteristic is Characteristic.TARGET_TEMPERATURE:
            self._attr_target_temperature = value
        elif characteristic is Characteristic.CURRENT_TEMPERATURE:
            self._attr_current_temperature = value
        else:
            _LOGGER.debug("%s: ignoring pushed %s", self.name, characteristic)
            return

        self.async_write_ha_state()

    async def _async_delayed_refresh(self) -> None:
        """Re-read the thermostat after a delay to pick up the derived mode."""
        await asyncio.sleep(COMMAND_REFRESH_DELAY)
        await self.async_update_ha_state(force_refresh=True)

    async def async_set_hvac_mode(self, hvac_mode: HVACMode) -> None:
        """Set the target mode.

        The resulting mode also depends on the authorization gate, so it is
        re-read instead of being assumed.

        Args:
            hvac_mode: The HVAC mode to set.

        """
        try:
            await self._translator.async_set_target_mode(hvac_mode)
        except (TydomApiClientError, httpx.RequestError) as err:
            _LOGGER.exception("Error while setting HVAC mode of %s", self.name)
            error_msg = f"Failed to set HVAC mode of {self.name}: {err}"
            raise HomeAssistantError(error_msg) from err

        self._refresh_task = asyncio.create_task(self._async_delayed_refresh())

    async def async_set_temperature(self, **kwargs: Any) -> None:  # noqa: ANN401
        """Set the target temperature.

        Args:
            **kwargs: Keyword arguments containing temperature data.

        """
        if (hvac_mode := kwargs.get(ATTR_HVAC_MODE)) is not None:
            await self.async_set_hvac_mode(hvac_mode)

        temperature = kwargs.get(ATTR_TEMPERATURE)
        if temperature is None:
            return

        try:
            await self._translator.async_set_target_temperature(temperature)
        except (TydomApiClientError, httpx.RequestError) as err:
            _LOGGER.exception("Error while setting temperature of %s", self.name)
            error_msg = f"Failed to set temperature of {self.name}: {err}"
            raise HomeAssistantError(error_msg) from err

        self._attr_target_temperature = temperature
        self.async_write_ha_state()

    async def async_turn_on(self) -> None:
        """Turn the thermostat on by setting it to heat."""
        await self.async_set_hvac_mode(HVACMode.HEAT)

    async def async_turn_off(self) -> None:
        """Turn the thermostat off."""
        await self.async_set_hvac_mode(HVACMode.OFF)
