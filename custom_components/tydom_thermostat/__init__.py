"""The Tydom Thermostat integration."""

from __future__ import annotations

import logging

import httpx
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_HOST, CONF_MAC, CONF_PASSWORD, Platform
from homeassistant.core import HomeAssistant
from homeassistant.helpers.dispatcher import async_dispatcher_connect

from . import api
from .api import create_session_client
from .const import DOMAIN, SIGNAL_PUSH_UPDATE
from .models import TydomConnection
from .registry import TydomAccessoryRegistry

_LOGGER = logging.getLogger(__name__)

PLATFORMS = [Platform.CLIMATE]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    _LOGGER.info("Setting up Tydom Thermostat integration for entry %s", entry.entry_id)

    connection = TydomConnection(
        host=entry.data[CONF_HOST],
        mac=entry.data[CONF_MAC],
        password=entry.data[CONF_PASSWORD],
    )
    session = create_session_client(hass)

    try:
        _LOGGER.debug("Fetching thermostats from Tydom box %s", connection.host)
        thermostats = await api.async_get_thermostats(session, connection)
        _LOGGER.info("Found %d thermostats on Tydom box", len(thermostats))
    except api.TydomApiAuthError as err:
        _LOGGER.warning(
            "Authentication failed for entry %s: %s", entry.entry_id, str(err)
        )
        return False
    except api.TydomApiClientError as err:
        _LOGGER.error("API client error for entry %s: %s", entry.entry_id, str(err))
        return False
    except httpx.ConnectError as err:
        _LOGGER.error("Connection error for entry %s: %s", entry.entry_id, str(err))
        return False
    except httpx.TimeoutException as err:
        _LOGGER.error("Timeout error for entry %s: %s", entry.entry_id, str(err))
        return False

    # Metadata only bounds the target temperature; defaults apply without it
    try:
        metadata = await api.async_get_metadata(session, connection)
    except (api.TydomApiClientError, httpx.RequestError) as err:
        _LOGGER.warning(
            "Could not fetch device metadata for entry %s: %s", entry.entry_id, err
        )
        metadata = {}

    registry = TydomAccessoryRegistry()
    unsub_push = async_dispatcher_connect(
        hass,
        SIGNAL_PUSH_UPDATE.format(entry.entry_id),
        registry.dispatch_devices_data,
    )

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = {
        "session": session,
        "connection": connection,
        "thermostats": thermostats,
        "metadata": metadata,
        "registry": registry,
        "unsub_push": unsub_push,
    }
    _LOGGER.debug(
        "Stored data for entry %s: %d thermostats", entry.entry_id, len(thermostats)
    )

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    _LOGGER.info(
        "Successfully setup Tydom Thermostat integration for entry %s",
        entry.entry_id,
    )
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    _LOGGER.info("Unloading Tydom Thermostat integration for entry %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if not unload_ok:
        _LOGGER.warning("Failed to unload some platforms for entry %s", entry.entry_id)
        return False

    entry_data = hass.data.get(DOMAIN, {}).pop(entry.entry_id, None)
    if entry_data is not None:
        entry_data["unsub_push"]()
        await entry_data["session"].aclose()
        _LOGGER.debug("Cleaned up data for entry %s", entry.entry_id)

    _LOGGER.info(
        "Successfully unloaded Tydom Thermostat integration for entry %s",
        entry.entry_id,
    )
    return True
