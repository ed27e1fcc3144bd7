"""
Configuration flow for Tydom Thermostat integration.

This module handles the setup and configuration of the Tydom Thermostat
integration through Home Assistant's config flow system.
"""

import logging
from typing import Any

import httpx
import voluptuous as vol
from homeassistant.config_entries import ConfigFlow, ConfigFlowResult
from homeassistant.const import CONF_HOST, CONF_MAC, CONF_PASSWORD
from homeassistant.helpers.httpx_client import get_async_client

from . import api
from .const import (
    DOMAIN,
    ERROR_API_ERROR,
    ERROR_CANNOT_CONNECT,
    ERROR_INVALID_AUTH,
    ERROR_TIMEOUT,
    ERROR_UNKNOWN,
)
from .models import TydomConnection

_LOGGER = logging.getLogger(__name__)

DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_HOST): str,
        vol.Required(CONF_MAC): str,
        vol.Required(CONF_PASSWORD): str,
    }
)


def normalize_mac(mac: str) -> str:
    """Return the MAC address in the form the Tydom box expects (001A25XXXXXX)."""
    return mac.replace(":", "").replace("-", "").strip().upper()


class TydomThermostatConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle configuration flow for Tydom Thermostat integration."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """
        Handle the initial step of the config flow.

        Args:
            user_input: User input data containing host, MAC and password.

        Returns:
            ConfigFlowResult indicating the next step or errors.

        """
        errors: dict[str, str] = {}

        if user_input is not None:
            connection = TydomConnection(
                host=user_input[CONF_HOST].strip(),
                mac=normalize_mac(user_input[CONF_MAC]),
                password=user_input[CONF_PASSWORD],
            )

            try:
                session = get_async_client(self.hass, verify_ssl=False)
                thermostats = await api.async_get_thermostats(session, connection)
                _LOGGER.info(
                    "Successfully connected to Tydom box, %d thermostats found",
                    len(thermostats),
                )

            except api.TydomApiAuthError as err:
                _LOGGER.warning(
                    "Authentication failed (%s): %s", ERROR_INVALID_AUTH, err
                )
                errors["base"] = ERROR_INVALID_AUTH
            except httpx.ConnectError:
                _LOGGER.exception("Connection error (%s)", ERROR_CANNOT_CONNECT)
                errors["base"] = ERROR_CANNOT_CONNECT
            except httpx.TimeoutException:
                _LOGGER.exception("Timeout error (%s)", ERROR_TIMEOUT)
                errors["base"] = ERROR_TIMEOUT
            except api.TydomApiClientError:
                _LOGGER.exception("API client error (%s)", ERROR_API_ERROR)
                errors["base"] = ERROR_API_ERROR
            except Exception:
                _LOGGER.exception(
                    "Unexpected error while connecting (%s)",
                    ERROR_UNKNOWN,
                )
                errors["base"] = ERROR_UNKNOWN

            else:
                await self.async_set_unique_id(connection.mac.lower())
                self._abort_if_unique_id_configured()

                return self.async_create_entry(
                    title=f"Tydom ({connection.host})",
                    data={
                        CONF_HOST: connection.host,
                        CONF_MAC: connection.mac,
                        CONF_PASSWORD: connection.password,
                    },
                )

        return self.async_show_form(
            step_id="user",
            data_schema=DATA_SCHEMA,
            errors=errors,
        )
