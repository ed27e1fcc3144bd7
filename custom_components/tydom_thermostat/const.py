"""Constants for Tydom Thermostat integration.

This module contains all the constants used throughout the integration,
including configuration keys, Tydom property names and mapping dictionaries.
"""

from datetime import timedelta

from homeassistant.components.climate import HVACAction, HVACMode

DOMAIN = "tydom_thermostat"

DEFAULT_SCAN_INTERVAL = timedelta(seconds=60)
COMMAND_REFRESH_DELAY = 5  # Seconds to wait before re-reading after a mode change

# Fired by the push feed with a Tydom /devices/data payload
SIGNAL_PUSH_UPDATE = f"{DOMAIN}_push_update_{{}}"

ERROR_INVALID_AUTH = "invalid_auth"
ERROR_CANNOT_CONNECT = "cannot_connect"
ERROR_TIMEOUT = "timeout_error"
ERROR_API_ERROR = "api_error"
ERROR_UNKNOWN = "unknown_error"

# Endpoint usage reported by /configs/file for thermostats
USAGE_HVAC = "hvac"

PROP_AUTHORIZATION = "authorization"
PROP_SETPOINT = "setpoint"
PROP_TEMPERATURE = "temperature"
PROP_HVAC_MODE = "hvacMode"

AUTHORIZATION_STOP = "STOP"
AUTHORIZATION_HEATING = "HEATING"

HVAC_MODE_NORMAL = "NORMAL"
HVAC_MODE_STOP = "STOP"
HVAC_MODE_ANTI_FROST = "ANTI_FROST"

# The thermostat only heats: COOL and AUTO are never offered
SUPPORTED_MODES = [HVACMode.OFF, HVACMode.HEAT]

CURRENT_MODE_ACTION_MAP = {
    HVACMode.OFF: HVACAction.OFF,
    HVACMode.HEAT: HVACAction.HEATING,
}

DEFAULT_MIN_TEMP = 10.0
DEFAULT_MAX_TEMP = 30.0
DEFAULT_TEMP_STEP = 0.5
