"""API client for Tydom home automation boxes.

This module provides functions to interact with the local Tydom HTTP API,
including reading endpoint data, metadata and configuration, and submitting
property writes.
"""

import logging
from typing import Any

import httpx
from homeassistant.core import HomeAssistant
from homeassistant.helpers.httpx_client import create_async_httpx_client
from httpx_retries import Retry, RetryTransport

from .const import USAGE_HVAC
from .models import (
    DeviceProperty,
    DeviceWrite,
    PropertyMetadata,
    TydomConnection,
    TydomThermostat,
)

_LOGGER = logging.getLogger(__name__)

# HTTP status codes
HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401


class TydomApiClientError(Exception):
    """Base exception for Tydom transport errors."""


class TydomApiAuthError(TydomApiClientError):
    """Exception raised for authentication errors."""


def build_url(connection: TydomConnection, path: str) -> str:
    """Build an absolute URL on the Tydom box.

    Args:
        connection: Connection details of the box.
        path: Absolute path starting with "/".

    Returns:
        The HTTPS URL for the given path.

    """
    return f"https://{connection.host}{path}"


def endpoint_data_path(device_id: int, endpoint_id: int) -> str:
    """Return the data path of a device endpoint."""
    return f"/devices/{device_id}/endpoints/{endpoint_id}/data"


def create_auth(connection: TydomConnection) -> httpx.DigestAuth:
    """Create digest credentials for the box (MAC address as user name)."""
    return httpx.DigestAuth(connection.mac, connection.password)


def create_headers() -> dict[str, str]:
    """Create HTTP headers for Tydom API requests."""
    return {
        "content-type": "application/json",
        "accept": "application/json",
    }


def is_http_error(status: int) -> bool:
    """Check if HTTP status code indicates an error.

    Args:
        status: HTTP status code to check.

    Returns:
        True if status code is 400 or higher, False otherwise.

    """
    return status >= HTTP_BAD_REQUEST


def is_auth_error(status: int) -> bool:
    """Check if HTTP status code indicates authentication error.

    Args:
        status: HTTP status code to check.

    Returns:
        True if status code is 401, False otherwise.

    """
    return status == HTTP_UNAUTHORIZED


def validate_response(response: httpx.Response) -> Any:
    """Validate HTTP response and return parsed JSON data.

    Args:
        response: HTTP response object to validate.

    Returns:
        Parsed JSON data from response, or None for an empty body.

    Raises:
        TydomApiAuthError: If authentication error is detected.
        TydomApiClientError: If the request failed.

    """
    if is_http_error(response.status_code):
        if is_auth_error(response.status_code):
            auth_error = "Authentication error"
            raise TydomApiAuthError(auth_error)
        client_error = f"Request failed: {response.status_code}"
        raise TydomApiClientError(client_error)

    if not response.content:
        return None
    return response.json()


def _find_endpoint(data: Any, endpoint_id: int) -> dict[str, Any]:
    endpoints = data.get("endpoints", []) if isinstance(data, dict) else []
    for endpoint in endpoints:
        if endpoint.get("id") == endpoint_id:
            return endpoint

    error_msg = f"Endpoint {endpoint_id} missing from response"
    raise TydomApiClientError(error_msg)


def extract_endpoint_data(data: Any, endpoint_id: int) -> list[DeviceProperty]:
    """Extract the property snapshot of an endpoint from a device data response.

    Args:
        data: Parsed response of /devices/{id}/endpoints/{id}/data.
        endpoint_id: Endpoint whose data items are wanted.

    Returns:
        Data items in the order reported by the box.

    Raises:
        TydomApiClientError: If the endpoint is absent or reports an error.

    """
    endpoint = _find_endpoint(data, endpoint_id)
    error_code = endpoint.get("error", 0)
    if error_code:
        error_msg = f"Endpoint {endpoint_id} reported error {error_code}"
        raise TydomApiClientError(error_msg)

    return [
        DeviceProperty(
            name=item["name"],
            value=item.get("value"),
            validity=item.get("validity"),
        )
        for item in endpoint.get("data", [])
    ]


def _parse_metadata(item: dict[str, Any]) -> PropertyMetadata:
    enum_values = item.get("enum_values")
    return PropertyMetadata(
        name=item["name"],
        type=item.get("type"),
        permission=item.get("permission"),
        enum_values=tuple(enum_values) if enum_values is not None else None,
        min=item.get("min"),
        max=item.get("max"),
        step=item.get("step"),
        unit=item.get("unit"),
    )


def extract_metadata(
    data: Any,
) -> dict[tuple[int, int], dict[str, PropertyMetadata]]:
    """Extract per-endpoint property metadata from a /devices/meta response.

    Args:
        data: List of devices, each carrying endpoints with metadata.

    Returns:
        Mapping of (device_id, endpoint_id) to metadata keyed by property name.

    """
    metadata: dict[tuple[int, int], dict[str, PropertyMetadata]] = {}
    for device in data or []:
        for endpoint in device.get("endpoints", []):
            items = endpoint.get("metadata", [])
            metadata[(device["id"], endpoint["id"])] = {
                item["name"]: _parse_metadata(item) for item in items
            }
    return metadata


def extract_thermostats(data: Any) -> list[TydomThermostat]:
    """Extract thermostat endpoints from a /configs/file response.

    Args:
        data: Parsed Tydom configuration file.

    Returns:
        List of TydomThermostat objects.

    """
    endpoints = (data or {}).get("endpoints", [])
    return [
        TydomThermostat(
            device_id=e["id_device"],
            endpoint_id=e["id_endpoint"],
            name=e.get("name") or f"Thermostat {e['id_endpoint']}",
        )
        for e in endpoints
        if e.get("first_usage") == USAGE_HVAC
    ]


def create_session_client(hass: HomeAssistant) -> httpx.AsyncClient:
    """Create HTTP client with retry logic for the Tydom box.

    The box serves a self-signed certificate, so verification is disabled.

    Args:
        hass: Home Assistant instance.

    Returns:
        Configured httpx AsyncClient with retry transport.

    """
    base_client = create_async_httpx_client(hass, verify_ssl=False, timeout=10.0)
    retry = Retry(total=3, backoff_factor=0.5)
    base_client._transport = RetryTransport(  # noqa: SLF001
        transport=base_client._transport,  # noqa: SLF001
        retry=retry,
    )
    return base_client


async def async_get_thermostats(
    session: httpx.AsyncClient,
    connection: TydomConnection,
) -> list[TydomThermostat]:
    """Fetch the thermostat endpoints declared on the box.

    Raises:
        TydomApiAuthError: If authentication fails.
        TydomApiClientError: If API request fails.

    """
    _LOGGER.debug("Fetching configuration file from Tydom box %s", connection.host)
    response = await session.get(
        build_url(connection, "/configs/file"),
        headers=create_headers(),
        auth=create_auth(connection),
    )
    data = validate_response(response)
    thermostats = extract_thermostats(data)
    _LOGGER.debug("Found %d thermostats on Tydom box", len(thermostats))
    return thermostats


async def async_get_metadata(
    session: httpx.AsyncClient,
    connection: TydomConnection,
) -> dict[tuple[int, int], dict[str, PropertyMetadata]]:
    """Fetch property metadata of every endpoint on the box.

    Raises:
        TydomApiAuthError: If authentication fails.
        TydomApiClientError: If API request fails.

    """
    _LOGGER.debug("Fetching device metadata from Tydom box %s", connection.host)
    response = await session.get(
        build_url(connection, "/devices/meta"),
        headers=create_headers(),
        auth=create_auth(connection),
    )
    return extract_metadata(validate_response(response))


async def async_fetch_snapshot(
    session: httpx.AsyncClient,
    connection: TydomConnection,
    device_id: int,
    endpoint_id: int,
) -> list[DeviceProperty]:
    """Fetch the full property snapshot of a device endpoint.

    Args:
        session: HTTP client session.
        connection: Connection details of the box.
        device_id: Tydom device identifier.
        endpoint_id: Endpoint identifier.

    Returns:
        List of DeviceProperty objects.

    Raises:
        TydomApiAuthError: If authentication fails.
        TydomApiClientError: If API request fails.

    """
    response = await session.get(
        build_url(connection, endpoint_data_path(device_id, endpoint_id)),
        headers=create_headers(),
        auth=create_auth(connection),
    )
    data = validate_response(response)
    snapshot = extract_endpoint_data(data, endpoint_id)
    _LOGGER.debug(
        "Fetched %d data items for device %s endpoint %s",
        len(snapshot),
        device_id,
        endpoint_id,
    )
    return snapshot


async def async_submit_write(
    session: httpx.AsyncClient,
    connection: TydomConnection,
    device_id: int,
    endpoint_id: int,
    writes: list[DeviceWrite],
) -> None:
    """Submit property writes to a device endpoint.

    Completes as soon as the box accepts the request; the applied state is
    reported later through the push channel.

    Raises:
        TydomApiAuthError: If authentication fails.
        TydomApiClientError: If API request fails.

    """
    payload = [write.as_payload() for write in writes]

    _LOGGER.debug(
        "Writing to device %s endpoint %s: %s", device_id, endpoint_id, payload
    )
    response = await session.put(
        build_url(connection, endpoint_data_path(device_id, endpoint_id)),
        headers=create_headers(),
        auth=create_auth(connection),
        json=payload,
    )
    validate_response(response)
