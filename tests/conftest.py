"""Pytest configuration and fixtures for Tydom Thermostat tests."""

from typing import Any

import pytest

from custom_components.tydom_thermostat.models import (
    DeviceProperty,
    TydomConnection,
    TydomThermostat,
)

DEVICE_ID = 1537640941
ENDPOINT_ID = 1537640941
HOST = "192.168.1.20"


def make_snapshot(**values: Any) -> list[DeviceProperty]:
    """Build a snapshot from keyword data items, in the given order."""
    return [
        DeviceProperty(name=name, value=value, validity="upToDate")
        for name, value in values.items()
    ]


@pytest.fixture
def connection() -> TydomConnection:
    """Fixture providing connection details of a Tydom box."""
    return TydomConnection(host=HOST, mac="001A25123456", password="secret")


@pytest.fixture
def thermostat() -> TydomThermostat:
    """Fixture providing a thermostat endpoint."""
    return TydomThermostat(
        device_id=DEVICE_ID, endpoint_id=ENDPOINT_ID, name="Living Room"
    )


@pytest.fixture
def sample_data_items() -> list[dict[str, Any]]:
    """Fixture providing the data items reported by a heating thermostat."""
    return [
        {"name": "authorization", "validity": "expired", "value": "HEATING"},
        {"name": "setpoint", "validity": "expired", "value": 18.5},
        {"name": "thermicLevel", "validity": "expired", "value": None},
        {"name": "hvacMode", "validity": "expired", "value": "NORMAL"},
        {"name": "timeDelay", "validity": "expired", "value": 0},
        {"name": "temperature", "validity": "expired", "value": 19.44},
        {"name": "tempoOn", "validity": "expired", "value": False},
        {"name": "antifrostOn", "validity": "expired", "value": False},
        {"name": "boostOn", "validity": "expired", "value": False},
    ]


@pytest.fixture
def sample_snapshot_response(sample_data_items: list[dict[str, Any]]) -> dict:
    """Fixture providing a sample endpoint data API response."""
    return {
        "id": DEVICE_ID,
        "endpoints": [
            {"id": ENDPOINT_ID, "error": 0, "data": sample_data_items},
        ],
    }


@pytest.fixture
def sample_snapshot(sample_data_items: list[dict[str, Any]]) -> list[DeviceProperty]:
    """Fixture providing the parsed snapshot of the sample data items."""
    return [
        DeviceProperty(name=i["name"], value=i["value"], validity=i["validity"])
        for i in sample_data_items
    ]


@pytest.fixture
def sample_metadata_response() -> list[dict]:
    """Fixture providing a sample /devices/meta API response."""
    return [
        {
            "id": DEVICE_ID,
            "endpoints": [
                {
                    "id": ENDPOINT_ID,
                    "error": 0,
                    "metadata": [
                        {
                            "name": "authorization",
                            "type": "string",
                            "permission": "rw",
                            "enum_values": ["STOP", "HEATING"],
                        },
                        {
                            "name": "setpoint",
                            "type": "numeric",
                            "permission": "rw",
                            "min": 10.0,
                            "max": 30.0,
                            "step": 0.5,
                            "unit": "degC",
                        },
                        {
                            "name": "temperature",
                            "type": "numeric",
                            "permission": "r",
                            "min": -99.9,
                            "max": 99.9,
                            "step": 0.01,
                            "unit": "degC",
                        },
                    ],
                },
            ],
        },
    ]


@pytest.fixture
def sample_config_response() -> dict:
    """Fixture providing a sample /configs/file API response."""
    return {
        "endpoints": [
            {
                "id_endpoint": ENDPOINT_ID,
                "id_device": DEVICE_ID,
                "name": "Living Room",
                "first_usage": "hvac",
                "last_usage": "electric",
            },
            {
                "id_endpoint": 1537640942,
                "id_device": 1537640942,
                "name": "Kitchen Shutter",
                "first_usage": "shutter",
                "last_usage": "shutter",
            },
        ],
    }
