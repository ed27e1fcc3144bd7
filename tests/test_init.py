"""Tests for the Tydom Thermostat integration setup."""

from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest
from homeassistant.const import CONF_HOST, CONF_MAC, CONF_PASSWORD

from custom_components.tydom_thermostat import (
    PLATFORMS,
    async_setup_entry,
    async_unload_entry,
)
from custom_components.tydom_thermostat.api import (
    TydomApiAuthError,
    TydomApiClientError,
)
from custom_components.tydom_thermostat.const import DOMAIN
from custom_components.tydom_thermostat.models import TydomThermostat
from custom_components.tydom_thermostat.registry import TydomAccessoryRegistry

MODULE = "custom_components.tydom_thermostat"


@pytest.fixture
def mock_hass() -> Mock:
    """Create a mock Home Assistant instance."""
    hass = Mock()
    hass.data = {}
    hass.config_entries = Mock()
    hass.config_entries.async_forward_entry_setups = AsyncMock()
    hass.config_entries.async_unload_platforms = AsyncMock(return_value=True)
    return hass


@pytest.fixture
def mock_entry() -> Mock:
    """Create a mock config entry."""
    entry = Mock()
    entry.entry_id = "test_entry"
    entry.data = {
        CONF_HOST: "192.168.1.20",
        CONF_MAC: "001A25123456",
        CONF_PASSWORD: "secret",
    }
    return entry


class TestAsyncSetupEntry:
    """Tests for async_setup_entry function."""

    @pytest.mark.asyncio
    async def test_async_setup_entry_stores_entry_data(
        self,
        mock_hass: Mock,
        mock_entry: Mock,
        thermostat: TydomThermostat,
    ) -> None:
        """Test that a successful setup stores data and forwards platforms."""
        unsub = Mock()
        with (
            patch(f"{MODULE}.create_session_client", return_value=Mock()),
            patch(
                f"{MODULE}.api.async_get_thermostats",
                new=AsyncMock(return_value=[thermostat]),
            ),
            patch(f"{MODULE}.api.async_get_metadata", new=AsyncMock(return_value={})),
            patch(f"{MODULE}.async_dispatcher_connect", return_value=unsub) as connect,
        ):
            assert await async_setup_entry(mock_hass, mock_entry) is True

        entry_data = mock_hass.data[DOMAIN]["test_entry"]
        assert entry_data["thermostats"] == [thermostat]
        assert entry_data["connection"].mac == "001A25123456"
        assert isinstance(entry_data["registry"], TydomAccessoryRegistry)
        assert connect.call_args[0][1] == "tydom_thermostat_push_update_test_entry"
        assert connect.call_args[0][2] == entry_data["registry"].dispatch_devices_data
        mock_hass.config_entries.async_forward_entry_setups.assert_awaited_once_with(
            mock_entry, PLATFORMS
        )

    @pytest.mark.asyncio
    async def test_async_setup_entry_continues_without_metadata(
        self,
        mock_hass: Mock,
        mock_entry: Mock,
        thermostat: TydomThermostat,
    ) -> None:
        """Test that a metadata failure falls back to no metadata."""
        with (
            patch(f"{MODULE}.create_session_client", return_value=Mock()),
            patch(
                f"{MODULE}.api.async_get_thermostats",
                new=AsyncMock(return_value=[thermostat]),
            ),
            patch(
                f"{MODULE}.api.async_get_metadata",
                new=AsyncMock(side_effect=TydomApiClientError("Request failed: 404")),
            ),
            patch(f"{MODULE}.async_dispatcher_connect", return_value=Mock()),
        ):
            assert await async_setup_entry(mock_hass, mock_entry) is True

        assert mock_hass.data[DOMAIN]["test_entry"]["metadata"] == {}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            TydomApiAuthError("Authentication error"),
            TydomApiClientError("Request failed: 500"),
            httpx.ConnectError("Connection refused"),
            httpx.TimeoutException("Request timeout"),
        ],
    )
    async def test_async_setup_entry_fails_when_box_unreachable(
        self,
        mock_hass: Mock,
        mock_entry: Mock,
        error: Exception,
    ) -> None:
        """Test that setup fails when thermostats cannot be listed."""
        with (
            patch(f"{MODULE}.create_session_client", return_value=Mock()),
            patch(
                f"{MODULE}.api.async_get_thermostats",
                new=AsyncMock(side_effect=error),
            ),
        ):
            assert await async_setup_entry(mock_hass, mock_entry) is False

        assert DOMAIN not in mock_hass.data
        mock_hass.config_entries.async_forward_entry_setups.assert_not_awaited()


class TestAsyncUnloadEntry:
    """Tests for async_unload_entry function."""

    @pytest.mark.asyncio
    async def test_async_unload_entry_cleans_up(
        self,
        mock_hass: Mock,
        mock_entry: Mock,
    ) -> None:
        """Test that unloading disconnects push, closes the session and drops data."""
        unsub = Mock()
        session = AsyncMock(spec=httpx.AsyncClient)
        mock_hass.data[DOMAIN] = {
            "test_entry": {"unsub_push": unsub, "session": session}
        }
        assert await async_unload_entry(mock_hass, mock_entry) is True
        unsub.assert_called_once()
        session.aclose.assert_awaited_once()
        assert "test_entry" not in mock_hass.data[DOMAIN]

    @pytest.mark.asyncio
    async def test_async_unload_entry_keeps_data_when_platforms_fail(
        self,
        mock_hass: Mock,
        mock_entry: Mock,
    ) -> None:
        """Test that a failed platform unload keeps the entry data."""
        unsub = Mock()
        session = AsyncMock(spec=httpx.AsyncClient)
        mock_hass.data[DOMAIN] = {
            "test_entry": {"unsub_push": unsub, "session": session}
        }
        mock_hass.config_entries.async_unload_platforms.return_value = False
        assert await async_unload_entry(mock_hass, mock_entry) is False
        unsub.assert_not_called()
        session.aclose.assert_not_awaited()
        assert "test_entry" in mock_hass.data[DOMAIN]
