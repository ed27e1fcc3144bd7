"""Registry binding Tydom device endpoints to thermostat accessories.

The registry is owned by a config entry. Entities register themselves when
added to Home Assistant and unregister when removed, so push updates coming
from the box are only routed to live accessories.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from homeassistant.core import callback

from .translator import apply_push_updates

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from .translator import ThermostatAccessory

_LOGGER = logging.getLogger(__name__)


class TydomAccessoryRegistry:
    """Keyed lookup table of (device_id, endpoint_id) to accessory."""

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._accessories: dict[tuple[int, int], ThermostatAccessory] = {}

    def __len__(self) -> int:
        return len(self._accessories)

    def register(
        self,
        device_id: int,
        endpoint_id: int,
        accessory: ThermostatAccessory,
    ) -> Callable[[], None]:
        """Bind an accessory to a device endpoint.

        Args:
            device_id: Tydom device identifier.
            endpoint_id: Endpoint identifier.
            accessory: Accessory receiving push updates for the endpoint.

        Returns:
            A function to unregister the accessory.

        """
        key = (device_id, endpoint_id)
        if key in self._accessories:
            _LOGGER.warning(
                "Replacing accessory bound to device %s endpoint %s",
                device_id,
                endpoint_id,
            )
        self._accessories[key] = accessory

        def unregister() -> None:
            if self._accessories.get(key) is accessory:
                del self._accessories[key]

        return unregister

    def get(self, device_id: int, endpoint_id: int) -> ThermostatAccessory | None:
        """Return the accessory bound to a device endpoint, if any."""
        return self._accessories.get((device_id, endpoint_id))

    @callback
    def apply_push_updates(
        self,
        device_id: int,
        endpoint_id: int,
        updates: Iterable[Mapping[str, Any]],
    ) -> None:
        """Route incremental data updates to the bound accessory."""
        accessory = self.get(device_id, endpoint_id)
        if accessory is None:
            _LOGGER.debug(
                "No accessory bound to device %s endpoint %s, ignoring update",
                device_id,
                endpoint_id,
            )
            return
        apply_push_updates(accessory, updates)

    @callback
    def dispatch_devices_data(self, payload: Iterable[Mapping[str, Any]]) -> None:
        """Route a Tydom /devices/data push payload.

        Runs on the event loop so accessories can write their state directly.

        Event format: [{ id: deviceId, endpoints: [{ id, data: [...] }] }]
        """
        for device in payload:
            device_id = device.get("id")
            for endpoint in device.get("endpoints", []):
                updates = endpoint.get("data")
                if device_id is None or not updates:
                    continue
                self.apply_push_updates(device_id, endpoint.get("id"), updates)
