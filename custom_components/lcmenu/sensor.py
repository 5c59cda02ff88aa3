"""Sensor platform for LC Lunch Menu."""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Any

from homeassistant.components.sensor import SensorEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.restore_state import RestoreEntity
from homeassistant.helpers.entity import DeviceInfo
from homeassistant.util import dt as dt_util

from .const import DOMAIN, CONF_NAME, CONF_DISTRICT_ID, CONF_BUILDING_ID
from .menu import MenuService, LunchMenuError
from .menufilter import MenuFilter

_LOGGER = logging.getLogger(__name__)

NO_MENU_STATE = "No menu today"


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry, add_entities):
    data = hass.data[DOMAIN][entry.entry_id]

    add_entities(
        [
            LunchMenuSensor(
                entry=entry,
                service=data["service"],
                menu_filter=data["filter"],
            )
        ],
        update_before_add=True,
    )


def build_state(foodNames: list[str]) -> str:
    if not foodNames:
        return NO_MENU_STATE

    state = ", ".join(foodNames)
    if len(state) > 255:
        state = state[:252] + "..."
    return state


class LunchMenuSensor(RestoreEntity, SensorEntity):

    _attr_icon = "mdi:food"

    def __init__(self, entry, service: MenuService, menu_filter: MenuFilter):
        self._entry = entry
        self._service = service
        self._filter = menu_filter

        self._name = entry.data[CONF_NAME]
        self._attr_unique_id = f"lcmenu_sensor_{entry.entry_id}"

        self._state: str | None = None
        self._attrs: dict[str, Any] = {}

    @property
    def name(self):
        return self._name

    @property
    def native_value(self):
        return self._state

    @property
    def extra_state_attributes(self):
        return self._attrs

    @property
    def device_info(self):
        return DeviceInfo(
            identifiers={(DOMAIN, self._entry.entry_id)},
            name=self._name,
            manufacturer="LINQ Connect",
        )

    async def async_added_to_hass(self):
        # Restore state
        await super().async_added_to_hass()

        last = await self.async_get_last_state()
        if last is not None:
            self._state = last.state
            self._attrs = dict(last.attributes)

    async def async_update(self) -> None:

        today = dt_util.now().date()

        try:
            items = self._filter.filterItems(await self._service.getMenuForDate(today))
        except LunchMenuError as err:
            _LOGGER.warning("Failed to update menu for %s: %s", self._name, err)
            self._attr_available = False
            return

        self._attr_available = True
        self._state = build_state([item.food_name for item in items])
        self._attrs = {
            "district_id": self._entry.data[CONF_DISTRICT_ID],
            "building_id": self._entry.data[CONF_BUILDING_ID],
            "updated": datetime.now().isoformat(),
            "items": [
                {"category": item.category_name, "food": item.food_name, "menu": item.menu_name}
                for item in items
            ],
        }
