"""The LC Lunch Menu integration."""

from __future__ import annotations

import logging
import os
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.const import Platform
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .api import MenuApiClient
from .const import (
    DOMAIN,
    CONF_DISTRICT_ID,
    CONF_BUILDING_ID,
    CONF_LUNCH_ONLY,
    CONF_MAIN_ENTREES_ONLY,
    LOG_LEVEL_ENV,
)
from .logger import createLogger
from .menu import MenuService
from .menufilter import MenuFilter

_LOGGER = logging.getLogger(__name__)

PLATFORMS = [Platform.SENSOR, Platform.CALENDAR]


async def async_setup(hass: HomeAssistant, config: dict[str, Any]) -> bool:
    """YAML configuration is not supported."""
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    hass.data.setdefault(DOMAIN, {})

    client = MenuApiClient(async_get_clientsession(hass))
    logger = createLogger(os.environ.get(LOG_LEVEL_ENV), _LOGGER)

    service = MenuService(
        buildingId=entry.data[CONF_BUILDING_ID],
        districtId=entry.data[CONF_DISTRICT_ID],
        client=client,
        logger=logger,
    )
    menuFilter = MenuFilter({
        "lunch_only": entry.data.get(CONF_LUNCH_ONLY, False),
        "main_entrees_only": entry.data.get(CONF_MAIN_ENTREES_ONLY, False),
    })

    hass.data[DOMAIN][entry.entry_id] = {
        "service": service,
        "filter": menuFilter,
    }

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)

    if unload_ok:
        hass.data[DOMAIN].pop(entry.entry_id, None)

    return unload_ok
