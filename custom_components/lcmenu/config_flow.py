"""Config flow for LC Lunch Menu."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.core import callback

from .const import (
    DOMAIN,
    CONF_NAME,
    CONF_DISTRICT_ID,
    CONF_BUILDING_ID,
    CONF_LUNCH_ONLY,
    CONF_MAIN_ENTREES_ONLY,
    CONF_LUNCH_BEGIN,
    CONF_LUNCH_END,
)


def _parse_time(value: str | None):
    """Convert HH:MM string to time object, or None."""
    if not value:
        return None
    return datetime.strptime(value, "%H:%M").time()


def _build_schema(defaults: dict[str, Any]) -> vol.Schema:
    # only serializable types in the schema
    return vol.Schema(
        {
            vol.Required(CONF_NAME, default=defaults.get(CONF_NAME, vol.UNDEFINED)): str,
            vol.Required(CONF_DISTRICT_ID, default=defaults.get(CONF_DISTRICT_ID, vol.UNDEFINED)): str,
            vol.Required(CONF_BUILDING_ID, default=defaults.get(CONF_BUILDING_ID, vol.UNDEFINED)): str,
            vol.Optional(CONF_LUNCH_ONLY, default=defaults.get(CONF_LUNCH_ONLY, False)): bool,
            vol.Optional(CONF_MAIN_ENTREES_ONLY, default=defaults.get(CONF_MAIN_ENTREES_ONLY, False)): bool,
            vol.Optional(CONF_LUNCH_BEGIN, default=defaults.get(CONF_LUNCH_BEGIN, "")): str,
            vol.Optional(CONF_LUNCH_END, default=defaults.get(CONF_LUNCH_END, "")): str,
        }
    )


def entry_unique_id(data: dict[str, Any]) -> str:
    return f"{data[CONF_DISTRICT_ID]}_{data[CONF_BUILDING_ID]}"


def unique_id_taken(entries, entry_id: str, unique_id: str) -> bool:
    """True if an entry other than entry_id already uses unique_id."""
    return any(e.unique_id == unique_id for e in entries if e.entry_id != entry_id)


def validate_input(user_input: dict[str, Any]) -> tuple[dict[str, Any], dict[str, str]]:
    """Return (entry data, errors) for the submitted form."""

    errors: dict[str, str] = {}

    name = user_input[CONF_NAME].strip()
    district_id = user_input[CONF_DISTRICT_ID].strip()
    building_id = user_input[CONF_BUILDING_ID].strip()

    if not district_id or not building_id:
        errors["base"] = "missing_ids"
        return {}, errors

    try:
        begin = _parse_time(user_input.get(CONF_LUNCH_BEGIN))
        end = _parse_time(user_input.get(CONF_LUNCH_END))
    except ValueError:
        errors["base"] = "invalid_time"
        return {}, errors

    if begin and end and end <= begin:
        errors["base"] = "invalid_lunch_interval"
        return {}, errors

    data = {
        CONF_NAME: name,
        CONF_DISTRICT_ID: district_id,
        CONF_BUILDING_ID: building_id,
        CONF_LUNCH_ONLY: bool(user_input.get(CONF_LUNCH_ONLY, False)),
        CONF_MAIN_ENTREES_ONLY: bool(user_input.get(CONF_MAIN_ENTREES_ONLY, False)),
    }

    # Optional times - add only when provided
    if begin:
        data[CONF_LUNCH_BEGIN] = begin.strftime("%H:%M")
    if end:
        data[CONF_LUNCH_END] = end.strftime("%H:%M")

    return data, errors


class LunchMenuConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Config flow for LC Lunch Menu."""

    VERSION = 1

    async def async_step_user(self, user_input=None):
        errors: dict[str, str] = {}

        if user_input is not None:
            data, errors = validate_input(user_input)
            if not errors:
                await self.async_set_unique_id(entry_unique_id(data))
                self._abort_if_unique_id_configured()
                return self.async_create_entry(title=data[CONF_NAME], data=data)

        return self.async_show_form(
            step_id="user",
            data_schema=_build_schema(user_input or {}),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(entry):
        return LunchMenuOptionsFlowHandler(entry)


class LunchMenuOptionsFlowHandler(config_entries.OptionsFlow):
    """Handle LC Lunch Menu options."""

    def __init__(self, entry):
        self.entry = entry

    async def async_step_init(self, user_input=None):
        errors: dict[str, str] = {}

        if user_input is not None:
            data, errors = validate_input(user_input)
            if not errors:
                unique_id = entry_unique_id(data)
                others = self.hass.config_entries.async_entries(DOMAIN)
                if unique_id_taken(others, self.entry.entry_id, unique_id):
                    errors["base"] = "already_configured"

            if not errors:
                # Update entry and reload
                self.hass.config_entries.async_update_entry(self.entry, data=data, unique_id=unique_id)
                await self.hass.config_entries.async_reload(self.entry.entry_id)
                return self.async_create_entry(title="", data={})

        return self.async_show_form(
            step_id="init",
            data_schema=_build_schema(user_input or dict(self.entry.data)),
            errors=errors,
        )
