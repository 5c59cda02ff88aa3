"""Calendar platform for LC Lunch Menu."""

from __future__ import annotations

from datetime import datetime, timedelta, date
import logging
from typing import Any

from homeassistant.components.calendar import CalendarEntity, CalendarEvent
from homeassistant.core import HomeAssistant
from homeassistant.config_entries import ConfigEntry
from homeassistant.helpers.entity import DeviceInfo
from homeassistant.util import dt as dt_util
from homeassistant.util import slugify

from .const import (
    DOMAIN,
    CONF_NAME,
    CONF_LUNCH_BEGIN,
    CONF_LUNCH_END,
)
from .menu import MenuService, MenuDay, LunchMenuError, menuDateToCanonical
from .menufilter import MenuFilter

_LOGGER = logging.getLogger(__name__)

# how far ahead the entity looks for its current/next event
LOOKAHEAD_DAYS = 14


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry, add_entities):
    data = hass.data[DOMAIN][entry.entry_id]

    add_entities(
        [
            LunchMenuCalendarEntity(
                entry=entry,
                service=data["service"],
                menu_filter=data["filter"],
            )
        ],
        update_before_add=True,
    )


def day_summary(day: MenuDay, max_items: int = 3) -> str:
    """Entrees if there are any, otherwise the first few items."""

    entrees = [i.food_name for i in day.items if i.category_name and "entree" in i.category_name.lower()]
    names = entrees or [i.food_name for i in day.items]
    return " | ".join(names[:max_items])


def day_description(day: MenuDay) -> str:
    """Items grouped by category, in menu order."""

    grouped: dict[str, list[str]] = {}
    for item in day.items:
        grouped.setdefault(item.category_name or "Other", []).append(item.food_name)

    lines = [f"{day.menu_name}"]
    for category, foods in grouped.items():
        lines.append(f"{category}: {', '.join(foods)}")
    return "\n".join(lines)


class LunchMenuCalendarEntity(CalendarEntity):

    _attr_icon = "mdi:calendar"

    def __init__(self, entry, service: MenuService, menu_filter: MenuFilter):
        self._entry = entry
        self._service = service
        self._filter = menu_filter

        self._name = entry.data[CONF_NAME]

        name_slug = slugify(self._name) or "unnamed"
        self._attr_unique_id = f"lcmenu_calendar_{name_slug}_{entry.entry_id}"
        self._attr_available = True

        self._lunch_begin = self._parse_time(entry.data.get(CONF_LUNCH_BEGIN))
        self._lunch_end = self._parse_time(entry.data.get(CONF_LUNCH_END))

        self._current_or_next: CalendarEvent | None = None

    @staticmethod
    def _parse_time(v):
        if not v:
            return None
        return datetime.strptime(v, "%H:%M").time()

    @property
    def name(self):
        return self._name

    @property
    def device_info(self):
        return DeviceInfo(
            identifiers={(DOMAIN, self._entry.entry_id)},
            name=self._name,
            manufacturer="LINQ Connect",
        )

    @property
    def event(self) -> CalendarEvent | None:
        return self._current_or_next

    async def async_update(self):
        today = dt_util.now().date()
        events = await self._async_fetch_events(today, today + timedelta(days=LOOKAHEAD_DAYS))
        if events is None:
            self._current_or_next = None
            return
        self._current_or_next = self._find_current_or_next(events)

    async def _async_fetch_events(self, start: date, end: date) -> list[CalendarEvent] | None:
        try:
            menu_days = self._filter.filterDays(await self._service.fetchMenuData(start, end))
        except LunchMenuError as err:
            _LOGGER.warning("Failed to load menu for %s: %s", self._name, err)
            self._attr_available = False
            return None

        self._attr_available = True

        events = []
        for day in menu_days:
            iso = menuDateToCanonical(day.date)
            if iso is None or not day.items:
                continue
            events.append(
                self._build_event(
                    day=date.fromisoformat(iso),
                    summary=day_summary(day),
                    description=day_description(day),
                )
            )

        events.sort(key=lambda e: self._normalize(e.start))
        return events

    def _build_event(self, day: date, summary: str, description: str) -> CalendarEvent:

        if not (self._lunch_begin and self._lunch_end):
            # ALL-DAY event → use date objects
            start = day
            end = day + timedelta(days=1)
        else:
            # TIMED event → use datetime objects
            start = dt_util.start_of_local_day(day).replace(
                hour=self._lunch_begin.hour,
                minute=self._lunch_begin.minute,
            )
            end = dt_util.start_of_local_day(day).replace(
                hour=self._lunch_end.hour,
                minute=self._lunch_end.minute,
            )

        return CalendarEvent(
            summary=summary or "",
            description=description or "",
            start=start,
            end=end,
        )

    @staticmethod
    def _normalize(value: Any) -> datetime:
        if isinstance(value, datetime):
            return dt_util.as_local(value)
        if isinstance(value, date):
            return dt_util.start_of_local_day(value)
        return dt_util.now()

    def _find_current_or_next(self, events):
        now = dt_util.now()
        for e in events:
            start = self._normalize(e.start)
            end = self._normalize(e.end)
            if start <= now < end:
                return e
            if start > now:
                return e
        return None

    async def async_get_events(self, hass, start_date, end_date):
        events = await self._async_fetch_events(
            dt_util.as_local(start_date).date(),
            dt_util.as_local(end_date).date(),
        )
        if not events:
            return []

        result = []
        for e in events:
            s = self._normalize(e.start)
            t = self._normalize(e.end)

            if t <= start_date:
                continue
            if s >= end_date:
                continue

            result.append(e)

        return result
