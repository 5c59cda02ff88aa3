"""Menu operations as exposed to consumers of the integration.

Each operation validates its input, queries a MenuService and applies a
MenuFilter, returning plain json-able data.
"""

from __future__ import annotations
from datetime import date
from typing import Any
from logging import getLogger

from dateutil import parser
from dateutil.relativedelta import relativedelta

from .menu import MenuService, MenuDay, MenuItem, OperationError, menuDateToCanonical, toCanonicalDate
from .menufilter import MenuFilter

log = getLogger(__name__)

OPERATION_GET_MENU = "getMenu"
OPERATION_GET_MENU_FOR_DATE = "getMenuForDate"


def parseDay(value: Any) -> date | None:
    """Calendar day (UTC) of a date, datetime or date string, None when not given."""

    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            value = parser.isoparse(value.strip())
        except ValueError:
            try:
                value = parser.parse(value)
            except (ValueError, OverflowError) as err:
                raise OperationError(f"Invalid date provided: {value!r}") from err
    if not isinstance(value, date):
        raise OperationError(f"Invalid date provided: {value!r}")
    return date.fromisoformat(toCanonicalDate(value))


def itemToDict(item: MenuItem) -> dict[str, Any]:
    return {
        "categoryName": item.category_name,
        "foodName": item.food_name,
        "menuName": item.menu_name,
    }


def dayToDict(day: MenuDay) -> dict[str, Any]:
    return {
        "date": menuDateToCanonical(day.date) or day.date,
        "menuName": day.menu_name,
        "items": [
            {
                "recipeName": item.food_name,
                "categoryName": item.category_name,
                "foodComponents": [],
                "allergens": [],
            }
            for item in day.items
        ],
    }


async def getMenu(service: MenuService, startDate: Any = None, endDate: Any = None, lunchOnly: bool = False, mainEntreesOnly: bool = False) -> dict[str, Any]:

    start = parseDay(startDate)
    end = parseDay(endDate)

    if start is not None and end is not None and start > end:
        raise OperationError("Start date cannot be after end date")

    menuFilter = MenuFilter({"lunch_only": lunchOnly, "main_entrees_only": mainEntreesOnly})
    menuDays = menuFilter.filterDays(await service.fetchMenuData(start, end))

    today = date.today()
    effectiveStart = start.isoformat() if start is not None else today.isoformat()
    effectiveEnd = end.isoformat() if end is not None else (today + relativedelta(months=1)).isoformat()

    return {
        "servingSessions": [{
            "id": "1",
            "name": "Lunch",
            "days": [dayToDict(day) for day in menuDays],
        }],
        "startDate": effectiveStart,
        "endDate": effectiveEnd,
    }


async def getMenuForDate(service: MenuService, targetDate: Any, servingSessionId: str | None = None, lunchOnly: bool = False, mainEntreesOnly: bool = False) -> list[dict[str, Any]]:

    target = parseDay(targetDate)
    if target is None:
        raise OperationError("Invalid date provided")

    log.debug("Processing target date %s, serving session %r", target, servingSessionId)

    menuFilter = MenuFilter({"lunch_only": lunchOnly, "main_entrees_only": mainEntreesOnly})
    items = menuFilter.filterItems(await service.getMenuForDate(target, servingSessionId or None))
    return [itemToDict(item) for item in items]


async def runOperation(service: MenuService, operation: str, params: dict[str, Any] | None = None):
    """Dispatch `operation` by name with keyword `params`."""

    params = params or {}
    log.debug("Processing operation %s", operation)

    if operation == OPERATION_GET_MENU:
        return await getMenu(
            service,
            startDate=params.get("startDate"),
            endDate=params.get("endDate"),
            lunchOnly=params.get("lunchOnly") is True,
            mainEntreesOnly=params.get("mainEntreesOnly") is True,
        )

    if operation == OPERATION_GET_MENU_FOR_DATE:
        return await getMenuForDate(
            service,
            params.get("targetDate"),
            servingSessionId=params.get("servingSessionId"),
            lunchOnly=params.get("lunchOnly") is True,
            mainEntreesOnly=params.get("mainEntreesOnly") is True,
        )

    raise OperationError(f"The operation '{operation}' is not supported.")
