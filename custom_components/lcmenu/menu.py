from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, date, timezone
from typing import Any, Protocol

from dateutil.relativedelta import relativedelta

from .const import BASE_URL, WIRE_DATE_FORMAT, MENU_DATE_FORMAT
from .logger import Logger, createLogger


class LunchMenuError(Exception):
    """Base class for lcmenu errors."""


class FetchError(LunchMenuError):
    """The menu endpoint could not be reached or answered with an error."""


class ParseError(LunchMenuError):
    """The menu payload could not be traversed."""


class OperationError(LunchMenuError):
    """Invalid input to a menu operation."""


@dataclass(frozen=True)
class MenuItem:
    category_name: str
    food_name: str
    menu_name: str | None = None


@dataclass
class MenuDay:
    date: str  # upstream MM/DD/YYYY
    menu_name: str
    items: list[MenuItem] = field(default_factory=list)


@dataclass
class ServingSession:
    id: str
    name: str
    days: list[MenuDay] = field(default_factory=list)


class FetchClient(Protocol):
    async def get(self, url: str, params: dict[str, str]) -> Any: ...


def toCanonicalDate(value: date | datetime) -> str:
    """YYYY-MM-DD of `value` on UTC day boundaries, naive datetimes are taken as UTC."""

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date().isoformat()
    return value.isoformat()


def menuDateToCanonical(menuDate: Any) -> str | None:
    """'1/5/2024' -> '2024-01-05', None if the upstream date is unusable."""

    if not isinstance(menuDate, str):
        return None
    try:
        return datetime.strptime(menuDate.strip(), MENU_DATE_FORMAT).date().isoformat()
    except ValueError:
        return None


def _toWireDate(value: date | datetime) -> str:
    return value.strftime(WIRE_DATE_FORMAT)


def _listOf(node: Any, key: str) -> list:
    # absent or mistyped levels count as empty
    if not isinstance(node, Mapping):
        return []
    value = node.get(key)
    return value if isinstance(value, list) else []


class MenuService():

    def __init__(self, buildingId: str, districtId: str, client: FetchClient, logger: Any = None, url: str = BASE_URL):
        self.buildingId = buildingId
        self.districtId = districtId
        self.url = url
        self._client = client
        self.log: Logger = createLogger(None, logger)

    async def fetchMenuData(self, startDate: date | datetime | None = None, endDate: date | datetime | None = None) -> list[MenuDay]:
        """Fetch and parse the menu for [startDate, endDate].

        Defaults to today through one month ahead. Failures from the fetch
        client are logged and re-raised as they are.
        """

        today = date.today()

        params = {
            "buildingId": self.buildingId,
            "districtId": self.districtId,
            "startDate": _toWireDate(startDate if startDate is not None else today),
            "endDate": _toWireDate(endDate if endDate is not None else today + relativedelta(months=1)),
        }

        try:
            self.log.debug("Fetching menu data", {"params": params})
            data = await self._client.get(self.url, params=params)
            self.log.debug("Received menu data", {"data": data})
        except Exception as err:
            self.log.error("Error fetching menu data", {"error": err})
            raise

        return self.parseRawMealData(data)

    def parseRawMealData(self, jsonData: Any) -> list[MenuDay]:
        """Flatten FamilyMenuSessions into one MenuDay per (date, session name).

        Items keep the order they appear in the payload. Missing levels are
        treated as empty, records that are not objects are skipped.
        """

        self.log.debug("Parsing raw meal data")

        try:
            return self._parseSessions(jsonData)
        except Exception as err:
            self.log.error("Error parsing menu data", {"error": err})
            raise ParseError("Failed to parse menu data") from None

    def _parseSessions(self, jsonData: Any) -> list[MenuDay]:

        if jsonData is None:
            return []

        if not isinstance(jsonData, Mapping):
            raise TypeError(f"expected a json object, got {type(jsonData).__name__}")

        familySessions = jsonData.get("FamilyMenuSessions")
        if familySessions is None:
            return []
        if not isinstance(familySessions, list):
            raise TypeError(f"FamilyMenuSessions is {type(familySessions).__name__}, expected list")

        menuDays: list[MenuDay] = []
        dayIndex: dict[tuple[str, str], MenuDay] = {}
        sessions: dict[str, ServingSession] = {}

        for familySession in familySessions:
            if not isinstance(familySession, Mapping):
                self.log.debug("Skipping malformed session", {"session": familySession})
                continue

            self.log.debug("Processing family session", {"session": familySession.get("ServingSession")})
            sessionId = familySession.get("ServingSessionId") or "default"
            sessionName = familySession.get("ServingSession") or "Lunch"

            session = sessions.get(sessionId)
            if session is None:
                session = sessions[sessionId] = ServingSession(id=sessionId, name=sessionName)

            for plan in _listOf(familySession, "MenuPlans"):
                for day in _listOf(plan, "Days"):
                    mealDate = day.get("Date") if isinstance(day, Mapping) else None
                    if not isinstance(mealDate, str) or not mealDate:
                        self.log.debug("Skipping day without date", {"day": day})
                        continue

                    meals = _listOf(day, "MenuMeals")
                    self.log.debug("Processing meal items", {"date": mealDate, "count": len(meals)})

                    for meal in meals:
                        for category in _listOf(meal, "RecipeCategories"):
                            categoryName = category.get("CategoryName") if isinstance(category, Mapping) else None

                            for recipe in _listOf(category, "Recipes"):
                                foodName = recipe.get("RecipeName") if isinstance(recipe, Mapping) else None
                                if foodName is None:
                                    self.log.debug("Skipping recipe without name", {"date": mealDate, "category": categoryName})
                                    continue

                                self.log.debug("Processing recipe", {"date": mealDate, "recipe": foodName})
                                item = MenuItem(category_name=categoryName, food_name=foodName, menu_name=sessionName)

                                key = (mealDate, sessionName)
                                menuDay = dayIndex.get(key)
                                if menuDay is None:
                                    menuDay = dayIndex[key] = MenuDay(date=mealDate, menu_name=sessionName)
                                    menuDays.append(menuDay)
                                    session.days.append(menuDay)
                                menuDay.items.append(item)

        self.log.debug("Finished processing all days", {"days": len(menuDays), "sessions": len(sessions)})
        return menuDays

    async def getMenuForDate(self, targetDate: date | datetime, sessionFilter: str | None = None) -> list[MenuItem]:
        """All items served on targetDate, across sessions.

        sessionFilter is accepted for callers that pass it along, it does
        not narrow the result. An empty list means nothing is served.
        """

        targetDateStr = toCanonicalDate(targetDate)
        targetDay = date.fromisoformat(targetDateStr)

        menuData = await self.fetchMenuData(targetDay, targetDay)
        self.log.debug("Retrieved menu data for date", {"targetDate": targetDateStr, "sessionFilter": sessionFilter, "dayCount": len(menuData)})

        menuItems: list[MenuItem] = []
        for menuDay in menuData:
            menuDateStr = menuDateToCanonical(menuDay.date)
            self.log.debug("Matching menu day", {"menuDate": menuDay.date, "formattedMenuDate": menuDateStr, "targetDate": targetDateStr})

            if menuDateStr == targetDateStr:
                menuItems.extend(menuDay.items)

        return menuItems
