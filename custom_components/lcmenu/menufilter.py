from __future__ import annotations
from dataclasses import replace
from typing import TypedDict, Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .menu import MenuDay, MenuItem

from logging import getLogger
log = getLogger(__name__)


class MenuFilterConfig(TypedDict, total=False):
    lunch_only: bool
    main_entrees_only: bool


def _contains(value: Any, needle: str) -> bool:
    return isinstance(value, str) and needle in value.lower()


class MenuFilter():
    """Selection and ordering applied on top of MenuService results.

    MenuService returns everything the district publishes; what a consumer
    wants to see (only lunch, only entrees) is decided here.
    """

    def __init__(self, config_raw: dict | None = None):
        self._config: MenuFilterConfig = self._processConfig(config_raw)

    @property
    def config(self) -> MenuFilterConfig:
        return dict(self._config)

    def _processConfig(self, config_raw: dict | None) -> MenuFilterConfig:

        config_raw = config_raw if isinstance(config_raw, dict) else {}

        def flag(key: str) -> bool:
            value = config_raw.get(key)
            if not isinstance(value, bool):
                if value is not None:
                    log.warning("MenuFilter: ignoring non boolean %s=%r", key, value)
                return False
            return value

        return {
            "lunch_only": flag("lunch_only"),
            "main_entrees_only": flag("main_entrees_only"),
        }

    def filterDays(self, days: list[MenuDay]) -> list[MenuDay]:
        """Filter MenuDays and sort them by menu name, keeping date order within a name."""

        if not days:
            return []

        result = [d for d in days if d is not None]

        if self._config["lunch_only"]:
            result = [d for d in result if _contains(d.menu_name, "lunch")]

        if self._config["main_entrees_only"]:
            result = [replace(d, items=self._entreesOnly(d.items)) for d in result]

        return sorted(result, key=lambda d: (d.menu_name or "").casefold())

    def filterItems(self, items: list[MenuItem]) -> list[MenuItem]:
        """Filter items and sort them by category, then food name."""

        if not items:
            return []

        result = list(items)

        if self._config["lunch_only"]:
            result = [i for i in result if _contains(i.menu_name, "lunch")]

        if self._config["main_entrees_only"]:
            result = self._entreesOnly(result)

        return sorted(result, key=lambda i: ((i.category_name or "").casefold(), (i.food_name or "").casefold()))

    @staticmethod
    def _entreesOnly(items: list[MenuItem]) -> list[MenuItem]:
        return [i for i in items if _contains(i.category_name, "entree")]
