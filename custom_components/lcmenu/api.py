from __future__ import annotations
from typing import Any
from logging import getLogger
import asyncio

import aiohttp

from .menu import FetchError

log = getLogger(__name__)


class MenuApiClient():
    """Fetch collaborator for MenuService, returns the raw FamilyMenu JSON."""

    def __init__(self, aiohttp_session: aiohttp.ClientSession):
        self._session = aiohttp_session
        self.headers = {"Accept": "application/json"}

    async def get(self, url: str, params: dict[str, str]) -> Any:
        try:
            async with self._session.get(url, params=params, headers=self.headers, raise_for_status=True) as response:
                # the endpoint does not always label its json as such
                return await response.json(content_type=None)
        except aiohttp.ClientError as err:
            log.debug("Request to %s failed: %s", url, err)
            raise FetchError(f"Failed to retrieve {url}: {err}") from err
        except asyncio.TimeoutError as err:
            log.debug("Request to %s timed out", url)
            raise FetchError(f"Timed out retrieving {url}") from err
        except ValueError as err:
            raise FetchError(f"Malformatted json from {url}") from err
