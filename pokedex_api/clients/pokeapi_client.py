import logging
from typing import Any, Optional, Union
from urllib.parse import quote

import httpx
from fastapi import HTTPException

logger = logging.getLogger(__name__)

# Raised for any transport, status or parsing failure talking to PokeAPI
class UpstreamUnavailable(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=503, detail=f"External API Error: {detail}")

class PokeAPIClient:
    BASE_URL = "https://pokeapi.co/api/v2"

    def __init__(self, base_url: Optional[str] = None, timeout: float = 5.0):
        self.client = httpx.AsyncClient(base_url=base_url or self.BASE_URL, timeout=timeout)

    @staticmethod
    def entry_path(identifier: Union[int, str]) -> str:
        """Numeric ids are used as-is, names are lower-cased. Always a single escaped path segment."""
        identifier = str(identifier)
        if not identifier.isdigit():
            identifier = identifier.lower()
        return f"/pokemon/{quote(identifier, safe='')}"

    @staticmethod
    def ability_path(name: str) -> str:
        return f"/ability/{quote(name.lower(), safe='')}"

    async def _get_json(self, url: str, params: Optional[dict] = None) -> Any:
        """
        Performs one GET and decodes the body.
        Returns None when PokeAPI has nothing for the URL (404 or empty body).
        """
        try:
            response = await self.client.get(url, params=params)
            if response.status_code == 404:
                logger.info(f"PokeAPI has no record at {url}")
                return None
            response.raise_for_status()

        except httpx.HTTPStatusError as e:
            logger.error(f"PokeAPI failed with status {e.response.status_code} for {url}")
            raise UpstreamUnavailable(f"PokeAPI failed with status {e.response.status_code}")
        except httpx.RequestError as e:
            # Network failures/timeouts
            logger.error(f"PokeAPI network error for {url}: {str(e)}")
            raise UpstreamUnavailable(f"PokeAPI network error: {str(e)}")

        if not response.content.strip():
            return None

        try:
            data = response.json()
        except ValueError:
            logger.error(f"PokeAPI returned an unparseable body for {url}")
            raise UpstreamUnavailable("PokeAPI returned an unexpected response format.")

        return data or None

    async def fetch_list(self, limit: int, offset: int) -> Any:
        """Fetches one page of the Pokemon index, untouched."""
        logger.info(f"Fetching Pokemon list limit={limit} offset={offset}")
        return await self._get_json("/pokemon", params={"limit": limit, "offset": offset})

    async def fetch_entry(self, identifier: Union[int, str]) -> Optional[dict]:
        """Fetches the raw Pokemon record by id or name."""
        return await self._get_json(self.entry_path(identifier))

    async def fetch_ability(self, name: str) -> Optional[dict]:
        """Fetches the raw ability record by name."""
        return await self._get_json(self.ability_path(name))

    async def close(self):
        """Close the HTTP connection pool (call on app shutdown)."""
        await self.client.aclose()
