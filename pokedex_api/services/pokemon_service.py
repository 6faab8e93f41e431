import logging
from typing import Any, Optional, Union

from fastapi import HTTPException

from pokedex_api.clients.pokeapi_client import PokeAPIClient, UpstreamUnavailable
from pokedex_api.db.team_store import StoreError, TeamStore
from pokedex_api.models import (
    AbilityInfo,
    CatalogEntry,
    MessageResponse,
    TeamCreate,
    TeamCreatedResponse,
    TeamRecord,
)
from pokedex_api.normalizer import normalize_ability, normalize_entry

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
DEFAULT_PAGE = 1

TEAM_ADDED_MESSAGE = "Pokémon team added successfully"
NO_TEAMS_MESSAGE = "No Pokémon teams found"

# Store failures surfaced to API consumers as a 500 with an identifying code
class TeamStoreFailure(HTTPException):
    def __init__(self, code: str, message: str):
        super().__init__(status_code=500, detail={"code": code, "message": message})

def compute_offset(limit: int, page: int) -> int:
    """Offset of the first item on a 1-based page."""
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    if page < 1:
        raise ValueError(f"page must be at least 1, got {page}")
    return (page - 1) * limit

class PokemonService:
    # Both collaborators are built once at startup and injected
    def __init__(self, poke_client: PokeAPIClient, team_store: TeamStore):
        self._poke_client = poke_client
        self._team_store = team_store

    async def list_pokemon(self, limit: int = DEFAULT_LIMIT, page: int = DEFAULT_PAGE) -> Any:
        """
        Returns PokeAPI's list page as-is, envelope included.
        An unreachable PokeAPI yields an empty list rather than an error.
        A limit of 0 falls back to the default page size.
        """
        limit = limit or DEFAULT_LIMIT
        offset = compute_offset(limit, page)
        try:
            data = await self._poke_client.fetch_list(limit, offset)
        except UpstreamUnavailable as e:
            logger.warning(f"Returning empty Pokemon list: {e.detail}")
            return []

        return data if data is not None else []

    async def get_pokemon(self, identifier: Union[int, str]) -> Optional[CatalogEntry]:
        """
        Fetches and normalizes one Pokemon by id or name.
        None means PokeAPI has no such Pokemon; UpstreamUnavailable is left to FastAPI (503).
        """
        raw = await self._poke_client.fetch_entry(identifier)
        entry = normalize_entry(raw)
        if entry is None:
            logger.info(f"Pokemon '{identifier}' not found")
        return entry

    async def get_ability(self, name: str) -> Optional[AbilityInfo]:
        """Fetches an ability and keeps only its English effect texts."""
        raw = await self._poke_client.fetch_ability(name)
        ability = normalize_ability(raw)
        if ability is None:
            logger.info(f"No English effect found for ability '{name}'")
        return ability

    async def add_team(self, payload: TeamCreate) -> TeamCreatedResponse:
        try:
            # No-op once the table is known to exist
            await self._team_store.ensure_schema()
            team_id = await self._team_store.insert_team(
                name=payload.name,
                nickname=payload.nickname,
                stats=payload.stats,
                ability=payload.ability,
                held_item=payload.held_item,
            )
        except StoreError as e:
            raise TeamStoreFailure(code=e.code, message=e.message)

        return TeamCreatedResponse(message=TEAM_ADDED_MESSAGE, data=team_id)

    async def list_teams(self) -> Union[list[TeamRecord], MessageResponse]:
        """All saved teams, or an informational message when there are none."""
        try:
            await self._team_store.ensure_schema()
            teams = await self._team_store.list_all_teams()
        except StoreError as e:
            raise TeamStoreFailure(code=e.code, message=e.message)

        if not teams:
            return MessageResponse(message=NO_TEAMS_MESSAGE)
        return teams
