import logging
from contextlib import asynccontextmanager
from typing import Any, Optional, Union

from fastapi import Depends, FastAPI, Path, Query

from pokedex_api.clients import PokeAPIClient
from pokedex_api.config import Settings
from pokedex_api.db import StoreError, TeamStore
from pokedex_api.dependencies import get_pokemon_service, get_team_payload
from pokedex_api.logging_config import setup_logging
from pokedex_api.models import (
    AbilityInfo,
    CatalogEntry,
    MessageResponse,
    TeamCreate,
    TeamCreatedResponse,
    TeamRecord,
)
from pokedex_api.services.pokemon_service import DEFAULT_LIMIT, DEFAULT_PAGE, PokemonService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()
    setup_logging(settings.log_level, settings.log_file)

    poke_client = PokeAPIClient(base_url=settings.pokeapi_base_url, timeout=settings.http_timeout)
    team_store = TeamStore(settings.database_url, echo=settings.database_echo)
    try:
        await team_store.ensure_schema()
    except StoreError:
        # Team routes retry and report the failure per request
        logger.exception("Team table could not be prepared at startup")

    app.state.poke_client = poke_client
    app.state.team_store = team_store
    try:
        yield
    finally:
        await poke_client.close()
        await team_store.close()


app = FastAPI(
    title="Pokedex Team API",
    description="PokeAPI proxy with normalized lookups and persisted Pokemon teams.",
    lifespan=lifespan,
)

# Identifiers accepted by the data routes: PokeAPI ids and slugs only
IDENTIFIER_PATTERN = r"^[a-zA-Z0-9-]+$"

# Endpoint 1: Raw Pokemon list
@app.get(
    "/pokemon/v1/list",
    summary="Returns one page of the PokeAPI Pokemon index",
)
async def list_pokemon(
    limit: int = Query(DEFAULT_LIMIT, ge=0, description="0 falls back to the default"),
    page: int = Query(DEFAULT_PAGE, ge=1),
    service: PokemonService = Depends(get_pokemon_service),
) -> Any:
    """Passes PokeAPI's list response through unchanged; an empty list if PokeAPI is unreachable."""
    return await service.list_pokemon(limit=limit, page=page)


# Endpoint 2: Normalized Pokemon data
@app.get(
    "/pokemon/v1/data/{identifier}",
    response_model=Optional[CatalogEntry],
    summary="Returns normalized data for a Pokemon id or name",
)
async def get_pokemon_data(
    identifier: str = Path(..., pattern=IDENTIFIER_PATTERN),
    service: PokemonService = Depends(get_pokemon_service),
):
    # null when PokeAPI has no such Pokemon, 503 when it cannot be reached
    return await service.get_pokemon(identifier)


# Endpoint 3: Ability effect texts
@app.get(
    "/ability/v1/data/{ability_name}",
    response_model=Optional[AbilityInfo],
    summary="Returns the English effect texts of an ability",
)
async def get_ability_data(
    ability_name: str = Path(..., pattern=IDENTIFIER_PATTERN),
    service: PokemonService = Depends(get_pokemon_service),
):
    return await service.get_ability(ability_name)


# Endpoint 4: Save a team member
@app.post(
    "/pokemon/v1/add-team",
    response_model=TeamCreatedResponse,
    summary="Stores a Pokemon team entry (form fields or JSON body)",
)
async def add_team(
    payload: TeamCreate = Depends(get_team_payload),
    service: PokemonService = Depends(get_pokemon_service),
):
    """Returns the new row id; store failures become a 500 with an identifying code."""
    return await service.add_team(payload)


# Endpoint 5: All saved teams
@app.get(
    "/pokemon_team/v1/all",
    response_model=Union[list[TeamRecord], MessageResponse],
    summary="Returns every stored Pokemon team entry",
)
async def list_teams(service: PokemonService = Depends(get_pokemon_service)):
    return await service.list_teams()
