from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from pokedex_api.clients import PokeAPIClient
from pokedex_api.db import TeamStore
from pokedex_api.models import TeamCreate
from pokedex_api.services import PokemonService

# Both instances are created by the lifespan in main.py and live on app.state

def get_poke_client(request: Request) -> PokeAPIClient:
    return request.app.state.poke_client

def get_team_store(request: Request) -> TeamStore:
    return request.app.state.team_store

def get_pokemon_service(
    poke_client: PokeAPIClient = Depends(get_poke_client),
    team_store: TeamStore = Depends(get_team_store),
) -> PokemonService:
    return PokemonService(poke_client=poke_client, team_store=team_store)

async def get_team_payload(request: Request) -> TeamCreate:
    """Reads the team fields from a JSON body or, for any other content type, from form fields."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            data = await request.json()
        except ValueError:
            raise RequestValidationError(
                [{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": None}]
            )
    else:
        data = dict(await request.form())

    if not isinstance(data, dict):
        raise RequestValidationError(
            [{"type": "dict_type", "loc": ("body",), "msg": "Input should be an object", "input": None}]
        )

    try:
        return TeamCreate.model_validate(data)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False, include_input=False)
        raise RequestValidationError([dict(error, loc=("body", *error["loc"])) for error in errors])
