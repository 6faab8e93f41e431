"""Request orchestration between PokeAPI and the team store."""
from .pokemon_service import PokemonService, TeamStoreFailure

__all__ = [
    'PokemonService',
    'TeamStoreFailure',
]
