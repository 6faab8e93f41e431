"""Client modules for external API communication."""
from .pokeapi_client import PokeAPIClient, UpstreamUnavailable

__all__ = [
    'PokeAPIClient',
    'UpstreamUnavailable',
]
