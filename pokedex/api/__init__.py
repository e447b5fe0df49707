"""Remote boundary to the catalog/favorites service."""

from .client import NO_CACHE_HEADERS, PokemonApiClient

__all__ = ["NO_CACHE_HEADERS", "PokemonApiClient"]
