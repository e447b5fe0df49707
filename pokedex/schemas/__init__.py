"""Pydantic schemas for service payloads and error reports."""

from pokedex.schemas.error import ErrorReport, ErrorType  # noqa: F401
from pokedex.schemas.pokemon import (  # noqa: F401
    ApiEnvelope,
    CatalogEntry,
    FavoriteRecord,
    PokemonDetail,
    derive_pokemon_id,
)
