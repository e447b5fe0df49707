"""Pydantic schemas mirroring the catalog/favorites service payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, TypeVar
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def derive_pokemon_id(resource_ref: str) -> int:
    """Return the last positive-integer path segment of ``resource_ref``.

    ``https://pokeapi.co/api/v2/pokemon/25/`` resolves to ``25``. Query strings
    and fragments are ignored. References without such a segment raise
    :class:`ValueError`.
    """

    path = urlsplit(resource_ref.strip()).path
    for segment in reversed([part for part in path.split("/") if part]):
        if segment.isascii() and segment.isdigit() and int(segment) > 0:
            return int(segment)
    raise ValueError(f"No positive integer id in resource reference: {resource_ref!r}")


class CatalogEntry(BaseModel):
    """One browsable Pokémon in the fixed catalog list."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(..., gt=0, description="Pokédex number, unique within the catalog")
    name: str
    resource_ref: str = Field(
        ...,
        alias="url",
        description="Resource URL the service exposes for the entry.",
    )

    @model_validator(mode="before")
    @classmethod
    def _derive_missing_id(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("id") is not None:
            return data
        ref = data.get("url", data.get("resource_ref"))
        if not isinstance(ref, str):
            return data
        return {**data, "id": derive_pokemon_id(ref)}


class FavoriteRecord(BaseModel):
    """Server-persisted favorite marker for a catalog entry."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="allow",
    )

    pokemon_id: int = Field(..., gt=0)
    created_at: datetime
    id: int | str | None = None
    name: str | None = None


def _flatten_names(value: Any, key: str) -> Any:
    """Collapse PokeAPI-style ``[{key: {"name": ...}}]`` lists into names."""

    if not isinstance(value, list):
        return value
    names: list[str] = []
    for item in value:
        if isinstance(item, str):
            names.append(item)
        elif isinstance(item, dict):
            nested = item.get(key)
            if isinstance(nested, dict) and "name" in nested:
                names.append(str(nested["name"]))
            elif "name" in item:
                names.append(str(item["name"]))
    return names


class PokemonDetail(BaseModel):
    """Detail payload fetched lazily when a Pokémon is selected."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="allow",
    )

    id: int = Field(..., gt=0)
    name: str
    height: int | None = None
    weight: int | None = None
    base_experience: int | None = None
    types: list[str] = Field(default_factory=list)
    abilities: list[str] = Field(default_factory=list)
    sprite_url: str | None = None

    @field_validator("types", mode="before")
    @classmethod
    def _flatten_types(cls, value: Any) -> Any:
        return _flatten_names(value, "type")

    @field_validator("abilities", mode="before")
    @classmethod
    def _flatten_abilities(cls, value: Any) -> Any:
        return _flatten_names(value, "ability")

    @model_validator(mode="before")
    @classmethod
    def _pick_sprite(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("spriteUrl") or data.get("sprite_url"):
            return data
        sprites = data.get("sprites")
        if isinstance(sprites, dict) and isinstance(sprites.get("front_default"), str):
            return {**data, "spriteUrl": sprites["front_default"]}
        return data


class ApiEnvelope(BaseModel, Generic[T]):
    """Uniform ``success``/``data``/``message`` wrapper used by every endpoint."""

    success: bool
    data: T | None = None
    message: str | list[str] | None = None

    @property
    def error_message(self) -> str:
        """Return ``message`` as a single string, joining multi-part messages."""

        if isinstance(self.message, list):
            joined = ", ".join(part for part in self.message if part)
            return joined or "An unknown error occurred"
        return self.message or "An unknown error occurred"
