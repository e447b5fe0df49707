"""Async HTTP client for the Pokémon catalog/favorites service.

Every endpoint answers with the same ``{success, data, message}`` envelope.
:meth:`PokemonApiClient._request` is the single place where transport
failures, HTTP errors and ``success=false`` envelopes are normalized into
:class:`~pokedex.errors.NetworkError` and :class:`~pokedex.errors.ServiceError`.
Nothing here retries; callers decide.
"""

from __future__ import annotations

import json
import logging
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from pokedex.errors import NetworkError, ServiceError
from pokedex.schemas.pokemon import (
    ApiEnvelope,
    CatalogEntry,
    FavoriteRecord,
    PokemonDetail,
)
from pokedex.utils.request_context import (
    REQUEST_ID_HEADER,
    new_request_id,
    set_request_id,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CATALOG_ADAPTER: TypeAdapter[list[CatalogEntry]] = TypeAdapter(list[CatalogEntry])
_FAVORITES_ADAPTER: TypeAdapter[list[FavoriteRecord]] = TypeAdapter(list[FavoriteRecord])
_FAVORITE_ADAPTER: TypeAdapter[FavoriteRecord] = TypeAdapter(FavoriteRecord)
_DETAIL_ADAPTER: TypeAdapter[PokemonDetail] = TypeAdapter(PokemonDetail)

# Favorites are edited from other sessions too, so intermediaries must not
# answer from a stored copy.
NO_CACHE_HEADERS = {"Cache-Control": "no-cache, no-store", "Pragma": "no-cache"}


class PokemonApiClient:
    """Typed request/response boundary to the remote service."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> PokemonApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client when this instance created it."""

        if self._owns_client:
            await self._client.aclose()

    async def fetch_catalog(self) -> list[CatalogEntry]:
        """GET /pokemon/list: the fixed catalog, in service order."""

        return await self._request("GET", "/pokemon/list", adapter=_CATALOG_ADAPTER)

    async def fetch_detail(self, pokemon_id: int) -> PokemonDetail:
        """GET /pokemon/{id}: detail for one entry, fetched on selection."""

        return await self._request(
            "GET", f"/pokemon/{pokemon_id}", adapter=_DETAIL_ADAPTER
        )

    async def fetch_favorites(self) -> list[FavoriteRecord]:
        """GET /pokemon/favorites, bypassing any intermediate cache."""

        return await self._request(
            "GET",
            "/pokemon/favorites",
            adapter=_FAVORITES_ADAPTER,
            headers=NO_CACHE_HEADERS,
        )

    async def add_favorite(self, pokemon_id: int) -> FavoriteRecord:
        """POST /pokemon/favorites with ``{"pokemonId": id}``."""

        return await self._request(
            "POST",
            "/pokemon/favorites",
            adapter=_FAVORITE_ADAPTER,
            json_body={"pokemonId": pokemon_id},
        )

    async def remove_favorite(self, pokemon_id: int) -> FavoriteRecord:
        """DELETE /pokemon/favorites/{id}."""

        return await self._request(
            "DELETE", f"/pokemon/favorites/{pokemon_id}", adapter=_FAVORITE_ADAPTER
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        adapter: TypeAdapter[T],
        json_body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> T:
        request_id = new_request_id()
        set_request_id(request_id)
        request_headers = {REQUEST_ID_HEADER: request_id, **(headers or {})}

        logger.debug(f"{method} {path} [{request_id}]")
        try:
            response = await self._client.request(
                method, path, json=json_body, headers=request_headers
            )
        except httpx.TransportError as exc:
            logger.warning(f"{method} {path} transport failure [{request_id}]: {exc}")
            raise NetworkError(
                f"Network error while calling {path}: {exc}", request_id=request_id
            ) from exc
        except httpx.RequestError as exc:
            # A response arrived but could not be read (bad encoding, redirect loop).
            logger.warning(f"{method} {path} unreadable response [{request_id}]: {exc}")
            raise ServiceError(
                f"Malformed response from {path}: {exc}", request_id=request_id
            ) from exc

        envelope = self._parse_envelope(response, request_id=request_id)

        if not response.is_success or not envelope.success:
            message = envelope.error_message
            logger.warning(
                f"{method} {path} failed with {response.status_code} [{request_id}]: {message}"
            )
            raise ServiceError(
                message, status_code=response.status_code, request_id=request_id
            )

        try:
            return adapter.validate_python(envelope.data)
        except ValidationError as exc:
            logger.warning(f"{method} {path} returned unexpected data [{request_id}]")
            raise ServiceError(
                f"Malformed response data from {path}: {exc.error_count()} validation error(s)",
                status_code=response.status_code,
                request_id=request_id,
            ) from exc

    @staticmethod
    def _parse_envelope(
        response: httpx.Response, *, request_id: str
    ) -> ApiEnvelope[Any]:
        """Decode the body into an envelope or raise ``ServiceError``."""

        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ServiceError(
                f"Malformed response envelope: body is not JSON (HTTP {response.status_code})",
                status_code=response.status_code,
                request_id=request_id,
            ) from exc

        try:
            return ApiEnvelope[Any].model_validate(payload)
        except ValidationError as exc:
            raise ServiceError(
                f"Malformed response envelope (HTTP {response.status_code})",
                status_code=response.status_code,
                request_id=request_id,
            ) from exc


__all__ = ["NO_CACHE_HEADERS", "PokemonApiClient"]
