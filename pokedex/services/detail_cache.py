"""In-process cache for Pokémon detail fetched on selection."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Protocol

from pokedex.schemas.pokemon import PokemonDetail

logger = logging.getLogger(__name__)

_DEFAULT_TTL_SECONDS = 300


class DetailApi(Protocol):
    async def fetch_detail(self, pokemon_id: int) -> PokemonDetail: ...


class DetailCache:
    """TTL cache in front of ``fetch_detail``.

    Concurrent lookups for the same id share one request; lookups for
    different ids proceed independently. Failures are not cached.
    """

    def __init__(
        self,
        api: DetailApi,
        *,
        ttl_seconds: int = _DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._api = api
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[int, tuple[float, PokemonDetail]] = {}
        self._inflight: dict[int, asyncio.Task[PokemonDetail]] = {}
        self._lock = asyncio.Lock()

    async def peek(self, pokemon_id: int) -> PokemonDetail | None:
        """Return a cached detail that is still valid, without fetching."""

        async with self._lock:
            cached = self._entries.get(pokemon_id)
            if cached is None:
                return None

            expires_at, detail = cached
            if expires_at < self._clock():
                self._entries.pop(pokemon_id, None)
                return None
            return detail

    async def get(self, pokemon_id: int) -> PokemonDetail:
        """Return detail for ``pokemon_id``, fetching it on a miss."""

        cached = await self.peek(pokemon_id)
        if cached is not None:
            return cached

        async with self._lock:
            task = self._inflight.get(pokemon_id)
            if task is None:
                task = asyncio.ensure_future(self._fetch(pokemon_id))
                self._inflight[pokemon_id] = task

        return await asyncio.shield(task)

    async def _fetch(self, pokemon_id: int) -> PokemonDetail:
        try:
            detail = await self._api.fetch_detail(pokemon_id)
        finally:
            async with self._lock:
                self._inflight.pop(pokemon_id, None)

        if self._ttl > 0:
            async with self._lock:
                self._entries[pokemon_id] = (self._clock() + self._ttl, detail)
        logger.debug(f"Cached detail for Pokémon {pokemon_id}")
        return detail

    async def evict(self, pokemon_id: int) -> None:
        async with self._lock:
            self._entries.pop(pokemon_id, None)

    async def clear(self) -> None:
        """Remove every cached entry."""

        async with self._lock:
            self._entries.clear()


__all__ = ["DetailCache"]
