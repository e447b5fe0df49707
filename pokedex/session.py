"""Explicit per-session context bundling client, store, cache and controller."""

from __future__ import annotations

import logging

import httpx

from pokedex.api.client import PokemonApiClient
from pokedex.controller import Renderer, ViewController
from pokedex.services.detail_cache import DetailCache
from pokedex.services.sync_store import SyncStore
from pokedex.settings import AppSettings

logger = logging.getLogger(__name__)


class PokedexSession:
    """Owns every long-lived object for one browsing session.

    Consumers receive the session (or its members) explicitly; nothing is
    reachable through module globals. ``start`` performs the initial load and
    ``aclose`` releases the HTTP connection pool.
    """

    def __init__(
        self,
        *,
        settings: AppSettings,
        client: PokemonApiClient,
        store: SyncStore,
        details: DetailCache,
        controller: ViewController,
    ) -> None:
        self.settings = settings
        self.client = client
        self.store = store
        self.details = details
        self.controller = controller
        self._closed = False

    @classmethod
    def create(
        cls,
        settings: AppSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        renderer: Renderer | None = None,
    ) -> PokedexSession:
        """Wire a session from settings; ``transport`` lets tests fake HTTP."""

        client = PokemonApiClient(
            base_url=settings.api_base_url,
            timeout=settings.request_timeout_seconds,
            transport=transport,
        )
        store = SyncStore(client)
        details = DetailCache(client, ttl_seconds=settings.detail_cache_ttl_seconds)
        controller = ViewController(store, details, renderer=renderer)
        return cls(
            settings=settings,
            client=client,
            store=store,
            details=details,
            controller=controller,
        )

    @property
    def closed(self) -> bool:
        return self._closed

    async def start(self) -> None:
        await self.controller.load()

    async def aclose(self) -> None:
        """Unmount the view, drop state and close the HTTP client."""

        if self._closed:
            return
        self._closed = True
        self.controller.unmount()
        self.store.reset()
        await self.details.clear()
        await self.client.aclose()
        logger.debug("Pokédex session closed")

    async def __aenter__(self) -> PokedexSession:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["PokedexSession"]
