"""Single source of truth for catalog and favorite state.

:class:`SyncStore` mediates every read and write between the view layer and
:class:`~pokedex.api.client.PokemonApiClient`:

* ``initialize``: joins the catalog and favorites fetches and applies both
  results or neither.
* ``toggle_favorite``: pessimistic add, optimistic remove with rollback,
  serialized per Pokémon id.

The favorite id set is never stored. :func:`favorite_ids` projects it from the
record list on every read so the two cannot drift apart.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from pokedex.errors import MutationError, PokedexError, RemoteError
from pokedex.schemas.pokemon import CatalogEntry, FavoriteRecord

logger = logging.getLogger(__name__)


class FavoritesApi(Protocol):
    """Subset of the remote client the store depends on."""

    async def fetch_catalog(self) -> list[CatalogEntry]: ...

    async def fetch_favorites(self) -> list[FavoriteRecord]: ...

    async def add_favorite(self, pokemon_id: int) -> FavoriteRecord: ...

    async def remove_favorite(self, pokemon_id: int) -> FavoriteRecord: ...


class SyncStatus(str, Enum):
    """Global load status of the session."""

    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


@dataclass(slots=True)
class SyncState:
    """Mutable session state owned exclusively by :class:`SyncStore`."""

    catalog: list[CatalogEntry] = field(default_factory=list)
    favorites: list[FavoriteRecord] = field(default_factory=list)
    status: SyncStatus = SyncStatus.IDLE
    error_message: str | None = None


def favorite_ids(records: Iterable[FavoriteRecord]) -> frozenset[int]:
    """Return the set of Pokémon ids referenced by ``records``."""

    return frozenset(record.pokemon_id for record in records)


@dataclass(slots=True)
class OptimisticRemoval:
    """Tentative removal of every favorite record for one Pokémon.

    ``apply`` performs the local change and remembers which records preceded
    each removed one; ``revert`` puts every record back after the nearest of
    those that is still present, or at the front when none is. Records added
    or removed by other toggles in the meantime keep their places.
    """

    pokemon_id: int
    removed: list[tuple[tuple[FavoriteRecord, ...], FavoriteRecord]] = field(
        default_factory=list
    )

    def apply(self, state: SyncState) -> None:
        kept: list[FavoriteRecord] = []
        for index, record in enumerate(state.favorites):
            if record.pokemon_id == self.pokemon_id:
                self.removed.append((tuple(state.favorites[:index]), record))
            else:
                kept.append(record)
        state.favorites = kept

    def revert(self, state: SyncState) -> None:
        restored = list(state.favorites)
        for preceding, record in self.removed:
            restored.insert(_position_after(restored, preceding), record)
        state.favorites = restored


def _position_after(
    records: list[FavoriteRecord], preceding: tuple[FavoriteRecord, ...]
) -> int:
    for anchor in reversed(preceding):
        for index, record in enumerate(records):
            if record is anchor:
                return index + 1
    return 0


class SyncStore:
    """Hold SyncState and expose load and mutation operations."""

    def __init__(self, api: FavoritesApi) -> None:
        self._api = api
        self._state = SyncState()
        self._load_error: BaseException | None = None
        self._inflight: dict[int, asyncio.Future[None]] = {}
        self._listeners: list[Callable[[], None]] = []

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Call ``listener`` after every state change; returns an unsubscribe hook."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener()

    # -- Reads ---------------------------------------------------------------

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def catalog(self) -> Sequence[CatalogEntry]:
        return tuple(self._state.catalog)

    @property
    def favorites(self) -> Sequence[FavoriteRecord]:
        return tuple(self._state.favorites)

    @property
    def favorite_ids(self) -> frozenset[int]:
        return favorite_ids(self._state.favorites)

    @property
    def status(self) -> SyncStatus:
        return self._state.status

    @property
    def error_message(self) -> str | None:
        return self._state.error_message

    @property
    def load_error(self) -> BaseException | None:
        """The failure behind the current ERROR status, if any."""

        return self._load_error

    def is_favorite(self, pokemon_id: int) -> bool:
        return pokemon_id in self.favorite_ids

    def is_pending(self, pokemon_id: int) -> bool:
        """Return ``True`` while a toggle for ``pokemon_id`` is in flight."""

        return pokemon_id in self._inflight

    # -- Loading -------------------------------------------------------------

    async def initialize(self) -> None:
        """Fetch catalog and favorites concurrently; apply both or neither."""

        self._state.status = SyncStatus.LOADING
        self._state.error_message = None
        self._load_error = None
        self._changed()

        catalog_result, favorites_result = await asyncio.gather(
            self._api.fetch_catalog(),
            self._api.fetch_favorites(),
            return_exceptions=True,
        )

        for result in (catalog_result, favorites_result):
            if isinstance(result, BaseException):
                self._state.status = SyncStatus.ERROR
                self._state.error_message = str(result) or type(result).__name__
                self._load_error = result
                self._changed()
                if isinstance(result, PokedexError):
                    logger.error(f"Failed to load initial data: {result}")
                    return
                raise result

        self._state.catalog = list(catalog_result)
        self._state.favorites = list(favorites_result)
        self._state.status = SyncStatus.IDLE
        self._changed()
        logger.info(
            f"Loaded {len(self._state.catalog)} Pokémon and "
            f"{len(self._state.favorites)} favorites"
        )

    def reset(self) -> None:
        """Drop all session state, returning to an empty idle store."""

        self._state = SyncState()
        self._load_error = None
        self._changed()

    # -- Mutations -----------------------------------------------------------

    async def toggle_favorite(self, pokemon_id: int) -> bool:
        """Flip favorite membership for ``pokemon_id`` and return the new value.

        A second toggle for an id with a mutation in flight waits for the first
        to settle and then reads membership afresh. Failures raise
        :class:`MutationError` after local state has been restored; the global
        status is never touched.
        """

        while (pending := self._inflight.get(pokemon_id)) is not None:
            await asyncio.shield(pending)

        marker: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._inflight[pokemon_id] = marker
        try:
            if self.is_favorite(pokemon_id):
                await self._remove(pokemon_id)
                return False
            await self._add(pokemon_id)
            return True
        finally:
            del self._inflight[pokemon_id]
            marker.set_result(None)

    async def _add(self, pokemon_id: int) -> None:
        state = self._state
        try:
            record = await self._api.add_favorite(pokemon_id)
        except RemoteError as exc:
            logger.warning(f"Adding favorite {pokemon_id} failed: {exc}")
            raise MutationError(
                operation="add",
                pokemon_id=pokemon_id,
                message=exc.message,
                request_id=exc.request_id,
            ) from exc

        if state is not self._state:
            logger.info(f"Store was reset while adding {pokemon_id}; result discarded")
            return
        others = [r for r in state.favorites if r.pokemon_id != record.pokemon_id]
        state.favorites = [record, *others]
        self._changed()
        logger.info(f"Added Pokémon {pokemon_id} to favorites")

    async def _remove(self, pokemon_id: int) -> None:
        state = self._state
        removal = OptimisticRemoval(pokemon_id)
        removal.apply(state)
        self._changed()
        try:
            await self._api.remove_favorite(pokemon_id)
        except RemoteError as exc:
            self._rollback(state, removal)
            logger.warning(f"Removing favorite {pokemon_id} failed, rolled back: {exc}")
            raise MutationError(
                operation="remove",
                pokemon_id=pokemon_id,
                message=exc.message,
                request_id=exc.request_id,
            ) from exc
        except BaseException:
            self._rollback(state, removal)
            raise
        logger.info(f"Removed Pokémon {pokemon_id} from favorites")

    def _rollback(self, state: SyncState, removal: OptimisticRemoval) -> None:
        # A reset replaces the state object; the old one is no longer shown.
        if state is not self._state:
            return
        removal.revert(state)
        self._changed()


__all__ = [
    "FavoritesApi",
    "OptimisticRemoval",
    "SyncState",
    "SyncStatus",
    "SyncStore",
    "favorite_ids",
]
