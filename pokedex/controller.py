"""View controller wiring user intents to the store and filter pipeline.

The controller keeps only transient UI state (criteria, selection, detail,
notifications) and derives a fresh :class:`ViewState` on demand. Everything
durable lives in :class:`~pokedex.services.sync_store.SyncStore`.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace

from pokedex.errors import MutationError, PokedexError
from pokedex.schemas.error import ErrorReport
from pokedex.schemas.pokemon import CatalogEntry, PokemonDetail
from pokedex.services.detail_cache import DetailCache
from pokedex.services.filter_pipeline import FilterCriteria, filter_catalog
from pokedex.services.sync_store import SyncStatus, SyncStore
from pokedex.utils.error_reports import (
    LOAD_FAILURE_MESSAGE,
    MUTATION_FAILURE_MESSAGE,
    build_error_report,
)

logger = logging.getLogger(__name__)

DETAIL_FAILURE_MESSAGE = "Could not load Pokémon details."


@dataclass(frozen=True, slots=True)
class Notification:
    """Dismissable, transient error shown after a failed intent."""

    id: int
    report: ErrorReport


@dataclass(frozen=True, slots=True)
class ViewState:
    """Everything a renderer needs to draw one frame."""

    entries: tuple[CatalogEntry, ...]
    total: int
    favorite_ids: frozenset[int]
    criteria: FilterCriteria
    selected_id: int | None
    selected: CatalogEntry | None
    detail: PokemonDetail | None
    is_selected_favorite: bool
    is_loading: bool
    banner: ErrorReport | None
    notifications: tuple[Notification, ...]

    @property
    def summary(self) -> str:
        return f"Showing {len(self.entries)} Pokémon"


Renderer = Callable[[ViewState], None]


class ViewController:
    """Map intents onto store calls and publish derived view state."""

    def __init__(
        self,
        store: SyncStore,
        details: DetailCache,
        *,
        renderer: Renderer | None = None,
    ) -> None:
        self._store = store
        self._details = details
        self._renderer = renderer
        self._criteria = FilterCriteria()
        self._selected_id: int | None = None
        self._detail: PokemonDetail | None = None
        self._notifications: list[Notification] = []
        self._notification_ids = itertools.count(1)
        self._mounted = True
        self._unsubscribe = store.subscribe(self._on_store_changed)

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    # -- Intents -------------------------------------------------------------

    async def load(self) -> ViewState:
        """Run the initial load; frames are published as the store changes."""

        await self._store.initialize()
        return self.view()

    def set_search_term(self, term: str) -> ViewState:
        self._criteria = replace(self._criteria, search_term=term)
        return self._publish()

    def set_favorites_only(self, enabled: bool) -> ViewState:
        self._criteria = replace(self._criteria, favorites_only=enabled)
        return self._publish()

    def toggle_favorites_only(self) -> ViewState:
        return self.set_favorites_only(not self._criteria.favorites_only)

    async def select(self, pokemon_id: int | None) -> ViewState:
        """Select an entry and lazily load its detail.

        Ids that do not resolve in the current filtered view act as "no
        selection" rather than an error.
        """

        self._selected_id = pokemon_id
        self._detail = None
        if pokemon_id is None or self._resolve(pokemon_id) is None:
            return self._publish()

        self._publish()
        try:
            detail = await self._details.get(pokemon_id)
        except PokedexError as exc:
            logger.warning(f"Detail load for Pokémon {pokemon_id} failed: {exc}")
            if self._mounted:
                self._notify(build_error_report(exc, message=DETAIL_FAILURE_MESSAGE))
            return self._publish()

        # A later selection may have replaced this one while the fetch ran.
        if self._selected_id == pokemon_id:
            self._detail = detail
        return self._publish()

    async def toggle_favorite(self, pokemon_id: int) -> ViewState:
        """Toggle membership; failures become a dismissable notification."""

        try:
            await self._store.toggle_favorite(pokemon_id)
        except MutationError as exc:
            if self._mounted:
                self._notify(build_error_report(exc, message=MUTATION_FAILURE_MESSAGE))
            else:
                logger.info(f"Ignoring failed toggle for {pokemon_id} after unmount: {exc}")
        return self._publish()

    def dismiss_notification(self, notification_id: int) -> ViewState:
        self._notifications = [n for n in self._notifications if n.id != notification_id]
        return self._publish()

    def unmount(self) -> None:
        """Stop publishing; in-flight work still settles in the store."""

        self._mounted = False
        self._unsubscribe()
        self._notifications.clear()

    # -- Derived state -------------------------------------------------------

    def view(self) -> ViewState:
        """Derive the current :class:`ViewState` from store and UI state."""

        status = self._store.status
        favorites = self._store.favorite_ids

        banner: ErrorReport | None = None
        entries: tuple[CatalogEntry, ...] = ()
        if status is SyncStatus.ERROR:
            cause = self._store.load_error or PokedexError(
                self._store.error_message or "unknown error"
            )
            banner = build_error_report(
                cause, message=LOAD_FAILURE_MESSAGE, dismissable=False
            )
        else:
            entries = tuple(filter_catalog(self._store.catalog, favorites, self._criteria))

        selected = next((e for e in entries if e.id == self._selected_id), None)
        detail = self._detail if selected is not None else None

        return ViewState(
            entries=entries,
            total=len(self._store.catalog),
            favorite_ids=favorites,
            criteria=self._criteria,
            selected_id=self._selected_id,
            selected=selected,
            detail=detail,
            is_selected_favorite=selected is not None and selected.id in favorites,
            is_loading=status is SyncStatus.LOADING,
            banner=banner,
            notifications=tuple(self._notifications),
        )

    def _resolve(self, pokemon_id: int) -> CatalogEntry | None:
        return next((e for e in self.view().entries if e.id == pokemon_id), None)

    def _notify(self, report: ErrorReport) -> None:
        self._notifications.append(Notification(next(self._notification_ids), report))

    def _on_store_changed(self) -> None:
        self._publish()

    def _publish(self) -> ViewState:
        state = self.view()
        if self._mounted and self._renderer is not None:
            self._renderer(state)
        return state


__all__ = ["Notification", "Renderer", "ViewController", "ViewState"]
