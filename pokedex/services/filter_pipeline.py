"""Pure filtering of the catalog by favorite scope and search text."""

from __future__ import annotations

from collections.abc import Iterable, Set
from dataclasses import dataclass

from pokedex.schemas.pokemon import CatalogEntry


@dataclass(frozen=True, slots=True)
class FilterCriteria:
    """Transient view filters entered by the user."""

    search_term: str = ""
    favorites_only: bool = False

    @property
    def normalized_term(self) -> str | None:
        """Return the case-folded search term, or ``None`` when blank."""

        term = self.search_term.strip()
        return term.casefold() if term else None


def filter_catalog(
    catalog: Iterable[CatalogEntry],
    favorite_ids: Set[int],
    criteria: FilterCriteria,
) -> list[CatalogEntry]:
    """Return catalog entries that satisfy ``criteria``, in catalog order.

    The favorite scope runs first so the substring scan only touches the
    narrowed set. The two predicates commute; the order is for cost only.
    """

    filtered = list(catalog)

    if criteria.favorites_only:
        filtered = [entry for entry in filtered if entry.id in favorite_ids]

    term = criteria.normalized_term
    if term:
        filtered = [entry for entry in filtered if term in entry.name.casefold()]

    return filtered


__all__ = ["FilterCriteria", "filter_catalog"]
