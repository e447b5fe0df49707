"""Tests for favorite scope and search filtering."""

from __future__ import annotations

import pytest

from pokedex.schemas.pokemon import CatalogEntry
from pokedex.services.filter_pipeline import FilterCriteria, filter_catalog


def _entry(pokemon_id: int, name: str) -> CatalogEntry:
    return CatalogEntry(
        id=pokemon_id,
        name=name,
        resource_ref=f"https://pokeapi.co/api/v2/pokemon/{pokemon_id}/",
    )


@pytest.fixture
def catalog() -> list[CatalogEntry]:
    return [
        _entry(1, "Bulbasaur"),
        _entry(4, "Charmander"),
        _entry(5, "Charmeleon"),
        _entry(7, "Squirtle"),
        _entry(25, "Pikachu"),
    ]


def test_default_criteria_return_catalog_unchanged(catalog: list[CatalogEntry]) -> None:
    result = filter_catalog(catalog, frozenset({1, 25}), FilterCriteria())

    assert result == catalog
    assert result is not catalog


def test_favorites_only_keeps_exactly_the_favorite_subset(
    catalog: list[CatalogEntry],
) -> None:
    result = filter_catalog(catalog, frozenset({25, 4}), FilterCriteria(favorites_only=True))

    assert [entry.id for entry in result] == [4, 25]


def test_favorites_only_with_no_favorites_is_empty(catalog: list[CatalogEntry]) -> None:
    assert filter_catalog(catalog, frozenset(), FilterCriteria(favorites_only=True)) == []


@pytest.mark.parametrize("term", ["char", "CHAR", "ChAr"])
def test_search_is_case_insensitive_substring(
    catalog: list[CatalogEntry], term: str
) -> None:
    result = filter_catalog(catalog, frozenset(), FilterCriteria(search_term=term))

    assert [entry.name for entry in result] == ["Charmander", "Charmeleon"]


@pytest.mark.parametrize("term", ["", "   "])
def test_blank_search_term_is_a_no_op(catalog: list[CatalogEntry], term: str) -> None:
    assert filter_catalog(catalog, frozenset(), FilterCriteria(search_term=term)) == catalog


def test_search_without_matches_returns_empty(catalog: list[CatalogEntry]) -> None:
    assert filter_catalog(catalog, frozenset(), FilterCriteria(search_term="mew")) == []


def test_scope_and_search_commute(catalog: list[CatalogEntry]) -> None:
    favorites = frozenset({4, 7, 25})

    combined = filter_catalog(
        catalog, favorites, FilterCriteria(search_term="a", favorites_only=True)
    )
    search_then_scope = filter_catalog(
        filter_catalog(catalog, favorites, FilterCriteria(search_term="a")),
        favorites,
        FilterCriteria(favorites_only=True),
    )
    scope_then_search = filter_catalog(
        filter_catalog(catalog, favorites, FilterCriteria(favorites_only=True)),
        favorites,
        FilterCriteria(search_term="a"),
    )

    assert combined == search_then_scope == scope_then_search
    assert [entry.id for entry in combined] == [4, 25]


def test_pipeline_is_idempotent(catalog: list[CatalogEntry]) -> None:
    criteria = FilterCriteria(search_term="r", favorites_only=True)
    favorites = frozenset({1, 4, 7})

    first = filter_catalog(catalog, favorites, criteria)
    second = filter_catalog(catalog, favorites, criteria)

    assert first == second
    assert filter_catalog(first, favorites, criteria) == first


def test_reference_scenario() -> None:
    catalog = [_entry(1, "Bulbasaur"), _entry(4, "Charmander")]
    favorites = frozenset({1})

    assert filter_catalog(catalog, favorites, FilterCriteria(favorites_only=True)) == [
        catalog[0]
    ]
    assert filter_catalog(catalog, favorites, FilterCriteria(search_term="char")) == [
        catalog[1]
    ]


def test_filter_accepts_any_iterable(catalog: list[CatalogEntry]) -> None:
    result = filter_catalog(iter(catalog), {1}, FilterCriteria(favorites_only=True))

    assert [entry.id for entry in result] == [1]
