"""Tests for the lazily populated Pokémon detail cache."""

from __future__ import annotations

import asyncio

import pytest

from pokedex.api.client import PokemonApiClient
from pokedex.errors import ServiceError
from pokedex.services.detail_cache import DetailCache
from tests.pokedex.support.fake_service import FakePokemonService, fail


class FakeClock:
    def __init__(self) -> None:
        self.now = 1_000.0

    def __call__(self) -> float:
        return self.now


@pytest.mark.asyncio
async def test_detail_is_fetched_once_and_then_served_from_cache(
    details: DetailCache, fake_service: FakePokemonService
) -> None:
    first = await details.get(25)
    second = await details.get(25)

    assert first == second
    assert first.name == "pikachu"
    assert len(fake_service.calls("GET /pokemon/25")) == 1


@pytest.mark.asyncio
async def test_expired_entries_are_refetched(
    api_client: PokemonApiClient, fake_service: FakePokemonService
) -> None:
    clock = FakeClock()
    cache = DetailCache(api_client, ttl_seconds=10, clock=clock)

    await cache.get(1)
    clock.now += 11
    assert await cache.peek(1) is None
    await cache.get(1)

    assert len(fake_service.calls("GET /pokemon/1")) == 2


@pytest.mark.asyncio
async def test_concurrent_lookups_share_one_request(
    details: DetailCache, fake_service: FakePokemonService
) -> None:
    gate = asyncio.Event()
    fake_service.gates["GET /pokemon/4"] = gate

    lookups = [asyncio.create_task(details.get(4)) for _ in range(3)]
    for _ in range(5):
        await asyncio.sleep(0)
    gate.set()
    results = await asyncio.gather(*lookups)

    assert {result.name for result in results} == {"charmander"}
    assert len(fake_service.calls("GET /pokemon/4")) == 1


@pytest.mark.asyncio
async def test_failures_are_not_cached(
    details: DetailCache, fake_service: FakePokemonService
) -> None:
    fake_service.failures["GET /pokemon/7"] = fail("Pokemon not found", 404)

    with pytest.raises(ServiceError):
        await details.get(7)
    detail = await details.get(7)

    assert detail.name == "squirtle"


@pytest.mark.asyncio
async def test_evict_and_clear_drop_entries(details: DetailCache) -> None:
    await details.get(1)
    await details.get(4)

    await details.evict(1)
    assert await details.peek(1) is None
    assert await details.peek(4) is not None

    await details.clear()
    assert await details.peek(4) is None
