"""Shared fixtures for the Pokédex client test suite."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator

import pytest
import pytest_asyncio

from tests import _ensure_repo_on_path

_ensure_repo_on_path()

from pokedex.api.client import PokemonApiClient  # noqa: E402
from pokedex.services.detail_cache import DetailCache  # noqa: E402
from pokedex.services.sync_store import SyncStore  # noqa: E402
from pokedex.settings import AppSettings, get_settings  # noqa: E402
from pokedex.utils.request_context import clear_request_id  # noqa: E402
from tests.pokedex.support.fake_service import FakePokemonService  # noqa: E402

TEST_BASE_URL = "http://pokedex.test"


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep developer shells and cached settings from leaking into tests."""

    for name in (
        "POKEDEX_API_BASE_URL",
        "NEXT_PUBLIC_API_BASE_URL",
        "POKEDEX_REQUEST_TIMEOUT",
        "POKEDEX_DETAIL_CACHE_TTL",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    clear_request_id()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(api_base_url=TEST_BASE_URL, detail_cache_ttl_seconds=60)


@pytest.fixture
def fake_service() -> FakePokemonService:
    return FakePokemonService()


@pytest_asyncio.fixture
async def api_client(fake_service: FakePokemonService) -> AsyncIterator[PokemonApiClient]:
    """Yield a client whose HTTP traffic is served by ``fake_service``."""

    client = PokemonApiClient(base_url=TEST_BASE_URL, transport=fake_service.transport())
    async with client:
        yield client


@pytest.fixture
def store(api_client: PokemonApiClient) -> SyncStore:
    return SyncStore(api_client)


@pytest.fixture
def details(api_client: PokemonApiClient) -> DetailCache:
    return DetailCache(api_client, ttl_seconds=60)
