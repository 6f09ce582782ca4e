"""テスト用のフィクスチャ"""
import json
from collections.abc import Iterator
from typing import Any

import pytest

from fakes import API_KEY, WHITE_HOUSE, FakeHTTPClient
from mapsco_geocoding.features.cache.providers.memory_cache_store import InMemoryCacheStore
from mapsco_geocoding.features.geocoding.providers.mapsco_geocoder import GeocodingClient
from mapsco_geocoding.shared.logging.config import reset_logging


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    yield
    reset_logging()


@pytest.fixture
def http_client() -> FakeHTTPClient:
    return FakeHTTPClient()


@pytest.fixture
def cache_store() -> InMemoryCacheStore:
    return InMemoryCacheStore()


@pytest.fixture
def client(http_client: FakeHTTPClient, cache_store: InMemoryCacheStore) -> GeocodingClient:
    return GeocodingClient(
        API_KEY,
        cache_store=cache_store,
        http_client=http_client,
    )


@pytest.fixture
def white_house() -> dict[str, Any]:
    return json.loads(json.dumps(WHITE_HOUSE))
