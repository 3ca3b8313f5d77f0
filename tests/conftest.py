"""Shared pytest fixtures for the catapi test suite."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from catapi.models.source import FetchedImage
from catapi.providers.cache.memory_cache import MemoryCacheProvider
from catapi.providers.store.memory_store import MemoryCatalogStore
from catapi.providers.store.sqlite_store import SQLiteCatalogStore


class FakeClock:
    """Manually advanced monotonic clock for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_image(
    external_id: str,
    temperament: str | None = None,
    *,
    url: str | None = None,
    width: int = 800,
    height: int = 600,
) -> FetchedImage:
    """Build a FetchedImage with one breed temperament (or none)."""
    return FetchedImage(
        external_id=external_id,
        url=url if url is not None else f"https://cdn2.thecatapi.com/images/{external_id}.jpg",
        width=width,
        height=height,
        temperaments=[temperament] if temperament else [],
    )


def make_source(*batches: list[FetchedImage]) -> MagicMock:
    """Image source mock returning *batches* in order, one per call.

    A single batch is returned on every call; with several, a call past
    the last one raises ``StopAsyncIteration``.
    """
    source = MagicMock()
    if len(batches) == 1:
        source.fetch_batch = AsyncMock(return_value=batches[0])
    else:
        source.fetch_batch = AsyncMock(side_effect=list(batches))
    source.get_provider_name.return_value = "mock_source"
    return source


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_cache(clock: FakeClock) -> MemoryCacheProvider:
    """In-memory cache driven by the fake clock."""
    return MemoryCacheProvider(max_size=100, timer=clock)


@pytest.fixture
def memory_store() -> MemoryCatalogStore:
    return MemoryCatalogStore()


@pytest_asyncio.fixture
async def sqlite_store(tmp_path: Path) -> SQLiteCatalogStore:
    """Initialised SQLite catalog in a temporary directory."""
    store = SQLiteCatalogStore(db_path=tmp_path / "catapi.db")
    await store.initialize()
    return store
