"""Shared pytest fixtures: in-memory stores, services and an API client."""

import asyncio
from typing import AsyncGenerator, Callable, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError

from shortener.allocator import IdAllocator
from shortener.dependencies import get_shortening_service
from shortener.errors import PersistenceFailure, QueryFailure
from shortener.main import app
from shortener.service import ShorteningService
from shortener.store import URLRecord

SECRET_KEY = "default_secret"
ID_OFFSET = 14_000_000


class InMemoryCounter:
    """Atomic counter; the read-modify-write never spans an await."""

    def __init__(self, start: int = 0):
        self.values: dict[str, int] = {}
        self._start = start

    async def incr(self, key: str) -> int:
        await asyncio.sleep(0)
        self.values[key] = self.values.get(key, self._start) + 1
        return self.values[key]


class UnavailableCounter:
    async def incr(self, key: str) -> int:
        raise RedisConnectionError("Connection refused")


class InMemoryURLStore:
    def __init__(self):
        self.records: dict[str, URLRecord] = {}

    async def put(self, record: URLRecord) -> None:
        await asyncio.sleep(0)
        assert record.short_url not in self.records, f"duplicate key {record.short_url}"
        self.records[record.short_url] = record

    async def get(self, short_url: str) -> Optional[URLRecord]:
        await asyncio.sleep(0)
        return self.records.get(short_url)


class RejectingURLStore(InMemoryURLStore):
    """Store whose first write fails."""

    def __init__(self, failures: int = 1):
        super().__init__()
        self.failures = failures

    async def put(self, record: URLRecord) -> None:
        if self.failures > 0:
            self.failures -= 1
            raise PersistenceFailure(f"Failed to store '{record.short_url}': write timeout")
        await super().put(record)


class UnavailableURLStore(InMemoryURLStore):
    async def get(self, short_url: str) -> Optional[URLRecord]:
        raise QueryFailure(f"Failed to look up '{short_url}': connection reset")


@pytest.fixture
def make_counter() -> Callable[..., InMemoryCounter]:
    return InMemoryCounter


@pytest.fixture
def counter() -> InMemoryCounter:
    return InMemoryCounter()


@pytest.fixture
def unavailable_counter() -> UnavailableCounter:
    return UnavailableCounter()


@pytest.fixture
def store() -> InMemoryURLStore:
    return InMemoryURLStore()


@pytest.fixture
def rejecting_store() -> RejectingURLStore:
    return RejectingURLStore(failures=1)


@pytest.fixture
def unavailable_store() -> UnavailableURLStore:
    return UnavailableURLStore()


@pytest.fixture
def make_service() -> Callable[..., ShorteningService]:
    def _make(counter=None, store=None) -> ShorteningService:
        return ShorteningService(
            IdAllocator(counter if counter is not None else InMemoryCounter()),
            store if store is not None else InMemoryURLStore(),
            secret_key=SECRET_KEY,
            id_offset=ID_OFFSET,
        )

    return _make


@pytest.fixture
def service(make_service, counter: InMemoryCounter, store: InMemoryURLStore) -> ShorteningService:
    return make_service(counter, store)


@pytest.fixture
def use_service() -> Callable[[ShorteningService], None]:
    """Route API requests in this test to the given service."""

    def _use(service: ShorteningService) -> None:
        app.dependency_overrides[get_shortening_service] = lambda: service

    return _use


@pytest_asyncio.fixture(scope="function")
async def client(service: ShorteningService, use_service) -> AsyncGenerator[AsyncClient, None]:
    use_service(service)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
