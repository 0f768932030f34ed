"""Shorten endpoint behavior tests."""

import pytest
from httpx import AsyncClient

from shortener.encoder import BASE62_ALPHABET


@pytest.mark.asyncio
async def test_shorten_valid_url(client: AsyncClient) -> None:
    response = await client.post("/shorten", json={"long_url": "https://example.com"})
    assert response.status_code == 201
    data = response.json()
    assert data["long_url"] == "https://example.com"
    assert data["short_url"]
    assert all(c in BASE62_ALPHABET for c in data["short_url"])
    assert set(data) == {"short_url", "long_url"}


@pytest.mark.asyncio
async def test_shorten_missing_long_url(client: AsyncClient) -> None:
    response = await client.post("/shorten", json={"url": "https://example.com"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_shorten_multiple_urls(client: AsyncClient) -> None:
    urls = [
        "https://www.google.com",
        "https://www.github.com",
        "https://www.python.org",
    ]
    codes = set()
    for url in urls:
        response = await client.post("/shorten", json={"long_url": url})
        assert response.status_code == 201
        codes.add(response.json()["short_url"])
    assert len(codes) == 3


@pytest.mark.asyncio
async def test_shorten_same_url_twice_gets_two_codes(client: AsyncClient) -> None:
    first = await client.post("/shorten", json={"long_url": "https://example.com"})
    second = await client.post("/shorten", json={"long_url": "https://example.com"})
    assert first.json()["short_url"] != second.json()["short_url"]


@pytest.mark.asyncio
async def test_shorten_counter_down(client: AsyncClient, make_service, unavailable_counter, use_service) -> None:
    use_service(make_service(counter=unavailable_counter))

    response = await client.post("/shorten", json={"long_url": "https://example.com"})
    assert response.status_code == 500


@pytest.mark.asyncio
async def test_shorten_database_down(client: AsyncClient, make_service, rejecting_store, use_service) -> None:
    use_service(make_service(store=rejecting_store))

    response = await client.post("/shorten", json={"long_url": "https://example.com"})
    assert response.status_code == 500
    assert rejecting_store.records == {}
