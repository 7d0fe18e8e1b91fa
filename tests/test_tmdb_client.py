import json

import httpx
import pytest
import redis.asyncio as redis

from movie_bff.cache import ResponseCache, cache_key
from movie_bff.clients.tmdb_client import (
    RATE_LIMIT_MESSAGE,
    TMDBClient,
    build_http_client,
)
from movie_bff.config import Settings
from movie_bff.errors import UpstreamError, UpstreamSuccess


@pytest.fixture
def settings():
    return Settings(TMDB_READ_ACCESS_TOKEN="test-token", _env_file=None)


def make_client(settings, handler, cache=None):
    http = build_http_client(settings, transport=httpx.MockTransport(handler))
    return TMDBClient(http, cache=cache)


class FakeRedis:
    def __init__(self):
        self.store = {}
        self.ttls = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value
        self.ttls[key] = ex


# --- request shape ---


@pytest.mark.asyncio
async def test_fetch_resource_sends_bearer_token_and_json_headers(settings):
    seen = {}

    def handler(request):
        seen["request"] = request
        return httpx.Response(200, json={"images": {}})

    client = make_client(settings, handler)
    result = await client.fetch_resource("/configuration")

    request = seen["request"]
    assert str(request.url) == "https://api.themoviedb.org/3/configuration"
    assert request.headers["Authorization"] == "Bearer test-token"
    assert request.headers["Content-Type"] == "application/json"
    assert result == UpstreamSuccess({"images": {}})


@pytest.mark.asyncio
async def test_fetch_resource_encodes_query_params(settings):
    seen = {}

    def handler(request):
        seen["url"] = request.url
        return httpx.Response(200, json={"results": []})

    client = make_client(settings, handler)
    await client.fetch_resource(
        "/search/movie", params={"query": "star wars", "page": 2})

    url = seen["url"]
    assert url.path == "/3/search/movie"
    assert url.params["query"] == "star wars"
    assert url.params["page"] == "2"
    assert b"query=star+wars" in url.query or b"query=star%20wars" in url.query


# --- error classification ---


@pytest.mark.asyncio
async def test_fetch_resource_rate_limited(settings):
    client = make_client(settings, lambda request: httpx.Response(429))
    result = await client.fetch_resource("/configuration")
    assert result == UpstreamError(RATE_LIMIT_MESSAGE, 429, is_rate_limited=True)


@pytest.mark.asyncio
async def test_fetch_resource_http_error_carries_status_and_body(settings):
    def handler(request):
        return httpx.Response(
            404, text='{"status_message":"The resource you requested could not be found."}')

    client = make_client(settings, handler)
    result = await client.fetch_resource("/movie/999999")

    assert isinstance(result, UpstreamError)
    assert result.status_code == 404
    assert result.is_rate_limited is False
    assert result.message.startswith("TMDB API error: Not Found - ")
    assert "could not be found" in result.message


@pytest.mark.asyncio
async def test_fetch_resource_network_error_has_no_status(settings):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(settings, handler)
    result = await client.fetch_resource("/configuration")

    assert isinstance(result, UpstreamError)
    assert result.status_code is None
    assert result.is_rate_limited is False
    assert "connection refused" in result.message


@pytest.mark.asyncio
async def test_fetch_resource_malformed_json_has_no_status(settings):
    client = make_client(
        settings, lambda request: httpx.Response(200, content=b"<html>oops"))
    result = await client.fetch_resource("/configuration")

    assert isinstance(result, UpstreamError)
    assert result.status_code is None
    assert result.message.startswith("Failed to fetch from TMDB")


# --- response cache ---


def test_cache_key_sorts_params():
    assert cache_key("/configuration") == "tmdb:/configuration"
    assert (cache_key("/search/movie", {"page": 1, "query": "alien"})
            == "tmdb:/search/movie?page=1&query=alien")


@pytest.mark.asyncio
async def test_cache_hit_skips_upstream(settings):
    fake = FakeRedis()
    fake.store["tmdb:/configuration"] = json.dumps({"images": {"cached": True}})

    def handler(request):
        raise AssertionError("upstream should not be called on cache hit")

    client = make_client(settings, handler, cache=ResponseCache(fake))
    result = await client.fetch_resource("/configuration", max_age=86400)
    assert result == UpstreamSuccess({"images": {"cached": True}})


@pytest.mark.asyncio
async def test_cache_miss_stores_success_with_ttl(settings):
    fake = FakeRedis()
    client = make_client(
        settings,
        lambda request: httpx.Response(200, json={"page": 1}),
        cache=ResponseCache(fake),
    )
    await client.fetch_resource(
        "/search/movie", params={"query": "alien", "page": 1}, max_age=60)

    key = "tmdb:/search/movie?page=1&query=alien"
    assert json.loads(fake.store[key]) == {"page": 1}
    assert fake.ttls[key] == 60


@pytest.mark.asyncio
async def test_errors_are_not_cached(settings):
    fake = FakeRedis()
    client = make_client(
        settings, lambda request: httpx.Response(500), cache=ResponseCache(fake))
    result = await client.fetch_resource("/configuration", max_age=86400)
    assert isinstance(result, UpstreamError)
    assert fake.store == {}


@pytest.mark.asyncio
async def test_cache_not_used_without_max_age(settings):
    fake = FakeRedis()
    client = make_client(
        settings, lambda request: httpx.Response(200, json={}), cache=ResponseCache(fake))
    await client.fetch_resource("/configuration")
    assert fake.store == {}


@pytest.mark.asyncio
async def test_cache_backend_failure_falls_through_to_upstream(settings):
    class BrokenRedis:
        async def get(self, key):
            raise redis.ConnectionError("redis down")

        async def set(self, key, value, ex=None):
            raise redis.ConnectionError("redis down")

    client = make_client(
        settings,
        lambda request: httpx.Response(200, json={"ok": True}),
        cache=ResponseCache(BrokenRedis()),
    )
    result = await client.fetch_resource("/configuration", max_age=86400)
    assert result == UpstreamSuccess({"ok": True})


@pytest.mark.asyncio
async def test_undecodable_cached_value_falls_through_to_upstream(settings):
    fake = FakeRedis()
    fake.store["tmdb:/configuration"] = "not-json{"
    client = make_client(
        settings,
        lambda request: httpx.Response(200, json={"ok": True}),
        cache=ResponseCache(fake),
    )
    result = await client.fetch_resource("/configuration", max_age=60)
    assert result == UpstreamSuccess({"ok": True})
    # the fresh payload replaces the corrupt entry
    assert json.loads(fake.store["tmdb:/configuration"]) == {"ok": True}
