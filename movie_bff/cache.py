import json
from typing import Any, Mapping, Optional

import redis.asyncio as redis
from loguru import logger

KEY_PREFIX = 'tmdb'


def cache_key(path: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Build a stable key from the upstream path and its query parameters."""
    if not params:
        return f"{KEY_PREFIX}:{path}"
    query = '&'.join(f"{k}={params[k]}" for k in sorted(params))
    return f"{KEY_PREFIX}:{path}?{query}"


class ResponseCache:
    """
    Redis-backed store for upstream JSON payloads.

    Entries expire after the freshness window the caller passes in, so
    nothing outlives the Cache-Control max-age advertised for the endpoint.
    Backend failures are logged and reported as a miss.
    """

    def __init__(self, client: redis.Redis):
        self._redis = client

    @classmethod
    def from_url(cls, url: str) -> 'ResponseCache':
        return cls(redis.from_url(url, encoding="utf-8", decode_responses=True))

    async def get(self, key: str) -> Optional[Any]:
        try:
            cached = await self._redis.get(key)
        except redis.RedisError as exc:
            logger.warning("Response cache read failed for {}: {}", key, exc)
            return None
        if cached is None:
            return None
        try:
            return json.loads(cached)
        except ValueError as exc:
            logger.warning("Response cache holds undecodable value for {}: {}", key, exc)
            return None

    async def set(self, key: str, value: Any, ttl: int) -> None:
        try:
            await self._redis.set(key, json.dumps(value), ex=ttl)
        except redis.RedisError as exc:
            logger.warning("Response cache write failed for {}: {}", key, exc)

    async def close(self) -> None:
        await self._redis.aclose()
