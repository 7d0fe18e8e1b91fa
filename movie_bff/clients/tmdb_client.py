from typing import Any, Mapping, Optional

import httpx
from loguru import logger

from ..cache import ResponseCache, cache_key
from ..config import Settings
from ..errors import UpstreamError, UpstreamResult, UpstreamSuccess

RATE_LIMIT_MESSAGE = "TMDB API rate limit exceeded. Please try again later."
UNKNOWN_ERROR_BODY = "Unknown error"


def build_http_client(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    """
    Create the httpx client used for TMDB calls.

    The bearer token, JSON headers, base URL and per-call timeout all
    come from `settings`. `transport` replaces the network layer, e.g. with
    httpx.MockTransport.
    """
    return httpx.AsyncClient(
        base_url=settings.TMDB_BASE_URL,
        timeout=settings.TMDB_TIMEOUT,
        transport=transport,
        headers={
            'Authorization': f"Bearer {settings.TMDB_READ_ACCESS_TOKEN}",
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        },
    )


def _read_body(response: httpx.Response) -> str:
    try:
        return response.text
    except (httpx.ResponseNotRead, UnicodeDecodeError, LookupError):
        return UNKNOWN_ERROR_BODY


def classify_response(response: httpx.Response) -> UpstreamResult:
    """
    Turn a TMDB HTTP response into a tagged result.

    :param response: The raw httpx response.
    :return: UpstreamSuccess with the decoded JSON, or UpstreamError with
        status_code set for HTTP failures and None for undecodable bodies.
    """
    if response.status_code == 429:
        return UpstreamError(RATE_LIMIT_MESSAGE, 429, is_rate_limited=True)

    if not response.is_success:
        return UpstreamError(
            f"TMDB API error: {response.reason_phrase} - {_read_body(response)}",
            response.status_code,
        )

    try:
        return UpstreamSuccess(response.json())
    except ValueError as exc:
        return UpstreamError(f"Failed to fetch from TMDB: {exc}")


class TMDBClient:
    """
    Thin async client for the TMDB v3 API.

    Every call returns an UpstreamResult instead of raising; callers decide
    how each failure maps to a response. Nothing is retried.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        cache: Optional[ResponseCache] = None
    ):
        self._http = http
        self._cache = cache

    async def fetch_resource(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        max_age: Optional[int] = None
    ) -> UpstreamResult:
        """
        GET a TMDB resource.

        :param path: Path under the API base URL, e.g. '/configuration'.
        :param params: Query parameters, URL-encoded by httpx.
        :param max_age: Freshness window in seconds. When set and a cache is
            attached, a cached payload younger than this is returned and a
            fresh success is stored for this long.
        :return: UpstreamSuccess or UpstreamError.
        """
        use_cache = self._cache is not None and max_age is not None
        key = cache_key(path, params)
        if use_cache:
            cached = await self._cache.get(key)
            if cached is not None:
                logger.debug("Response cache hit for {}", key)
                return UpstreamSuccess(cached)

        try:
            response = await self._http.get(path, params=params)
        except httpx.RequestError as exc:
            logger.warning("TMDB request to {} failed: {!r}", path, exc)
            return UpstreamError(f"Failed to fetch from TMDB: {exc}")

        result = classify_response(response)
        if isinstance(result, UpstreamError):
            logger.warning(
                "TMDB returned an error for {} (status={}): {}",
                path, result.status_code, result.message)
        elif use_cache:
            await self._cache.set(key, result.data, max_age)
        return result
