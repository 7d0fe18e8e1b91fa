"""
Request handlers for the three BFF operations.

Each one is a straight pipeline: validate the input, fetch the image
configuration and the primary resource concurrently, normalize, respond.
The first failure short-circuits the pipeline and is mapped to an error
response here; nothing below this layer catches.
"""
import asyncio
from typing import Mapping, Optional

from fastapi.responses import JSONResponse
from loguru import logger

from ..clients.tmdb_client import TMDBClient
from ..errors import UpstreamError, ValidationError
from ..responses import (
    CONFIG_MAX_AGE,
    DETAILS_MAX_AGE,
    SEARCH_MAX_AGE,
    contract_response,
    unexpected_error_response,
    upstream_error_response,
    validation_error_response,
)
from ..utils.normalizers import (
    normalize_config_response,
    normalize_configuration,
    normalize_movie_details,
    normalize_search_results,
)
from ..utils.validators import validate_movie_id, validate_search_params

CONFIGURATION_PATH = '/configuration'
SEARCH_PATH = '/search/movie'
DETAILS_APPEND = 'videos,credits'

CONFIG_FAILURE = "Failed to fetch configuration"
SEARCH_FAILURE = "Failed to search movies"
DETAILS_FAILURE = "Failed to fetch movie details"


def movie_details_path(movie_id: int) -> str:
    return f"/movie/{movie_id}"


async def get_configuration(client: TMDBClient) -> JSONResponse:
    try:
        result = await client.fetch_resource(
            CONFIGURATION_PATH, max_age=CONFIG_MAX_AGE)
        if isinstance(result, UpstreamError):
            return upstream_error_response(result, CONFIG_FAILURE)
        body = normalize_config_response(result.data)
    except Exception:
        logger.exception("Unexpected error in /config")
        return unexpected_error_response(CONFIG_FAILURE)
    return contract_response(body, CONFIG_MAX_AGE)


async def search_movies(
    query_params: Mapping[str, str],
    client: TMDBClient
) -> JSONResponse:
    """
    Search TMDB movies by title.

    :param query_params: Raw query parameters ('q' and optional 'page').
    :param client: TMDB client for this request.
    :return: SearchMoviesResponse as JSON, or an ErrorResponse.
    """
    try:
        params = validate_search_params(query_params)
    except ValidationError as exc:
        return validation_error_response(exc)

    try:
        config_result, search_result = await asyncio.gather(
            client.fetch_resource(CONFIGURATION_PATH, max_age=CONFIG_MAX_AGE),
            client.fetch_resource(
                SEARCH_PATH,
                params={'query': params.query, 'page': params.page},
                max_age=SEARCH_MAX_AGE,
            ),
        )
        for result in (config_result, search_result):
            if isinstance(result, UpstreamError):
                return upstream_error_response(result, SEARCH_FAILURE)

        images = normalize_configuration(config_result.data)
        body = normalize_search_results(search_result.data, images.base_url)
    except Exception:
        logger.exception("Unexpected error in /movies/search")
        return unexpected_error_response(SEARCH_FAILURE)
    return contract_response(body, SEARCH_MAX_AGE)


async def get_movie_details(
    raw_movie_id: Optional[str],
    client: TMDBClient
) -> JSONResponse:
    """
    Fetch one movie with its videos and credits appended.

    :param raw_movie_id: The ID path segment as received.
    :param client: TMDB client for this request.
    :return: MovieDetailsResponse as JSON, or an ErrorResponse.
    """
    try:
        movie_id = validate_movie_id(raw_movie_id)
    except ValidationError as exc:
        return validation_error_response(exc)

    try:
        config_result, details_result = await asyncio.gather(
            client.fetch_resource(CONFIGURATION_PATH, max_age=CONFIG_MAX_AGE),
            client.fetch_resource(
                movie_details_path(movie_id),
                params={'append_to_response': DETAILS_APPEND},
                max_age=DETAILS_MAX_AGE,
            ),
        )
        if isinstance(config_result, UpstreamError):
            return upstream_error_response(config_result, DETAILS_FAILURE)
        if isinstance(details_result, UpstreamError):
            return upstream_error_response(
                details_result,
                DETAILS_FAILURE,
                not_found_message=f"Movie with ID {movie_id} not found.",
            )

        images = normalize_configuration(config_result.data)
        body = normalize_movie_details(details_result.data, images.base_url)
    except Exception:
        logger.exception("Unexpected error in /movies/{}", movie_id)
        return unexpected_error_response(DETAILS_FAILURE)
    return contract_response(body, DETAILS_MAX_AGE)
