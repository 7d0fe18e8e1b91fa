from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import Depends, FastAPI, Request
from loguru import logger

from .cache import ResponseCache
from .clients.tmdb_client import TMDBClient, build_http_client
from .config import Settings, get_settings
from .handlers import movie_handlers
from .logging_config import configure_logging
from .schemas.movies_schemas import (
    ConfigResponse,
    ErrorResponse,
    MovieDetailsResponse,
    SearchMoviesResponse,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    app.state.response_cache = (
        ResponseCache.from_url(settings.REDIS_URL) if settings.REDIS_URL else None
    )
    logger.info("Starting movie BFF against {}", settings.TMDB_BASE_URL)
    yield
    if app.state.response_cache is not None:
        await app.state.response_cache.close()
    logger.info("Movie BFF stopped")


app = FastAPI(title="Movie BFF", lifespan=lifespan)


def get_response_cache(request: Request) -> Optional[ResponseCache]:
    return getattr(request.app.state, 'response_cache', None)


async def get_tmdb_client(
    settings: Settings = Depends(get_settings),
    cache: Optional[ResponseCache] = Depends(get_response_cache)
) -> AsyncIterator[TMDBClient]:
    async with build_http_client(settings) as http:
        yield TMDBClient(http, cache=cache)


ERROR_RESPONSES = {
    429: {'model': ErrorResponse},
    500: {'model': ErrorResponse},
}


@app.get('/config', response_model=ConfigResponse, responses=ERROR_RESPONSES)
async def get_config(client: TMDBClient = Depends(get_tmdb_client)):
    return await movie_handlers.get_configuration(client)


@app.get(
    '/movies/search',
    response_model=SearchMoviesResponse,
    responses={400: {'model': ErrorResponse}, **ERROR_RESPONSES}
)
async def search_movies(
    request: Request,
    client: TMDBClient = Depends(get_tmdb_client)
):
    return await movie_handlers.search_movies(request.query_params, client)


@app.get(
    '/movies/{movie_id}',
    response_model=MovieDetailsResponse,
    responses={
        400: {'model': ErrorResponse},
        404: {'model': ErrorResponse},
        **ERROR_RESPONSES
    }
)
async def get_movie(
    movie_id: str,
    client: TMDBClient = Depends(get_tmdb_client)
):
    return await movie_handlers.get_movie_details(movie_id, client)
