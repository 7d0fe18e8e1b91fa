from typing import Any, List, Optional

from ..schemas.movies_schemas import (
    CastMember,
    ConfigResponse,
    Genre,
    ImageConfiguration,
    MovieDetailsResponse,
    SearchMovieResult,
    SearchMoviesResponse,
    Trailer,
)
from ..schemas.tmdb_schemas import (
    TMDBConfiguration,
    TMDBCreditsResponse,
    TMDBMovieDetailsResponse,
    TMDBSearchMoviesResponse,
    TMDBVideosResponse,
)

POSTER_SIZE = 'w500'
BACKDROP_SIZE = 'w1280'
PROFILE_SIZE = 'w185'
TOP_CAST_LIMIT = 5

TRAILER_SITE = 'YouTube'
TRAILER_TYPE = 'Trailer'


def build_image_url(
    image_path: Optional[str],
    base_url: str,
    size: str
) -> str:
    """
    Build an absolute TMDB image URL.

    :param image_path: Path as returned by TMDB (e.g. '/abc.jpg'), or None.
    :param base_url: Secure image base URL from the configuration.
    :param size: One of the configured sizes, e.g. 'w500'.
    :return: base_url + size + image_path, or '' when there is no image.
    """
    if not image_path:
        return ''
    return f"{base_url}{size}{image_path}"


def normalize_configuration(raw: Any) -> ImageConfiguration:
    """
    Reduce the TMDB /configuration payload to the image settings the client uses.
    The non-secure base_url, logo/still sizes and change_keys are dropped.
    """
    config = TMDBConfiguration.model_validate(raw)
    return ImageConfiguration(
        base_url=config.images.secure_base_url,
        poster_sizes=config.images.poster_sizes,
        backdrop_sizes=config.images.backdrop_sizes,
        profile_sizes=config.images.profile_sizes,
    )


def normalize_config_response(raw: Any) -> ConfigResponse:
    return ConfigResponse(images=normalize_configuration(raw))


def normalize_search_results(
    raw: Any,
    image_base_url: str
) -> SearchMoviesResponse:
    """
    Map a TMDB /search/movie page to the client contract.

    Pagination fields pass through unchanged. Each hit keeps only
    id, title, release_date, overview, poster_url and vote_average.

    :param raw: Decoded JSON body of the search call.
    :param image_base_url: ImageConfiguration.base_url.
    :return: SearchMoviesResponse.
    """
    search = TMDBSearchMoviesResponse.model_validate(raw)
    return SearchMoviesResponse(
        page=search.page,
        total_pages=search.total_pages,
        total_results=search.total_results,
        results=[
            SearchMovieResult(
                id=movie.id,
                title=movie.title,
                release_date=movie.release_date or '',
                overview=movie.overview or '',
                poster_url=build_image_url(
                    movie.poster_path, image_base_url, POSTER_SIZE),
                vote_average=movie.vote_average,
            )
            for movie in search.results
        ],
    )


def format_cast(
    credits: Optional[TMDBCreditsResponse],
    image_base_url: str
) -> List[CastMember]:
    """
    Take the first five cast entries in the order TMDB returned them.
    TMDB already ranks credits by billing, so no re-sort on `order` is done.
    """
    if credits is None:
        return []
    return [
        CastMember(
            id=member.id,
            name=member.name,
            character=member.character or '',
            profile_url=build_image_url(
                member.profile_path, image_base_url, PROFILE_SIZE),
            order=member.order,
        )
        for member in credits.cast[:TOP_CAST_LIMIT]
    ]


def format_trailers(videos: Optional[TMDBVideosResponse]) -> List[Trailer]:
    if videos is None:
        return []
    return [
        Trailer(
            id=video.id,
            key=video.key,
            name=video.name,
            site=video.site,
            type=video.type,
        )
        for video in videos.results
        if video.site == TRAILER_SITE and video.type == TRAILER_TYPE
    ]


def normalize_movie_details(
    raw: Any,
    image_base_url: str
) -> MovieDetailsResponse:
    """
    Map a TMDB /movie/{id}?append_to_response=videos,credits payload
    to the client contract.

    :param raw: Decoded JSON body of the details call.
    :param image_base_url: ImageConfiguration.base_url.
    :return: MovieDetailsResponse. Missing credits or videos give empty lists.
    """
    movie = TMDBMovieDetailsResponse.model_validate(raw)
    return MovieDetailsResponse(
        id=movie.id,
        title=movie.title,
        original_title=movie.original_title,
        release_date=movie.release_date or '',
        overview=movie.overview or '',
        runtime=movie.runtime,
        vote_average=movie.vote_average,
        vote_count=movie.vote_count,
        poster_url=build_image_url(
            movie.poster_path, image_base_url, POSTER_SIZE),
        backdrop_url=build_image_url(
            movie.backdrop_path, image_base_url, BACKDROP_SIZE),
        genres=[Genre(id=g.id, name=g.name) for g in movie.genres],
        cast=format_cast(movie.credits, image_base_url),
        trailers=format_trailers(movie.videos),
        tagline=movie.tagline,
        status=movie.status,
    )
