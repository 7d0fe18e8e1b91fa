"""
Upstream TMDB response shapes.

Only the fields the normalizers read are declared; everything else TMDB
sends is ignored. Fields TMDB may omit or send as null are optional, and
the append_to_response blocks (videos, credits) may be absent entirely.
"""
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict


def _none_as_empty_list(value: Any) -> Any:
    return [] if value is None else value


NullAsEmpty = BeforeValidator(_none_as_empty_list)


def NullAs(default: Any) -> BeforeValidator:
    """Decode an explicit null as `default` instead of rejecting it."""
    return BeforeValidator(lambda value: default if value is None else value)


class TMDBModel(BaseModel):
    model_config = ConfigDict(extra='ignore')


class TMDBImagesConfiguration(TMDBModel):
    base_url: Optional[str] = None
    secure_base_url: str
    poster_sizes: Annotated[List[str], NullAsEmpty] = []
    backdrop_sizes: Annotated[List[str], NullAsEmpty] = []
    profile_sizes: Annotated[List[str], NullAsEmpty] = []
    logo_sizes: Annotated[List[str], NullAsEmpty] = []
    still_sizes: Annotated[List[str], NullAsEmpty] = []


class TMDBConfiguration(TMDBModel):
    images: TMDBImagesConfiguration
    change_keys: Annotated[List[str], NullAsEmpty] = []


class TMDBMovieSearchResult(TMDBModel):
    id: int
    title: Annotated[str, NullAs('')] = ''
    release_date: Optional[str] = None
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    vote_average: Annotated[float, NullAs(0.0)] = 0.0
    vote_count: Annotated[int, NullAs(0)] = 0


class TMDBSearchMoviesResponse(TMDBModel):
    page: Annotated[int, NullAs(1)] = 1
    results: Annotated[List[TMDBMovieSearchResult], NullAsEmpty] = []
    total_pages: Annotated[int, NullAs(0)] = 0
    total_results: Annotated[int, NullAs(0)] = 0


class TMDBGenre(TMDBModel):
    id: int
    name: Annotated[str, NullAs('')] = ''


class TMDBVideo(TMDBModel):
    id: Annotated[str, NullAs('')] = ''
    key: Annotated[str, NullAs('')] = ''
    name: Annotated[str, NullAs('')] = ''
    site: Annotated[str, NullAs('')] = ''
    type: Annotated[str, NullAs('')] = ''


class TMDBVideosResponse(TMDBModel):
    results: Annotated[List[TMDBVideo], NullAsEmpty] = []


class TMDBCastMember(TMDBModel):
    id: int
    name: Annotated[str, NullAs('')] = ''
    character: Optional[str] = None
    order: Annotated[int, NullAs(0)] = 0
    profile_path: Optional[str] = None


class TMDBCrewMember(TMDBModel):
    id: int
    name: Annotated[str, NullAs('')] = ''
    job: Annotated[str, NullAs('')] = ''
    department: Annotated[str, NullAs('')] = ''
    profile_path: Optional[str] = None


class TMDBCreditsResponse(TMDBModel):
    cast: Annotated[List[TMDBCastMember], NullAsEmpty] = []
    crew: Annotated[List[TMDBCrewMember], NullAsEmpty] = []


class TMDBMovieDetailsResponse(TMDBModel):
    id: int
    title: Annotated[str, NullAs('')] = ''
    original_title: Annotated[str, NullAs('')] = ''
    overview: Optional[str] = None
    release_date: Optional[str] = None
    runtime: Optional[int] = None
    vote_average: Annotated[float, NullAs(0.0)] = 0.0
    vote_count: Annotated[int, NullAs(0)] = 0
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    status: Annotated[str, NullAs('')] = ''
    tagline: Optional[str] = None
    genres: Annotated[List[TMDBGenre], NullAsEmpty] = []
    videos: Optional[TMDBVideosResponse] = None
    credits: Optional[TMDBCreditsResponse] = None
