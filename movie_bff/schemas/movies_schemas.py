from typing import List, Optional

from pydantic import BaseModel, field_validator


class SearchParams(BaseModel):
    query: str
    page: int = 1


class ImageConfiguration(BaseModel):
    base_url: str
    poster_sizes: List[str]
    backdrop_sizes: List[str]
    profile_sizes: List[str]

    @field_validator('base_url')
    @classmethod
    def absolute_with_trailing_slash(cls, value: str) -> str:
        if not value.startswith(('https://', 'http://')):
            raise ValueError(f"Image base URL must be absolute, got {value!r}")
        return value if value.endswith('/') else value + '/'


class ConfigResponse(BaseModel):
    images: ImageConfiguration


class SearchMovieResult(BaseModel):
    id: int
    title: str
    release_date: str
    overview: str
    poster_url: str
    vote_average: float


class SearchMoviesResponse(BaseModel):
    page: int
    total_pages: int
    total_results: int
    results: List[SearchMovieResult]


class Genre(BaseModel):
    id: int
    name: str


class CastMember(BaseModel):
    id: int
    name: str
    character: str
    profile_url: str
    order: int


class Trailer(BaseModel):
    id: str
    key: str
    name: str
    site: str
    type: str


class MovieDetailsResponse(BaseModel):
    id: int
    title: str
    original_title: str
    release_date: str
    overview: str
    runtime: Optional[int]
    vote_average: float
    vote_count: int
    poster_url: str
    backdrop_url: str
    genres: List[Genre]
    cast: List[CastMember]
    trailers: List[Trailer]
    tagline: Optional[str]
    status: str


class ErrorResponse(BaseModel):
    error: str
    message: str
