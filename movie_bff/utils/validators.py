import re
from typing import Mapping, Optional

from ..errors import ValidationError
from ..schemas.movies_schemas import SearchParams

MIN_QUERY_LENGTH = 2
DEFAULT_PAGE = '1'

_POSITIVE_INT = re.compile(r'[0-9]+')


def _parse_positive_int(raw: Optional[str]) -> Optional[int]:
    """Return the integer value of `raw`, or None if it is not a positive integer."""
    if raw is None:
        return None
    raw = raw.strip()
    if not _POSITIVE_INT.fullmatch(raw):
        return None
    value = int(raw)
    return value if value > 0 else None


def validate_search_params(query_params: Mapping[str, str]) -> SearchParams:
    """
    Validate the raw query string of a movie search.

    :param query_params: Raw query parameters, e.g. request.query_params.
    :return: SearchParams with the trimmed query and the page number.
    :raises ValidationError: with the message to show the client.
    """
    query = (query_params.get('q') or '').strip()
    if not query:
        raise ValidationError("Query parameter 'q' is required")
    if len(query) < MIN_QUERY_LENGTH:
        raise ValidationError(
            f"Query must be at least {MIN_QUERY_LENGTH} characters long")

    page = _parse_positive_int(query_params.get('page') or DEFAULT_PAGE)
    if page is None:
        raise ValidationError("Page must be a positive integer")

    return SearchParams(query=query, page=page)


def validate_movie_id(raw_id: Optional[str]) -> int:
    """
    Validate a movie ID taken from the request path.

    :param raw_id: The path segment as received.
    :return: The movie ID as a positive int.
    :raises ValidationError: if the segment is not a positive integer.
    """
    movie_id = _parse_positive_int(raw_id)
    if movie_id is None:
        raise ValidationError("Invalid movie ID. Must be a positive integer.")
    return movie_id
