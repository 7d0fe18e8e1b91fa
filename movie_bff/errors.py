from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


class ValidationError(ValueError):
    """Client input is malformed. The message is shown to the client as-is."""


@dataclass(frozen=True)
class UpstreamSuccess:
    data: Any


@dataclass(frozen=True)
class UpstreamError:
    message: str
    status_code: Optional[int] = None
    is_rate_limited: bool = False


UpstreamResult = Union[UpstreamSuccess, UpstreamError]


class ErrorKind(str, Enum):
    RATE_LIMITED = 'rate_limited'
    NOT_FOUND = 'not_found'
    UPSTREAM = 'upstream'
    UNEXPECTED = 'unexpected'


def classify_upstream_error(
    error: UpstreamError,
    resource_lookup: bool = False
) -> ErrorKind:
    """
    Map an upstream failure onto the error taxonomy.

    :param error: UpstreamError returned by the TMDB client.
    :param resource_lookup: True when the call fetched a single resource by ID,
        which is the only case where a 404 means "not found" to the client.
    :return: The ErrorKind the handler should respond with.
    """
    if error.is_rate_limited:
        return ErrorKind.RATE_LIMITED
    if error.status_code is None:
        return ErrorKind.UNEXPECTED
    if resource_lookup and error.status_code == 404:
        return ErrorKind.NOT_FOUND
    return ErrorKind.UPSTREAM
