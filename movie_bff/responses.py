from typing import Optional

from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel

from .errors import ErrorKind, UpstreamError, ValidationError, classify_upstream_error
from .schemas.movies_schemas import ErrorResponse

CONFIG_MAX_AGE = 86400  # 24 hours
SEARCH_MAX_AGE = 60
DETAILS_MAX_AGE = 60


def contract_response(body: BaseModel, max_age: int) -> JSONResponse:
    """Serialize a contract model with its freshness hint."""
    return JSONResponse(
        content=body.model_dump(),
        headers={'Cache-Control': f"public, max-age={max_age}"},
    )


def error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, message=message).model_dump(),
    )


def validation_error_response(exc: ValidationError) -> JSONResponse:
    return error_response(400, "Validation error", str(exc))


def unexpected_error_response(failure_message: str) -> JSONResponse:
    return error_response(500, "Internal server error", failure_message)


def upstream_error_response(
    error: UpstreamError,
    failure_message: str,
    not_found_message: Optional[str] = None
) -> JSONResponse:
    """
    Map an UpstreamError to the client-facing error body.

    :param error: Failure returned by the TMDB client.
    :param failure_message: Generic message for the operation, used when the
        failure has no HTTP status (network error, bad JSON).
    :param not_found_message: Set for lookups by ID; a 404 then becomes
        "Not found" with this message instead of a plain upstream error.
    :return: JSONResponse with the mapped status code.
    """
    kind = classify_upstream_error(
        error, resource_lookup=not_found_message is not None)

    if kind is ErrorKind.RATE_LIMITED:
        return error_response(429, "Rate limit exceeded", error.message)
    if kind is ErrorKind.NOT_FOUND:
        return error_response(404, "Not found", not_found_message)
    if kind is ErrorKind.UPSTREAM:
        return error_response(
            error.status_code or 500, "TMDB API error", error.message)

    logger.error("Upstream failure without HTTP status: {}", error.message)
    return unexpected_error_response(failure_message)
