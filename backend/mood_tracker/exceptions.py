"""Domain error kinds and the handlers that render them.

Services raise these the same way they would raise ``HTTPException``; the
status code travels with the exception. Validation failures, whether raised by
a service or by FastAPI's request parsing, are rendered as::

    {"message": "<first error>", "errors": {"field": ["msg", ...]}}
"""
import logging
from typing import Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ValidationError(HTTPException):
    """422: one or more fields failed validation."""

    def __init__(self, errors: dict[str, list[str]], message: Optional[str] = None):
        self.errors = errors
        if message is None:
            message = _first_message(errors) or "The given data was invalid."
        self.message = message
        super().__init__(status_code=422, detail=message)


class AuthenticationError(HTTPException):
    """401: missing, malformed or revoked bearer token."""

    def __init__(self, detail: str = "Unauthenticated."):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(HTTPException):
    """403: the caller is authenticated but does not own the resource."""

    def __init__(self, detail: str = "This action is unauthorized."):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFoundError(HTTPException):
    """404: no row with the given id exists at all."""

    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def _first_message(errors: dict[str, list[str]]) -> Optional[str]:
    for messages in errors.values():
        if messages:
            return messages[0]
    return None


def _field_key(loc: tuple) -> str:
    """Turn a pydantic error location into a field key.

    ``("body", "mood_level")`` → ``mood_level``;
    ``("body", "activities", 0)`` → ``activities.0``;
    ``("query", "per_page")`` → ``per_page``.
    """
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or "__root__"


def request_errors_to_fields(exc: RequestValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        msg = err.get("msg", "Invalid value")
        # pydantic prefixes messages from custom validators
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        errors.setdefault(_field_key(tuple(err.get("loc", ()))), []).append(msg)
    return errors


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "errors": exc.errors},
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = request_errors_to_fields(exc)
    logger.debug("Request validation failed on %s: %s", request.url.path, list(errors))
    return JSONResponse(
        status_code=422,
        content={"message": _first_message(errors) or "The given data was invalid.", "errors": errors},
    )
