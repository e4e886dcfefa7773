# app/errors.py
"""API error types and the handlers that render them as envelopes."""
from typing import List, Optional

from fastapi import HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .utils import envelope, get_logger

logger = get_logger(__name__)


class ApiError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[dict]] = None, headers=None):
        super().__init__(status_code=self.status_code, detail=message or self.message, headers=headers)
        self.errors = errors


class ValidationFailed(ApiError):
    status_code = 422
    message = "Validation failed"


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Forbidden"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class Conflict(ApiError):
    status_code = status.HTTP_409_CONFLICT
    message = "Conflict"


def _json(status_code: int, body: dict, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc, ApiError):
        return _json(exc.status_code, envelope(exc.status_code, exc.detail, errors=exc.errors), exc.headers)
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        # unmatched route
        return _json(404, envelope(404, "Endpoint not found"))
    return _json(exc.status_code, envelope(exc.status_code, str(exc.detail)), getattr(exc, "headers", None))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ())[1:]) or "body", "message": err.get("msg")}
        for err in exc.errors()
    ]
    return _json(422, envelope(422, ValidationFailed.message, errors=errors))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    return _json(500, envelope(500, "Internal server error"))


def install_error_handlers(app) -> None:
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
