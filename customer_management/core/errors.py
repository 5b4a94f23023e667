from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class CustomerServiceError(Exception):
    """Base class for failures that map onto a fixed HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class CustomerAlreadyExistsError(CustomerServiceError):
    status_code = status.HTTP_409_CONFLICT


class CustomerNotFoundError(CustomerServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidCredentialError(CustomerServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidOtpError(InvalidCredentialError):
    pass


class PasswordMismatchError(InvalidCredentialError):
    pass


def _field_path(loc: tuple) -> str:
    # Drop the "body"/"query"/"path" source prefix
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


async def customer_service_error_handler(request: Request, exc: CustomerServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Routing failures (404, 405) and explicit HTTPExceptions share the {"error": ...} body
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=getattr(exc, "headers", None))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: dict[str, str] = {}
    for err in exc.errors():
        errors.setdefault(_field_path(tuple(err.get("loc", ()))), err.get("msg", "Invalid value"))
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=errors)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CustomerServiceError, customer_service_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
