"""
sourcing_portal.api.errors

Exception handlers that render every error as `{"message": ...}`.

Responsibilities:
- Map service-layer errors to their HTTP status.
- Reshape FastAPI/Starlette HTTP and validation errors to the same body.
- Turn anything unhandled into a 500 with the same body.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

from sourcing_portal.observability.logging import get_logger
from sourcing_portal.services.errors import ServiceError

log = get_logger(__name__)


async def _service_error(_: Request, exc: ServiceError) -> JSONResponse:
    log.info("service_error", status_code=exc.status_code, message=exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def _http_error(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def _validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    # Drop echoed input so submitted passwords never come back in an error body.
    errors = jsonable_encoder([{k: v for k, v in e.items() if k != "input"} for e in exc.errors()])
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ())[1:]) or "request"
    message = f"Invalid {field}: {first.get('msg', 'invalid value')}"
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content={"message": message, "errors": errors},
    )


async def _unhandled_error(_: Request, exc: Exception) -> JSONResponse:
    # Logged with its traceback by `RequestContextMiddleware`.
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, _service_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error)
