from __future__ import annotations

import logging
from http import HTTPStatus
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, OperationalError
from starlette.middleware.base import RequestResponseEndpoint
from starlette.responses import Response

from fishing_api.common.errors import DomainError

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

_ERROR_CODES: dict[int, str] = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    409: "conflict",
    422: "validation_error",
    429: "too_many_requests",
    503: "service_unavailable",
}


def error_code_for(status_code: int) -> str:
    if status_code in _ERROR_CODES:
        return _ERROR_CODES[status_code]
    return "internal_error" if status_code >= 500 else f"http_{status_code}"


def _request_id(request: Request) -> str:
    request_id = getattr(request.state, "request_id", None)
    return request_id if isinstance(request_id, str) and request_id else str(uuid4())


def _error_response(
    request: Request,
    status_code: int,
    detail: object,
    *,
    error_code: str | None = None,
    details: object | None = None,
    headers: dict[str, str] | None = None,
    request_id: str | None = None,
) -> JSONResponse:
    """Render the envelope every failing request gets.

    ``message`` is always a string; ``detail`` keeps whatever the raiser passed
    (a string for domain errors, possibly a structure for ``HTTPException``).
    """
    body: dict[str, object] = {
        "error_code": error_code or error_code_for(status_code),
        "message": detail if isinstance(detail, str) else HTTPStatus(status_code).phrase,
        "detail": detail,
        "request_id": request_id or _request_id(request),
    }
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    @app.middleware("http")
    async def attach_request_id(request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        return response

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        return _error_response(
            request,
            exc.status_code,
            exc.message,
            error_code=exc.code,
            headers=exc.headers,
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        detail = exc.detail if exc.detail is not None else HTTPStatus(exc.status_code).phrase
        return _error_response(
            request,
            exc.status_code,
            detail,
            details=detail if isinstance(detail, (dict, list)) else None,
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        return _error_response(request, 422, "Validation failed", details=exc.errors())

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return _error_response(request, 422, str(exc) or "Validation failed")

    @app.exception_handler(OperationalError)
    async def database_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.warning("database_unavailable", extra={"error": type(exc).__name__})
        return _error_response(request, 503, "Database unavailable")

    @app.exception_handler(DBAPIError)
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = _request_id(request)
        logger.error(
            "unhandled_exception",
            exc_info=exc,
            extra={"request_id": request_id, "path": request.url.path},
        )
        # The request-id middleware never sees this response.
        return _error_response(
            request,
            500,
            "Internal server error",
            headers={REQUEST_ID_HEADER: request_id},
            request_id=request_id,
        )
