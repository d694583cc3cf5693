"""
Centralized error responders.

- RequestValidationFailed -> 400 {"errors": [{field, message}, ...]}
- RequestValidationError (framework-level parsing) -> same 400 shape
- Exception (catch-all) -> 500 generic message, details only in the log;
  `InternalErrorMiddleware` produces it below CORS so the response keeps
  CORS headers

HTTPException raised by feature code keeps FastAPI's default rendering.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from .validation import BODY_FIELD, DEFAULT_FIELD_MESSAGE, RequestValidationFailed

INTERNAL_ERROR_MESSAGE = "Une erreur interne du serveur s'est produite"

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationFailed)
    async def validation_failed_handler(request: Request, exc: RequestValidationFailed) -> JSONResponse:
        logger.info(
            "validation_failed path=%s fields=%s",
            request.url.path,
            ",".join(e["field"] for e in exc.errors),
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"errors": exc.errors},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = []
        for e in exc.errors():
            loc = [str(part) for part in e.get("loc", ()) if part not in ("body", "query", "path", "header")]
            errors.append({"field": ".".join(loc) or BODY_FIELD, "message": DEFAULT_FIELD_MESSAGE})
        logger.info("request_invalid path=%s errors=%s", request.url.path, len(errors))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"errors": errors},
        )

    # Last resort for errors raised outside InternalErrorMiddleware (other middleware).
    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
        return internal_error_response(request, exc)


def internal_error_response(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_error method=%s path=%s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": INTERNAL_ERROR_MESSAGE},
    )


class InternalErrorMiddleware(BaseHTTPMiddleware):
    """
    Turns unhandled route errors into the generic 500 inside the middleware
    stack, so CORS headers still apply to it.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return internal_error_response(request, exc)
