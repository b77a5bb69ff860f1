"""
Error handling for the procedure API.

Provides:
- Domain error to HTTP status mapping (404 / 400 / 422)
- One JSON error shape for domain errors and unexpected failures
- Request ID tracking for log correlation
"""

import logging
import uuid
from typing import Callable, Dict, Optional, Type

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from ..domain.errors import (
    DomainError,
    InvalidReviewIndex,
    ProcedureNotFound,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Checked in order; subclasses must precede their bases
DOMAIN_ERROR_STATUS: Dict[Type[DomainError], int] = {
    ProcedureNotFound: 404,
    InvalidReviewIndex: 400,
    ValidationError: 422,
}
DEFAULT_DOMAIN_STATUS = 400


def status_for(error: DomainError) -> int:
    """HTTP status for a domain error."""
    return next(
        (status for cls, status in DOMAIN_ERROR_STATUS.items() if isinstance(error, cls)),
        DEFAULT_DOMAIN_STATUS,
    )


def error_body(message: str, request_id: str, error_type: Optional[str] = None) -> dict:
    """Standard ``{"error": {...}, "request_id": ...}`` payload."""
    error = {"message": message}
    if error_type:
        error = {"type": error_type, **error}
    return {"error": error, "request_id": request_id}


def _new_request_id() -> str:
    return uuid.uuid4().hex[:8]


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Expected failures from ProcedureService surfaced through ``unwrap()``."""
    request_id = getattr(request.state, "request_id", None) or _new_request_id()
    status = status_for(exc)
    logger.info(
        "[%s] %s %s -> %d %s: %s",
        request_id,
        request.method,
        request.url.path,
        status,
        type(exc).__name__,
        exc,
    )
    return JSONResponse(
        status_code=status,
        content=error_body(str(exc), request_id, type(exc).__name__),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Tags each request with an ID and turns unhandled exceptions into a
    generic 500 JSON response. Exception details go to the log only.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = _new_request_id()
        request.state.request_id = request_id

        try:
            return await call_next(request)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(
                "Unhandled exception [%s] on %s %s: %s: %s",
                request_id,
                request.method,
                request.url.path,
                type(e).__name__,
                e,
                exc_info=True,
            )
            return JSONResponse(
                status_code=500,
                content=error_body("Internal server error", request_id),
            )


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain error handler and the catch-all middleware."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_middleware(ErrorHandlerMiddleware)
