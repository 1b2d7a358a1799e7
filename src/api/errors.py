"""
Translation of relay errors into HTTP responses.

Every error body has the shape `{"error": message}`.
"""

import logging
from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.relay.errors import RelayError, InvalidRequest, NotFound, UpstreamError

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = [
    (InvalidRequest, 400),
    (NotFound, 404),
    (UpstreamError, 500),
]


def http_error(exc: RelayError, upstream_detail: str = "Upstream request failed") -> HTTPException:
    """Map a relay error to an HTTPException; upstream causes stay in the server log."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            detail = upstream_detail if status_code == 500 else str(exc)
            return HTTPException(status_code=status_code, detail=detail)
    logger.error(f"Unmapped relay error: {exc!r}")
    return HTTPException(status_code=500, detail="Internal error")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed or non-object request bodies get the relay's 400 instead of FastAPI's 422."""
    logger.info(f"Rejected request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})
