"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain exceptions
to HTTP responses. Decode and encode errors never reach here: the search
filter middleware handles them per request.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from searchfilter.core.config import get_settings
from searchfilter.domain.exceptions import SearchFilterException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status when applicable
_ERROR_CODE_STATUS: dict[str, int] = {
    "UPSTREAM_UNAVAILABLE": 502,
    "CAPABILITY_ERROR": 500,
    "CONFIGURATION_ERROR": 500,
}


def _search_filter_exception_handler(
    request: Request, exc: SearchFilterException
) -> JSONResponse:
    """Return JSON from SearchFilterException.to_dict() with appropriate status code."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 500)
    if status == 500:
        logger.error("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status, content=exc.to_dict())


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register domain and generic exception handlers on the app."""
    app.add_exception_handler(SearchFilterException, _search_filter_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
