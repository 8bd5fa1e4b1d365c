"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, middleware, routers.
The forwarder catches every path, so the health router is included first.

Settings are loaded inside create_app() so that tests can set env (and
clear the get_settings cache) before calling create_app().
"""

from fastapi import FastAPI

from searchfilter.api import health, proxy
from searchfilter.core.config import get_settings
from searchfilter.core.exception_handlers import register_exception_handlers
from searchfilter.core.lifespan import create_lifespan
from searchfilter.middleware import MatrixSearchFilterMiddleware
from searchfilter.services.record_filter import FilterConfig
from searchfilter.shared.logging import setup_logging


def create_app() -> FastAPI:
    """Build and return the FastAPI application.

    Raises ConfigurationException if USER_ID_REGEX does not compile.
    """
    settings = get_settings()
    setup_logging()

    # Starlette builds the middleware stack lazily; compile here so a bad
    # pattern fails at startup rather than on the first request.
    FilterConfig.from_options(settings.user_id_regex, settings.last_modified)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    register_exception_handlers(app)

    app.add_middleware(
        MatrixSearchFilterMiddleware,
        user_id_regex=settings.user_id_regex,
        last_modified=settings.last_modified,
    )

    app.include_router(health.router)
    app.include_router(proxy.router)

    return app
