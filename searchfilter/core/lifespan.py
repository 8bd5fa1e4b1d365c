"""Application lifespan: startup and shutdown.

Owns the shared httpx client used to reach the upstream homeserver.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from searchfilter.core.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the upstream client on startup (unless one was injected); close it on shutdown."""
    settings = get_settings()
    owns_client = getattr(app.state, "upstream_client", None) is None
    if owns_client:
        app.state.upstream_client = httpx.AsyncClient(
            timeout=settings.upstream_timeout_seconds
        )
    logger.info("Forwarding to upstream %s", settings.upstream_url)
    try:
        yield
    finally:
        if owns_client:
            await app.state.upstream_client.aclose()
            app.state.upstream_client = None
