"""Catch-all forwarder to the upstream homeserver.

Sends the request as-is to settings.upstream_url and returns the upstream
status, headers and raw (still encoded) body. Hop-by-hop headers are dropped
in both directions.
"""

import logging

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import Response

from searchfilter.core.config import get_settings
from searchfilter.domain.exceptions import UpstreamUnavailableException

logger = logging.getLogger(__name__)

router = APIRouter()

HOP_BY_HOP_HEADERS = frozenset({
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailer",
    "transfer-encoding",
    "upgrade",
    "host",
})

FORWARDED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _forwardable(headers: list[tuple[bytes, bytes]]) -> list[tuple[bytes, bytes]]:
    return [(k, v) for k, v in headers if k.decode("latin-1").lower() not in HOP_BY_HOP_HEADERS]


@router.api_route("/{path:path}", methods=FORWARDED_METHODS, include_in_schema=False)
async def forward(request: Request, path: str) -> Response:
    """Forward the request to the upstream homeserver and relay its response."""
    settings = get_settings()
    client: httpx.AsyncClient = request.app.state.upstream_client
    # raw_path keeps percent-escapes such as %23 in room aliases intact.
    raw_path = request.scope.get("raw_path")
    path = raw_path.decode("latin-1") if raw_path else request.url.path
    url = settings.upstream_url + path
    if request.url.query:
        url += "?" + request.url.query
    upstream_request = client.build_request(
        request.method,
        url,
        headers=_forwardable(request.headers.raw),
        content=await request.body(),
    )
    try:
        upstream = await client.send(upstream_request, stream=True)
        try:
            body = b"".join([chunk async for chunk in upstream.aiter_raw()])
        finally:
            await upstream.aclose()
    except httpx.HTTPError as e:
        logger.warning(
            "Upstream request failed: %s %s: %s", request.method, request.url.path, e
        )
        raise UpstreamUnavailableException(settings.upstream_url, reason=type(e).__name__) from e

    response = Response(content=body, status_code=upstream.status_code)
    # Replace Starlette's computed headers with the upstream's own.
    response.raw_headers = _forwardable(upstream.headers.raw)
    return response
