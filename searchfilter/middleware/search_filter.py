"""User directory search filter middleware.

Buffers every HTTP response, and for POST /_matrix/client/v3/user_directory/search
with a JSON request and an uncompressed response, drops search results whose
user_id is not allow-listed before the body is sent. Uses raw ASGI (no
BaseHTTPMiddleware) so non-HTTP scopes such as websockets pass straight through.
"""

import logging
from typing import Callable

from searchfilter.core.constants import (
    HEADER_CONTENT_ENCODING,
    HEADER_CONTENT_TYPE,
    IDENTITY_ENCODINGS,
    JSON_CONTENT_TYPE,
    SEARCH_METHOD,
    SEARCH_PATH,
)
from searchfilter.domain.exceptions import DecodeException, EncodeException
from searchfilter.middleware.intercepted_response import (
    InterceptedResponse,
    get_header,
    scope_for_wrapped_app,
)
from searchfilter.services.record_filter import FilterConfig, filter_response

logger = logging.getLogger(__name__)


def should_filter(scope: dict, response: InterceptedResponse) -> bool:
    """True if the captured response is a search result the filter may parse.

    Checks the request's Content-Type, not the response's.
    """
    if not response.finalized:
        return False
    if scope.get("method") != SEARCH_METHOD or scope.get("path") != SEARCH_PATH:
        return False
    if get_header(scope.get("headers", []), HEADER_CONTENT_TYPE) != JSON_CONTENT_TYPE:
        return False
    return (response.header(HEADER_CONTENT_ENCODING) or "") in IDENTITY_ENCODINGS


def MatrixSearchFilterMiddleware(
    app: Callable, user_id_regex: str, last_modified: bool = False
) -> Callable:
    """Filter user directory search results by user_id pattern. Raw ASGI.

    Raises ConfigurationException if user_id_regex does not compile.
    """
    config = FilterConfig.from_options(user_id_regex, preserve_last_modified=last_modified)

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        response = InterceptedResponse(
            send,
            extensions=scope.get("extensions"),
            preserve_last_modified=config.preserve_last_modified,
        )
        await app(scope_for_wrapped_app(scope), receive, response)

        if not should_filter(scope, response):
            logger.debug(
                "Passing through response unfiltered: %s %s",
                scope.get("method", ""),
                scope.get("path", ""),
            )
            await response.commit()
            return

        try:
            body = filter_response(bytes(response.body), config)
        except (DecodeException, EncodeException) as e:
            logger.error(
                "Dropping search response body (%s: %s): %s %s",
                e.error_code,
                e.message,
                scope.get("method", ""),
                scope.get("path", ""),
            )
            body = b""
        await response.commit(body)

    return asgi_app
