"""Buffering ASGI send wrapper.

Presents itself to the wrapped app as an ordinary ASGI ``send`` callable but
keeps the response body in memory, so the owner can decide what to emit once
the whole body is known. Headers are rewritten once, when the response start
is finalized: Content-Length is always dropped (the emitted body may be
shorter) and Last-Modified is dropped unless preserved.
"""

from __future__ import annotations

import logging
from typing import Callable

from searchfilter.core.constants import HEADER_CONTENT_LENGTH, HEADER_LAST_MODIFIED
from searchfilter.domain.exceptions import CapabilityException

logger = logging.getLogger(__name__)

# Extension messages sent ahead of the body: forwarded when the server advertises them.
PASSTHROUGH_EXTENSIONS = ("http.response.early_hint", "http.response.push")

# Extensions that send body data around the buffer, or after it; hidden from the wrapped app.
BODY_BYPASS_EXTENSIONS = (
    "http.response.pathsend",
    "http.response.zerocopysend",
    "http.response.trailers",
)


def strip_headers(
    headers: list[tuple[bytes, bytes]], names: set[str]
) -> list[tuple[bytes, bytes]]:
    """Return headers without any whose (case-insensitive) name is in names."""
    drop = {n.lower().encode() for n in names}
    return [(k, v) for k, v in headers if k.lower() not in drop]


def get_header(headers: list[tuple[bytes, bytes]], name: str) -> str | None:
    """Return first header value for name (case-insensitive)."""
    want = name.lower().encode()
    for k, v in headers:
        if k.lower() == want:
            return v.decode("latin-1")
    return None


def scope_for_wrapped_app(scope: dict) -> dict:
    """Copy of scope that no longer advertises body-bypassing extensions."""
    extensions = scope.get("extensions")
    if not extensions or not any(name in extensions for name in BODY_BYPASS_EXTENSIONS):
        return scope
    child = dict(scope)
    child["extensions"] = {
        k: v for k, v in extensions.items() if k not in BODY_BYPASS_EXTENSIONS
    }
    return child


class InterceptedResponse:
    """Per-request capture of the response start and body.

    Lifecycle: created for one request, filled while the wrapped app runs,
    committed exactly once by the owner, then discarded. Never shared.
    """

    def __init__(
        self,
        send: Callable,
        extensions: dict | None = None,
        preserve_last_modified: bool = False,
    ) -> None:
        self._send = send
        self._extensions = extensions or {}
        self._preserve_last_modified = preserve_last_modified
        self.status: int | None = None
        self.headers: list[tuple[bytes, bytes]] = []
        self.body = bytearray()
        self._start_sent = False
        self._committed = False

    @property
    def finalized(self) -> bool:
        return self.status is not None

    def header(self, name: str) -> str | None:
        """Return a captured response header (after rewriting)."""
        return get_header(self.headers, name)

    def finalize(
        self, status: int = 200, headers: list[tuple[bytes, bytes]] | None = None
    ) -> None:
        """Commit status and headers (pending -> finalized). No-op once finalized."""
        if self.finalized:
            logger.warning(
                "response start already finalized with status %s; ignoring status %s",
                self.status,
                status,
            )
            return
        dropped = {HEADER_CONTENT_LENGTH}
        if not self._preserve_last_modified:
            dropped.add(HEADER_LAST_MODIFIED)
        self.headers = strip_headers(list(headers or []), dropped)
        self.status = status

    def write(self, data: bytes) -> int:
        """Buffer data, finalizing the start with 200 first if needed. Returns bytes buffered."""
        if not self.finalized:
            self.finalize()
        self.body.extend(data)
        return len(data)

    async def flush(self) -> None:
        """Send the finalized start to the real sink early. The buffered body stays put."""
        if not self.finalized or self._start_sent:
            return
        await self._send_start()

    async def __call__(self, message: dict) -> None:
        message_type = message["type"]
        if message_type == "http.response.start":
            self.finalize(message["status"], message.get("headers"))
        elif message_type == "http.response.body":
            body = message.get("body", b"")
            if not body and message.get("more_body", False):
                # An empty chunk with more to come is ASGI's way of flushing.
                await self.flush()
                return
            self.write(body)
        elif message_type in PASSTHROUGH_EXTENSIONS:
            await self._delegate(message)
        else:
            raise CapabilityException(message_type)

    async def _delegate(self, message: dict) -> None:
        if message["type"] not in self._extensions:
            raise CapabilityException(message["type"])
        await self._send(message)

    async def _send_start(self) -> None:
        self._start_sent = True
        await self._send({
            "type": "http.response.start",
            "status": self.status,
            "headers": self.headers,
        })

    async def commit(self, body: bytes | None = None) -> None:
        """Send the start (if not flushed yet) and body to the real sink, once.

        body replaces the captured bytes when given. Does nothing if the
        wrapped app never started a response.
        """
        if self._committed:
            raise RuntimeError("Intercepted response already committed")
        self._committed = True
        if not self.finalized:
            return
        if not self._start_sent:
            await self._send_start()
        await self._send({
            "type": "http.response.body",
            "body": bytes(self.body) if body is None else body,
            "more_body": False,
        })
