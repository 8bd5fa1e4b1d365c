"""Pytest configuration and fixtures for searchfilter.

Uses searchfilter.main:create_app for HTTP tests, with the upstream homeserver
replaced by an httpx.MockTransport. Settings come from env set per test.
"""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from searchfilter.core.config import get_settings
from searchfilter.main import create_app

USER_ID_REGEX = r"^@[a-z0-9\._=\-\/\+]+:example\.com$"
UPSTREAM_URL = "http://homeserver.test"

EXAMPLE_BODY = """{
    "limited": false,
    "results": [
        {
            "user_id": "@abc:example.com",
            "display_name": "ABC",
            "avatar_url": null
        },
        {
            "user_id": "@efg_+:foo.example.com.bar",
            "display_name": "E FG",
            "avatar_url": "mxc://foo.example.com.bar/lNQvWxOnxiRINfNkcGA"
        },
        {
            "user_id": "@hij:bar.foo",
            "display_name": "HIJ"
        }
    ]
}"""

FILTERED_BODY = b'{"limited":false,"results":[{"display_name":"ABC","user_id":"@abc:example.com"}]}'

LAST_MODIFIED = "Thu, 02 Jun 2016 06:01:08 GMT"


class FakeHomeserver:
    """MockTransport handler: records requests, answers with a configurable response."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body = b""
        self.headers: dict[str, str] = {}
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        headers = {"Content-Length": str(len(self.body)), **self.headers}
        return httpx.Response(
            self.status_code, stream=httpx.ByteStream(self.body), headers=headers
        )


@pytest.fixture(autouse=True)
def settings_env(monkeypatch: pytest.MonkeyPatch):
    """Minimal valid environment; settings cache cleared around each test."""
    monkeypatch.setenv("USER_ID_REGEX", USER_ID_REGEX)
    monkeypatch.setenv("UPSTREAM_URL", UPSTREAM_URL)
    monkeypatch.delenv("LAST_MODIFIED", raising=False)
    monkeypatch.delenv("DEBUG", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def homeserver() -> FakeHomeserver:
    return FakeHomeserver()


@pytest.fixture
async def client(homeserver: FakeHomeserver) -> AsyncClient:
    """Async HTTP client against the app, forwarding to the fake homeserver."""
    app = create_app()
    upstream_client = httpx.AsyncClient(transport=httpx.MockTransport(homeserver))
    app.state.upstream_client = upstream_client
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await upstream_client.aclose()
