"""Shared fixtures: a fake clock, a scripted upstream and an app factory."""

import asyncio
from collections.abc import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from sverigesradio_mcp.config import Settings
from sverigesradio_mcp.engine.dispatcher import ToolDispatcher
from sverigesradio_mcp.engine.handlers import HandlerContext
from sverigesradio_mcp.server import create_app
from sverigesradio_mcp.services.sr_client import SRClient

API_PREFIX = "/api/v2/"


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


Route = dict | list | Callable[[httpx.Request], httpx.Response]


class UpstreamStub:
    """httpx.MockTransport handler serving canned responses by endpoint.

    A route is either a JSON body (served with 200) or a callable taking the
    request and returning an ``httpx.Response``. Unrouted endpoints get 404.
    """

    def __init__(self):
        self.routes: dict[str, Route] = {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        endpoint = request.url.path.removeprefix(API_PREFIX)
        route = self.routes.get(endpoint)
        if route is None:
            return httpx.Response(404, text="Not Found")
        if callable(route):
            return route(request)
        return httpx.Response(200, json=route)

    def requests_to(self, endpoint: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.removeprefix(API_PREFIX) == endpoint]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
def sr_client(upstream, clock) -> SRClient:
    return SRClient(transport=httpx.MockTransport(upstream), clock=clock)


@pytest.fixture
def dispatcher(sr_client) -> ToolDispatcher:
    return ToolDispatcher(HandlerContext(client=sr_client))


def make_settings(**overrides) -> Settings:
    overrides.setdefault("mcp_auth_token", None)
    return Settings(_env_file=None, **overrides)


@pytest.fixture
def app_factory(sr_client):
    def factory(**overrides):
        return create_app(settings=make_settings(**overrides), sr_client=sr_client)

    return factory


@pytest.fixture
def client(app_factory):
    with TestClient(app_factory()) as test_client:
        yield test_client


class AsgiExchange:
    """Drives one HTTP request straight through an ASGI app.

    Unlike ``TestClient`` it does not wait for the response to finish, so
    open event streams can be inspected while they are still running.
    """

    def __init__(self, app, method: str, path: str, headers: dict | None = None, body: bytes = b""):
        path, _, query = path.partition("?")
        self.app = app
        self.scope = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method,
            "scheme": "http",
            "path": path,
            "raw_path": path.encode(),
            "query_string": query.encode(),
            "root_path": "",
            "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
            "client": ("127.0.0.1", 50000),
            "server": ("testserver", 80),
        }
        self.body_sent = body
        self.body_read = False
        self.messages: list[dict] = []
        self.task: asyncio.Task | None = None
        self._disconnect = asyncio.Event()

    async def receive(self) -> dict:
        if not self.body_read:
            self.body_read = True
            return {"type": "http.request", "body": self.body_sent, "more_body": False}
        await self._disconnect.wait()
        return {"type": "http.disconnect"}

    async def send(self, message: dict) -> None:
        self.messages.append(message)

    def start(self) -> "AsgiExchange":
        self.task = asyncio.create_task(self.app(self.scope, self.receive, self.send))
        return self

    async def wait_for(self, predicate: Callable[[], bool], timeout: float = 2.0) -> None:
        async def poll():
            while not predicate():
                await asyncio.sleep(0.01)

        await asyncio.wait_for(poll(), timeout)

    async def finish(self, timeout: float = 2.0) -> None:
        await asyncio.wait_for(self.task, timeout)

    @property
    def started(self) -> bool:
        return any(m["type"] == "http.response.start" for m in self.messages)

    @property
    def status(self) -> int:
        return next(m["status"] for m in self.messages if m["type"] == "http.response.start")

    @property
    def headers(self) -> dict[str, str]:
        start = next(m for m in self.messages if m["type"] == "http.response.start")
        return {k.decode().lower(): v.decode() for k, v in start["headers"]}

    @property
    def text(self) -> str:
        return "".join(m.get("body", b"").decode() for m in self.messages if m["type"] == "http.response.body")
