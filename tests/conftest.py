import httpx
import pytest

from src.relay.client import BackendClient
from src.relay.registry import BackendRegistry


class FakeBackends:
    """
    In-process stand-in for registered backends, served through httpx.MockTransport.

    `data` maps a data URL to the JSON snapshot it returns (or an int status
    code, or an exception to raise); `control` maps a control URL to a
    (status, body) pair. Unknown URLs behave like unreachable hosts.
    """

    def __init__(self):
        self.data = {}
        self.control = {}
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)

        routes = self.data if request.method == "GET" else self.control
        if url not in routes:
            raise httpx.ConnectError(f"unreachable: {url}", request=request)

        answer = routes[url]
        if isinstance(answer, Exception):
            raise answer
        if request.method == "GET":
            if isinstance(answer, int):
                return httpx.Response(answer, json={"error": "backend failure"})
            return httpx.Response(200, json=answer)

        status, body = answer
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    def posted(self):
        return [r for r in self.requests if r.method == "POST"]


@pytest.fixture
def backends():
    return FakeBackends()


@pytest.fixture
def backend_client(backends):
    return BackendClient(request_timeout_s=2.0, max_concurrency=2, transport=httpx.MockTransport(backends.handler))


@pytest.fixture
def registry():
    return BackendRegistry()


@pytest.fixture
def pool_a():
    return {
        "sys001": {"name": "Pool A", "status": "ok", "devices": {"pump": "on", "heater": "off"}},
        "sys002": {"name": "Spa", "status": "offline", "devices": {}},
    }


@pytest.fixture
def pool_b():
    return {
        "abc100": {"status": "ok", "devices": {"light": "blue"}},
    }
