import inspect
import json
from collections.abc import Callable
from typing import Any, Optional

import httpx
import pytest

from rag_gateway.backend_client import BackendClient
from rag_gateway.config import GatewaySettings
from rag_gateway.main import app, get_backend_client

BACKEND_URL = "http://backend.test"


class StubBackend:
    """Stands in for the RAG backend and records every request it receives."""

    def __init__(self, responder: Optional[Callable[[httpx.Request], Any]] = None) -> None:
        self.requests: list[httpx.Request] = []
        self._responder = responder or (lambda request: httpx.Response(200, json={"ok": True}))

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._responder(request)
        if inspect.isawaitable(response):
            response = await response
        return response

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def json_body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content.decode())


@pytest.fixture
def settings() -> GatewaySettings:
    return GatewaySettings(
        backend_url=BACKEND_URL + "/",
        search_timeout=1.0,
        generation_timeout=1.0,
        log_level="INFO",
    )


@pytest.fixture
def gateway(settings: GatewaySettings):
    """Return a factory that wires a stub backend into the app and yields an HTTP client."""

    def install(stub: StubBackend, gateway_settings: Optional[GatewaySettings] = None):
        client = BackendClient(gateway_settings or settings, transport=stub.transport)
        app.dependency_overrides[get_backend_client] = lambda: client
        return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")

    yield install
    app.dependency_overrides.clear()
