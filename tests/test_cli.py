import httpx
import pytest

from rag_gateway.backend_client import BackendClient
from rag_gateway.cli import gateway as cli

from tests.conftest import BACKEND_URL, StubBackend


@pytest.mark.asyncio
async def test_probe_backend_success(settings):
    stub = StubBackend(lambda request: httpx.Response(200, json={"status": "up"}))

    ok, envelope = await cli.probe_backend(BackendClient(settings, transport=stub.transport))

    assert ok is True
    assert envelope == {"ok": True, "backend": BACKEND_URL, "health": {"status": "up"}}


@pytest.mark.asyncio
async def test_probe_backend_failure(settings):
    stub = StubBackend(lambda request: httpx.Response(200, text="not json"))

    ok, envelope = await cli.probe_backend(BackendClient(settings, transport=stub.transport))

    assert ok is False
    assert envelope["ok"] is False
    assert envelope["backend"] == BACKEND_URL
    assert envelope["error"]


def test_serve_runs_uvicorn(monkeypatch: pytest.MonkeyPatch):
    calls: dict[str, object] = {}

    def fake_run(app: str, **kwargs) -> None:
        calls["app"] = app
        calls.update(kwargs)

    monkeypatch.setattr(cli.uvicorn, "run", fake_run)

    cli.main(["serve", "--port", "9001"])

    assert calls["app"] == "rag_gateway.main:app"
    assert calls["port"] == 9001
    assert calls["host"] == "127.0.0.1"
    assert calls["reload"] is False
