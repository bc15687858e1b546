from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from functools import lru_cache
from pathlib import Path
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from rag_gateway import __version__
from rag_gateway.backend_client import BackendClient
from rag_gateway.config import get_settings
from rag_gateway.envelope import (
    gateway_error_response,
    health_error_response,
    health_response,
    outcome_response,
)
from rag_gateway.errors import BackendUnavailableError, GatewayError
from rag_gateway.logging import get_logger, setup_logging
from rag_gateway.operations import Operation
from rag_gateway.validation import validate

logger = get_logger("rag_gateway.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("gateway_ready", backend_url=settings.backend_url)
    yield


app = FastAPI(title="RAG Gateway", version=__version__, lifespan=lifespan)
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


@lru_cache(maxsize=1)
def get_backend_client() -> BackendClient:
    return BackendClient(get_settings())


async def _read_json(request: Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


async def proxy(
    operation: Operation,
    payload: Mapping[str, Any],
    client: BackendClient,
    *,
    location: str = "body",
) -> JSONResponse:
    """Validate, dispatch, normalize, and wrap one gateway call."""

    try:
        gateway_request = validate(operation, payload.get("mode"), payload, location=location)
    except GatewayError as exc:
        logger.info("request_rejected", operation=operation.value, error=exc.message)
        return gateway_error_response(exc)

    try:
        outcome = await client.dispatch(gateway_request)
    except GatewayError as exc:
        return gateway_error_response(exc)

    return outcome_response(outcome)


@app.get("/", response_class=HTMLResponse)
async def index(request: Request):
    return templates.TemplateResponse(request, "index.html", {"version": __version__})


@app.get("/search")
async def search(request: Request, client: BackendClient = Depends(get_backend_client)):
    return await proxy(
        Operation.SEARCH, dict(request.query_params), client, location="query"
    )


@app.post("/search/echo")
async def search_echo(request: Request, client: BackendClient = Depends(get_backend_client)):
    return await proxy(Operation.SEARCH, await _read_json(request), client)


@app.post("/chat-openai")
async def chat(request: Request, client: BackendClient = Depends(get_backend_client)):
    return await proxy(Operation.CHAT, await _read_json(request), client)


@app.post("/summarize")
async def summarize(request: Request, client: BackendClient = Depends(get_backend_client)):
    return await proxy(Operation.SUMMARIZE, await _read_json(request), client)


@app.post("/analyze")
async def analyze(request: Request, client: BackendClient = Depends(get_backend_client)):
    return await proxy(Operation.ANALYZE, await _read_json(request), client)


@app.get("/health")
async def health(client: BackendClient = Depends(get_backend_client)):
    try:
        data = await client.health()
    except BackendUnavailableError as exc:
        return health_error_response(client.backend_url, exc.message)
    return health_response(client.backend_url, data)
