import asyncio
from typing import Any, Optional

import httpx

from rag_gateway.config import GatewaySettings, get_settings
from rag_gateway.errors import BackendUnavailableError
from rag_gateway.logging import get_logger
from rag_gateway.normalizer import Passthrough, UpstreamOutcome, decode_json, normalize
from rag_gateway.operations import get_spec
from rag_gateway.schemas import GatewayRequest

logger = get_logger("rag_gateway.backend")


def _describe(exc: Exception) -> str:
    return str(exc) or exc.__class__.__name__


class BackendClient:
    """Issues one deadline-bound call to the RAG backend per gateway request.

    Calls are never retried: the backend may already have done (and billed)
    model work for a request that failed on the way back.
    """

    def __init__(
        self,
        settings: Optional[GatewaySettings] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._transport = transport

    @property
    def backend_url(self) -> str:
        return self.settings.backend_url

    async def dispatch(self, request: GatewayRequest) -> UpstreamOutcome:
        spec = get_spec(request.operation)
        deadline = self.settings.deadline_for(request.operation)

        async with httpx.AsyncClient(
            base_url=self.backend_url,
            timeout=deadline,
            transport=self._transport,
        ) as client:
            try:
                response = await asyncio.wait_for(
                    self._send(client, request), timeout=deadline
                )
            except asyncio.TimeoutError as exc:
                logger.error(
                    "backend_request_failed",
                    operation=request.operation.value,
                    path=spec.path,
                    error="deadline exceeded",
                    deadline=deadline,
                )
                raise BackendUnavailableError(
                    f"backend {spec.path} did not respond within {deadline:g}s"
                ) from exc
            except httpx.HTTPError as exc:
                logger.error(
                    "backend_request_failed",
                    operation=request.operation.value,
                    path=spec.path,
                    error=_describe(exc),
                )
                raise BackendUnavailableError(_describe(exc)) from exc

        outcome = normalize(response.status_code, response.text)
        if isinstance(outcome, Passthrough):
            logger.warning(
                "backend_passthrough",
                operation=request.operation.value,
                status_code=outcome.status_code,
                body_length=len(outcome.body),
            )
        return outcome

    async def _send(self, client: httpx.AsyncClient, request: GatewayRequest) -> httpx.Response:
        spec = get_spec(request.operation)
        if spec.method == "GET":
            return await client.get(spec.path, params=request.query_params())
        return await client.request(
            spec.method,
            spec.path,
            json=request.json_body(),
            headers={"Content-Type": "application/json"},
        )

    async def health(self) -> Any:
        """Return the backend's decoded ``/health`` body."""

        async with httpx.AsyncClient(
            base_url=self.backend_url, transport=self._transport
        ) as client:
            try:
                response = await client.get("/health")
                return decode_json(response.text)
            except (httpx.HTTPError, ValueError) as exc:
                logger.error("backend_health_failed", error=_describe(exc))
                raise BackendUnavailableError(_describe(exc)) from exc


__all__ = ["BackendClient"]
