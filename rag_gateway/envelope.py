from typing import Any

from fastapi.responses import JSONResponse

from rag_gateway.errors import GatewayError
from rag_gateway.normalizer import Passthrough, Structured, UpstreamOutcome


def error_response(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse({"ok": False, "error": message}, status_code=status_code)


def gateway_error_response(exc: GatewayError) -> JSONResponse:
    return error_response(exc.message, exc.status_code)


def outcome_response(outcome: UpstreamOutcome) -> JSONResponse:
    """Render an upstream outcome with the backend's own status code."""

    if isinstance(outcome, Structured):
        return JSONResponse(outcome.value, status_code=outcome.status_code)
    if isinstance(outcome, Passthrough):
        return JSONResponse(outcome.as_payload(), status_code=outcome.status_code)
    raise TypeError(f"Unexpected upstream outcome: {outcome!r}")


def health_response(backend: str, health: Any) -> JSONResponse:
    return JSONResponse({"ok": True, "backend": backend, "health": health})


def health_error_response(backend: str, message: str) -> JSONResponse:
    return JSONResponse(
        {"ok": False, "backend": backend, "error": message},
        status_code=500,
    )


__all__ = [
    "error_response",
    "gateway_error_response",
    "outcome_response",
    "health_response",
    "health_error_response",
]
