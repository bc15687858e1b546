import argparse
import asyncio
import json
from typing import Optional

import uvicorn

from rag_gateway.backend_client import BackendClient
from rag_gateway.config import get_settings
from rag_gateway.errors import BackendUnavailableError
from rag_gateway.logging import setup_logging


async def probe_backend(client: Optional[BackendClient] = None) -> tuple[bool, dict]:
    client = client or BackendClient(get_settings())
    try:
        health = await client.health()
    except BackendUnavailableError as exc:
        return False, {"ok": False, "backend": client.backend_url, "error": exc.message}
    return True, {"ok": True, "backend": client.backend_url, "health": health}


def serve(host: str, port: int, reload: bool) -> None:
    settings = get_settings()
    setup_logging(settings.log_level)
    uvicorn.run(
        "rag_gateway.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Run or probe the RAG gateway")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the gateway HTTP server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    serve_parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart the server when source files change",
    )

    subparsers.add_parser("health", help="Check that the configured backend answers")

    args = parser.parse_args(argv)

    if args.command == "serve":
        serve(args.host, args.port, args.reload)
    elif args.command == "health":
        ok, envelope = asyncio.run(probe_backend())
        print(json.dumps(envelope, indent=2))
        if not ok:
            raise SystemExit(1)


if __name__ == "__main__":
    main()
