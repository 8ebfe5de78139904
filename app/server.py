"""Process entry point: serves the API and the healthcheck listener.

``volunteers-api healthcheck`` (alias ``hc``) queries the listener from
inside the same host, for use as a container HEALTHCHECK command.
"""

import argparse
import logging
import sys
import threading

import httpx
import uvicorn
from fastapi import FastAPI

from app.api.routers import health
from app.core.config import settings

logger = logging.getLogger(__name__)


def build_healthcheck_app() -> FastAPI:
    """A bare app answering the store healthcheck at ``/``."""
    healthcheck_app = FastAPI(openapi_url=None, docs_url=None, redoc_url=None)
    healthcheck_app.add_api_route("/", health.health, methods=["GET"])
    return healthcheck_app


def spawn_healthcheck_server(log_level: str) -> threading.Thread:
    """Serve the healthcheck on localhost in a daemon thread.

    Signals are only handled on the main thread, so the API server owns
    shutdown and the healthcheck listener dies with the process.
    """
    server = uvicorn.Server(
        uvicorn.Config(
            build_healthcheck_app(),
            host="127.0.0.1",
            port=settings.healthcheck_port,
            log_level=log_level,
        )
    )
    thread = threading.Thread(target=server.run, name="healthcheck", daemon=True)
    thread.start()
    logger.info("Healthcheck server starting on port %d", settings.healthcheck_port)
    return thread


def run_healthcheck(client: httpx.Client | None = None) -> int:
    """Query the local healthcheck listener; return the process exit status."""
    url = f"http://localhost:{settings.healthcheck_port}/"
    client = client or httpx.Client(timeout=5.0)
    try:
        with client:
            response = client.get(url)
    except httpx.RequestError as exc:
        print(f"FAILURE: {exc}", file=sys.stderr)
        return 1

    if response.status_code != httpx.codes.OK:
        print(f"FAILURE: healthcheck returned {response.status_code}", file=sys.stderr)
        return 1

    print("SUCCESS")
    return 0


def run_server() -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug_enabled else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    log_level = "debug" if settings.debug_enabled else "info"

    spawn_healthcheck_server(log_level)

    logger.info("API server starting on %s:%d", settings.http_host, settings.http_port)
    uvicorn.run(
        "app.main:app",
        host=settings.http_host,
        port=settings.http_port,
        timeout_keep_alive=settings.http_idle_timeout_seconds,
        log_level=log_level,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="volunteers-api", description="Volunteers API server")
    subcommands = parser.add_subparsers(dest="command")
    subcommands.add_parser("serve", help="run the API and healthcheck servers (default)")
    subcommands.add_parser(
        "healthcheck",
        aliases=["hc"],
        help="query the local healthcheck listener and exit non-zero if unhealthy",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    if args.command in ("healthcheck", "hc"):
        sys.exit(run_healthcheck())
    run_server()


if __name__ == "__main__":
    main()
