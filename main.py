# -*- coding: utf-8 -*-

# Relay Gateway
# Copyright (C) 2025 Jwadow
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.

"""
Relay Gateway - entry point.

Usage:
    python main.py                      # host/port from env or defaults
    python main.py --port 9000
    python main.py -H 127.0.0.1 -p 9000
    uvicorn main:app --port 9000
"""

import argparse
import sys
from contextlib import asynccontextmanager
from typing import Tuple

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from relay.config import (
    APP_DESCRIPTION,
    APP_TITLE,
    APP_VERSION,
    CORS_ALLOW_HEADERS,
    CORS_ALLOW_METHODS,
    CORS_ALLOW_ORIGINS,
    DEFAULT_SERVER_HOST,
    DEFAULT_SERVER_PORT,
    LOG_LEVEL,
    SERVER_HOST,
    SERVER_PORT,
    UPSTREAM_BASE_URL,
)
from relay.exceptions import register_exception_handlers
from relay.http_client import UpstreamHttpClient
from relay.routes import router


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Replaces loguru's default sink with a colorized stderr sink at the given level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        colorize=True,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Creates the shared upstream client on startup and closes it on shutdown."""
    logger.info("Starting {} v{}, upstream: {}", APP_TITLE, APP_VERSION, UPSTREAM_BASE_URL)
    app.state.upstream_client = UpstreamHttpClient()
    yield
    await app.state.upstream_client.close()
    logger.info("Upstream client closed")


def create_app() -> FastAPI:
    """Builds the FastAPI application with CORS, routes and exception handlers."""
    app = FastAPI(
        title=APP_TITLE,
        description=APP_DESCRIPTION,
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ALLOW_ORIGINS,
        allow_credentials=False,
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
    )
    app.include_router(router)
    register_exception_handlers(app)
    return app


def parse_cli_args() -> argparse.Namespace:
    """
    Parses command line arguments.

    Defaults are None so resolve_server_config() can tell
    "not given" apart from an explicit value.
    """
    parser = argparse.ArgumentParser(description=APP_DESCRIPTION)
    parser.add_argument(
        "-H", "--host", type=str, default=None,
        help=f"Server host (default: {DEFAULT_SERVER_HOST}, env: SERVER_HOST)",
    )
    parser.add_argument(
        "-p", "--port", type=int, default=None,
        help=f"Server port (default: {DEFAULT_SERVER_PORT}, env: SERVER_PORT)",
    )
    parser.add_argument(
        "-v", "--version", action="version",
        version=f"{APP_TITLE} {APP_VERSION}",
    )
    return parser.parse_args()


def resolve_server_config(args: argparse.Namespace) -> Tuple[str, int]:
    """
    Resolves host and port.

    Priority: CLI argument > environment variable > default.
    Each value is resolved independently.
    """
    host = args.host if args.host is not None else SERVER_HOST or DEFAULT_SERVER_HOST
    port = args.port if args.port is not None else SERVER_PORT or DEFAULT_SERVER_PORT
    return host, port


def print_startup_banner(host: str, port: int) -> None:
    """Prints server URLs to stdout."""
    display_host = "localhost" if host == "0.0.0.0" else host
    base_url = f"http://{display_host}:{port}"
    print(f"\n  {APP_TITLE} v{APP_VERSION}")
    print(f"  Server:   {base_url}")
    print(f"  API docs: {base_url}/docs")
    print(f"  Health:   {base_url}/health\n")


setup_logging()
app = create_app()


if __name__ == "__main__":
    cli_args = parse_cli_args()
    server_host, server_port = resolve_server_config(cli_args)
    print_startup_banner(server_host, server_port)
    uvicorn.run(app, host=server_host, port=server_port, log_level=LOG_LEVEL.lower())
