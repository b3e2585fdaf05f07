"""Command-line entry point for the OECD MCP bridge."""
from __future__ import annotations

import argparse
import logging
import os
from typing import Callable, Sequence

import uvicorn
from starlette.applications import Starlette

from .utils import config

AppFactory = Callable[[], Starlette]
RunMCP = Callable[[str], None]
SetBaseURL = Callable[[str], None]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="OECD statistics MCP bridge (stdio, SSE or HTTP JSON-RPC)"
    )
    parser.add_argument(
        "--transport",
        type=str,
        default="stdio",
        choices=["stdio", "sse", "http"],
        help="MCP transport; 'http' serves /mcp JSON-RPC plus /sse on one port.",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=config.MCP_HOST,
        help=f"Bind address for sse/http transports, default: {config.MCP_HOST}",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config.MCP_PORT,
        help=f"Port for sse/http transports, default: {config.MCP_PORT}",
    )
    parser.add_argument(
        "--sdmx-base-url",
        type=str,
        default=None,
        help=f"OECD SDMX REST base URL, default: {config.SDMX_BASE_URL}",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def run(
    args: argparse.Namespace,
    *,
    logger: logging.Logger,
    set_base_url: SetBaseURL,
    run_mcp: RunMCP,
    app_factory: AppFactory,
) -> None:
    """Start the selected transport."""
    if args.debug:
        logging.getLogger("oecd_bridge").setLevel(logging.DEBUG)

    base_url = args.sdmx_base_url or os.getenv("OECD_SDMX_BASE_URL", config.SDMX_BASE_URL)
    set_base_url(base_url)
    logger.info("[Bridge] Using OECD SDMX endpoint %s", base_url)

    if args.transport == "http":
        logger.info(
            "[HTTP] JSON-RPC endpoint on http://%s:%s/mcp", args.host, args.port
        )
        uvicorn.run(app_factory(), host=args.host, port=int(args.port))
    elif args.transport == "sse":
        logger.info("[MCP] SSE endpoint on http://%s:%s/sse", args.host, args.port)
        run_mcp("sse")
    else:
        logger.info("[MCP] Running in stdio mode.")
        run_mcp("stdio")


def main(argv: Sequence[str] | None = None) -> None:
    from .app import MCP_SERVER, configure, create_app, set_sdmx_base_url

    args = build_parser().parse_args(argv)
    configure()

    def run_mcp(transport: str) -> None:
        MCP_SERVER.settings.host = args.host
        MCP_SERVER.settings.port = int(args.port)
        MCP_SERVER.run(transport=transport)

    run(
        args,
        logger=logging.getLogger("oecd_bridge.cli"),
        set_base_url=set_sdmx_base_url,
        run_mcp=run_mcp,
        app_factory=create_app,
    )


__all__ = ["build_parser", "main", "run"]
