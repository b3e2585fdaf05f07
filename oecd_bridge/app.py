"""Application wiring for the OECD MCP bridge."""
from __future__ import annotations

import contextlib
import logging
from typing import AsyncIterator, Callable, Optional

from mcp.server.fastmcp import FastMCP
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware

from .api.routes import SERVER_NAME, make_routes
from .api.tools import register_tools
from .error_handlers import install_error_handlers
from .features import prompts
from .features.resources import RESOURCE_SPECS, read_resource
from .oecd.client import OECDClient, OECDSDMXClient
from .utils import config
from .utils.logging import configure_root

MCP_SERVER = FastMCP(SERVER_NAME)
_sdmx_base_url = config.SDMX_BASE_URL
_client: Optional[OECDClient] = None
_CONFIGURED = False

logger = logging.getLogger("oecd_bridge.app")


def set_sdmx_base_url(url: str) -> None:
    """Override the SDMX endpoint used by the shared client."""

    global _sdmx_base_url
    _sdmx_base_url = url
    if _client is not None:
        # The live client keeps its session; only the endpoint changes.
        _client.sdmx.base_url = url.rstrip("/")


def _client_factory() -> OECDClient:
    # One stateless client is shared by all calls.
    global _client
    if _client is None:
        _client = OECDClient(OECDSDMXClient(_sdmx_base_url))
    return _client


def _resource_reader(uri: str) -> Callable[[], str]:
    # FastMCP treats functions with parameters as URI templates.
    def _read() -> str:
        return read_resource(_client_factory(), uri)

    return _read


def _register_resources(server: FastMCP) -> None:
    for spec in RESOURCE_SPECS:
        server.resource(
            spec.uri,
            name=spec.name,
            description=spec.description,
            mime_type=spec.mime_type,
        )(_resource_reader(spec.uri))


def _register_prompts(server: FastMCP) -> None:
    @server.prompt(
        name="analyze_economic_trend",
        description="Analyze economic indicators over time for specified countries",
    )
    def analyze_economic_trend(
        indicator: str, countries: str, time_period: str | None = None
    ) -> str:
        return prompts.analyze_economic_trend(indicator, countries, time_period)

    @server.prompt(
        name="compare_countries",
        description="Compare data across multiple countries for a specific indicator",
    )
    def compare_countries(indicator: str, countries: str, year: str | None = None) -> str:
        return prompts.compare_countries(indicator, countries, year)

    @server.prompt(
        name="get_latest_statistics",
        description="Get the most recent statistics for a specific topic",
    )
    def get_latest_statistics(topic: str, country: str | None = None) -> str:
        return prompts.get_latest_statistics(topic, country)


def configure() -> None:
    global _CONFIGURED
    if _CONFIGURED:
        return
    configure_root()
    register_tools(MCP_SERVER, client_factory=_client_factory)
    _register_resources(MCP_SERVER)
    _register_prompts(MCP_SERVER)
    _CONFIGURED = True


async def close_shared_client() -> None:
    """Close the shared client's HTTP session, if one was opened."""

    global _client
    client, _client = _client, None
    if client is not None:
        await client.aclose()


@contextlib.asynccontextmanager
async def _lifespan(app: Starlette) -> AsyncIterator[None]:
    try:
        yield
    finally:
        await close_shared_client()
        logger.debug("app.shutdown: shared client closed")


def build_api_app(*, debug: bool = False) -> Starlette:
    configure()
    app = Starlette(
        debug=debug,
        routes=make_routes(_client_factory),
        middleware=[
            Middleware(
                CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"]
            )
        ],
        lifespan=_lifespan,
    )
    install_error_handlers(app)
    return app


def create_app() -> Starlette:
    """Factory compatible with ``uvicorn --factory``."""

    api_app = build_api_app()
    sse_app = MCP_SERVER.sse_app()
    api_app.router.routes.extend(sse_app.routes)
    return api_app


__all__ = [
    "MCP_SERVER",
    "build_api_app",
    "close_shared_client",
    "configure",
    "create_app",
    "set_sdmx_base_url",
]
