"""MCP tool surface for the OECD statistics bridge."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Tuple

from mcp import types
from mcp.server.fastmcp import FastMCP

from ..features.observations import query_observations
from ..oecd.client import OECDClient
from ..utils.errors import (
    BridgeError,
    ToolInputError,
    UnknownToolError,
    fault_message,
)
from ..utils.logging import call_scope
from . import schemas
from ._shared import (
    ToolEnvelope,
    envelope_error,
    envelope_json,
    envelope_text,
    to_call_tool_result,
)
from .validators import InputSchema, validate_input

logger = logging.getLogger("oecd_bridge.mcp.tools")

ToolHandler = Callable[[OECDClient, Any], Awaitable[ToolEnvelope]]


async def search_dataflows(client: OECDClient, arguments: Any) -> ToolEnvelope:
    validated = validate_input(schemas.SEARCH_DATAFLOWS, arguments, "search_dataflows")
    results = await client.search_dataflows(validated["query"], validated["limit"])
    return envelope_json(results)


async def list_dataflows(client: OECDClient, arguments: Any) -> ToolEnvelope:
    validated = validate_input(schemas.LIST_DATAFLOWS, arguments, "list_dataflows")
    results = await client.list_dataflows(
        category=validated["category"],
        limit=validated["limit"],
    )
    return envelope_json(results)


async def get_data_structure(client: OECDClient, arguments: Any) -> ToolEnvelope:
    validated = validate_input(schemas.GET_DATA_STRUCTURE, arguments, "get_data_structure")
    structure = await client.get_data_structure(validated["dataflow_id"])
    return envelope_json(structure)


async def query_data(client: OECDClient, arguments: Any) -> ToolEnvelope:
    validated = validate_input(schemas.QUERY_DATA, arguments, "query_data")
    payload = await query_observations(
        client,
        dataflow_id=validated["dataflow_id"],
        filter=validated["filter"],
        start_period=validated["start_period"],
        end_period=validated["end_period"],
        last_n_observations=validated["last_n_observations"],
    )
    return envelope_json(payload)


async def get_categories(client: OECDClient, arguments: Any) -> ToolEnvelope:
    return envelope_json(client.get_categories())


async def get_popular_datasets(client: OECDClient, arguments: Any) -> ToolEnvelope:
    return envelope_json(client.get_popular_datasets())


async def search_indicators(client: OECDClient, arguments: Any) -> ToolEnvelope:
    validated = validate_input(schemas.SEARCH_INDICATORS, arguments, "search_indicators")
    results = await client.search_indicators(
        indicator=validated["indicator"],
        category=validated["category"],
    )
    return envelope_json(results)


async def get_dataflow_url(client: OECDClient, arguments: Any) -> ToolEnvelope:
    validated = validate_input(schemas.GET_DATAFLOW_URL, arguments, "get_dataflow_url")
    url = client.get_data_explorer_url(validated["dataflow_id"], validated["filter"])
    return envelope_text(url)


async def list_categories_detailed(client: OECDClient, arguments: Any) -> ToolEnvelope:
    return envelope_json(await client.get_categories_detailed())


@dataclass(frozen=True)
class ToolSpec:
    """One catalog entry: the advertised name, description and schema, and its handler."""

    name: str
    description: str
    schema: InputSchema
    handler: ToolHandler

    def definition(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.schema.json_schema(),
        }


TOOL_SPECS: Tuple[ToolSpec, ...] = (
    ToolSpec(
        "search_dataflows",
        "Search for OECD datasets (dataflows) by keyword. Returns matching datasets with "
        "their IDs, names, and descriptions.",
        schemas.SEARCH_DATAFLOWS,
        search_dataflows,
    ),
    ToolSpec(
        "list_dataflows",
        "List available OECD dataflows (datasets), optionally filtered by category. Use "
        "this to browse datasets by topic area.",
        schemas.LIST_DATAFLOWS,
        list_dataflows,
    ),
    ToolSpec(
        "get_data_structure",
        "Get the metadata and structure of a specific OECD dataset. Returns dimensions, "
        "attributes, and valid values for querying data.",
        schemas.GET_DATA_STRUCTURE,
        get_data_structure,
    ),
    ToolSpec(
        "query_data",
        "Query actual statistical data from an OECD dataset. ⚠️ IMPORTANT: Defaults to "
        "last 100 observations (max 1000) to protect context window. Use filters, time "
        "periods, or last_n_observations to control data size. Large datasets (e.g. "
        "SOCX_AGG) can have 70,000+ observations - always specify limits!",
        schemas.QUERY_DATA,
        query_data,
    ),
    ToolSpec(
        "get_categories",
        "Get all available OECD data categories (17 categories covering all topics: "
        "Economy, Health, Education, Environment, etc.)",
        schemas.NO_ARGUMENTS,
        get_categories,
    ),
    ToolSpec(
        "get_popular_datasets",
        "Get a curated list of commonly used OECD datasets across all categories.",
        schemas.NO_ARGUMENTS,
        get_popular_datasets,
    ),
    ToolSpec(
        "search_indicators",
        "Search for specific economic or social indicators by keyword (e.g., "
        '"inflation", "unemployment", "GDP").',
        schemas.SEARCH_INDICATORS,
        search_indicators,
    ),
    ToolSpec(
        "get_dataflow_url",
        "Generate an OECD Data Explorer URL for a dataset. Use this to provide users with "
        "a direct link to explore data visually in their browser.",
        schemas.GET_DATAFLOW_URL,
        get_dataflow_url,
    ),
    ToolSpec(
        "list_categories_detailed",
        "Get all OECD data categories with example datasets for each category. Returns "
        "comprehensive information about all 17 categories.",
        schemas.NO_ARGUMENTS,
        list_categories_detailed,
    ),
)

TOOL_HANDLERS: Mapping[str, ToolHandler] = MappingProxyType(
    {spec.name: spec.handler for spec in TOOL_SPECS}
)

if len(TOOL_HANDLERS) != len(TOOL_SPECS):  # pragma: no cover - catalog typo guard
    raise RuntimeError("Duplicate tool names in TOOL_SPECS")


def tool_definitions() -> List[Dict[str, object]]:
    return [spec.definition() for spec in TOOL_SPECS]


async def execute_tool(client: OECDClient, name: str, arguments: Any) -> ToolEnvelope:
    """Run tool ``name`` and always return an envelope.

    Faults of any kind become an ``isError`` envelope whose text is
    ``Error: <message>``.
    """

    with call_scope(name, logger=logger, fields={"tool": name}) as context:
        try:
            handler = TOOL_HANDLERS.get(name)
            if handler is None:
                raise UnknownToolError(name)
            return await handler(client, arguments)
        except ToolInputError as exc:
            context.metadata["issues"] = [path for path, _ in exc.issues]
            context.fail("invalid_input", fault_message(exc))
            return envelope_error(fault_message(exc))
        except BridgeError as exc:
            context.fail(exc.code.value.lower(), fault_message(exc))
            return envelope_error(fault_message(exc))
        except Exception as exc:  # noqa: BLE001 - every fault is reported to the caller
            context.fail("error", fault_message(exc))
            logger.exception("tool.error", extra=context.fields())
            return envelope_error(fault_message(exc))


def register_tools(server: FastMCP, *, client_factory: Callable[[], OECDClient]) -> None:
    """Serve the tool catalog through ``server``'s low-level request handlers.

    FastMCP would otherwise derive argument models from Python signatures and
    reject bad input before the bridge's own validation can report it.
    """

    lowlevel = server._mcp_server

    async def _list_tools(_: types.ListToolsRequest) -> types.ServerResult:
        tools = [
            types.Tool(
                name=spec.name,
                description=spec.description,
                inputSchema=spec.schema.json_schema(),
            )
            for spec in TOOL_SPECS
        ]
        return types.ServerResult(types.ListToolsResult(tools=tools))

    async def _call_tool(request: types.CallToolRequest) -> types.ServerResult:
        envelope = await execute_tool(
            client_factory(), request.params.name, request.params.arguments
        )
        return types.ServerResult(to_call_tool_result(envelope))

    lowlevel.request_handlers[types.ListToolsRequest] = _list_tools
    lowlevel.request_handlers[types.CallToolRequest] = _call_tool


__all__ = [
    "TOOL_HANDLERS",
    "TOOL_SPECS",
    "ToolHandler",
    "ToolSpec",
    "execute_tool",
    "register_tools",
    "tool_definitions",
]
