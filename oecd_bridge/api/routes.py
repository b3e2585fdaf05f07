"""HTTP routes: health probe and synchronous JSON-RPC access to the MCP surface."""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping

from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from .. import __version__
from ..features.prompts import list_prompts, render_prompt
from ..features.resources import list_resources, read_resource
from ..oecd.client import OECDClient
from ..utils.errors import ErrorCode
from ..utils.logging import call_scope
from ._shared import rpc_error, rpc_result
from .tools import TOOL_SPECS, execute_tool, tool_definitions

PROTOCOL_VERSION = "2025-06-18"
SERVER_NAME = "oecd-mcp-bridge"

RpcMethod = Callable[[OECDClient, Mapping[str, Any]], Awaitable[object]]


async def _initialize(client: OECDClient, params: Mapping[str, Any]) -> object:
    return {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {
            "tools": {"listChanged": False},
            "resources": {"subscribe": False, "listChanged": False},
            "prompts": {"listChanged": False},
        },
        "serverInfo": {"name": SERVER_NAME, "version": __version__},
    }


async def _tools_list(client: OECDClient, params: Mapping[str, Any]) -> object:
    return {"tools": tool_definitions()}


async def _tools_call(client: OECDClient, params: Mapping[str, Any]) -> object:
    name = params.get("name")
    if not isinstance(name, str):
        raise ValueError("tools/call requires a string 'name'")
    return await execute_tool(client, name, params.get("arguments"))


async def _resources_list(client: OECDClient, params: Mapping[str, Any]) -> object:
    return {"resources": list_resources()}


async def _resources_read(client: OECDClient, params: Mapping[str, Any]) -> object:
    uri = str(params.get("uri", ""))
    return {
        "contents": [
            {"uri": uri, "mimeType": "application/json", "text": read_resource(client, uri)}
        ]
    }


async def _prompts_list(client: OECDClient, params: Mapping[str, Any]) -> object:
    return {"prompts": list_prompts()}


async def _prompts_get(client: OECDClient, params: Mapping[str, Any]) -> object:
    arguments = params.get("arguments")
    if arguments is not None and not isinstance(arguments, Mapping):
        raise ValueError("prompts/get 'arguments' must be an object")
    return render_prompt(str(params.get("name", "")), arguments)


RPC_METHODS: Mapping[str, RpcMethod] = {
    "initialize": _initialize,
    "tools/list": _tools_list,
    "tools/call": _tools_call,
    "resources/list": _resources_list,
    "resources/read": _resources_read,
    "prompts/list": _prompts_list,
    "prompts/get": _prompts_get,
}


def usage_document() -> Dict[str, object]:
    """Self-description served on ``GET /mcp``."""

    return {
        "service": SERVER_NAME,
        "version": __version__,
        "description": "Model Context Protocol server for OECD statistical data",
        "status": "operational",
        "usage": {
            "method": "POST",
            "contentType": "application/json",
            "body": {
                "jsonrpc": "2.0",
                "id": "request-id",
                "method": " | ".join(RPC_METHODS),
                "params": {},
            },
        },
        "examples": [
            {
                "description": "List all available tools",
                "request": {
                    "method": "POST",
                    "url": "/mcp",
                    "body": {"jsonrpc": "2.0", "id": 1, "method": "tools/list"},
                },
            },
            {
                "description": "Call a tool",
                "request": {
                    "method": "POST",
                    "url": "/mcp",
                    "body": {
                        "jsonrpc": "2.0",
                        "id": 2,
                        "method": "tools/call",
                        "params": {
                            "name": "search_dataflows",
                            "arguments": {"query": "GDP", "limit": 10},
                        },
                    },
                },
            },
        ],
        "endpoints": {
            "/health": "GET - Health check",
            "/mcp": "POST - MCP protocol endpoint (JSON-RPC 2.0)",
            "/sse": "GET - Server-Sent Events streaming",
        },
    }


def make_routes(client_factory: Callable[[], OECDClient]) -> List[Route]:
    logger = logging.getLogger("oecd_bridge.api")

    async def health(_: Request) -> JSONResponse:
        payload: Dict[str, object] = {
            "status": "ok",
            "service": SERVER_NAME,
            "version": __version__,
            "tools": len(TOOL_SPECS),
        }
        return JSONResponse(payload)

    async def mcp_usage(_: Request) -> JSONResponse:
        return JSONResponse(usage_document())

    async def mcp_rpc(request: Request) -> JSONResponse:
        # JSONDecodeError propagates to the handler installed by install_error_handlers.
        body = await request.json()
        if not isinstance(body, dict):
            return rpc_error(None, ErrorCode.INVALID_REQUEST, "Payload must be a JSON object.")
        request_id = body.get("id")
        method = body.get("method")
        if body.get("jsonrpc") != "2.0" or not isinstance(method, str):
            return rpc_error(request_id, ErrorCode.INVALID_REQUEST)
        handler = RPC_METHODS.get(method)
        if handler is None:
            return rpc_error(
                request_id, ErrorCode.METHOD_NOT_FOUND, f"Unknown method: {method}"
            )
        params = body.get("params") or {}
        if not isinstance(params, Mapping):
            return rpc_error(request_id, ErrorCode.INVALID_PARAMS, "params must be an object")

        with call_scope("rpc", logger=logger, fields={"method": method}) as context:
            try:
                result = await handler(client_factory(), params)
            except ValueError as exc:
                context.fail("invalid_params", str(exc))
                return rpc_error(request_id, ErrorCode.INVALID_PARAMS, str(exc))
        return rpc_result(request_id, result)

    return [
        Route("/health", health, methods=["GET"], name="health"),
        Route("/mcp", mcp_rpc, methods=["POST"], name="mcp"),
        Route("/mcp", mcp_usage, methods=["GET"], name="mcp_usage"),
    ]


__all__ = ["PROTOCOL_VERSION", "RPC_METHODS", "SERVER_NAME", "make_routes", "usage_document"]
