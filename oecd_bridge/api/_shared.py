"""Shared helpers for tools and HTTP routes."""
from __future__ import annotations

import json
from typing import Dict, List

from mcp import types
from starlette.responses import JSONResponse

from ..utils.errors import ErrorCode, make_error

ToolEnvelope = Dict[str, object]


def envelope_text(text: str) -> ToolEnvelope:
    return {"content": [{"type": "text", "text": text}]}


def envelope_json(payload: object) -> ToolEnvelope:
    return envelope_text(json.dumps(payload, indent=2, ensure_ascii=False))


def envelope_error(message: str) -> ToolEnvelope:
    return {"content": [{"type": "text", "text": f"Error: {message}"}], "isError": True}


def to_call_tool_result(envelope: ToolEnvelope) -> types.CallToolResult:
    """Convert an envelope into the MCP SDK result model."""

    blocks: List[types.TextContent] = [
        types.TextContent(type="text", text=str(block["text"]))
        for block in envelope["content"]  # type: ignore[union-attr]
    ]
    return types.CallToolResult(content=blocks, isError=bool(envelope.get("isError", False)))


def rpc_result(request_id: object, result: object) -> JSONResponse:
    return JSONResponse({"jsonrpc": "2.0", "id": request_id, "result": result})


def rpc_error(
    request_id: object,
    code: ErrorCode,
    message: str | None = None,
    *,
    data: Dict[str, object] | None = None,
) -> JSONResponse:
    # JSON-RPC errors travel with HTTP 200; only transport failures use other statuses.
    return JSONResponse(
        {
            "jsonrpc": "2.0",
            "id": request_id,
            "error": make_error(code, message, data=data),
        }
    )
