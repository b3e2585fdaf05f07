#!/usr/bin/env python3
"""Sanity-check the OECD MCP tools over the stdio transport.

This script launches ``oecd_mcp_bridge.py --transport stdio`` via the MCP
Python client, checks that every advertised tool is listed, and exercises the
offline tools (``search_dataflows``, ``get_data_structure``,
``get_dataflow_url``) plus one rejected ``query_data`` call. With ``--live`` it
also queries real observations. It exits non-zero on any failure.
"""
from __future__ import annotations

import argparse
import asyncio
import os
import sys
from datetime import timedelta
from pathlib import Path
from typing import Any

import mcp.types as types
from mcp import StdioServerParameters, stdio_client
from mcp.client.session import ClientSession
from mcp.shared.exceptions import McpError

ROOT = Path(__file__).resolve().parents[1]
EXPECTED_TOOLS = {
    "search_dataflows",
    "list_dataflows",
    "get_data_structure",
    "query_data",
    "get_categories",
    "get_popular_datasets",
    "search_indicators",
    "get_dataflow_url",
    "list_categories_detailed",
}


def _text_of(result: types.CallToolResult) -> str | None:
    """Text of the first text block, or ``None`` for non-text results."""

    for content in result.content:
        if isinstance(content, types.TextContent):
            return content.text
    return None


async def _call_tool(
    session: ClientSession,
    name: str,
    arguments: dict[str, Any] | None = None,
    *,
    expect_error: bool = False,
) -> types.CallToolResult:
    """Invoke an MCP tool and raise unless its error flag matches ``expect_error``."""

    result = await session.call_tool(name, arguments)
    if bool(result.isError) != expect_error:
        state = "an error" if result.isError else "success"
        raise RuntimeError(f"{name} unexpectedly returned {state}: {_text_of(result)}")
    if not result.content:
        raise RuntimeError(f"{name} returned an empty content array")
    return result


async def _run_sequence(args: argparse.Namespace) -> int:
    env = dict(os.environ)
    if args.sdmx_base_url:
        env["OECD_SDMX_BASE_URL"] = args.sdmx_base_url

    server = StdioServerParameters(
        command=args.python_command,
        args=[str(args.bridge_script), "--transport", "stdio"],
        env=env,
        cwd=args.cwd,
    )

    try:
        async with stdio_client(server) as (read_stream, write_stream):
            async with ClientSession(
                read_stream,
                write_stream,
                read_timeout_seconds=timedelta(seconds=args.timeout),
            ) as session:
                init_result = await session.initialize()
                server_info = init_result.serverInfo
                print(
                    f"Connected to {server_info.name} {server_info.version}"
                    if server_info
                    else "Connected to OECD bridge"
                )

                listed = {tool.name for tool in (await session.list_tools()).tools}
                missing = EXPECTED_TOOLS - listed
                if missing:
                    raise RuntimeError(f"missing tools: {sorted(missing)}")
                print(f"{len(listed)} tools advertised")

                search = await _call_tool(
                    session, "search_dataflows", {"query": args.query, "limit": 5}
                )
                print(_text_of(search) or "search_dataflows returned data")

                structure = await _call_tool(
                    session, "get_data_structure", {"dataflow_id": args.dataflow}
                )
                print(_text_of(structure) or "get_data_structure returned data")

                url = await _call_tool(
                    session, "get_dataflow_url", {"dataflow_id": args.dataflow}
                )
                print(_text_of(url))

                rejected = await _call_tool(
                    session,
                    "query_data",
                    {"dataflow_id": args.dataflow, "last_n_observations": 1001},
                    expect_error=True,
                )
                print(_text_of(rejected))

                if args.live:
                    observations = await _call_tool(
                        session,
                        "query_data",
                        {"dataflow_id": args.dataflow, "last_n_observations": 5},
                    )
                    text = _text_of(observations) or ""
                    print(text[:500])
    except (McpError, Exception) as exc:
        print(f"verify_mcp_tools: {exc}", file=sys.stderr)
        return 1

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Launch oecd_mcp_bridge.py --transport stdio via the MCP client "
            "and verify the tool catalog."
        )
    )
    parser.add_argument(
        "--python-command",
        default=sys.executable,
        help="Interpreter that runs oecd_mcp_bridge.py (default: %(default)s)",
    )
    parser.add_argument(
        "--bridge-script",
        type=Path,
        default=ROOT / "oecd_mcp_bridge.py",
        help="Path to oecd_mcp_bridge.py (default: repository root)",
    )
    parser.add_argument(
        "--sdmx-base-url",
        help="Override OECD_SDMX_BASE_URL for the subprocess.",
    )
    parser.add_argument(
        "--cwd",
        default=str(ROOT),
        help="Directory the bridge runs in, where it looks for .env (default: %(default)s)",
    )
    parser.add_argument(
        "--query",
        default="GDP",
        help="Keyword passed to search_dataflows (default: %(default)s)",
    )
    parser.add_argument(
        "--dataflow",
        default="QNA",
        help="Dataflow id used for structure, URL and query calls (default: %(default)s)",
    )
    parser.add_argument(
        "--live",
        action="store_true",
        help="Also query observations from the OECD SDMX service.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Seconds to wait for each MCP response (default: %(default)s)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point."""

    args = build_parser().parse_args(argv)
    return asyncio.run(_run_sequence(args))


if __name__ == "__main__":  # pragma: no cover - script entry point
    raise SystemExit(main())
