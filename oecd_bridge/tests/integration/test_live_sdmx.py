"""Round trips against the public OECD SDMX service (opt-in)."""
from __future__ import annotations

import asyncio
import json

import pytest

from oecd_bridge.api.tools import execute_tool
from oecd_bridge.oecd.client import OECDClient, OECDSDMXClient
from oecd_bridge.tests._env import live_oecd

pytestmark = pytest.mark.skipif(
    not live_oecd(), reason="Set RUN_LIVE_OECD_TESTS=1 to query sdmx.oecd.org."
)


def _execute(name: str, arguments: dict) -> dict:
    async def runner() -> dict:
        client = OECDClient(OECDSDMXClient())
        try:
            return await execute_tool(client, name, arguments)
        finally:
            await client.aclose()

    return asyncio.run(runner())


def test_query_latest_observations() -> None:
    envelope = _execute("query_data", {"dataflow_id": "MEI", "last_n_observations": 3})
    assert "isError" not in envelope, envelope["content"][0]["text"]
    payload = json.loads(envelope["content"][0]["text"])
    observations = payload["data"] if isinstance(payload, dict) else payload
    assert observations
    assert "TIME_PERIOD" in observations[0]["dimensions"]


def test_unknown_filter_is_reported() -> None:
    envelope = _execute("query_data", {"dataflow_id": "QNA", "filter": "ZZZ.NOPE.NOPE"})
    assert envelope["isError"] is True
    assert envelope["content"][0]["text"].startswith("Error: SDMX API")
