from __future__ import annotations

import asyncio
import logging

import pytest

from oecd_bridge.api.tools import execute_tool
from oecd_bridge.tests._stubs import StubOECDClient
from oecd_bridge.utils.errors import UpstreamError
from oecd_bridge.utils.logging import bump_counter, call_scope, current_call


def _finish_records(caplog):
    return [record for record in caplog.records if record.getMessage() == "call.finish"]


def test_call_scope_tracks_counters(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="oecd_bridge.test")
    logger = logging.getLogger("oecd_bridge.test")

    assert current_call() is None
    with call_scope("query_data", logger=logger, fields={"tool": "query_data"}) as context:
        assert current_call() is context
        bump_counter("observations", 40)
        bump_counter("observations", 2)
    assert current_call() is None
    assert context.counters == {"observations": 42}

    messages = [record.getMessage() for record in caplog.records]
    assert messages[0] == "call.start"
    (finish,) = _finish_records(caplog)
    assert finish.levelno == logging.INFO
    assert finish.outcome == "ok"
    assert finish.tool == "query_data"
    assert finish.counters == {"observations": 42}
    assert finish.call_id == context.call_id
    assert finish.duration_ms >= 0


def test_escaping_exception_marks_call_failed(caplog) -> None:
    caplog.set_level(logging.INFO, logger="oecd_bridge.test")
    with pytest.raises(RuntimeError):
        with call_scope("rpc", logger=logging.getLogger("oecd_bridge.test")):
            raise RuntimeError("boom")
    (finish,) = _finish_records(caplog)
    assert finish.outcome == "error"
    assert finish.levelno == logging.WARNING


def test_counters_outside_scope_are_ignored() -> None:
    bump_counter("observations")
    assert current_call() is None


@pytest.mark.parametrize(
    ("name", "arguments", "fault", "outcome"),
    [
        ("query_data", {}, None, "invalid_input"),
        ("nope", {}, None, "unknown_tool"),
        (
            "list_dataflows",
            {},
            UpstreamError("SDMX API error: 500 Internal Server Error"),
            "upstream_error",
        ),
        ("list_dataflows", {}, LookupError("gone"), "error"),
    ],
)
def test_dispatcher_records_outcome(caplog, name, arguments, fault, outcome) -> None:
    caplog.set_level(logging.INFO, logger="oecd_bridge")
    envelope = asyncio.run(execute_tool(StubOECDClient(fail_with=fault), name, arguments))
    assert envelope["isError"] is True
    (finish,) = _finish_records(caplog)
    assert finish.outcome == outcome
    assert finish.error == envelope["content"][0]["text"].removeprefix("Error: ")
