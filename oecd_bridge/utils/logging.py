"""Structured logging for tool and JSON-RPC calls."""
from __future__ import annotations

import logging
import sys
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from time import perf_counter
from typing import Dict, Iterator, Mapping, Optional, TextIO

import contextvars


_CALL_CONTEXT: contextvars.ContextVar["CallContext | None"] = contextvars.ContextVar(
    "oecd_bridge_call", default=None
)

OUTCOME_OK = "ok"


def configure_root(level: int = logging.INFO, *, stream: TextIO = sys.stderr) -> None:
    # stdout carries the stdio transport.
    logging.basicConfig(level=level, format="%(levelname)s:%(name)s:%(message)s", stream=stream)


def _elapsed_ms(start: float) -> float:
    return round((perf_counter() - start) * 1000.0, 3)


@contextmanager
def scoped_timer(
    logger: logging.Logger, message: str, *, extra: Optional[Dict[str, object]] = None
) -> Iterator[None]:
    start = perf_counter()
    try:
        yield
    finally:
        logger.debug("%s", message, extra={"duration_ms": _elapsed_ms(start), **(extra or {})})


@dataclass(slots=True)
class CallContext:
    """Per-call logging state.

    ``outcome`` stays ``"ok"`` unless the call is marked failed; the closing
    ``call.finish`` record carries it together with the counters.
    """

    name: str
    call_id: str
    logger: logging.Logger
    metadata: Dict[str, object] = field(default_factory=dict)
    counters: Dict[str, int] = field(default_factory=dict)
    outcome: str = OUTCOME_OK
    started: float = field(default_factory=perf_counter)

    def fields(self, **values: object) -> Dict[str, object]:
        payload: Dict[str, object] = {"call_id": self.call_id, "call": self.name}
        payload.update(self.metadata)
        payload.update(values)
        return payload

    def log(
        self, level: int, message: str, *, extra: Optional[Mapping[str, object]] = None
    ) -> None:
        self.logger.log(level, message, extra=self.fields(**dict(extra or {})))

    def bump(self, counter: str, amount: int = 1) -> int:
        value = self.counters.get(counter, 0) + amount
        self.counters[counter] = value
        return value

    def fail(self, outcome: str, reason: str) -> None:
        """Mark the call failed; the last failure wins."""

        self.outcome = outcome
        self.metadata["error"] = reason


@contextmanager
def call_scope(
    name: str,
    *,
    logger: Optional[logging.Logger] = None,
    fields: Optional[Mapping[str, object]] = None,
) -> Iterator[CallContext]:
    """Open a logging scope for one tool or JSON-RPC call."""

    context = CallContext(
        name=name,
        call_id=uuid.uuid4().hex,
        logger=logger or logging.getLogger("oecd_bridge.call"),
        metadata=dict(fields or {}),
    )
    token = _CALL_CONTEXT.set(context)
    context.log(logging.DEBUG, "call.start")
    try:
        yield context
    except BaseException:
        context.outcome = "error"
        raise
    finally:
        level = logging.INFO if context.outcome == OUTCOME_OK else logging.WARNING
        context.log(
            level,
            "call.finish",
            extra={
                "outcome": context.outcome,
                "duration_ms": _elapsed_ms(context.started),
                "counters": dict(context.counters),
            },
        )
        _CALL_CONTEXT.reset(token)


def current_call() -> Optional[CallContext]:
    """Return the call being served, if any."""

    return _CALL_CONTEXT.get()


def bump_counter(name: str, amount: int = 1) -> None:
    context = current_call()
    if context is not None:
        context.bump(name, amount)


__all__ = [
    "CallContext",
    "OUTCOME_OK",
    "bump_counter",
    "call_scope",
    "configure_root",
    "current_call",
    "scoped_timer",
]
