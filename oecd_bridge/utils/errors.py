"""Error codes and fault types for the bridge."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple


class ErrorCode(str, Enum):
    """Stable error codes reported by the JSON-RPC endpoint."""

    INVALID_REQUEST = "INVALID_REQUEST"
    PARSE_ERROR = "PARSE_ERROR"
    METHOD_NOT_FOUND = "METHOD_NOT_FOUND"
    INVALID_PARAMS = "INVALID_PARAMS"
    UNKNOWN_TOOL = "UNKNOWN_TOOL"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    INTERNAL = "INTERNAL"


@dataclass(frozen=True)
class ErrorTemplate:
    """Default JSON-RPC code, message, and recovery hints for an error code."""

    rpc_code: int
    message: str
    recovery: Sequence[str] = ()


_TEMPLATES: Mapping[ErrorCode, ErrorTemplate] = {
    ErrorCode.INVALID_REQUEST: ErrorTemplate(
        rpc_code=-32600,
        message="Request was malformed or failed validation.",
        recovery=(
            "Check required fields and value formats.",
        ),
    ),
    ErrorCode.PARSE_ERROR: ErrorTemplate(
        rpc_code=-32700,
        message="Request body is not valid JSON.",
        recovery=(
            "Send a JSON-RPC 2.0 object encoded as UTF-8 JSON.",
        ),
    ),
    ErrorCode.METHOD_NOT_FOUND: ErrorTemplate(
        rpc_code=-32601,
        message="Method not found.",
        recovery=(
            "Call tools/list, resources/list or prompts/list to discover methods.",
        ),
    ),
    ErrorCode.INVALID_PARAMS: ErrorTemplate(
        rpc_code=-32602,
        message="Invalid method parameters.",
        recovery=(
            "Check the parameter names and values for this method.",
        ),
    ),
    ErrorCode.UNKNOWN_TOOL: ErrorTemplate(
        rpc_code=-32602,
        message="Unknown tool.",
        recovery=(
            "Call tools/list to see the available tools.",
        ),
    ),
    ErrorCode.UPSTREAM_ERROR: ErrorTemplate(
        rpc_code=-32000,
        message="The OECD SDMX service returned an error.",
        recovery=(
            "Check the dataflow identifier and filter, then retry.",
        ),
    ),
    ErrorCode.INTERNAL: ErrorTemplate(
        rpc_code=-32603,
        message="Internal server error.",
        recovery=(
            "Retry the request or report it with the correlation id.",
        ),
    ),
}


def _resolve_template(code: ErrorCode) -> ErrorTemplate:
    try:
        return _TEMPLATES[code]
    except KeyError:  # pragma: no cover - defensive guard
        raise ValueError(f"No error template registered for {code!s}") from None


def make_error(
    code: ErrorCode,
    message: Optional[str] = None,
    *,
    recovery: Optional[Iterable[str]] = None,
    data: Optional[Mapping[str, object]] = None,
) -> Dict[str, object]:
    """Create a JSON-RPC ``error`` member for ``code``."""

    template = _resolve_template(code)
    resolved_recovery: List[str] = list(recovery) if recovery is not None else list(
        template.recovery
    )
    details: Dict[str, object] = {"code": code.value, "recovery": resolved_recovery}
    if data:
        details.update(data)
    return {
        "code": template.rpc_code,
        "message": message if message is not None else template.message,
        "data": details,
    }


class BridgeError(Exception):
    """Base class for faults surfaced to tool callers."""

    code: ErrorCode = ErrorCode.INTERNAL

    @property
    def message(self) -> str:
        return str(self)


class ToolInputError(BridgeError):
    """Raised when tool arguments fail schema validation."""

    code = ErrorCode.INVALID_REQUEST

    def __init__(self, tool: str, issues: Sequence[Tuple[str, str]]):
        self.tool = tool
        self.issues: Tuple[Tuple[str, str], ...] = tuple(issues)
        summary = "; ".join(f"{path}: {reason}" for path, reason in self.issues)
        super().__init__(f'Invalid input for tool "{tool}": {summary}')


class UpstreamError(BridgeError):
    """Raised when the OECD SDMX service or transport fails."""

    code = ErrorCode.UPSTREAM_ERROR

    def __init__(self, reason: str, *, status: Optional[int] = None):
        self.reason = reason
        self.status = status
        super().__init__(reason)


class UnknownToolError(BridgeError):
    """Raised when a tool name has no registered handler."""

    code = ErrorCode.UNKNOWN_TOOL

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class NonErrorRaised(Exception):
    """Carries a non-exception value raised by a collaborator."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(str(value))


def fault_message(exc: BaseException) -> str:
    """Return the display message for any caught fault."""

    if isinstance(exc, BridgeError):
        return exc.message
    if isinstance(exc, NonErrorRaised):
        return str(exc.value)
    return str(exc)


__all__ = [
    "BridgeError",
    "ErrorCode",
    "ErrorTemplate",
    "NonErrorRaised",
    "ToolInputError",
    "UnknownToolError",
    "UpstreamError",
    "fault_message",
    "make_error",
]
