"""JSON-RPC error responses for bodies the ``/mcp`` route cannot handle."""
import json
import logging
import uuid
from typing import Dict, Tuple, Type

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse

from .api._shared import rpc_error
from .utils.errors import ErrorCode
from .utils.logging import current_call

log = logging.getLogger(__name__)

# Most specific first; JSONDecodeError and UnicodeDecodeError are ValueErrors.
MALFORMED_BODY_ERRORS: Tuple[Tuple[Type[Exception], str, ErrorCode], ...] = (
    (UnicodeDecodeError, "decode_error", ErrorCode.PARSE_ERROR),
    (json.JSONDecodeError, "json_decode_error", ErrorCode.PARSE_ERROR),
    (ValueError, "value_error", ErrorCode.INVALID_REQUEST),
    (TypeError, "type_error", ErrorCode.INVALID_REQUEST),
)


def _rpc_failure(summary: str, code: ErrorCode):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        context = current_call()
        correlation_id = context.call_id if context is not None else uuid.uuid4().hex
        log.warning(
            "rpc.%s: %s",
            summary,
            exc,
            extra={"correlation_id": correlation_id, "path": request.url.path},
        )
        data: Dict[str, object] = {"correlation_id": correlation_id, "summary": summary}
        if request.app.debug:
            data["detail"] = str(exc)
        # The request id is unknown when the body could not be read.
        return rpc_error(None, code, data=data)

    return handler


def install_error_handlers(app: Starlette) -> None:
    for exc_type, summary, code in MALFORMED_BODY_ERRORS:
        app.add_exception_handler(exc_type, _rpc_failure(summary, code))


__all__ = ["MALFORMED_BODY_ERRORS", "install_error_handlers"]
